"""
Query-parameter normalization and Mongo predicate building.

Raw query strings are turned into a typed ``ListQuery`` (page, limit, sort,
filters, search) by ``normalize_filters``; the per-resource ``build_*_query``
functions turn that descriptor into a MongoDB predicate. All list endpoints
share this path so that the page of results and the total count always use
the same predicate.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from re import escape
from typing import Any

from pymongo import ASCENDING, DESCENDING

from content_api.configs import settings
from content_api.errors.validation import FieldError, ValidationError
from content_api.models.blog import BlogCategory
from content_api.models.contact import ContactStatus
from content_api.models.subscription import SubscriptionType

type RawParams = Mapping[str, str | None]
type SortSpec = list[tuple[str, int]]

DEFAULT_SORT = "-createdAt"

# Largest skip a BSON int64 can carry.
MAX_SKIP = 2**63 - 1

_TRUE_VALUES = frozenset({"true", "1", "yes"})
_FALSE_VALUES = frozenset({"false", "0", "no"})


@dataclass(frozen=True, slots=True)
class ResourceFilterSpec:
    """Which query parameters a resource accepts and how to parse them."""

    name: str
    default_limit: int
    sortable: frozenset[str]
    boolean_filters: frozenset[str] = frozenset()
    enum_filters: Mapping[str, frozenset[str]] = field(default_factory=dict)
    list_filters: frozenset[str] = frozenset()


@dataclass(frozen=True, slots=True)
class ListQuery:
    """Typed, validated list request: pagination, sort, filters and search."""

    page: int
    limit: int
    sort: SortSpec
    filters: dict[str, Any] = field(default_factory=dict)
    search: str | None = None

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


BLOG_FILTERS = ResourceFilterSpec(
    name="blogs",
    default_limit=10,
    sortable=frozenset(
        {"createdAt", "updatedAt", "publishedAt", "title", "views", "likes", "category"},
    ),
    boolean_filters=frozenset({"published", "featured"}),
    enum_filters={"category": frozenset(c.value for c in BlogCategory)},
    list_filters=frozenset({"tags"}),
)

CONTACT_FILTERS = ResourceFilterSpec(
    name="contacts",
    default_limit=20,
    sortable=frozenset({"createdAt", "updatedAt", "name", "email", "subject", "status"}),
    enum_filters={"status": frozenset(s.value for s in ContactStatus)},
)

SUBSCRIPTION_FILTERS = ResourceFilterSpec(
    name="subscriptions",
    default_limit=20,
    sortable=frozenset({"createdAt", "updatedAt", "email", "name", "subscriptionType"}),
    boolean_filters=frozenset({"isActive", "verified"}),
    enum_filters={"subscriptionType": frozenset(t.value for t in SubscriptionType)},
)


def _clean(raw: RawParams, key: str) -> str | None:
    value = raw.get(key)
    if value is None:
        return None
    value = value.strip()
    return value or None


def parse_bool(value: str) -> bool | None:
    """Parse ``"true"``/``"false"`` style strings; ``None`` if unrecognized."""
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return None


def parse_positive_int(value: str | None, default: int) -> int | None:
    """Parse a positive integer, falling back to ``default`` when absent."""
    if value is None:
        return default
    try:
        number = int(value)
    except ValueError:
        return None
    return number if number >= 1 else None


def split_csv(value: str) -> list[str]:
    """Split a comma-separated list, dropping blanks and repeated entries."""
    items = (item.strip() for item in value.split(","))
    return list(dict.fromkeys(item for item in items if item))


def parse_sort(value: str | None, sortable: frozenset[str]) -> tuple[SortSpec, list[str]]:
    """
    Parse a Mongoose-style sort string such as ``"-createdAt,title"``.

    Returns:
        The sort specification and the list of rejected field names.
    """
    spec: SortSpec = []
    rejected: list[str] = []
    for token in (value or DEFAULT_SORT).replace(",", " ").split():
        direction = DESCENDING if token.startswith("-") else ASCENDING
        name = token.lstrip("+-")
        if name not in sortable:
            rejected.append(name or token)
            continue
        if all(existing != name for existing, _ in spec):
            spec.append((name, direction))
    if not spec and not rejected:
        spec = [("createdAt", DESCENDING)]
    return spec, rejected


def normalize_filters(raw: RawParams, spec: ResourceFilterSpec) -> ListQuery:
    """
    Convert raw query parameters into a ``ListQuery``.

    Absent optional filters are left out entirely so they never constrain
    the query. Every malformed parameter is reported at once.

    Args:
        raw: Query parameters as received (values may be ``None``).
        spec: The resource's accepted parameters.

    Returns:
        ListQuery: The normalized descriptor.

    Raises:
        ValidationError: If any parameter is malformed.
    """
    errors: list[FieldError] = []

    page = parse_positive_int(_clean(raw, "page"), 1)
    if page is None:
        errors.append({"field": "page", "message": "Page must be a positive integer"})

    limit = parse_positive_int(_clean(raw, "limit"), spec.default_limit)
    if limit is None:
        errors.append({"field": "limit", "message": "Limit must be a positive integer"})
    elif limit > settings.MAX_PAGE_SIZE:
        errors.append(
            {"field": "limit", "message": f"Limit cannot exceed {settings.MAX_PAGE_SIZE}"},
        )

    if page is not None and limit is not None and (page - 1) * limit > MAX_SKIP:
        errors.append({"field": "page", "message": "Page is too large"})

    sort, rejected = parse_sort(_clean(raw, "sort"), spec.sortable)
    if rejected:
        errors.append(
            {"field": "sort", "message": f"Cannot sort by: {', '.join(rejected)}"},
        )

    filters: dict[str, Any] = {}

    for key in sorted(spec.boolean_filters):
        if (value := _clean(raw, key)) is None:
            continue
        parsed = parse_bool(value)
        if parsed is None:
            errors.append({"field": key, "message": f"{key} must be 'true' or 'false'"})
        else:
            filters[key] = parsed

    for key, allowed in spec.enum_filters.items():
        if (value := _clean(raw, key)) is None:
            continue
        if value not in allowed:
            errors.append({"field": key, "message": f"Invalid {key}"})
        else:
            filters[key] = value

    for key in sorted(spec.list_filters):
        if (value := _clean(raw, key)) is None:
            continue
        if items := split_csv(value):
            filters[key] = items

    if errors:
        raise ValidationError(detail="Invalid query parameters", errors=errors)

    return ListQuery(
        page=page or 1,
        limit=limit or spec.default_limit,
        sort=sort,
        filters=filters,
        search=_clean(raw, "search"),
    )


def regex_search(term: str, fields: list[str]) -> dict[str, Any]:
    """Case-insensitive substring match over several fields (literal input)."""
    pattern = escape(term)
    return {"$or": [{name: {"$regex": pattern, "$options": "i"}} for name in fields]}


def build_blog_query(query: ListQuery) -> dict[str, Any]:
    """
    Build the predicate for blog listings.

    Drafts are hidden unless the caller explicitly asks for
    ``published=false``.
    """
    filters = query.filters
    predicate: dict[str, Any] = {"published": filters.get("published", True)}
    if "category" in filters:
        predicate["category"] = filters["category"]
    if "tags" in filters:
        predicate["tags"] = {"$in": filters["tags"]}
    if "featured" in filters:
        predicate["featured"] = filters["featured"]
    if query.search:
        predicate["$text"] = {"$search": query.search}
    return predicate


def build_contact_query(query: ListQuery) -> dict[str, Any]:
    predicate: dict[str, Any] = {}
    if "status" in query.filters:
        predicate["status"] = query.filters["status"]
    if query.search:
        predicate.update(regex_search(query.search, ["name", "email", "subject", "message"]))
    return predicate


def build_subscription_query(query: ListQuery) -> dict[str, Any]:
    predicate: dict[str, Any] = {}
    for key in ("isActive", "subscriptionType", "verified"):
        if key in query.filters:
            predicate[key] = query.filters[key]
    if query.search:
        predicate.update(regex_search(query.search, ["email", "name"]))
    return predicate
