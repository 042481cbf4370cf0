"""
Async client for the content API, used by frontends and scripts.

Example:
    async with ContentApiClient("http://localhost:8000/api") as api:
        page = await api.blogs.list(category="Technology", limit=5)
        await api.subscriptions.subscribe("reader@example.com")
"""

from collections.abc import Mapping, Sequence
from types import TracebackType
from typing import Any, Self

from httpx import AsyncClient, HTTPError, Response, TimeoutException

from content_api.configs import settings

type Params = Mapping[str, str | int | bool | Sequence[str] | None]
type Payload = dict[str, Any]

DEFAULT_ERROR_MESSAGE = "An error occurred"


class ApiError(Exception):
    """Base class for client-side API errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ApiTimeoutError(ApiError):
    def __init__(self, message: str = "Request timed out") -> None:
        super().__init__(message)


class ApiNetworkError(ApiError):
    def __init__(self, message: str = "Network error occurred") -> None:
        super().__init__(message)


class ApiRequestError(ApiError):
    """The server answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str = DEFAULT_ERROR_MESSAGE) -> None:
        super().__init__(message)
        self.status_code = status_code

    def __str__(self) -> str:
        return f"{self.status_code}: {self.message}"


def encode_params(params: Params) -> dict[str, str]:
    """Drop ``None`` values, render booleans as ``true``/``false`` and join lists."""
    encoded: dict[str, str] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            encoded[key] = "true" if value else "false"
        elif isinstance(value, str | int):
            encoded[key] = str(value)
        else:
            encoded[key] = ",".join(value)
    return encoded


def _error_message(response: Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return DEFAULT_ERROR_MESSAGE
    if not isinstance(body, dict):
        return DEFAULT_ERROR_MESSAGE
    if body.get("error"):
        return str(body["error"])
    errors = body.get("errors")
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        return str(errors[0].get("message") or DEFAULT_ERROR_MESSAGE)
    return DEFAULT_ERROR_MESSAGE


class _Resource:
    def __init__(self, client: "ContentApiClient") -> None:
        self._client = client


class BlogsApi(_Resource):
    async def list(
        self,
        *,
        page: int | None = None,
        limit: int | None = None,
        category: str | None = None,
        tags: Sequence[str] | None = None,
        search: str | None = None,
        published: bool | None = None,
        featured: bool | None = None,
        sort: str | None = None,
    ) -> Payload:
        params = {
            "page": page,
            "limit": limit,
            "category": category,
            "tags": tags,
            "search": search,
            "published": published,
            "featured": featured,
            "sort": sort,
        }
        return await self._client.request("GET", "/blogs", params=params)

    async def get(self, id_or_slug: str) -> Payload:
        return await self._client.request("GET", f"/blogs/{id_or_slug}")

    async def create(self, blog: Payload) -> Payload:
        return await self._client.request("POST", "/blogs", json=blog)

    async def update(self, blog_id: str, changes: Payload) -> Payload:
        return await self._client.request("PUT", f"/blogs/{blog_id}", json=changes)

    async def delete(self, blog_id: str) -> Payload:
        return await self._client.request("DELETE", f"/blogs/{blog_id}")

    async def like(self, blog_id: str) -> Payload:
        return await self._client.request("PUT", f"/blogs/{blog_id}/like")

    async def categories(self) -> Payload:
        return await self._client.request("GET", "/blogs/categories/list")

    async def popular_tags(self) -> Payload:
        return await self._client.request("GET", "/blogs/tags/popular")


class ContactsApi(_Resource):
    async def submit(self, contact: Payload) -> Payload:
        return await self._client.request("POST", "/contacts", json=contact)

    async def list(
        self,
        *,
        page: int | None = None,
        limit: int | None = None,
        status: str | None = None,
        search: str | None = None,
        sort: str | None = None,
    ) -> Payload:
        params = {"page": page, "limit": limit, "status": status, "search": search, "sort": sort}
        return await self._client.request("GET", "/contacts", params=params)

    async def get(self, contact_id: str) -> Payload:
        return await self._client.request("GET", f"/contacts/{contact_id}")

    async def update(
        self,
        contact_id: str,
        *,
        status: str | None = None,
        notes: str | None = None,
    ) -> Payload:
        fields = {"status": status, "notes": notes}
        body = {key: value for key, value in fields.items() if value is not None}
        return await self._client.request("PUT", f"/contacts/{contact_id}", json=body)

    async def delete(self, contact_id: str) -> Payload:
        return await self._client.request("DELETE", f"/contacts/{contact_id}")

    async def stats(self) -> Payload:
        return await self._client.request("GET", "/contacts/stats/summary")


class SubscriptionsApi(_Resource):
    async def subscribe(
        self,
        email: str,
        *,
        name: str | None = None,
        subscription_type: str | None = None,
        source: str | None = None,
        preferences: Payload | None = None,
    ) -> Payload:
        body = {
            "email": email,
            "name": name,
            "subscriptionType": subscription_type,
            "source": source,
            "preferences": preferences,
        }
        json = {key: value for key, value in body.items() if value is not None}
        return await self._client.request("POST", "/subscriptions", json=json)

    async def unsubscribe(self, token: str) -> Payload:
        return await self._client.request("GET", f"/subscriptions/unsubscribe/{token}")

    async def list(
        self,
        *,
        page: int | None = None,
        limit: int | None = None,
        is_active: bool | None = None,
        subscription_type: str | None = None,
        verified: bool | None = None,
        search: str | None = None,
        sort: str | None = None,
    ) -> Payload:
        params = {
            "page": page,
            "limit": limit,
            "isActive": is_active,
            "subscriptionType": subscription_type,
            "verified": verified,
            "search": search,
            "sort": sort,
        }
        return await self._client.request("GET", "/subscriptions", params=params)

    async def get(self, subscription_id: str) -> Payload:
        return await self._client.request("GET", f"/subscriptions/{subscription_id}")

    async def update(self, subscription_id: str, changes: Payload) -> Payload:
        return await self._client.request("PUT", f"/subscriptions/{subscription_id}", json=changes)

    async def delete(self, subscription_id: str) -> Payload:
        return await self._client.request("DELETE", f"/subscriptions/{subscription_id}")

    async def stats(self) -> Payload:
        return await self._client.request("GET", "/subscriptions/stats/summary")

    async def export_emails(self, subscription_type: str | None = None) -> Payload:
        params = {"subscriptionType": subscription_type}
        return await self._client.request("GET", "/subscriptions/export/emails", params=params)


class ContentApiClient:
    """
    Typed wrapper around ``httpx.AsyncClient``.

    Every call returns the decoded JSON envelope. Failures are raised as
    ``ApiTimeoutError``, ``ApiNetworkError`` or ``ApiRequestError``.

    Args:
        base_url: API root including the prefix, e.g. ``http://host/api``.
        timeout: Per-request timeout in seconds.
        api_prefix: Prefix stripped from ``base_url`` to reach ``/health``.
        client: Pre-built ``AsyncClient`` (tests pass one with a mock transport).
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        *,
        api_prefix: str = settings.API_PREFIX,
        client: AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_prefix = api_prefix
        self._client = client or AsyncClient(
            timeout=timeout,
            headers={"Content-Type": "application/json"},
        )
        self.blogs = BlogsApi(self)
        self.contacts = ContactsApi(self)
        self.subscriptions = SubscriptionsApi(self)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    @property
    def health_url(self) -> str:
        prefix = self.api_prefix.rstrip("/")
        root = self.base_url.removesuffix(prefix) if prefix else self.base_url
        return f"{root}/health"

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Params | None = None,
        json: Payload | None = None,
    ) -> Payload:
        return await self._send(method, f"{self.base_url}{path}", params=params, json=json)

    async def check_health(self) -> Payload:
        return await self._send("GET", self.health_url)

    async def _send(
        self,
        method: str,
        url: str,
        *,
        params: Params | None = None,
        json: Payload | None = None,
    ) -> Payload:
        try:
            response = await self._client.request(
                method,
                url,
                params=encode_params(params) if params else None,
                json=json,
            )
        except TimeoutException as e:
            raise ApiTimeoutError from e
        except HTTPError as e:
            raise ApiNetworkError from e

        if response.is_error:
            raise ApiRequestError(response.status_code, _error_message(response))
        try:
            return response.json()
        except ValueError as e:
            raise ApiRequestError(response.status_code, "Invalid JSON response") from e
