"""FastAPI dependencies: repositories, services and list queries."""

from typing import Annotated

from fastapi import Depends, Query, Request

from content_api.db import BLOGS, CONTACTS, SUBSCRIPTIONS, MongoDatabase, get_database
from content_api.repositories import BlogRepository, ContactRepository, SubscriptionRepository
from content_api.services.contact import ContactService
from content_api.services.notifications import NotificationDispatcher
from content_api.services.subscription import SubscriptionService
from content_api.utils.filters import (
    BLOG_FILTERS,
    CONTACT_FILTERS,
    SUBSCRIPTION_FILTERS,
    ListQuery,
    normalize_filters,
)

DatabaseDep = Annotated[MongoDatabase, Depends(get_database)]


def get_blog_repository(db: DatabaseDep) -> BlogRepository:
    return BlogRepository(db.get_collection(BLOGS))


def get_contact_repository(db: DatabaseDep) -> ContactRepository:
    return ContactRepository(db.get_collection(CONTACTS))


def get_subscription_repository(db: DatabaseDep) -> SubscriptionRepository:
    return SubscriptionRepository(db.get_collection(SUBSCRIPTIONS))


BlogRepoDep = Annotated[BlogRepository, Depends(get_blog_repository)]
ContactRepoDep = Annotated[ContactRepository, Depends(get_contact_repository)]
SubscriptionRepoDep = Annotated[SubscriptionRepository, Depends(get_subscription_repository)]


def get_dispatcher(request: Request) -> NotificationDispatcher:
    """The dispatcher started by the application lifespan."""
    return request.app.state.dispatcher


DispatcherDep = Annotated[NotificationDispatcher, Depends(get_dispatcher)]


def get_contact_service(repo: ContactRepoDep, dispatcher: DispatcherDep) -> ContactService:
    return ContactService(repo, dispatcher)


def get_subscription_service(
    repo: SubscriptionRepoDep,
    dispatcher: DispatcherDep,
) -> SubscriptionService:
    return SubscriptionService(repo, dispatcher)


ContactServiceDep = Annotated[ContactService, Depends(get_contact_service)]
SubscriptionServiceDep = Annotated[SubscriptionService, Depends(get_subscription_service)]

# List parameters arrive as raw strings and are validated by
# ``normalize_filters`` so every malformed value is reported together.
PageParam = Annotated[str | None, Query(description="Page number, starting at 1")]
LimitParam = Annotated[str | None, Query(description="Items per page")]
SortParam = Annotated[
    str | None,
    Query(description="Comma separated fields, '-' prefix for descending", examples=["-createdAt"]),
]
SearchParam = Annotated[str | None, Query(description="Free text search")]


def get_blog_list_query(
    page: PageParam = None,
    limit: LimitParam = None,
    sort: SortParam = None,
    search: SearchParam = None,
    category: Annotated[str | None, Query(description="Blog category")] = None,
    tags: Annotated[str | None, Query(description="Comma separated tags (any of)")] = None,
    published: Annotated[str | None, Query(description="Defaults to true")] = None,
    featured: Annotated[str | None, Query()] = None,
) -> ListQuery:
    return normalize_filters(
        {
            "page": page,
            "limit": limit,
            "sort": sort,
            "search": search,
            "category": category,
            "tags": tags,
            "published": published,
            "featured": featured,
        },
        BLOG_FILTERS,
    )


def get_contact_list_query(
    page: PageParam = None,
    limit: LimitParam = None,
    sort: SortParam = None,
    search: SearchParam = None,
    status: Annotated[str | None, Query(description="new, read, replied or archived")] = None,
) -> ListQuery:
    return normalize_filters(
        {"page": page, "limit": limit, "sort": sort, "search": search, "status": status},
        CONTACT_FILTERS,
    )


def get_subscription_list_query(
    page: PageParam = None,
    limit: LimitParam = None,
    sort: SortParam = None,
    search: SearchParam = None,
    is_active: Annotated[str | None, Query(alias="isActive")] = None,
    subscription_type: Annotated[str | None, Query(alias="subscriptionType")] = None,
    verified: Annotated[str | None, Query()] = None,
) -> ListQuery:
    return normalize_filters(
        {
            "page": page,
            "limit": limit,
            "sort": sort,
            "search": search,
            "isActive": is_active,
            "subscriptionType": subscription_type,
            "verified": verified,
        },
        SUBSCRIPTION_FILTERS,
    )


BlogListDep = Annotated[ListQuery, Depends(get_blog_list_query)]
ContactListDep = Annotated[ListQuery, Depends(get_contact_list_query)]
SubscriptionListDep = Annotated[ListQuery, Depends(get_subscription_list_query)]
