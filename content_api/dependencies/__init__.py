from content_api.dependencies.dependencies import (
    BlogListDep,
    BlogRepoDep,
    ContactListDep,
    ContactRepoDep,
    ContactServiceDep,
    DatabaseDep,
    DispatcherDep,
    SubscriptionListDep,
    SubscriptionRepoDep,
    SubscriptionServiceDep,
    get_blog_repository,
    get_contact_repository,
    get_contact_service,
    get_dispatcher,
    get_subscription_repository,
    get_subscription_service,
)

__all__ = [
    "BlogListDep",
    "BlogRepoDep",
    "ContactListDep",
    "ContactRepoDep",
    "ContactServiceDep",
    "DatabaseDep",
    "DispatcherDep",
    "SubscriptionListDep",
    "SubscriptionRepoDep",
    "SubscriptionServiceDep",
    "get_blog_repository",
    "get_contact_repository",
    "get_contact_service",
    "get_dispatcher",
    "get_subscription_repository",
    "get_subscription_service",
]
