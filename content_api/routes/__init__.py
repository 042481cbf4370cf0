from content_api.routes.blog import router as blog_router
from content_api.routes.contact import router as contact_router
from content_api.routes.subscription import router as subscription_router

__all__ = [
    "blog_router",
    "contact_router",
    "subscription_router",
]
