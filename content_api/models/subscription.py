"""Email subscription document definitions."""

from enum import StrEnum


class SubscriptionType(StrEnum):
    NEWSLETTER = "newsletter"
    BLOG_UPDATES = "blog_updates"
    PRODUCT_UPDATES = "product_updates"
    ALL = "all"


class SubscriptionSource(StrEnum):
    WEBSITE = "website"
    BLOG = "blog"
    LANDING_PAGE = "landing_page"
    POPUP = "popup"
    OTHER = "other"


class Frequency(StrEnum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


# Stripped from every API response.
PRIVATE_FIELDS = frozenset({"__v", "verificationToken"})
