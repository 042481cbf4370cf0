"""Blog post document definitions."""

from enum import StrEnum


class BlogCategory(StrEnum):
    TECHNOLOGY = "Technology"
    BUSINESS = "Business"
    STARTUP = "Startup"
    DEVELOPMENT = "Development"
    DESIGN = "Design"
    MARKETING = "Marketing"
    OTHER = "Other"
