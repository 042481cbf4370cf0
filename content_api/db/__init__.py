"""Database access."""

from content_api.db.database import (
    BLOGS,
    CONTACTS,
    INDEXES,
    SUBSCRIPTIONS,
    MongoDatabase,
    get_database,
    mongo,
)

__all__ = [
    "BLOGS",
    "CONTACTS",
    "INDEXES",
    "SUBSCRIPTIONS",
    "MongoDatabase",
    "get_database",
    "mongo",
]
