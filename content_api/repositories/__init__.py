"""Repositories over MongoDB collections."""

from content_api.repositories.base import BaseRepository, Document, Page
from content_api.repositories.blog import BlogRepository
from content_api.repositories.contact import ContactRepository
from content_api.repositories.subscription import SubscriptionRepository

__all__ = [
    "BaseRepository",
    "BlogRepository",
    "ContactRepository",
    "Document",
    "Page",
    "SubscriptionRepository",
]
