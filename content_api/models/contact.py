"""Contact submission document definitions."""

from enum import StrEnum


class ContactStatus(StrEnum):
    """
    Lifecycle of a contact submission.

    ``NEW`` becomes ``READ`` the first time an operator opens it;
    moving into ``REPLIED`` stamps ``repliedAt`` once.
    """

    NEW = "new"
    READ = "read"
    REPLIED = "replied"
    ARCHIVED = "archived"
