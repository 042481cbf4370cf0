"""
Blog post schemas.

Request models validate and trim incoming payloads; server-owned fields
(slug, counters, ``publishedAt``, timestamps) are never accepted from
clients. ``BlogResponse`` reads a stored document back out.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from content_api.configs.settings import (
    MAX_DESCRIPTION_LENGTH,
    MAX_META_DESCRIPTION_LENGTH,
    MAX_META_TITLE_LENGTH,
    MAX_NAME_LENGTH,
    MAX_TITLE_LENGTH,
)
from content_api.models import BlogCategory
from content_api.schemas.common import (
    DocumentResponse,
    choice,
    optional_text,
    required_text,
    string_list,
)
from content_api.utils.slug import slugify


def _title(value: Any) -> str:
    title = required_text(value, "Title", MAX_TITLE_LENGTH)
    if not slugify(title):
        raise ValueError("Title must contain at least one letter or number")
    return title


class Author(BaseModel):
    name: str = Field(..., examples=["Jane Doe"])
    email: str | None = Field(default=None, examples=["jane@example.com"])

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: Any) -> str:
        return required_text(v, "Author name", MAX_NAME_LENGTH)

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v: Any) -> str | None:
        return optional_text(v, "Author email")


class BlogCreate(BaseModel):
    """Payload for creating a blog post."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str = Field(..., examples=["Scaling a Startup Backend"])
    description: str = Field(..., examples=["Lessons learned moving to a document store"])
    content: str = Field(..., examples=["Long form content..."])
    author: Author
    category: BlogCategory = Field(..., examples=["Technology"])
    tags: list[str] = Field(default_factory=list, examples=[["mongodb", "python"]])
    featured_image: str = Field(default="", alias="featuredImage")
    images: list[str] = Field(default_factory=list)
    published: bool = False
    featured: bool = False
    meta_title: str | None = Field(default=None, alias="metaTitle")
    meta_description: str | None = Field(default=None, alias="metaDescription")

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v: Any) -> str:
        return _title(v)

    @field_validator("description", mode="before")
    @classmethod
    def validate_description(cls, v: Any) -> str:
        return required_text(v, "Description", MAX_DESCRIPTION_LENGTH)

    @field_validator("content", mode="before")
    @classmethod
    def validate_content(cls, v: Any) -> str:
        return required_text(v, "Content")

    @field_validator("category", mode="before")
    @classmethod
    def validate_category(cls, v: Any) -> BlogCategory:
        if v is None or v == "":
            raise ValueError("Category is required")
        return choice(v, BlogCategory, "category")

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, v: Any) -> list[str]:
        return list(dict.fromkeys(string_list(v, "Tags")))

    @field_validator("images", mode="before")
    @classmethod
    def validate_images(cls, v: Any) -> list[str]:
        return string_list(v, "Images")

    @field_validator("featured_image", mode="before")
    @classmethod
    def validate_featured_image(cls, v: Any) -> str:
        return optional_text(v, "Featured image") or ""

    @field_validator("meta_title", mode="before")
    @classmethod
    def validate_meta_title(cls, v: Any) -> str | None:
        return optional_text(v, "Meta title", MAX_META_TITLE_LENGTH)

    @field_validator("meta_description", mode="before")
    @classmethod
    def validate_meta_description(cls, v: Any) -> str | None:
        return optional_text(v, "Meta description", MAX_META_DESCRIPTION_LENGTH)

    def to_document(self) -> dict[str, Any]:
        """Stored field names, camelCase."""
        return self.model_dump(by_alias=True, mode="json")


class BlogUpdate(BlogCreate):
    """
    Partial update; only the fields present in the body are applied.

    Explicit ``null`` for a required field is rejected by the same
    validators as on create.
    """

    title: str | None = None  # type: ignore[assignment]
    description: str | None = None  # type: ignore[assignment]
    content: str | None = None  # type: ignore[assignment]
    author: Author | None = None  # type: ignore[assignment]
    category: BlogCategory | None = None  # type: ignore[assignment]
    published: bool | None = None  # type: ignore[assignment]
    featured: bool | None = None  # type: ignore[assignment]

    def to_document(self) -> dict[str, Any]:
        changes = self.model_dump(by_alias=True, mode="json", exclude_unset=True)
        # Only the meta fields may be cleared with an explicit null.
        return {
            key: value
            for key, value in changes.items()
            if value is not None or key in {"metaTitle", "metaDescription"}
        }


class AuthorResponse(BaseModel):
    name: str = ""
    email: str | None = None


class BlogResponse(DocumentResponse):
    """A stored blog post as returned to clients."""

    title: str
    slug: str
    description: str = ""
    content: str = ""
    author: AuthorResponse = Field(default_factory=AuthorResponse)
    category: str
    tags: list[str] = Field(default_factory=list)
    featured_image: str = Field(default="", alias="featuredImage")
    images: list[str] = Field(default_factory=list)
    published: bool = False
    featured: bool = False
    views: int = 0
    likes: int = 0
    meta_title: str | None = Field(default=None, alias="metaTitle")
    meta_description: str | None = Field(default=None, alias="metaDescription")
    published_at: datetime | None = Field(default=None, alias="publishedAt")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")


class LikesResponse(BaseModel):
    likes: int
