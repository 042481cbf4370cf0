"""
Blog Routes.

Public listing, reading and liking of posts plus the write endpoints used by
the admin dashboard.

Summary
-------
Endpoints include:
  - List blogs (pagination, filters, sort, search)
  - Get blog by id or slug (counts a view)
  - Create, update and delete a blog
  - Like a blog
  - Distinct categories and popular tags

Drafts are hidden from listings unless ``published=false`` is requested.
"""

from logging import getLogger
from typing import Annotated, Any

from fastapi import APIRouter, Body, Request
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED

from content_api.configs import file_logger
from content_api.decorators import timed
from content_api.dependencies import BlogListDep, BlogRepoDep
from content_api.schemas import (
    BlogCreate,
    BlogResponse,
    BlogUpdate,
    DataEnvelope,
    GroupCount,
    LikesResponse,
    PageEnvelope,
    error_examples,
)
from content_api.utils.filters import build_blog_query

router = APIRouter(prefix="/blogs", tags=["📝 Blogs"])

logger = file_logger(getLogger(__name__))

BLOG_EXAMPLE: dict[str, Any] = {
    "title": "Scaling a Startup Backend",
    "description": "Lessons learned moving to a document store",
    "content": "When we started...",
    "author": {"name": "Jane Doe", "email": "jane@example.com"},
    "category": "Technology",
    "tags": ["mongodb", "python"],
    "published": True,
}


@router.get(
    "",
    response_model=PageEnvelope[BlogResponse],
    summary="List blogs",
    description=(
        "Paginated list of posts. Filters: category, tags (comma separated, any of), "
        "published (defaults to true), featured, search (full text) and sort."
    ),
    responses=error_examples(400, 429),
    operation_id="blogs_list",
)
@timed("/blogs/list")
async def list_blogs(
    request: Request,
    response: Response,
    query: BlogListDep,
    repo: BlogRepoDep,
) -> PageEnvelope[BlogResponse]:
    """
    List blog posts.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Response object for middleware/decorators.
    query : ListQuery
        Normalized pagination, sort and filters.
    repo : BlogRepository
        Repository dependency.

    Returns
    -------
    PageEnvelope[BlogResponse]
        One page of posts with total and page count.
    """
    page = await repo.find_page(build_blog_query(query), query)
    return PageEnvelope[BlogResponse].model_validate(page.to_envelope())


@router.get(
    "/categories/list",
    response_model=DataEnvelope[list[str]],
    summary="List blog categories",
    description="Distinct categories of published posts.",
    responses=error_examples(429),
    operation_id="blogs_categories",
)
@timed("/blogs/categories")
async def list_categories(
    request: Request,
    response: Response,
    repo: BlogRepoDep,
) -> DataEnvelope[list[str]]:
    return DataEnvelope[list[str]](data=await repo.categories())


@router.get(
    "/tags/popular",
    response_model=DataEnvelope[list[GroupCount]],
    summary="Popular tags",
    description="Top 20 tags by number of published posts.",
    responses=error_examples(429),
    operation_id="blogs_popular_tags",
)
@timed("/blogs/tags")
async def popular_tags(
    request: Request,
    response: Response,
    repo: BlogRepoDep,
) -> DataEnvelope[list[GroupCount]]:
    tags = await repo.popular_tags()
    return DataEnvelope[list[GroupCount]].model_validate({"data": tags})


@router.get(
    "/{id_or_slug}",
    response_model=DataEnvelope[BlogResponse],
    summary="Get blog by id or slug",
    description="A 24 character hex value is treated as an id, anything else as a slug. Counts a view.",
    responses=error_examples(404, 429),
    operation_id="blogs_get",
)
@timed("/blogs/get")
async def get_blog(
    request: Request,
    response: Response,
    id_or_slug: str,
    repo: BlogRepoDep,
) -> DataEnvelope[BlogResponse]:
    """
    Get one post and increment its view counter.

    Raises
    ------
    RecordNotFoundError
        If neither an id nor a slug matches.
    """
    blog = await repo.view(id_or_slug)
    return DataEnvelope[BlogResponse].model_validate({"data": blog})


@router.post(
    "",
    response_model=DataEnvelope[BlogResponse],
    status_code=HTTP_201_CREATED,
    summary="Create a new blog post",
    description="The slug is derived from the title and made unique.",
    responses=error_examples(400, 429),
    operation_id="blogs_create",
)
@timed("/blogs/create")
async def create_blog(
    request: Request,
    response: Response,
    blog: Annotated[
        BlogCreate,
        Body(openapi_examples={"basic": {"summary": "Basic blog", "value": BLOG_EXAMPLE}}),
    ],
    repo: BlogRepoDep,
) -> DataEnvelope[BlogResponse]:
    """
    Create a new blog post.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Response object for middleware/decorators.
    blog : BlogCreate
        Blog input payload.
    repo : BlogRepository
        Repository dependency.

    Returns
    -------
    DataEnvelope[BlogResponse]
        The stored post.
    """
    created = await repo.create(blog)
    return DataEnvelope[BlogResponse].model_validate({"data": created})


@router.put(
    "/{blog_id}",
    response_model=DataEnvelope[BlogResponse],
    summary="Update a blog post",
    description="Partial update; a changed title also changes the slug.",
    responses=error_examples(400, 404, 429),
    operation_id="blogs_update",
)
@timed("/blogs/update")
async def update_blog(
    request: Request,
    response: Response,
    blog_id: str,
    changes: BlogUpdate,
    repo: BlogRepoDep,
) -> DataEnvelope[BlogResponse]:
    updated = await repo.update(blog_id, changes)
    logger.info(f"Updated blog {blog_id}")
    return DataEnvelope[BlogResponse].model_validate({"data": updated})


@router.delete(
    "/{blog_id}",
    response_model=DataEnvelope[dict[str, Any]],
    summary="Delete a blog post",
    responses=error_examples(404, 429),
    operation_id="blogs_delete",
)
@timed("/blogs/delete")
async def delete_blog(
    request: Request,
    response: Response,
    blog_id: str,
    repo: BlogRepoDep,
) -> DataEnvelope[dict[str, Any]]:
    await repo.delete(blog_id)
    logger.info(f"Deleted blog {blog_id}")
    return DataEnvelope[dict[str, Any]](data={})


@router.put(
    "/{blog_id}/like",
    response_model=DataEnvelope[LikesResponse],
    summary="Like a blog post",
    responses=error_examples(404, 429),
    operation_id="blogs_like",
)
@timed("/blogs/like")
async def like_blog(
    request: Request,
    response: Response,
    blog_id: str,
    repo: BlogRepoDep,
) -> DataEnvelope[LikesResponse]:
    likes = await repo.like(blog_id)
    return DataEnvelope[LikesResponse](data=LikesResponse(likes=likes))
