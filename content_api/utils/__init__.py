"""Utility helper functions."""

from content_api.utils.helpers import (
    get_summary,
    host,
    is_object_id,
    local_midnight,
    to_object_id,
    today_str,
    utc_now,
)
from content_api.utils.slug import slugify, with_suffix

__all__ = [
    "get_summary",
    "host",
    "is_object_id",
    "local_midnight",
    "slugify",
    "to_object_id",
    "today_str",
    "utc_now",
    "with_suffix",
]
