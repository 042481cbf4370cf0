from collections.abc import MutableMapping
from datetime import UTC, datetime
from re import compile as re_compile
from typing import Any

from bson import ObjectId
from fastapi import FastAPI, Request
from fastapi.routing import APIRoute
from starlette.routing import BaseRoute, Match, Route

_OBJECT_ID_PATTERN = re_compile(r"^[0-9a-fA-F]{24}$")


def host(request: Request) -> str:
    """Return the host IP address."""
    return request.client.host if request.client else "unknown"


def user_agent(request: Request) -> str | None:
    return request.headers.get("user-agent")


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(tz=UTC)


def local_midnight() -> datetime:
    """Return the start of today in the server's local timezone."""
    return datetime.now().astimezone().replace(hour=0, minute=0, second=0, microsecond=0)


def today_str() -> str:
    """Return today's date as a string."""
    return datetime.now(datetime.now().astimezone().tzinfo).strftime(
        "%Y-%m-%d %H:%M:%S",
    )


def is_object_id(value: str) -> bool:
    """Check whether ``value`` is a 24-character hexadecimal identifier."""
    return bool(_OBJECT_ID_PATTERN.match(value))


def to_object_id(value: str) -> ObjectId | None:
    """Convert a hex string to ``ObjectId``, or ``None`` if it is not one."""
    return ObjectId(value) if is_object_id(value) else None


def get_summary(request: Request) -> str | None:
    """Extract route summary from request."""

    scope: MutableMapping[str, Any] = request.scope
    app: FastAPI = scope["app"]
    routes: list[BaseRoute] = app.routes

    summary = None
    for route in routes:
        is_api_route = type(route) is APIRoute
        is_route = type(route) is Route
        if is_api_route and route.matches(scope)[0] == Match.FULL:
            summary = route.summary
            break
        if is_route and route.matches(scope)[0] == Match.FULL:
            summary = route.name
            break

    return summary
