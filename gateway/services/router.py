"""Route table for the gateway.

Routes are matched in declaration order against the path left after the
hosting runtime's prefix has been stripped.
"""

import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from functools import lru_cache

from gateway.core.config import get_settings
from gateway.services import handlers
from gateway.services.handlers import HandlerResult

Handler = Callable[..., Awaitable[HandlerResult]]

PROJECTS_ROOT = "/api/projects"

_UUID = r"(?P<project_id>[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12})"


@dataclass(frozen=True, slots=True)
class Route:
    method: str
    pattern: re.Pattern[str]
    handler: Handler


@dataclass(frozen=True, slots=True)
class RouteMatch:
    handler: Handler
    params: dict[str, str] = field(default_factory=dict)


ROUTES: tuple[Route, ...] = (
    Route("GET", re.compile(r"^/api/projects$"), handlers.list_projects),
    Route("GET", re.compile(rf"^/api/projects/{_UUID}$"), handlers.get_project_details),
    Route("GET", re.compile(rf"^/api/projects/{_UUID}/team$"), handlers.get_project_team),
    Route("GET", re.compile(rf"^/api/projects/{_UUID}/tasks$"), handlers.get_project_tasks),
    Route("GET", re.compile(rf"^/api/projects/{_UUID}/risks$"), handlers.get_project_risks),
)


@lru_cache
def _prefix_pattern(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern)


def strip_route_prefix(path: str) -> str:
    """Drop the deployment prefix, e.g. ``/functions/v1/api-gateway``."""
    cleaned = _prefix_pattern(get_settings().route_prefix_pattern).sub("", path, count=1)
    return cleaned or "/"


def route(method: str, path: str) -> RouteMatch | None:
    """Find the handler for (method, path), or None when nothing matches."""
    for candidate in ROUTES:
        if candidate.method != method.upper():
            continue
        match = candidate.pattern.match(path)
        if match:
            return RouteMatch(handler=candidate.handler, params=match.groupdict())
    return None


def not_found(path: str) -> HandlerResult:
    if path.startswith(PROJECTS_ROOT):
        return HandlerResult(404, {"error": "Endpoint not found"})
    return HandlerResult(
        404, {"error": f"Endpoint not found. Available endpoints: {PROJECTS_ROOT}"}
    )
