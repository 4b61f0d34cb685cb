"""Resource handlers for the /api/projects namespace.

Every handler is read-only and returns a HandlerResult instead of raising
for expected outcomes (not found, forbidden, data-store failure).
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Any

from sqlalchemy import false, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from gateway.core.config import Settings, get_settings
from gateway.core.database import rollback_quietly
from gateway.models.api_token import TokenScopes
from gateway.models.organization import Direction, Pole, Service
from gateway.models.project import (
    Project,
    ProjectDetailRead,
    ProjectStatistics,
    ProjectSummaryRead,
    Review,
    ReviewSnapshotRead,
)
from gateway.models.risk import Risk, RiskRead
from gateway.models.task import Task, TaskRead
from gateway.models.team import Profile, ProjectMember, TeamMemberRead
from gateway.services.scope import is_authorized_for_project, narrow_project_query

logger = logging.getLogger(__name__)

QueryParams = dict[str, str]
PathParams = dict[str, str]


@dataclass(slots=True)
class HandlerResult:
    status: int
    body: dict[str, Any]


def _project_not_found() -> HandlerResult:
    return HandlerResult(404, {"error": "Project not found"})


def _access_denied() -> HandlerResult:
    return HandlerResult(403, {"error": "Access denied to this project"})


def _error_message(exc: SQLAlchemyError) -> str:
    # The driver's message, without the SQL statement SQLAlchemy wraps around it
    return str(getattr(exc, "orig", None) or exc)


async def _upstream_failure(
    session: AsyncSession, message: str, exc: SQLAlchemyError
) -> HandlerResult:
    logger.error("%s: %s", message, _error_message(exc))
    await rollback_quietly(session)
    return HandlerResult(500, {"error": message, "details": _error_message(exc)})


def _dump(model: type[SQLModel], obj: Any, **update: Any) -> dict[str, Any]:
    return model.model_validate(obj, update=update).model_dump(mode="json")


# ── Query parameter parsing ──────────────────────────────────


def _page_size(raw: str | None, settings: Settings) -> int:
    try:
        limit = int(raw) if raw is not None else 0
    except ValueError:
        limit = 0
    if limit <= 0:
        limit = settings.default_page_size
    return min(limit, settings.max_page_size)


def _offset(raw: str | None) -> int:
    try:
        offset = int(raw) if raw is not None else 0
    except ValueError:
        return 0
    return max(offset, 0)


def _uuid_equals(column, raw: str):
    try:
        return column == uuid.UUID(raw)
    except ValueError:
        return false()


def _project_filters(params: QueryParams) -> list:
    """Caller-supplied filters for the project list, combined with AND."""
    filters = []
    if params.get("status"):
        filters.append(Project.status == params["status"])
    if params.get("lifecycle_status"):
        filters.append(Project.lifecycle_status == params["lifecycle_status"])
    if params.get("pole_id"):
        filters.append(_uuid_equals(Project.pole_id, params["pole_id"]))
    if params.get("direction_id"):
        filters.append(_uuid_equals(Project.direction_id, params["direction_id"]))
    if params.get("service_id"):
        filters.append(_uuid_equals(Project.service_id, params["service_id"]))
    if params.get("search"):
        filters.append(Project.title.ilike(f"%{params['search']}%"))  # type: ignore[union-attr]
    if "suivi_dgs" in params:
        filters.append(Project.suivi_dgs == (params["suivi_dgs"] == "true"))
    return filters


def _project_with_units():
    return (
        select(
            Project,
            Pole.name.label("pole_name"),  # type: ignore[attr-defined]
            Direction.name.label("direction_name"),  # type: ignore[attr-defined]
            Service.name.label("service_name"),  # type: ignore[attr-defined]
        )
        .outerjoin(Pole, Project.pole_id == Pole.id)
        .outerjoin(Direction, Project.direction_id == Direction.id)
        .outerjoin(Service, Project.service_id == Service.id)
    )


def _units(pole_name: str | None, direction_name: str | None, service_name: str | None) -> dict:
    return {
        "pole": {"name": pole_name} if pole_name is not None else None,
        "direction": {"name": direction_name} if direction_name is not None else None,
        "service": {"name": service_name} if service_name is not None else None,
    }


async def _count(session: AsyncSession, model: type[SQLModel], project_id: uuid.UUID) -> int:
    stmt = select(func.count()).select_from(model).where(model.project_id == project_id)  # type: ignore[attr-defined]
    return (await session.scalar(stmt)) or 0


async def _check_project_access(
    session: AsyncSession, project_id: uuid.UUID, scopes: TokenScopes
) -> HandlerResult | None:
    """Existence first, then scope. Returns the error result, or None if allowed."""
    exists = await session.scalar(select(Project.id).where(Project.id == project_id))
    if exists is None:
        return _project_not_found()
    if not is_authorized_for_project(scopes, project_id):
        return _access_denied()
    return None


# ── Handlers ─────────────────────────────────────────────────


async def list_projects(
    session: AsyncSession,
    path_params: PathParams,
    query_params: QueryParams,
    scopes: TokenScopes,
) -> HandlerResult:
    """GET /api/projects: scoped, filtered, paginated project list."""
    settings = get_settings()
    limit = _page_size(query_params.get("limit"), settings)
    offset = _offset(query_params.get("offset"))

    count_stmt = narrow_project_query(scopes, select(func.count()).select_from(Project))
    page_stmt = narrow_project_query(scopes, _project_with_units())
    for condition in _project_filters(query_params):
        count_stmt = count_stmt.where(condition)
        page_stmt = page_stmt.where(condition)
    page_stmt = (
        page_stmt
        .order_by(Project.created_at.desc(), Project.id)  # type: ignore[attr-defined]
        .offset(offset)
        .limit(limit)
    )

    try:
        total = (await session.scalar(count_stmt)) or 0
        rows = (await session.execute(page_stmt)).all()
    except SQLAlchemyError as exc:
        return await _upstream_failure(session, "Failed to fetch projects", exc)

    data = [
        _dump(ProjectSummaryRead, project, **_units(pole_name, direction_name, service_name))
        for project, pole_name, direction_name, service_name in rows
    ]
    return HandlerResult(
        200,
        {
            "data": data,
            "pagination": {"limit": limit, "offset": offset, "total": total},
        },
    )


async def get_project_details(
    session: AsyncSession,
    path_params: PathParams,
    query_params: QueryParams,
    scopes: TokenScopes,
) -> HandlerResult:
    """GET /api/projects/{id}: project row, latest review and counters."""
    project_id = uuid.UUID(path_params["project_id"])

    try:
        row = (await session.execute(
            _project_with_units().where(Project.id == project_id)
        )).first()
        if row is None:
            return _project_not_found()
        if not is_authorized_for_project(scopes, project_id):
            return _access_denied()

        review = (await session.execute(
            select(Review)
            .where(Review.project_id == project_id)
            .order_by(Review.created_at.desc())  # type: ignore[attr-defined]
            .limit(1)
        )).scalars().first()

        statistics = ProjectStatistics(
            team_members=await _count(session, ProjectMember, project_id),
            tasks=await _count(session, Task, project_id),
            risks=await _count(session, Risk, project_id),
        )
    except SQLAlchemyError as exc:
        return await _upstream_failure(session, "Failed to fetch project details", exc)

    project, pole_name, direction_name, service_name = row
    return HandlerResult(
        200,
        {
            "project": _dump(
                ProjectDetailRead, project, **_units(pole_name, direction_name, service_name)
            ),
            "last_review": _dump(ReviewSnapshotRead, review) if review is not None else None,
            "statistics": statistics.model_dump(),
        },
    )


async def get_project_team(
    session: AsyncSession,
    path_params: PathParams,
    query_params: QueryParams,
    scopes: TokenScopes,
) -> HandlerResult:
    """GET /api/projects/{id}/team: members with their profile fields."""
    project_id = uuid.UUID(path_params["project_id"])

    try:
        denied = await _check_project_access(session, project_id, scopes)
        if denied is not None:
            return denied
        rows = (await session.execute(
            select(ProjectMember, Profile)
            .outerjoin(Profile, ProjectMember.user_id == Profile.id)
            .where(ProjectMember.project_id == project_id)
            .order_by(ProjectMember.created_at)  # type: ignore[arg-type]
        )).all()
    except SQLAlchemyError as exc:
        return await _upstream_failure(session, "Failed to fetch team members", exc)

    data = [
        TeamMemberRead(
            user_id=member.user_id,
            email=profile.email if profile else None,
            first_name=profile.first_name if profile else None,
            last_name=profile.last_name if profile else None,
            role=member.role,
            joined_at=member.created_at,
        ).model_dump(mode="json")
        for member, profile in rows
    ]
    return HandlerResult(200, {"data": data})


async def get_project_tasks(
    session: AsyncSession,
    path_params: PathParams,
    query_params: QueryParams,
    scopes: TokenScopes,
) -> HandlerResult:
    """GET /api/projects/{id}/tasks: optional status / assignee filters."""
    project_id = uuid.UUID(path_params["project_id"])

    stmt = select(Task).where(Task.project_id == project_id)
    if query_params.get("status"):
        stmt = stmt.where(Task.status == query_params["status"])
    if query_params.get("assignee"):
        stmt = stmt.where(Task.assignee == query_params["assignee"])
    stmt = stmt.order_by(Task.created_at)  # type: ignore[arg-type]

    try:
        denied = await _check_project_access(session, project_id, scopes)
        if denied is not None:
            return denied
        tasks = (await session.execute(stmt)).scalars().all()
    except SQLAlchemyError as exc:
        return await _upstream_failure(session, "Failed to fetch tasks", exc)

    return HandlerResult(200, {"data": [_dump(TaskRead, t) for t in tasks]})


async def get_project_risks(
    session: AsyncSession,
    path_params: PathParams,
    query_params: QueryParams,
    scopes: TokenScopes,
) -> HandlerResult:
    """GET /api/projects/{id}/risks: optional status / severity / probability filters."""
    project_id = uuid.UUID(path_params["project_id"])

    stmt = select(Risk).where(Risk.project_id == project_id)
    for name in ("status", "severity", "probability"):
        if query_params.get(name):
            stmt = stmt.where(getattr(Risk, name) == query_params[name])
    stmt = stmt.order_by(Risk.created_at)  # type: ignore[arg-type]

    try:
        denied = await _check_project_access(session, project_id, scopes)
        if denied is not None:
            return denied
        risks = (await session.execute(stmt)).scalars().all()
    except SQLAlchemyError as exc:
        return await _upstream_failure(session, "Failed to fetch risks", exc)

    return HandlerResult(200, {"data": [_dump(RiskRead, r) for r in risks]})
