"""Token scope evaluation.

A scope restricts what a token may read along independent dimensions
(poles, directions, project allowlist). An empty dimension is unrestricted;
non-empty dimensions combine with AND.
"""

import json
import uuid
from collections.abc import Iterable
from typing import Any

from sqlalchemy import false
from sqlmodel.sql.expression import Select

from gateway.models.api_token import TokenScopes
from gateway.models.project import Project

_LIST_FIELDS = ("pole_ids", "direction_ids", "service_ids", "project_ids", "data_types")


def parse_scopes(raw: str | dict | None) -> TokenScopes:
    """Build a TokenScopes from the stored JSON, treating anything malformed as unset."""
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            return TokenScopes()
    if not isinstance(raw, dict):
        return TokenScopes()

    values: dict[str, Any] = {}
    for field in _LIST_FIELDS:
        items = raw.get(field)
        if isinstance(items, list):
            values[field] = [str(item) for item in items if item is not None]
    access_level = raw.get("access_level")
    if isinstance(access_level, str) and access_level:
        values["access_level"] = access_level
    return TokenScopes(**values)


def _normalize(value: str | uuid.UUID) -> str:
    return str(value).strip().lower()


def is_authorized_for_project(scopes: TokenScopes, project_id: str | uuid.UUID) -> bool:
    """Direct access check for a single project.

    Only the project allowlist is consulted here; organizational-unit scope
    narrows list queries but does not block direct access.
    """
    if not scopes.project_ids:
        return True
    allowed = {_normalize(pid) for pid in scopes.project_ids}
    return _normalize(project_id) in allowed


def _as_uuids(values: Iterable[str]) -> list[uuid.UUID]:
    ids = []
    for value in values:
        try:
            ids.append(uuid.UUID(str(value)))
        except ValueError:
            continue
    return ids


def _in_scope(column, values: list[str]):
    ids = _as_uuids(values)
    # A restricted dimension with no usable id matches nothing
    return column.in_(ids) if ids else false()


def narrow_project_query(scopes: TokenScopes, stmt: Select) -> Select:
    """Restrict a query over Project to the rows the token may list."""
    if scopes.pole_ids:
        stmt = stmt.where(_in_scope(Project.pole_id, scopes.pole_ids))
    if scopes.direction_ids:
        stmt = stmt.where(_in_scope(Project.direction_id, scopes.direction_ids))
    if scopes.project_ids:
        stmt = stmt.where(_in_scope(Project.id, scopes.project_ids))
    return stmt
