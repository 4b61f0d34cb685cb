"""API token model — credentials presented by external integrations."""

import uuid
from datetime import datetime

from sqlalchemy import Text
from sqlmodel import Column, Field, SQLModel

from gateway.models.base import TimestampMixin, new_uuid


class ApiToken(TimestampMixin, SQLModel, table=True):
    __tablename__ = "api_tokens"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)

    # Human-readable label, e.g. "ERP integration"
    name: str = Field(max_length=255, nullable=False)

    # SHA-256 hash of the raw token — raw value is shown only once at creation
    token_hash: str = Field(nullable=False, unique=True, index=True)

    created_by: uuid.UUID | None = Field(default=None, nullable=True)

    is_active: bool = Field(default=True)
    expires_at: datetime | None = Field(default=None)
    last_used_at: datetime | None = Field(default=None)

    # Scope descriptor stored as JSON text, see TokenScopes.
    scopes: str = Field(default="{}", sa_column=Column(Text, nullable=False, server_default="{}"))


# ── Pydantic schemas ─────────────────────────────────────────

class TokenScopes(SQLModel):
    """Restrictions attached to a token. Empty lists mean unrestricted."""

    access_level: str = "read_only"
    pole_ids: list[str] = Field(default_factory=list)
    direction_ids: list[str] = Field(default_factory=list)
    service_ids: list[str] = Field(default_factory=list)
    project_ids: list[str] = Field(default_factory=list)
    data_types: list[str] = Field(default_factory=list)
