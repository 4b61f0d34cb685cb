"""Profiles and project membership."""

import uuid
from datetime import datetime

from sqlmodel import Field, SQLModel

from gateway.models.base import TimestampMixin, new_uuid


class Profile(TimestampMixin, SQLModel, table=True):
    __tablename__ = "profiles"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    email: str | None = Field(default=None, max_length=320, index=True)
    first_name: str | None = Field(default=None, max_length=255)
    last_name: str | None = Field(default=None, max_length=255)


class ProjectMember(TimestampMixin, SQLModel, table=True):
    __tablename__ = "project_members"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    project_id: uuid.UUID = Field(foreign_key="projects.id", nullable=False, index=True)
    user_id: uuid.UUID = Field(foreign_key="profiles.id", nullable=False, index=True)
    role: str = Field(default="member", max_length=50)


# ── Pydantic schemas ─────────────────────────────────────────

class TeamMemberRead(SQLModel):
    user_id: uuid.UUID
    email: str | None
    first_name: str | None
    last_name: str | None
    role: str
    joined_at: datetime
