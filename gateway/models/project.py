"""Project model and its review snapshots."""

import uuid
from datetime import date, datetime

from sqlalchemy import Text
from sqlmodel import Column, Field, SQLModel

from gateway.models.base import TimestampMixin, new_uuid
from gateway.models.organization import OrgUnitName


class Project(TimestampMixin, SQLModel, table=True):
    __tablename__ = "projects"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    title: str = Field(max_length=255, nullable=False, index=True)
    description: str | None = Field(default=None, sa_column=Column(Text))
    status: str | None = Field(default=None, max_length=50, index=True)
    lifecycle_status: str | None = Field(default=None, max_length=50)

    project_manager: str | None = Field(default=None, max_length=320)
    project_manager_id: uuid.UUID | None = Field(default=None)

    start_date: date | None = Field(default=None)
    end_date: date | None = Field(default=None)

    # Organizational placement, used for token scoping
    pole_id: uuid.UUID | None = Field(default=None, foreign_key="poles.id", index=True)
    direction_id: uuid.UUID | None = Field(default=None, foreign_key="directions.id", index=True)
    service_id: uuid.UUID | None = Field(default=None, foreign_key="services.id", index=True)

    # Monitored by the general management (DGS)
    suivi_dgs: bool = Field(default=False)
    priority: str | None = Field(default=None, max_length=50)
    progress: int | None = Field(default=None)
    last_review_date: datetime | None = Field(default=None)


class Review(TimestampMixin, SQLModel, table=True):
    __tablename__ = "reviews"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    project_id: uuid.UUID = Field(foreign_key="projects.id", nullable=False, index=True)

    weather: str | None = Field(default=None, max_length=50)
    progress: str | None = Field(default=None, max_length=50)
    completion: int | None = Field(default=None)
    comment: str | None = Field(default=None, sa_column=Column(Text))


# ── Pydantic schemas ─────────────────────────────────────────

class ProjectSummaryRead(SQLModel):
    """Row returned by the project list endpoint."""
    id: uuid.UUID
    title: str
    description: str | None
    status: str | None
    lifecycle_status: str | None
    project_manager: str | None
    project_manager_id: uuid.UUID | None
    start_date: date | None
    end_date: date | None
    pole_id: uuid.UUID | None
    direction_id: uuid.UUID | None
    service_id: uuid.UUID | None
    suivi_dgs: bool
    priority: str | None
    pole: OrgUnitName | None = None
    direction: OrgUnitName | None = None
    service: OrgUnitName | None = None


class ProjectDetailRead(ProjectSummaryRead):
    progress: int | None
    last_review_date: datetime | None
    created_at: datetime
    updated_at: datetime


class ReviewSnapshotRead(SQLModel):
    weather: str | None
    progress: str | None
    completion: int | None
    comment: str | None
    created_at: datetime


class ProjectStatistics(SQLModel):
    team_members: int = 0
    tasks: int = 0
    risks: int = 0
