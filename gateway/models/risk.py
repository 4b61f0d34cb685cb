"""Risk model — risks tracked on a project."""

import uuid
from datetime import datetime

from sqlalchemy import Text
from sqlmodel import Column, Field, SQLModel

from gateway.models.base import TimestampMixin, new_uuid


class Risk(TimestampMixin, SQLModel, table=True):
    __tablename__ = "risks"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    project_id: uuid.UUID = Field(foreign_key="projects.id", nullable=False, index=True)

    description: str = Field(sa_column=Column(Text, nullable=False))
    probability: str = Field(default="medium", max_length=20)
    severity: str = Field(default="medium", max_length=20)
    status: str = Field(default="open", max_length=50)
    mitigation_plan: str | None = Field(default=None, sa_column=Column(Text))


# ── Pydantic schemas ─────────────────────────────────────────

class RiskRead(SQLModel):
    id: uuid.UUID
    description: str
    probability: str
    severity: str
    status: str
    mitigation_plan: str | None
    created_at: datetime
    updated_at: datetime
