"""Task model — work items belonging to a project."""

import uuid
from datetime import date, datetime

from sqlalchemy import Text
from sqlmodel import Column, Field, SQLModel

from gateway.models.base import TimestampMixin, new_uuid


class Task(TimestampMixin, SQLModel, table=True):
    __tablename__ = "tasks"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    project_id: uuid.UUID = Field(foreign_key="projects.id", nullable=False, index=True)
    parent_task_id: uuid.UUID | None = Field(default=None, foreign_key="tasks.id", nullable=True)

    title: str = Field(max_length=255, nullable=False)
    description: str | None = Field(default=None, sa_column=Column(Text))
    status: str = Field(default="todo", max_length=50)
    start_date: date | None = Field(default=None)
    due_date: date | None = Field(default=None)
    assignee: str | None = Field(default=None, max_length=320)


# ── Pydantic schemas ─────────────────────────────────────────

class TaskRead(SQLModel):
    id: uuid.UUID
    title: str
    description: str | None
    status: str
    start_date: date | None
    due_date: date | None
    assignee: str | None
    parent_task_id: uuid.UUID | None
    created_at: datetime
    updated_at: datetime
