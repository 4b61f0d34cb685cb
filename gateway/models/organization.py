"""Organizational units — pole > direction > service."""

import uuid

from sqlmodel import Field, SQLModel

from gateway.models.base import TimestampMixin, new_uuid


class Pole(TimestampMixin, SQLModel, table=True):
    __tablename__ = "poles"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    name: str = Field(max_length=255, nullable=False)


class Direction(TimestampMixin, SQLModel, table=True):
    __tablename__ = "directions"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    pole_id: uuid.UUID | None = Field(default=None, foreign_key="poles.id", index=True)
    name: str = Field(max_length=255, nullable=False)


class Service(TimestampMixin, SQLModel, table=True):
    __tablename__ = "services"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    direction_id: uuid.UUID | None = Field(default=None, foreign_key="directions.id", index=True)
    name: str = Field(max_length=255, nullable=False)


# ── Pydantic schemas ─────────────────────────────────────────

class OrgUnitName(SQLModel):
    """Embedded unit reference, e.g. ``{"name": "Pôle Numérique"}``."""
    name: str
