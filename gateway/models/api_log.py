"""ApiLog model — one row per gateway call made with a resolved token."""

import uuid
from datetime import datetime

from sqlmodel import Field, SQLModel

from gateway.models.base import new_uuid, utcnow


class ApiLog(SQLModel, table=True):
    __tablename__ = "api_logs"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    token_id: uuid.UUID = Field(foreign_key="api_tokens.id", nullable=False, index=True)

    endpoint: str = Field(max_length=2048, nullable=False)
    method: str = Field(max_length=16, nullable=False)
    status_code: int = Field(nullable=False)
    response_time_ms: int = Field(default=0)
    ip_address: str = Field(default="unknown", max_length=255)
    user_agent: str = Field(default="unknown", max_length=1024)

    # Append-only: no updated_at
    created_at: datetime = Field(default_factory=utcnow, nullable=False, index=True)
