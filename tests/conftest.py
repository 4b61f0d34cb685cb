"""Shared test fixtures — async SQLite in-memory DB + test client."""

import json
import uuid
from collections.abc import AsyncGenerator
from datetime import datetime

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

# Import all models so metadata is populated
import gateway.models  # noqa: F401
from gateway.core.database import get_session
from gateway.core.security import generate_api_token, hash_api_token
from gateway.main import app
from gateway.models.api_token import ApiToken
from gateway.models.organization import Direction, Pole
from gateway.models.project import Project


@pytest.fixture
async def engine():
    # One fresh in-memory database per test; StaticPool keeps it on one connection
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
async def session(engine) -> AsyncGenerator[AsyncSession, None]:
    factory = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as sess:
        yield sess


@pytest.fixture
async def client(session) -> AsyncGenerator[AsyncClient, None]:
    """HTTPX async test client with DB session override."""

    async def _override_session():
        yield session

    app.dependency_overrides[get_session] = _override_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_token(session):
    """Insert an ApiToken and return (raw_secret, token)."""

    async def _make(
        scopes: dict | None = None,
        *,
        is_active: bool = True,
        expires_at: datetime | None = None,
        name: str = "integration",
    ) -> tuple[str, ApiToken]:
        raw = generate_api_token()
        token = ApiToken(
            name=name,
            token_hash=hash_api_token(raw),
            is_active=is_active,
            expires_at=expires_at,
            scopes=json.dumps(scopes or {}),
        )
        session.add(token)
        await session.commit()
        return raw, token

    return _make


@pytest.fixture
def make_project(session):
    async def _make(title: str = "Project", **fields) -> Project:
        project = Project(title=title, **fields)
        session.add(project)
        await session.commit()
        return project

    return _make


@pytest.fixture
async def org(session) -> dict[str, uuid.UUID]:
    """Two poles, each with one direction."""
    pole_a = Pole(name="Pôle Numérique")
    pole_b = Pole(name="Pôle Territoires")
    session.add_all([pole_a, pole_b])
    await session.commit()
    dir_a = Direction(name="DSI", pole_id=pole_a.id)
    dir_b = Direction(name="Voirie", pole_id=pole_b.id)
    session.add_all([dir_a, dir_b])
    await session.commit()
    return {
        "pole_a": pole_a.id,
        "pole_b": pole_b.id,
        "dir_a": dir_a.id,
        "dir_b": dir_b.id,
    }
