"""Token validation — resolve a presented secret to an active ApiToken."""

import logging
import uuid

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select
from starlette.datastructures import Headers

from gateway.core.database import rollback_quietly
from gateway.core.security import hash_api_token
from gateway.models.api_token import ApiToken
from gateway.models.base import utcnow

logger = logging.getLogger(__name__)


def extract_api_key(headers: Headers) -> str | None:
    """Return the secret from ``X-API-Key`` or ``Authorization: Bearer``.

    Blank values are treated as absent so the caller can tell a missing
    credential apart from an invalid one.
    """
    api_key = headers.get("x-api-key", "").strip()
    if api_key:
        return api_key

    authorization = headers.get("authorization", "").strip()
    scheme, _, value = authorization.partition(" ")
    if scheme.lower() == "bearer":
        return value.strip() or None
    return authorization or None


async def validate_api_token(raw_token: str, session: AsyncSession) -> ApiToken | None:
    """Look up an API token by its SHA-256 hash.

    Returns None when no active token matches or when it has expired; the
    reason is not reported to the caller.
    """
    token_hash = hash_api_token(raw_token)
    stmt = select(ApiToken).where(
        ApiToken.token_hash == token_hash,
        ApiToken.is_active.is_(True),  # type: ignore[union-attr]
    )
    result = await session.execute(stmt)
    api_token = result.scalar_one_or_none()

    if api_token is None:
        logger.info("API token validation failed: no active token matches")
        return None

    if api_token.expires_at is not None and api_token.expires_at <= utcnow():
        logger.info("API token %s has expired", api_token.id)
        return None

    # Detached so a rollback in the best-effort write cannot expire it
    session.expunge(api_token)
    await touch_last_used(session, api_token.id)
    return api_token


async def touch_last_used(session: AsyncSession, token_id: uuid.UUID) -> None:
    """Bump last_used_at. Never raises; concurrent bumps are last-write-wins."""
    try:
        await session.execute(
            update(ApiToken)
            .where(ApiToken.id == token_id)
            .values(last_used_at=utcnow())
        )
        await session.commit()
    except Exception:
        logger.warning("Could not update last_used_at for token %s", token_id, exc_info=True)
        await rollback_quietly(session)
