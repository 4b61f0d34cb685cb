"""Call logging — one ApiLog row per gateway request with a resolved token."""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import Headers

from gateway.core.database import rollback_quietly
from gateway.models.api_log import ApiLog

logger = logging.getLogger(__name__)


def client_ip(headers: Headers) -> str:
    """Originating client address as reported by the proxy chain."""
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        # Left-most entry is the original client
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return headers.get("x-real-ip") or "unknown"


def user_agent(headers: Headers) -> str:
    return headers.get("user-agent") or "unknown"


async def log_api_call(
    session: AsyncSession,
    token_id: uuid.UUID,
    endpoint: str,
    method: str,
    status_code: int,
    response_time_ms: int,
    headers: Headers,
) -> None:
    """Persist one call log entry. Never raises."""
    try:
        entry = ApiLog(
            token_id=token_id,
            endpoint=endpoint,
            method=method,
            status_code=status_code,
            response_time_ms=response_time_ms,
            ip_address=client_ip(headers),
            user_agent=user_agent(headers),
        )
        session.add(entry)
        await session.commit()
    except Exception:
        logger.exception(
            "Failed to log API call %s %s (status %s) for token %s",
            method, endpoint, status_code, token_id,
        )
        await rollback_quietly(session)
