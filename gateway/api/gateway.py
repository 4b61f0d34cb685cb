"""Gateway entry point: authenticate, dispatch and log each call.

Every path below the mount point lands here; routing is done by the
gateway's own route table so that unknown paths, unsupported methods and
malformed ids all produce the same JSON 404 and are logged like any other
call.
"""

import logging
import time
import uuid

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse

from gateway.api.deps import Session
from gateway.core.database import rollback_quietly
from gateway.services.call_log import log_api_call
from gateway.services.handlers import HandlerResult
from gateway.services.router import not_found, route, strip_route_prefix
from gateway.services.scope import parse_scopes
from gateway.services.tokens import extract_api_key, validate_api_token

logger = logging.getLogger(__name__)

router = APIRouter(tags=["gateway"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-api-key, x-client-info, apikey, content-type",
}

MISSING_KEY = "API key required. Use X-API-Key header or Authorization: Bearer token"
INVALID_KEY = "Invalid, expired or inactive API key"


def _json(result: HandlerResult) -> JSONResponse:
    return JSONResponse(status_code=result.status, content=result.body, headers=CORS_HEADERS)


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


@router.api_route(
    "/{full_path:path}",
    methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    include_in_schema=False,
)
async def gateway_entry(request: Request, session: Session) -> Response:
    started = time.perf_counter()

    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)

    endpoint = strip_route_prefix(request.url.path)
    token_id: uuid.UUID | None = None

    try:
        raw_key = extract_api_key(request.headers)
        if raw_key is None:
            return _json(HandlerResult(401, {"error": MISSING_KEY}))

        api_token = await validate_api_token(raw_key, session)
        if api_token is None:
            return _json(HandlerResult(401, {"error": INVALID_KEY}))
        token_id = api_token.id

        match = route(request.method, endpoint)
        if match is None:
            result = not_found(endpoint)
        else:
            result = await match.handler(
                session,
                match.params,
                dict(request.query_params),
                parse_scopes(api_token.scopes),
            )
    except Exception as exc:
        logger.exception("API gateway error on %s %s", request.method, endpoint)
        await rollback_quietly(session)
        result = HandlerResult(500, {"error": "Internal server error", "message": str(exc)})

    if token_id is not None:
        await log_api_call(
            session,
            token_id,
            endpoint,
            request.method,
            result.status,
            _elapsed_ms(started),
            request.headers,
        )
    return _json(result)
