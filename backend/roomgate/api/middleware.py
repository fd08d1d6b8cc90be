"""
Request middleware: logging and request ID tracking, and room admission
for requests addressed to a room page.
"""

import re
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, RedirectResponse, Response

from roomgate.core.config import get_settings
from roomgate.core.exceptions import AdmissionError
from roomgate.core.logging import bind_request_context, get_logger
from roomgate.infrastructure.redis_keys import room_cookie_name, room_path
from roomgate.services.interfaces.admission import OutcomeKind

logger = get_logger(__name__)

ROOM_PATH_PATTERN = re.compile(r"^/room/([^/]+)")

# Token-protected calls under a room; they re-validate instead of admitting
ROOM_API_PATTERN = re.compile(r"^/room/[^/]+/api(/|$)")

REDIRECT_FLAGS = {
    OutcomeKind.ROOM_NOT_FOUND: "notFound",
    OutcomeKind.ROOM_FULL: "roomFull",
}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware that:
    1. Assigns a unique request ID to each request
    2. Logs request method, path, status code, and duration
    3. Binds request context (and the room ID of room requests) to structlog
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = str(uuid.uuid4())[:8]
        start_time = time.perf_counter()

        match = ROOM_PATH_PATTERN.match(request.url.path)
        bind_request_context(
            request_id,
            request.method,
            request.url.path,
            room_id=match.group(1) if match else None,
        )

        try:
            response = await call_next(request)
            duration_ms = round((time.perf_counter() - start_time) * 1000, 2)

            logger.info(
                "request_completed",
                status_code=response.status_code,
                duration_ms=duration_ms,
            )

            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{duration_ms}ms"

            return response

        except Exception as e:
            duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
            logger.error(
                "request_failed",
                error=str(e),
                duration_ms=duration_ms,
            )
            raise


class RoomAdmissionMiddleware(BaseHTTPMiddleware):
    """
    Gate for /room/<roomId> pages.

    1. Requests outside /room/<roomId>, and token-protected calls under
       /room/<roomId>/api, pass through untouched
    2. A request carrying this room's token cookie passes through (no Redis)
    3. Otherwise the admission client decides:
       - room not found -> redirect to /?notFound=true
       - room full      -> redirect to /?roomFull=true
       - admitted       -> pass through, then set the room-scoped cookie

    The cookie is written only after Redis confirmed the admission. If the
    store cannot decide, the request fails with 503.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        path = request.url.path
        match = ROOM_PATH_PATTERN.match(path)
        if not match or ROOM_API_PATTERN.match(path):
            return await call_next(request)

        room_id = match.group(1)
        cookie_name = room_cookie_name(room_id)
        admission = request.app.state.admission_client

        try:
            outcome = await admission.try_admit(room_id, request.cookies.get(cookie_name))
        except AdmissionError as e:
            logger.error("admission_unavailable", room_id=room_id, error=str(e))
            return JSONResponse(
                status_code=503,
                content={"detail": "Service temporarily unavailable"},
            )

        flag = REDIRECT_FLAGS.get(outcome.kind)
        if flag:
            return RedirectResponse(url=f"/?{flag}=true", status_code=307)

        response = await call_next(request)

        if outcome.kind == OutcomeKind.ADMITTED:
            response.set_cookie(
                cookie_name,
                outcome.token,
                path=room_path(room_id),
                httponly=True,
                samesite="lax",
                secure=get_settings().cookie_secure,
            )

        return response
