"""
Re-validation of a presented room token.

The admission fast path trusts any token the client presents. Protected
calls must come through here: the token is looked up in the room's
``connected`` list, which is the source of truth for admission.
Read-only; never writes ``connected`` and never runs the admission script.
"""

from typing import Optional

import redis.asyncio as redis
from fastapi import HTTPException, status
from redis.exceptions import RedisError

from roomgate.core.exceptions import StoreUnavailable
from roomgate.core.logging import get_logger
from roomgate.core.metrics import record_token_validation, redis_connection_errors
from roomgate.infrastructure.redis_keys import CONNECTED_FIELD, room_meta_key
from roomgate.schemas.room import RoomSession
from roomgate.services.connected import parse_connected

logger = get_logger(__name__)


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
    )


async def validate_room_token(
    client: redis.Redis,
    room_id: Optional[str],
    token: Optional[str],
) -> RoomSession:
    """
    Confirm that ``token`` is one of the tokens admitted to ``room_id``.
    Raises 401 if either is missing or the token is not in the room.
    """
    if not room_id or not token:
        record_token_validation("missing")
        logger.warning("token_rejected", room_id=room_id, reason="missing_room_or_token")
        raise _unauthorized()

    try:
        raw = await client.hget(room_meta_key(room_id), CONNECTED_FIELD)
    except RedisError as e:
        redis_connection_errors.inc()
        logger.error("token_validation_store_error", room_id=room_id, error=str(e))
        raise StoreUnavailable("Room store unavailable") from e

    connected = parse_connected(raw)
    if token not in connected:
        record_token_validation("invalid")
        logger.warning("token_rejected", room_id=room_id, reason="not_connected")
        raise _unauthorized()

    record_token_validation("valid")
    return RoomSession(room_id=room_id, token=token, connected=connected)
