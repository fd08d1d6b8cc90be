"""
Room creation.

Rooms are born with an empty ``connected`` list and a TTL. Admission never
touches the TTL or ``createdAt``; when the key expires the room is gone and
joins report not-found.
"""

import json
import secrets
import time

import redis.asyncio as redis
from redis.exceptions import RedisError

from roomgate.core.exceptions import StoreUnavailable
from roomgate.core.logging import get_logger
from roomgate.core.metrics import redis_connection_errors
from roomgate.infrastructure.redis_keys import CONNECTED_FIELD, CREATED_AT_FIELD, room_meta_key

logger = get_logger(__name__)

ROOM_ID_BYTES = 12


def generate_room_id() -> str:
    return secrets.token_urlsafe(ROOM_ID_BYTES)


async def create_room(client: redis.Redis, ttl_seconds: int) -> str:
    """Create a room metadata record and return the new room ID."""
    room_id = generate_room_id()
    key = room_meta_key(room_id)

    try:
        async with client.pipeline(transaction=True) as pipe:
            pipe.hset(key, mapping={
                CONNECTED_FIELD: json.dumps([]),
                CREATED_AT_FIELD: int(time.time() * 1000),
            })
            pipe.expire(key, ttl_seconds)
            await pipe.execute()
    except RedisError as e:
        redis_connection_errors.inc()
        logger.error("room_create_store_error", error=str(e))
        raise StoreUnavailable("Room store unavailable") from e

    logger.info("room_created", room_id=room_id, ttl=ttl_seconds)
    return room_id
