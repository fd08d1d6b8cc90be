"""
Optimistic admission strategy - WATCH/MULTI/EXEC with re-read.
Fallback for stores that cannot run server-side scripts.
"""

import json

import redis.asyncio as redis
from redis.exceptions import RedisError, WatchError

from roomgate.core.exceptions import AdmissionContention, StoreUnavailable
from roomgate.core.logging import get_logger
from roomgate.core.metrics import admission_retries, redis_connection_errors
from roomgate.infrastructure.redis_keys import CONNECTED_FIELD
from roomgate.services.connected import distinct_count, parse_connected
from roomgate.services.interfaces.admission import AdmissionResult, AdmissionStrategy

logger = get_logger(__name__)


class OptimisticAdmission(AdmissionStrategy):
    """
    Check-and-append guarded by WATCH on the room key.

    If another client writes the room between our read and EXEC, the
    transaction is discarded and the whole decision is taken again from a
    fresh read. Each failed attempt means some other admission committed,
    so a room with capacity N settles within N + 1 attempts unless writes
    come from outside the admission path.

    Weaker than ScriptedAdmission under extreme fan-in: every contender pays
    extra round trips, and a room that keeps changing can exhaust
    ``max_attempts``.
    """

    def __init__(self, client: redis.Redis, max_attempts: int = 10):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.redis = client
        self.max_attempts = max_attempts

    async def admit(self, room_key: str, token: str, capacity: int) -> AdmissionResult:
        for attempt in range(1, self.max_attempts + 1):
            try:
                async with self.redis.pipeline(transaction=True) as pipe:
                    await pipe.watch(room_key)

                    if not await pipe.exists(room_key):
                        return AdmissionResult.ROOM_NOT_FOUND

                    tokens = parse_connected(await pipe.hget(room_key, CONNECTED_FIELD))
                    if distinct_count(tokens) >= capacity:
                        return AdmissionResult.ROOM_FULL

                    pipe.multi()
                    pipe.hset(room_key, CONNECTED_FIELD, json.dumps([*tokens, token]))
                    await pipe.execute()
                    return AdmissionResult.ADMITTED

            except WatchError:
                admission_retries.inc()
                logger.info(
                    "admission_retry",
                    room_key=room_key,
                    attempt=attempt,
                    reason="concurrent_write",
                )
                continue
            except RedisError as e:
                redis_connection_errors.inc()
                logger.error("admission_store_error", room_key=room_key, error=str(e))
                raise StoreUnavailable("Room store unavailable") from e

        logger.warning("admission_contention", room_key=room_key, attempts=self.max_attempts)
        raise AdmissionContention(room_key, self.max_attempts)
