"""
Scripted admission for capacity-bounded rooms.
Implements AdmissionStrategy with a Lua script executed by Redis.

Why a script:
  A read-then-write join (HGET connected, check length, HSET connected)
  races. Two first-contact requests both read one occupant, both decide
  there is room, both write, and the room ends up over capacity.

  Redis runs a script as one indivisible unit, so the existence check,
  the distinct-token count, the capacity check and the append all see
  and produce a single consistent state per room. Admissions against the
  same room are linearized by Redis; different rooms do not interact.

Failure semantics:
  The script either runs to completion or not at all. Connection and
  command errors are raised as StoreUnavailable, never mapped to a
  decision. There is no fail-open: a store outage must not let clients
  into a room it cannot count.
"""

import os

import redis.asyncio as redis
from redis.exceptions import RedisError

from roomgate.core.exceptions import StoreUnavailable
from roomgate.core.logging import get_logger
from roomgate.core.metrics import redis_connection_errors
from roomgate.services.interfaces.admission import AdmissionResult, AdmissionStrategy

logger = get_logger(__name__)

# Load Lua script
SCRIPT_PATH = os.path.join(os.path.dirname(__file__), '../infrastructure/admission.lua')
with open(SCRIPT_PATH, 'r', encoding='utf-8') as f:
    ADMISSION_SCRIPT = f.read()


class ScriptedAdmission(AdmissionStrategy):
    """
    Redis-side admission control.

    One EVALSHA per join attempt. redis-py falls back to EVAL and caches
    the script again if the server's script cache was flushed.
    """

    def __init__(self, client: redis.Redis):
        self.redis = client
        self.script = self.redis.register_script(ADMISSION_SCRIPT)

    async def admit(self, room_key: str, token: str, capacity: int) -> AdmissionResult:
        try:
            reply = await self.script(keys=[room_key], args=[token, str(capacity)])
        except RedisError as e:
            redis_connection_errors.inc()
            logger.error("admission_store_error", room_key=room_key, error=str(e))
            raise StoreUnavailable("Room store unavailable") from e

        return AdmissionResult(int(reply))
