"""
Admission client: decides what happens to a request for a room page.

Fast path:
  The caller already holds a token for this room -> AlreadyAdmitted,
  without touching Redis. Whether that token is still in the room is
  checked later by token re-validation on every protected call.

Slow path:
  Generate a fresh candidate token and hand it to the admission
  strategy together with the room key and the capacity bound. The
  strategy's three-way result becomes the outcome.

The candidate is only handed out (cookie) after the store reports
ADMITTED. A candidate is never reused: a retried request generates a new
one, so a lost reply can never be mistaken for a second slot.
"""

import secrets
import time
from typing import Callable, Optional

from roomgate.core.logging import get_logger
from roomgate.core.metrics import admission_latency, record_admission
from roomgate.infrastructure.redis_keys import room_meta_key
from roomgate.services.interfaces.admission import (
    AdmissionOutcome,
    AdmissionResult,
    AdmissionStrategy,
)

logger = get_logger(__name__)

TOKEN_BYTES = 16


def generate_token() -> str:
    """Unpredictable session token (128 bits, URL and cookie safe)."""
    return secrets.token_urlsafe(TOKEN_BYTES)


class AdmissionClient:

    def __init__(
        self,
        strategy: AdmissionStrategy,
        capacity: int,
        token_factory: Callable[[], str] = generate_token,
    ):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.strategy = strategy
        self.capacity = capacity
        self.token_factory = token_factory

    async def try_admit(self, room_id: str, existing_token: Optional[str] = None) -> AdmissionOutcome:
        """
        Admit a client into ``room_id`` unless it already holds a token.

        Raises:
            AdmissionError if the store could not decide (propagated as is)
        """
        if existing_token:
            record_admission("already_admitted")
            return AdmissionOutcome.already_admitted(existing_token)

        candidate = self.token_factory()
        start = time.perf_counter()
        result = await self.strategy.admit(room_meta_key(room_id), candidate, self.capacity)
        admission_latency.observe(time.perf_counter() - start)

        if result == AdmissionResult.ROOM_NOT_FOUND:
            outcome = AdmissionOutcome.room_not_found()
            logger.info("room_not_found", room_id=room_id)
        elif result == AdmissionResult.ROOM_FULL:
            outcome = AdmissionOutcome.room_full()
            logger.info("room_full", room_id=room_id, capacity=self.capacity)
        else:
            outcome = AdmissionOutcome.admitted(candidate)
            logger.info("room_admitted", room_id=room_id)

        record_admission(outcome.kind.value)
        return outcome
