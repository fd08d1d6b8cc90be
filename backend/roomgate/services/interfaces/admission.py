"""
Admission control strategy interface.
Allows swapping between different concurrency control approaches.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional


class AdmissionResult(IntEnum):
    """Three-way decision of an atomic admission attempt.

    Values match the integer reply of the admission script.
    """

    ROOM_NOT_FOUND = -1
    ROOM_FULL = 0
    ADMITTED = 1


class OutcomeKind(str, Enum):
    ALREADY_ADMITTED = "already_admitted"
    ROOM_NOT_FOUND = "room_not_found"
    ROOM_FULL = "room_full"
    ADMITTED = "admitted"


@dataclass(frozen=True)
class AdmissionOutcome:
    """What the edge layer should do with a join request.

    ``token`` is set for ``ALREADY_ADMITTED`` (the presented token) and
    ``ADMITTED`` (the freshly issued one).
    """

    kind: OutcomeKind
    token: Optional[str] = None

    @classmethod
    def already_admitted(cls, token: str) -> "AdmissionOutcome":
        return cls(OutcomeKind.ALREADY_ADMITTED, token)

    @classmethod
    def admitted(cls, token: str) -> "AdmissionOutcome":
        return cls(OutcomeKind.ADMITTED, token)

    @classmethod
    def room_not_found(cls) -> "AdmissionOutcome":
        return cls(OutcomeKind.ROOM_NOT_FOUND)

    @classmethod
    def room_full(cls) -> "AdmissionOutcome":
        return cls(OutcomeKind.ROOM_FULL)


class AdmissionStrategy(ABC):
    """
    Interface for admission control strategies.

    Implementations:
    - ScriptedAdmission: server-side Lua script, one atomic round trip
    - OptimisticAdmission: WATCH/MULTI/EXEC with re-read on conflict
    """

    @abstractmethod
    async def admit(self, room_key: str, token: str, capacity: int) -> AdmissionResult:
        """
        Atomically check a room and append ``token`` to its ``connected`` list.

        Args:
            room_key: Room metadata hash key
            token: Freshly generated candidate token
            capacity: Maximum number of distinct tokens in the room

        Returns:
            ROOM_NOT_FOUND if the room key does not exist (no write)
            ROOM_FULL if the distinct token count already reaches capacity (no write)
            ADMITTED once the token has been stored

        Raises:
            AdmissionError if the store could not decide
        """
        pass
