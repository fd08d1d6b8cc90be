"""
Operational errors raised by the admission layer.

Room-not-found and room-full are protocol outcomes, not exceptions.
Everything here means "admission could not be determined" and must reach
the request layer as a failure, never as an implicit admit or deny.
"""


class AdmissionError(Exception):
    """Base class for errors that leave an admission undecided."""


class StoreUnavailable(AdmissionError):
    """Redis could not be reached or rejected the command."""


class AdmissionContention(AdmissionError):
    """Optimistic admission gave up after repeated concurrent writes."""

    def __init__(self, room_key: str, attempts: int):
        super().__init__(f"Admission for {room_key} did not settle after {attempts} attempts")
        self.room_key = room_key
        self.attempts = attempts
