"""
Pydantic schemas for room-related responses.
"""

from pydantic import BaseModel


class RoomCreated(BaseModel):
    room_id: str
    capacity: int
    expires_in: int


class RoomPage(BaseModel):
    room_id: str
    message: str


class RoomSession(BaseModel):
    """A token that re-validated against the room's connected list."""

    room_id: str
    token: str
    connected: list


class RoomSessionResponse(BaseModel):
    room_id: str
    token: str
    occupants: int
    capacity: int
