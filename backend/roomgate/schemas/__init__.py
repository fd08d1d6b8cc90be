from roomgate.schemas.room import RoomCreated, RoomPage, RoomSession, RoomSessionResponse

__all__ = [
    "RoomCreated", "RoomPage", "RoomSession", "RoomSessionResponse",
]
