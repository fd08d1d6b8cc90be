"""
Room endpoints: creation, the room page, and the token-protected session.
"""

import redis.asyncio as redis
from fastapi import APIRouter, Depends, status

from roomgate.api.dependencies import require_room_member
from roomgate.core.config import get_settings
from roomgate.infrastructure.redis_client import get_redis
from roomgate.schemas.room import RoomCreated, RoomPage, RoomSession, RoomSessionResponse
from roomgate.services.connected import distinct_count
from roomgate.services.room_service import create_room

router = APIRouter(prefix="/rooms", tags=["Rooms"])

# Served under /room/<roomId>; pages go through RoomAdmissionMiddleware
page_router = APIRouter(tags=["Room pages"])


@router.post("/", response_model=RoomCreated, status_code=status.HTTP_201_CREATED)
async def create_room_endpoint(client: redis.Redis = Depends(get_redis)):
    """Create an empty room that expires after ROOM_TTL_SECONDS."""
    settings = get_settings()
    room_id = await create_room(client, settings.ROOM_TTL_SECONDS)
    return RoomCreated(
        room_id=room_id,
        capacity=settings.ROOM_CAPACITY,
        expires_in=settings.ROOM_TTL_SECONDS,
    )


@page_router.get("/room/{room_id}/api/session", response_model=RoomSessionResponse)
async def room_session(session: RoomSession = Depends(require_room_member)):
    """
    Return the caller's session. Requires a token admitted to this room.

    Lives under the room path so browsers send the room-scoped cookie;
    admission skips it and the token is re-validated instead.
    """
    return RoomSessionResponse(
        room_id=session.room_id,
        token=session.token,
        occupants=distinct_count(session.connected),
        capacity=get_settings().ROOM_CAPACITY,
    )


@page_router.get("/room/{room_id}", response_model=RoomPage)
async def room_page(room_id: str):
    return RoomPage(room_id=room_id, message="Welcome to the room")
