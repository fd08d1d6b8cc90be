"""
FastAPI dependencies shared by room routes.
"""

import redis.asyncio as redis
from fastapi import Depends, Request

from roomgate.infrastructure.redis_client import get_redis
from roomgate.infrastructure.redis_keys import room_cookie_name
from roomgate.schemas.room import RoomSession
from roomgate.services.token_validation import validate_room_token


async def require_room_member(
    room_id: str,
    request: Request,
    client: redis.Redis = Depends(get_redis),
) -> RoomSession:
    """Re-validate the room-scoped token cookie against Redis."""
    token = request.cookies.get(room_cookie_name(room_id))
    return await validate_room_token(client, room_id, token)
