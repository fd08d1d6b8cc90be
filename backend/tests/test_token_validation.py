"""
Tests for token re-validation against the room's connected list.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import HTTPException
from httpx import AsyncClient
from redis.exceptions import ConnectionError as RedisConnectionError

from conftest import make_room
from roomgate.core.exceptions import StoreUnavailable
from roomgate.infrastructure.redis_client import get_redis
from roomgate.main import app
from roomgate.services.token_validation import validate_room_token


@pytest.mark.asyncio
async def test_admitted_token_is_valid(fake_redis):
    await make_room(fake_redis, "abc", connected=["t1", "t2"])

    session = await validate_room_token(fake_redis, "abc", "t2")

    assert session.room_id == "abc"
    assert session.token == "t2"
    assert session.connected == ["t1", "t2"]


@pytest.mark.asyncio
async def test_structured_connected_value_is_accepted():
    """Clients that hand back decoded JSON are read the same as raw text."""
    store = MagicMock()
    store.hget = AsyncMock(return_value=["t1"])

    session = await validate_room_token(store, "abc", "t1")

    assert session.connected == ["t1"]


@pytest.mark.asyncio
@pytest.mark.parametrize("room_id,token", [(None, "t1"), ("abc", None), ("", "t1"), ("abc", "")])
async def test_missing_room_or_token_is_rejected_without_store(room_id, token):
    store = MagicMock()
    store.hget = AsyncMock()

    with pytest.raises(HTTPException) as exc_info:
        await validate_room_token(store, room_id, token)

    assert exc_info.value.status_code == 401
    store.hget.assert_not_awaited()


@pytest.mark.asyncio
async def test_unknown_token_is_rejected(fake_redis):
    await make_room(fake_redis, "abc", connected=["t1"])

    with pytest.raises(HTTPException) as exc_info:
        await validate_room_token(fake_redis, "abc", "t9")

    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_expired_room_rejects_every_token(fake_redis):
    with pytest.raises(HTTPException):
        await validate_room_token(fake_redis, "gone", "t1")


@pytest.mark.asyncio
async def test_validation_never_writes(fake_redis):
    key = await make_room(fake_redis, "abc", connected=["t1", "t1"])

    await validate_room_token(fake_redis, "abc", "t1")

    assert json.loads(await fake_redis.hget(key, "connected")) == ["t1", "t1"]


@pytest.mark.asyncio
async def test_store_failure_is_not_unauthorized():
    store = MagicMock()
    store.hget = AsyncMock(side_effect=RedisConnectionError("connection refused"))

    with pytest.raises(StoreUnavailable):
        await validate_room_token(store, "abc", "t1")


@pytest.mark.asyncio
async def test_store_failure_on_protected_route_returns_503(client: AsyncClient):
    store = MagicMock()
    store.hget = AsyncMock(side_effect=RedisConnectionError("connection refused"))
    app.dependency_overrides[get_redis] = lambda: store
    client.cookies.clear()

    response = await client.get(
        "/room/abc/api/session",
        headers={"Cookie": "x-auth-token-abc=t1"},
    )

    assert response.status_code == 503
    assert "connection refused" not in response.text
