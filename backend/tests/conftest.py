"""
Pytest fixtures for Redis-backed rooms and the HTTP client.

Tests run against fakeredis with Lua support, so the admission script runs
in every default run. Script tests also run against a live Redis when
TEST_REDIS_URL (a dedicated database that gets flushed) is reachable, and
skip that variant otherwise.
"""

import json
import os
from typing import AsyncGenerator, Optional

import fakeredis
import pytest
import pytest_asyncio
import redis.asyncio as redis
import structlog
from httpx import AsyncClient, ASGITransport
from redis.exceptions import RedisError
from structlog.testing import LogCapture

from roomgate.main import app
from roomgate.infrastructure.redis_client import get_redis
from roomgate.infrastructure.redis_keys import room_meta_key
from roomgate.services.admission_client import AdmissionClient
from roomgate.services.admission_service import ScriptedAdmission

TEST_REDIS_URL = os.getenv("TEST_REDIS_URL", "redis://localhost:6379/15")


async def make_room(client: redis.Redis, room_id: str, connected: Optional[list] = None) -> str:
    """Create a room metadata record the way room creation does."""
    key = room_meta_key(room_id)
    await client.hset(key, mapping={
        "connected": json.dumps(connected or []),
        "createdAt": 1700000000000,
    })
    return key


def new_fake_redis() -> redis.Redis:
    return fakeredis.FakeAsyncRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest_asyncio.fixture
async def fake_redis() -> AsyncGenerator[redis.Redis, None]:
    """Isolated in-memory Redis per test."""
    client = new_fake_redis()
    yield client
    await client.aclose()


@pytest_asyncio.fixture(params=["fake", "live"])
async def script_redis(request) -> AsyncGenerator[redis.Redis, None]:
    """Redis able to run the admission script: in-memory, then live if reachable."""
    if request.param == "fake":
        client = new_fake_redis()
        yield client
        await client.aclose()
        return

    client = redis.from_url(TEST_REDIS_URL, decode_responses=True, socket_connect_timeout=1)
    try:
        await client.ping()
    except (RedisError, OSError) as e:
        await client.aclose()
        pytest.skip(f"Redis not reachable at {TEST_REDIS_URL}: {e}")

    await client.flushdb()
    yield client
    await client.flushdb()
    await client.aclose()


@pytest_asyncio.fixture
async def admission_client(fake_redis: redis.Redis) -> AdmissionClient:
    return AdmissionClient(ScriptedAdmission(fake_redis), capacity=2)


@pytest_asyncio.fixture
async def client(
    fake_redis: redis.Redis,
    admission_client: AdmissionClient,
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client wired to the fake store instead of the configured Redis."""
    app.dependency_overrides[get_redis] = lambda: fake_redis
    app.state.admission_client = admission_client

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def log_entries():
    """Structlog events with request context merged in."""
    capture = LogCapture()
    structlog.configure(processors=[structlog.contextvars.merge_contextvars, capture])
    yield capture.entries
    structlog.reset_defaults()
