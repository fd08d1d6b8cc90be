"""
Infrastructure layer - external system integrations.
Keeps business logic clean from implementation details.
"""

from .redis_client import get_redis, RedisClient
from .redis_keys import room_meta_key, room_cookie_name, room_path, CONNECTED_FIELD

__all__ = [
    'get_redis',
    'RedisClient',
    'room_meta_key',
    'room_cookie_name',
    'room_path',
    'CONNECTED_FIELD',
]
