"""Redis key patterns and field names for room metadata."""

CONNECTED_FIELD = "connected"
CREATED_AT_FIELD = "createdAt"

TOKEN_COOKIE_PREFIX = "x-auth-token-"


def room_meta_key(room_id: str) -> str:
    """Hash holding a room's metadata (``connected``, ``createdAt``)."""
    return f"meta:{room_id}"


def room_cookie_name(room_id: str) -> str:
    """Per-room cookie name, so a token never leaks into another room."""
    return f"{TOKEN_COOKIE_PREFIX}{room_id}"


def room_path(room_id: str) -> str:
    return f"/room/{room_id}"
