"""
Normalization of a room's ``connected`` field.

The field is logically an ordered list of session tokens stored as a JSON
array. Depending on the client that reads it, it arrives already decoded
(a list), as raw text (str or bytes), or not at all. Every reader goes
through ``parse_connected`` so admission and re-validation agree on what
the room contains.

Malformed values are never an error: they read as an empty room.
"""

import json
from typing import Any

from roomgate.core.logging import get_logger

logger = get_logger(__name__)


def parse_connected(raw: Any) -> list:
    """Map any stored shape of ``connected`` to a list of tokens."""
    if raw is None:
        return []

    if isinstance(raw, (list, tuple)):
        return list(raw)

    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError:
            logger.debug("connected_malformed", reason="undecodable_bytes")
            return []

    if isinstance(raw, str):
        try:
            parsed = json.loads(raw)
        except ValueError:
            logger.debug("connected_malformed", reason="invalid_json")
            return []
        if isinstance(parsed, list):
            return parsed
        logger.debug("connected_malformed", reason="not_a_list", type=type(parsed).__name__)
        return []

    logger.debug("connected_malformed", reason="unexpected_type", type=type(raw).__name__)
    return []


def distinct_count(tokens: list) -> int:
    """Occupancy of a room: unique non-empty tokens, duplicates counted once."""
    return len({token for token in tokens if isinstance(token, str) and token})
