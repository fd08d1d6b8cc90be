"""
Admission strategy factory.
Configures which admission control strategy to use.
"""

from typing import Optional

import redis.asyncio as redis

from roomgate.core.config import Settings, get_settings
from roomgate.services.admission_client import AdmissionClient
from roomgate.services.admission_service import ScriptedAdmission
from roomgate.services.interfaces.admission import AdmissionStrategy
from roomgate.services.interfaces.optimistic_admission import OptimisticAdmission


def get_admission_strategy(
    client: redis.Redis,
    settings: Optional[Settings] = None,
) -> AdmissionStrategy:
    """
    Get configured admission strategy.

    - script (default): ScriptedAdmission, one atomic Lua round trip
    - optimistic: OptimisticAdmission, for stores without scripting

    Selected via the ADMISSION_STRATEGY env var.
    """
    settings = settings or get_settings()

    if settings.ADMISSION_STRATEGY == 'optimistic':
        return OptimisticAdmission(client, max_attempts=settings.ADMISSION_MAX_ATTEMPTS)
    return ScriptedAdmission(client)


def build_admission_client(
    client: redis.Redis,
    settings: Optional[Settings] = None,
) -> AdmissionClient:
    """Admission client wired with the configured strategy and capacity."""
    settings = settings or get_settings()
    return AdmissionClient(
        get_admission_strategy(client, settings),
        capacity=settings.ROOM_CAPACITY,
    )
