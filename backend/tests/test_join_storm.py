"""
Tests for the join storm experiment's outcome accounting.
"""

import pytest

from join_storm import Metrics, run_storm
from roomgate.services.admission_service import ScriptedAdmission
from roomgate.services.interfaces.admission import AdmissionOutcome


@pytest.mark.parametrize("outcome,counts", [
    (AdmissionOutcome.admitted("t1"), (1, 0, 0)),
    (AdmissionOutcome.room_full(), (0, 1, 0)),
    (AdmissionOutcome.room_not_found(), (0, 0, 1)),
    (AdmissionOutcome.already_admitted("t1"), (0, 0, 0)),
])
def test_each_outcome_is_counted_by_its_own_kind(outcome, counts):
    metrics = Metrics()

    metrics.record(outcome)

    assert (metrics.admitted, metrics.full, metrics.not_found) == counts


@pytest.mark.asyncio
async def test_storm_reports_admitted_and_full_separately(fake_redis):
    metrics, _, occupants = await run_storm(fake_redis, ScriptedAdmission(fake_redis), users=20, capacity=2)

    assert metrics.admitted == 2
    assert metrics.full == 18
    assert metrics.not_found == 0
    assert metrics.errors == 0
    assert occupants == 2
    assert len(metrics.response_times) == 20
