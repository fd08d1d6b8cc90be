#!/usr/bin/env python3
"""
Join storm against a live Redis.

Creates a fresh room, fires many concurrent first-contact joins at it and
checks that exactly `capacity` of them got in, whatever the fan-in.

Usage:
    REDIS_URL=redis://localhost:6379/0 python experiments/join_storm.py
"""

import asyncio
import os
import statistics
import time
from dataclasses import dataclass, field
from typing import List

import redis.asyncio as redis

from roomgate.core.exceptions import AdmissionError
from roomgate.infrastructure.redis_keys import CONNECTED_FIELD, room_meta_key
from roomgate.services.admission_client import AdmissionClient
from roomgate.services.admission_service import ScriptedAdmission
from roomgate.services.connected import distinct_count, parse_connected
from roomgate.services.interfaces.admission import AdmissionOutcome, AdmissionStrategy, OutcomeKind
from roomgate.services.interfaces.optimistic_admission import OptimisticAdmission
from roomgate.services.room_service import create_room

REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
ROOM_TTL = 60

@dataclass
class Metrics:
    admitted: int = 0
    full: int = 0
    not_found: int = 0
    errors: int = 0
    response_times: List[float] = field(default_factory=list)

    def record(self, outcome: AdmissionOutcome):
        if outcome.kind == OutcomeKind.ADMITTED:
            self.admitted += 1
        elif outcome.kind == OutcomeKind.ROOM_FULL:
            self.full += 1
        elif outcome.kind == OutcomeKind.ROOM_NOT_FOUND:
            self.not_found += 1

    def percentile(self, p: float) -> float:
        if not self.response_times:
            return 0
        sorted_times = sorted(self.response_times)
        idx = int(len(sorted_times) * p)
        return sorted_times[min(idx, len(sorted_times)-1)]

def print_header(text: str):
    print(f"\n{'='*70}")
    print(f"{text:^70}")
    print(f"{'='*70}\n")

async def join(client: AdmissionClient, room_id: str, metrics: Metrics):
    start = time.perf_counter()
    try:
        outcome = await client.try_admit(room_id)
    except AdmissionError:
        metrics.errors += 1
        return
    finally:
        metrics.response_times.append((time.perf_counter() - start) * 1000)

    metrics.record(outcome)

async def run_storm(store: redis.Redis, strategy: AdmissionStrategy, users: int, capacity: int):
    room_id = await create_room(store, ROOM_TTL)
    client = AdmissionClient(strategy, capacity=capacity)
    metrics = Metrics()

    start = time.perf_counter()
    await asyncio.gather(*(join(client, room_id, metrics) for _ in range(users)))
    duration = time.perf_counter() - start

    stored = parse_connected(await store.hget(room_meta_key(room_id), CONNECTED_FIELD))
    return metrics, duration, distinct_count(stored)

def print_metrics(name: str, metrics: Metrics, duration: float, occupants: int, capacity: int):
    print(f"{name}:")
    print(f"  Admitted:        {metrics.admitted}")
    print(f"  Room full:       {metrics.full}")
    print(f"  Room not found:  {metrics.not_found}")
    print(f"  Errors:          {metrics.errors}")
    print(f"  Occupants:       {occupants} / {capacity}")
    print(f"  Duration:        {duration*1000:.1f}ms")

    if metrics.response_times:
        print(f"  Avg latency:     {statistics.mean(metrics.response_times):.2f}ms")
        print(f"  P95 latency:     {metrics.percentile(0.95):.2f}ms")
        print(f"  P99 latency:     {metrics.percentile(0.99):.2f}ms")

    print(f"\n  Invariant Check:")
    print(f"    Admitted == capacity:  {'✓' if metrics.admitted == capacity else '✗'}")
    print(f"    Occupants <= capacity: {'✓' if occupants <= capacity else '✗'}")
    print()

async def main():
    print_header("ROOM JOIN STORM")
    print(f"Redis: {REDIS_URL}\n")

    store = redis.from_url(REDIS_URL, decode_responses=True)

    SCENARIOS = [
        ("Pair room", 50, 2),
        ("Pair room, heavy fan-in", 1000, 2),
        ("Small group", 1000, 8),
    ]

    try:
        for name, users, capacity in SCENARIOS:
            print_header(f"{name}: {users} joins / capacity {capacity}")

            m1, d1, o1 = await run_storm(store, ScriptedAdmission(store), users, capacity)
            print_metrics("Scripted (Lua)", m1, d1, o1, capacity)

            m2, d2, o2 = await run_storm(store, OptimisticAdmission(store), users, capacity)
            print_metrics("Optimistic (WATCH)", m2, d2, o2, capacity)
    finally:
        await store.aclose()

if __name__ == "__main__":
    asyncio.run(main())
