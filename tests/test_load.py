"""
Load Testing for the Snippet Service

Measures response times and error rates of snippet creation and retrieval
against a running server at increasing request rates.

Only runs when LOAD_TEST_BASE_URL points at a server started separately,
e.g. ``uvicorn copyit.main:app --port 8000`` with REDIS_URL unset so the
rate limiter does not interfere.

Usage:
    LOAD_TEST_BASE_URL=http://localhost:8000 pytest tests/test_load.py -v -s
"""

import asyncio
import os
import statistics
import time
from typing import List

import httpx
import pytest

BASE_URL = os.getenv("LOAD_TEST_BASE_URL")
TEST_DURATION = 5  # seconds per step
RAMP_UP_STEPS = [10, 50, 100, 200]  # Requests per second

pytestmark = pytest.mark.skipif(
    not BASE_URL,
    reason="LOAD_TEST_BASE_URL not set; load tests need a running server"
)


class LoadTestResults:
    """Container for load test results."""

    def __init__(self, rps: int):
        self.rps = rps
        self.total_requests = 0
        self.successful_requests = 0
        self.response_times: List[float] = []
        self.errors: List[str] = []

    @property
    def success_rate(self) -> float:
        if self.total_requests == 0:
            return 0.0
        return (self.successful_requests / self.total_requests) * 100

    @property
    def p95_response_time(self) -> float:
        if not self.response_times:
            return 0.0
        sorted_times = sorted(self.response_times)
        index = int(len(sorted_times) * 0.95)
        return sorted_times[min(index, len(sorted_times) - 1)]

    def summary(self) -> str:
        avg = statistics.mean(self.response_times) if self.response_times else 0.0
        return (
            f"{self.rps} rps: {self.total_requests} requests, "
            f"{self.success_rate:.1f}% ok, avg {avg*1000:.1f}ms, "
            f"p95 {self.p95_response_time*1000:.1f}ms"
        )


async def create_and_fetch(client: httpx.AsyncClient, results: LoadTestResults, index: int) -> None:
    """Create a one-time snippet and read it back once."""
    start = time.perf_counter()
    try:
        created = await client.post(
            "/api/v1/snippets",
            json={"content": f"load test snippet {index}", "ttl_seconds": 60, "one_time": True}
        )
        if created.status_code != 201:
            results.errors.append(f"create {created.status_code}")
            return

        fetched = await client.get(f"/{created.json()['path']}")
        if fetched.status_code == 200:
            results.successful_requests += 1
        else:
            results.errors.append(f"fetch {fetched.status_code}")
    except httpx.HTTPError as e:
        results.errors.append(type(e).__name__)
    finally:
        results.total_requests += 1
        results.response_times.append(time.perf_counter() - start)


async def run_step(rps: int) -> LoadTestResults:
    results = LoadTestResults(rps)
    async with httpx.AsyncClient(base_url=BASE_URL, timeout=10.0) as client:
        tasks = []
        for second in range(TEST_DURATION):
            for i in range(rps):
                tasks.append(asyncio.create_task(create_and_fetch(client, results, second * rps + i)))
                await asyncio.sleep(1 / rps)
        await asyncio.gather(*tasks)
    return results


@pytest.mark.asyncio
async def test_health_under_no_load():
    async with httpx.AsyncClient(base_url=BASE_URL, timeout=5.0) as client:
        response = await client.get("/health")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_ramp_up():
    """Increase load step by step and report where errors start."""
    for rps in RAMP_UP_STEPS:
        results = await run_step(rps)
        print(f"\n[LOAD] {results.summary()}")
        if results.success_rate < 95:
            print(f"[LOAD] Breaking point reached at {rps} rps: {results.errors[:5]}")
            break
    else:
        results = None

    assert results is None or results.rps > RAMP_UP_STEPS[0]
