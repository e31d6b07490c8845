"""Root conftest: shared fixtures for unit and API tests.

Provides:
- fake_client: in-memory hosting client that records every call
- policy: CallPolicy with pacing and backoff sleeps recorded, never slept
"""

from __future__ import annotations

import pytest

from dtforge.services.reconcile import CallPolicy, CancellationToken, RetryPolicy, WritePacer

from tests.helpers.fake_hosting import FakeHostingClient


class RecordingSleep:
    """Async sleep stand-in that only records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def fake_client() -> FakeHostingClient:
    return FakeHostingClient()


@pytest.fixture
def sleeps() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def policy(sleeps: RecordingSleep) -> CallPolicy:
    return CallPolicy(
        pacer=WritePacer(0.3, sleep=sleeps),
        retry=RetryPolicy(retries=1, backoff=1.0, sleep=sleeps),
        cancel=CancellationToken(),
    )
