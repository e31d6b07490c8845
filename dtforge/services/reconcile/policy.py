"""
Call policy shared by the reconcilers during one batch.

- WritePacer: fixed delay before every write-class call (rate limit respect)
- RetryPolicy: bounded retry with backoff for retryable transport faults
- CancellationToken: cooperative stop flag checked at safe boundaries

The batch runs strictly sequentially, so per-call sleeps are the only
rate control. A concurrent orchestrator would need a shared token bucket
in place of WritePacer.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TypeVar

from dtforge.config import Settings
from dtforge.services.github.exceptions import TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


class WritePacer:
    """Waits a fixed delay before each remote write."""

    def __init__(self, delay: float = 0.0, sleep: Sleep = asyncio.sleep):
        self.delay = delay
        self._sleep = sleep

    async def wait(self) -> None:
        if self.delay > 0:
            await self._sleep(self.delay)


class RetryPolicy:
    """Retries retryable TransportErrors a bounded number of times."""

    def __init__(self, retries: int = 1, backoff: float = 1.0, sleep: Sleep = asyncio.sleep):
        self.retries = max(0, retries)
        self.backoff = backoff
        self._sleep = sleep

    async def run(
        self,
        call: Callable[[], Awaitable[T]],
        before_attempt: Callable[[], Awaitable[None]] | None = None,
    ) -> T:
        """Run `call`, retrying on retryable transport faults only."""
        attempt = 0
        while True:
            if before_attempt is not None:
                await before_attempt()
            try:
                return await call()
            except TransportError as e:
                if not e.retryable or attempt >= self.retries:
                    raise
                delay = self.backoff * (2**attempt)
                attempt += 1
                logger.warning(
                    f"Transient hosting error (attempt {attempt}/{self.retries + 1}), "
                    f"retrying in {delay}s: {e.message}"
                )
                if delay > 0:
                    await self._sleep(delay)


class CancellationToken:
    """Cooperative cancellation, honoured between Targets and between files."""

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        if not self._cancelled:
            logger.info("Cancellation requested; stopping at the next safe boundary")
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


@dataclass
class CallPolicy:
    """Pacing, retry and cancellation bundle owned by the orchestrator."""

    pacer: WritePacer = field(default_factory=WritePacer)
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    cancel: CancellationToken = field(default_factory=CancellationToken)

    @classmethod
    def from_settings(
        cls, config: Settings, cancel: CancellationToken | None = None
    ) -> "CallPolicy":
        return cls(
            pacer=WritePacer(config.write_pacing_seconds),
            retry=RetryPolicy(config.transport_retries, config.retry_backoff_seconds),
            cancel=cancel or CancellationToken(),
        )

    async def read(self, call: Callable[[], Awaitable[T]]) -> T:
        return await self.retry.run(call)

    async def write(self, call: Callable[[], Awaitable[T]]) -> T:
        return await self.retry.run(call, before_attempt=self.pacer.wait)
