"""
Pacing policies for the bulk generation and bulk send loops.

The loops are strictly sequential; a pacer only decides how long to wait
between two consecutive calls to an external endpoint.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, Optional
from dataclasses import dataclass
import logging

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[Any]]

class PacingPolicy(ABC):
    """Decides how long the loop waits before the next external call."""

    def __init__(self, sleep: Optional[SleepFunc] = None):
        self._sleep = sleep or asyncio.sleep

    @abstractmethod
    async def wait(self) -> float:
        """Wait for the next turn and return the number of seconds waited."""

    @abstractmethod
    def get_status(self) -> Dict[str, Any]:
        """Describe the policy for display."""

class FixedIntervalPacer(PacingPolicy):
    """Always waits the same number of seconds between two calls."""

    def __init__(self, interval_seconds: float, sleep: Optional[SleepFunc] = None):
        super().__init__(sleep)
        self.interval_seconds = max(0.0, interval_seconds)

    async def wait(self) -> float:
        if self.interval_seconds > 0:
            logger.debug(f"Pacing: waiting {self.interval_seconds:.1f}s")
            await self._sleep(self.interval_seconds)
        return self.interval_seconds

    def get_status(self) -> Dict[str, Any]:
        return {"policy": "fixed_interval", "interval_seconds": self.interval_seconds}

@dataclass
class TokenBucketConfig:
    """Configuration for token bucket pacing."""
    requests_per_minute: int = 30
    burst_limit: int = 1

class TokenBucketPacer(PacingPolicy):
    """Token bucket pacing with burst support."""

    def __init__(
        self,
        config: TokenBucketConfig,
        sleep: Optional[SleepFunc] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        super().__init__(sleep)
        self.config = config
        self._clock = clock
        self.tokens = float(config.burst_limit)
        self.last_refill = clock()

        # Calculate refill rate (tokens per second)
        self.refill_rate = config.requests_per_minute / 60.0

    def _refill_tokens(self, current_time: float) -> None:
        time_elapsed = current_time - self.last_refill
        self.tokens = min(self.config.burst_limit, self.tokens + time_elapsed * self.refill_rate)
        self.last_refill = current_time

    async def wait(self) -> float:
        self._refill_tokens(self._clock())

        waited = 0.0
        if self.tokens < 1:
            waited = (1 - self.tokens) / self.refill_rate
            logger.debug(f"Pacing: out of tokens, waiting {waited:.1f}s")
            await self._sleep(waited)
            self._refill_tokens(self._clock())
            # The sleep may return early under a fake clock
            self.tokens = max(self.tokens, 1.0)

        self.tokens -= 1
        return waited

    def get_status(self) -> Dict[str, Any]:
        self._refill_tokens(self._clock())
        return {
            "policy": "token_bucket",
            "available_tokens": int(self.tokens),
            "max_tokens": self.config.burst_limit,
            "requests_per_minute": self.config.requests_per_minute,
        }
