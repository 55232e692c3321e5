"""
Polling backoff policy.

Capped exponential backoff without jitter: the interval sequence is
deterministic, ``I0, I0*m, I0*m^2, ...`` up to ``max_interval``.
"""

from __future__ import annotations

import os
from contextlib import suppress
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator


@dataclass(frozen=True)
class BackoffPolicy:
    """Backoff policy for batch status polling.

    Attributes:
        initial_interval: First sleep in seconds
        multiplier: Growth factor applied after each non-terminal poll
        max_interval: Upper bound on any single sleep in seconds
    """

    initial_interval: float = 5.0
    multiplier: float = 2.0
    max_interval: float = 60.0

    def __post_init__(self) -> None:
        if self.initial_interval <= 0:
            raise ValueError("initial_interval must be positive")
        if self.multiplier < 1:
            raise ValueError("multiplier must be at least 1")
        if self.max_interval < self.initial_interval:
            raise ValueError("max_interval must be >= initial_interval")

    @classmethod
    def from_env(cls) -> BackoffPolicy:
        """Create a policy from ``ANTHROPIC_BATCH_POLL_*`` environment variables.

        Values that are not positive numbers are ignored.
        """
        initial = _env_seconds("ANTHROPIC_BATCH_POLL_INITIAL_SECS", cls.initial_interval)
        maximum = _env_seconds("ANTHROPIC_BATCH_POLL_MAX_SECS", cls.max_interval)
        return cls(initial_interval=initial, max_interval=max(maximum, initial))

    def delay(self, attempt: int) -> float:
        """Sleep before poll number ``attempt + 1`` (0-based).

        Args:
            attempt: Number of non-terminal observations so far, minus one
        """
        if attempt < 0:
            raise ValueError("attempt must be >= 0")
        # Stop growing once capped to avoid float overflow on long waits
        interval = self.initial_interval
        for _ in range(attempt):
            interval *= self.multiplier
            if interval >= self.max_interval:
                return self.max_interval
        return min(interval, self.max_interval)

    def intervals(self) -> Iterator[float]:
        """Fresh, infinite interval sequence for one polling session."""
        attempt = 0
        while True:
            yield self.delay(attempt)
            attempt += 1


def _env_seconds(name: str, default: float) -> float:
    value = default
    with suppress(ValueError):
        value = float(os.getenv(name) or default)
    return value if 0 < value < float("inf") else default
