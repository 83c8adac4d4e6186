"""Bounded exponential backoff for retry logic."""

from __future__ import annotations

import random
from collections import abc


class ExponentialBackoff:
    """
    Iterator that yields exponentially increasing delays with variance,
    stopping once the allowed number of attempts is used up.

    The first value is always 0, so the first attempt happens right away.

    Usage:
        for delay in ExponentialBackoff(attempts=3, maximum=10):
            await asyncio.sleep(delay)
            if await try_operation():
                break
        else:
            raise GaveUp()
    """

    def __init__(
        self,
        *,
        attempts: int,
        base: float = 2,
        variance: float = 0.1,
        maximum: float = 300,
    ):
        """
        Initialize exponential backoff.

        Args:
            attempts: Total number of values to yield (must be >= 1)
            base: Exponential base (must be > 1)
            variance: Symmetric random variance applied to each delay (1 ± variance)
            maximum: Maximum delay value to return

        Raises:
            ValueError: If base <= 1 or attempts < 1
        """
        if base <= 1:
            raise ValueError("Base has to be greater than 1")
        if attempts < 1:
            raise ValueError("At least one attempt is required")
        self.steps: int = 0
        self.attempts: int = attempts
        self.base: float = float(base)
        self.maximum: float = float(maximum)
        self.variance_min: float = 1 - variance
        self.variance_max: float = 1 + variance

    @property
    def remaining(self) -> int:
        """Number of attempts not yet handed out."""
        return self.attempts - self.steps

    def __iter__(self) -> abc.Iterator[float]:
        return self

    def __next__(self) -> float:
        if self.steps >= self.attempts:
            raise StopIteration
        if self.steps == 0:
            value = 0.0
        else:
            value = min(
                pow(self.base, self.steps - 1) * random.uniform(self.variance_min, self.variance_max),
                self.maximum,
            )
        self.steps += 1
        return value
