"""Retry configuration and per-chat retry counters."""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field
from tenacity import wait_incrementing, wait_random

logger = logging.getLogger(__name__)


class RetryPolicy(BaseModel, frozen=True):
    """Limits and pacing for corrective retries."""

    limit: int = Field(default=5, ge=0, description="Maximum number of recoverable failures before giving up.")
    base_delay: float = Field(default=0.2, ge=0, description="Seconds of backoff added per failed attempt.")
    jitter: float = Field(default=0.1, ge=0, description="Upper bound (exclusive) of the random delay in seconds.")


class RetryState:
    """Retry counters for a single ``chat()`` call.

    The backoff before each round trip is ``attempts * base_delay + uniform(0, jitter)``,
    priced with tenacity wait strategies. The state exposes ``attempt_number`` (one more than
    the number of failures so far) so it can be handed to them directly.
    """

    def __init__(self, policy: RetryPolicy | None = None):
        policy = policy or RetryPolicy()
        self.attempts = 0
        self.limit = policy.limit
        self.base_delay = policy.base_delay
        self.jitter = policy.jitter
        self._wait = wait_incrementing(start=0, increment=self.base_delay) + wait_random(0, self.jitter)

    @property
    def attempt_number(self) -> int:
        return self.attempts + 1

    @property
    def exhausted(self) -> bool:
        """True once no further retries are allowed."""
        return self.attempts >= self.limit

    def record_failure(self) -> None:
        self.attempts += 1
        logger.debug(f"Recorded failed attempt {self.attempts}/{self.limit}")

    def next_delay(self) -> float:
        """Seconds to wait before the next round trip (or before returning)."""
        return self._wait(self)

    def __repr__(self):
        return f"RetryState(attempts={self.attempts}, limit={self.limit})"
