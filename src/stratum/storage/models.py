"""Durable store models and retry configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Configuration for retrying durable store calls that fail transiently.

    Only whole-call failures classified TRANSIENT (timeouts, connection
    errors, TransientError) are retried; per-item results are never retried.
    """

    max_attempts: int = 1
    """Maximum attempts (1 = no retry). Default: no retry."""

    backoff: Literal["none", "linear", "exponential"] = "none"
    """Backoff strategy between retries."""

    base_delay: float = 0.1
    """Base delay in seconds for backoff calculation."""
