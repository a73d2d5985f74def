"""Configuration settings using Pydantic Settings.

Provides typed configuration with environment variable support for the
cache and store tiers.

Usage:
    from stratum.config import CacheSettings, StoreSettings

    # Load from environment variables (STRATUM_CACHE_*, STRATUM_STORE_*)
    cache_settings = CacheSettings()
    store_settings = StoreSettings()

    # Or override with explicit values
    cache_settings = CacheSettings(redis_url="redis://localhost:6379/0")
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from stratum.storage.models import RetryPolicy


class CacheSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for the shared cache tier.

    Attributes:
        redis_url: Redis connection URL (None = no Redis backend).
        key_prefix: Namespace for every shared-cache key.
        expiry_seconds: Lifetime of positive entries (None = backend default).
        negative_expiry_seconds: Lifetime of confirmed-absent entries.
        max_batch: Maximum keys per backend call; larger batches are chunked.

    Environment Variables:
        STRATUM_CACHE_REDIS_URL
        STRATUM_CACHE_KEY_PREFIX
        STRATUM_CACHE_EXPIRY_SECONDS
        STRATUM_CACHE_NEGATIVE_EXPIRY_SECONDS
        STRATUM_CACHE_MAX_BATCH
    """

    model_config = SettingsConfigDict(
        env_prefix="STRATUM_CACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    redis_url: str | None = None
    key_prefix: str = "stratum:"
    expiry_seconds: float | None = None
    negative_expiry_seconds: float | None = 300.0
    max_batch: int = Field(default=1000, gt=0)


class StoreSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for the durable store adapter.

    Attributes:
        max_get_batch: Maximum identities per durable get call.
        max_put_batch: Maximum entities per durable put call.
        max_delete_batch: Maximum identities per durable delete call.
        max_concurrent: Max chunk calls in flight (None = unlimited).
        retry_attempts: Attempts per chunk on transient failure (1 = no retry).
        retry_backoff: Backoff between attempts (none, linear, exponential).
        retry_base_delay: Base delay in seconds for backoff.

    Environment Variables:
        STRATUM_STORE_MAX_GET_BATCH
        STRATUM_STORE_MAX_PUT_BATCH
        STRATUM_STORE_MAX_DELETE_BATCH
        STRATUM_STORE_MAX_CONCURRENT
        STRATUM_STORE_RETRY_ATTEMPTS
        STRATUM_STORE_RETRY_BACKOFF
        STRATUM_STORE_RETRY_BASE_DELAY
    """

    model_config = SettingsConfigDict(
        env_prefix="STRATUM_STORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_get_batch: int = Field(default=1000, gt=0)
    max_put_batch: int = Field(default=500, gt=0)
    max_delete_batch: int = Field(default=500, gt=0)
    max_concurrent: int | None = Field(default=None, gt=0)
    retry_attempts: int = Field(default=1, ge=1)
    retry_backoff: Literal["none", "linear", "exponential"] = "none"
    retry_base_delay: float = Field(default=0.1, ge=0)

    def retry_policy(self) -> RetryPolicy:
        """Build the RetryPolicy described by these settings."""
        return RetryPolicy(
            max_attempts=self.retry_attempts,
            backoff=self.retry_backoff,
            base_delay=self.retry_base_delay,
        )
