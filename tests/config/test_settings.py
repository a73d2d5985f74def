"""Tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from stratum import CacheSettings, RetryPolicy, StoreSettings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "STRATUM_CACHE_REDIS_URL",
        "STRATUM_CACHE_KEY_PREFIX",
        "STRATUM_CACHE_EXPIRY_SECONDS",
        "STRATUM_STORE_MAX_GET_BATCH",
        "STRATUM_STORE_RETRY_ATTEMPTS",
        "STRATUM_STORE_RETRY_BACKOFF",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    cache = CacheSettings()
    store = StoreSettings()

    assert cache.redis_url is None
    assert cache.key_prefix == "stratum:"
    assert cache.negative_expiry_seconds == 300.0
    assert (store.max_get_batch, store.max_put_batch, store.max_delete_batch) == (1000, 500, 500)
    assert store.retry_policy() == RetryPolicy()


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("STRATUM_CACHE_REDIS_URL", "redis://cache:6379/1")
    monkeypatch.setenv("STRATUM_CACHE_EXPIRY_SECONDS", "30")
    monkeypatch.setenv("STRATUM_STORE_MAX_GET_BATCH", "250")
    monkeypatch.setenv("STRATUM_STORE_RETRY_ATTEMPTS", "4")
    monkeypatch.setenv("STRATUM_STORE_RETRY_BACKOFF", "exponential")

    cache = CacheSettings()
    store = StoreSettings()

    assert cache.redis_url == "redis://cache:6379/1"
    assert cache.expiry_seconds == 30.0
    assert store.max_get_batch == 250
    assert store.retry_policy() == RetryPolicy(max_attempts=4, backoff="exponential")


def test_explicit_values_win_over_environment(monkeypatch):
    monkeypatch.setenv("STRATUM_CACHE_KEY_PREFIX", "env:")

    assert CacheSettings(key_prefix="explicit:").key_prefix == "explicit:"


@pytest.mark.parametrize(
    "kwargs",
    [{"max_get_batch": 0}, {"retry_attempts": 0}, {"retry_backoff": "fibonacci"}],
)
def test_invalid_store_settings_are_rejected(kwargs):
    with pytest.raises(ValidationError):
        StoreSettings(**kwargs)
