"""Tests for RedisSharedCache against a mocked redis.asyncio client.

Focus: key namespacing, expiry translation and prefix-scoped flush; the
Redis server itself is not under test.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from stratum import CacheSettings, RedisSharedCache
from stratum.cache.redis_cache import _glob_escape


def _client() -> MagicMock:
    client = MagicMock()
    client.mget = AsyncMock()
    client.delete = AsyncMock()
    client.flushdb = AsyncMock()
    pipe = MagicMock()
    pipe.execute = AsyncMock()
    pipe.__aenter__ = AsyncMock(return_value=pipe)
    pipe.__aexit__ = AsyncMock(return_value=False)
    client.pipeline.return_value = pipe
    return client


@pytest.mark.asyncio
async def test_get_multi_prefixes_keys_and_drops_misses():
    client = _client()
    client.mget.return_value = [b"1", None]
    cache = RedisSharedCache(client, key_prefix="app:")

    assert await cache.get_multi(["a", "b"]) == {"a": b"1"}
    client.mget.assert_awaited_once_with(["app:a", "app:b"])


@pytest.mark.asyncio
async def test_get_multi_with_no_keys_skips_round_trip():
    client = _client()

    assert await RedisSharedCache(client).get_multi([]) == {}
    client.mget.assert_not_awaited()


@pytest.mark.asyncio
async def test_set_multi_pipelines_with_millisecond_expiry():
    client = _client()
    cache = RedisSharedCache(client, key_prefix="app:")

    await cache.set_multi({"a": b"1", "b": b"2"}, expiry=1.5)

    pipe = client.pipeline.return_value
    client.pipeline.assert_called_once_with(transaction=False)
    pipe.set.assert_any_call("app:a", b"1", px=1500)
    pipe.set.assert_any_call("app:b", b"2", px=1500)
    pipe.execute.assert_awaited_once()


@pytest.mark.asyncio
async def test_set_multi_without_expiry_uses_backend_default():
    client = _client()

    await RedisSharedCache(client).set_multi({"a": b"1"})

    client.pipeline.return_value.set.assert_called_once_with("stratum:a", b"1", px=None)


@pytest.mark.asyncio
async def test_delete_multi_prefixes_keys():
    client = _client()

    await RedisSharedCache(client, key_prefix="app:").delete_multi(["a", "b"])

    client.delete.assert_awaited_once_with("app:a", "app:b")


@pytest.mark.asyncio
async def test_flush_deletes_only_prefixed_keys_in_batches():
    client = _client()
    seen: dict[str, object] = {}

    async def scan_iter(match, count):
        seen["match"] = match
        for key in [b"app:1", b"app:2", b"app:3"]:
            yield key

    client.scan_iter = scan_iter
    cache = RedisSharedCache(client, key_prefix="app:", scan_count=2)

    await cache.flush()

    assert seen["match"] == "app:*"
    assert [c.args for c in client.delete.await_args_list] == [(b"app:1", b"app:2"), (b"app:3",)]
    client.flushdb.assert_not_awaited()


@pytest.mark.asyncio
async def test_flush_without_prefix_flushes_database():
    client = _client()

    await RedisSharedCache(client, key_prefix="").flush()

    client.flushdb.assert_awaited_once()


def test_glob_escape_neutralizes_pattern_characters():
    assert _glob_escape("a*b?[c]\\") == "a\\*b\\?\\[c\\]\\\\"


def test_from_settings_requires_url():
    with pytest.raises(ValueError, match="redis_url"):
        RedisSharedCache.from_settings(CacheSettings(redis_url=None))


def test_from_settings_builds_client_from_url():
    settings = CacheSettings(redis_url="redis://cache:6379/2", key_prefix="blog:")

    with patch("redis.asyncio.from_url") as from_url:
        cache = RedisSharedCache.from_settings(settings)

    from_url.assert_called_once_with("redis://cache:6379/2")
    assert cache.client is from_url.return_value
    assert cache._key("x") == "blog:x"
