"""Durable store adapter: chunking, concurrency, retry, error classification.

Usage:
    adapter = StoreAdapter(MemoryStore(), StoreSettings(max_get_batch=100))
    results = await adapter.get_multi(identities)

    # Retry transient chunk failures with exponential backoff
    settings = StoreSettings(retry_attempts=3, retry_backoff="exponential")
    adapter = StoreAdapter(store, settings)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TYPE_CHECKING, Any, TypeVar

import tenacity

from stratum.core.batching import chunked
from stratum.core.entity.codec import Properties
from stratum.core.errors import CallLevelError, ErrorKind, ItemError, as_item_error, classify
from stratum.core.identity import Identity
from stratum.storage.models import RetryPolicy
from stratum.storage.protocol import DurableStore

if TYPE_CHECKING:
    from stratum.config import StoreSettings

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def _is_transient(exc: BaseException) -> bool:
    return classify(exc) is ErrorKind.TRANSIENT


class StoreAdapter:
    """Batched access to a DurableStore with per-item outcome reporting.

    Batches larger than the configured limits are split into chunks that run
    concurrently; every call joins all of its chunks before returning.

    Args:
        store: Durable store implementation.
        settings: Batch limits, concurrency and retry configuration.
    """

    def __init__(self, store: DurableStore, settings: StoreSettings | None = None) -> None:
        if settings is None:
            # Import here to avoid circular dependency at module level
            from stratum.config import StoreSettings

            settings = StoreSettings()
        self._store = store
        self._settings = settings
        self._policy = settings.retry_policy()

    @property
    def store(self) -> DurableStore:
        """Get the underlying store."""
        return self._store

    async def _gather(
        self, call: Callable[[Sequence[T]], Awaitable[R]], chunks: list[Sequence[T]]
    ) -> list[R | BaseException]:
        """Run `call` over chunks with optional concurrency limiting."""
        max_concurrent = self._settings.max_concurrent

        if max_concurrent is None:
            return list(await asyncio.gather(*(call(c) for c in chunks), return_exceptions=True))

        semaphore = asyncio.Semaphore(max_concurrent)

        async def limited(chunk: Sequence[T]) -> R:
            async with semaphore:
                return await call(chunk)

        return list(await asyncio.gather(*(limited(c) for c in chunks), return_exceptions=True))

    async def _with_retry(self, call: Callable[..., Awaitable[R]], *args: Any) -> R:
        """Invoke a store call, retrying transient failures per RetryPolicy."""
        if self._policy.max_attempts <= 1:
            return await call(*args)

        async for attempt in self._build_retryer(self._policy):
            with attempt:
                return await call(*args)
        raise AssertionError("unreachable")  # pragma: no cover

    def _build_retryer(self, policy: RetryPolicy) -> tenacity.AsyncRetrying:
        """Build a tenacity retryer from RetryPolicy configuration."""
        stop = tenacity.stop_after_attempt(policy.max_attempts)

        wait: tenacity.wait.wait_base
        if policy.backoff == "exponential":
            wait = tenacity.wait_exponential(multiplier=policy.base_delay, min=policy.base_delay)
        elif policy.backoff == "linear":
            wait = tenacity.wait_incrementing(start=policy.base_delay, increment=policy.base_delay)
        else:
            wait = tenacity.wait_none()

        return tenacity.AsyncRetrying(
            stop=stop,
            wait=wait,
            retry=tenacity.retry_if_exception(_is_transient),
            before_sleep=lambda state: logger.warning(
                f"Durable store call failed (attempt {state.attempt_number}), retrying: "
                f"{state.outcome.exception()!r}"  # type: ignore[union-attr]
            ),
            reraise=True,
        )

    @staticmethod
    def _raise_first_failure(operation: str, results: list[Any]) -> None:
        for result in results:
            if isinstance(result, Exception):
                raise CallLevelError(f"Durable store {operation} failed: {result}") from result
            if isinstance(result, BaseException):
                raise result

    async def get_multi(self, identities: Sequence[Identity]) -> list[Properties | ItemError]:
        """Fetch identities in input order.

        A chunk that fails as a whole marks each of its identities with the
        classified error; other chunks are unaffected.

        Returns:
            Properties or ItemError per identity.
        """

        async def fetch(chunk: Sequence[Identity]) -> list[Properties | ItemError]:
            try:
                results = await self._with_retry(self._store.get_multi, list(chunk))
                if len(results) != len(chunk):
                    raise ValueError(f"store returned {len(results)} results for {len(chunk)} keys")
            except Exception as e:
                logger.warning(f"Durable get of {len(chunk)} entities failed: {e!r}")
                return [as_item_error(e, identity) for identity in chunk]
            return [
                as_item_error(r, identity) if isinstance(r, BaseException) else r
                for identity, r in zip(chunk, results, strict=True)
            ]

        chunks = chunked(identities, self._settings.max_get_batch)
        merged: list[Properties | ItemError] = []
        for result in await self._gather(fetch, chunks):
            if isinstance(result, BaseException):
                raise result
            merged.extend(result)
        return merged

    async def put_multi(self, items: Sequence[tuple[Identity, Properties]]) -> list[Identity]:
        """Write entities, returning complete identities in input order.

        Raises:
            CallLevelError: If any chunk failed; no per-item detail exists.
        """

        async def write(chunk: Sequence[tuple[Identity, Properties]]) -> list[Identity]:
            assigned = await self._with_retry(self._store.put_multi, list(chunk))
            if len(assigned) != len(chunk):
                raise ValueError(f"store returned {len(assigned)} identities for {len(chunk)} puts")
            return assigned

        results = await self._gather(write, chunked(items, self._settings.max_put_batch))
        self._raise_first_failure("put", results)
        return [identity for chunk in results for identity in chunk]  # type: ignore[union-attr]

    async def delete_multi(self, identities: Sequence[Identity]) -> None:
        """Delete entities.

        Raises:
            CallLevelError: If any chunk failed.
        """

        async def remove(chunk: Sequence[Identity]) -> None:
            await self._with_retry(self._store.delete_multi, list(chunk))

        results = await self._gather(remove, chunked(identities, self._settings.max_delete_batch))
        self._raise_first_failure("delete", results)
