"""Error taxonomy and the per-item batch error reporter.

Usage:
    try:
        await session.get_multi_async([a, b, c])
    except MultiError as err:
        if is_not_found_at(err, 1):
            ...  # b does not exist; a and c were filled in
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stratum.core.identity import Identity


class ErrorKind(Enum):
    """Classification of a single item's failure within a batch."""

    NOT_FOUND = auto()  # Durable store has no entity for the identity
    TRANSIENT = auto()  # Retryable infrastructure failure (timeout, unavailable)
    OTHER = auto()  # Anything else


class StratumError(Exception):
    """Base class for all errors raised by stratum."""


class IncompleteIdentityError(StratumError):
    """Raised when a value's identity cannot be used for the requested operation."""


class ItemError(StratumError):
    """Failure of one item in a batch."""

    kind: ErrorKind = ErrorKind.OTHER

    def __init__(self, message: str, identity: Identity | None = None) -> None:
        super().__init__(message)
        self.identity = identity


class NotFoundError(ItemError):
    """The durable store has no entity for this identity."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, identity: Identity | None = None, message: str | None = None) -> None:
        super().__init__(message or f"no such entity: {identity}", identity)


class TransientError(ItemError):
    """Retryable failure: quota, unavailability, deadline exceeded."""

    kind = ErrorKind.TRANSIENT


class CallLevelError(StratumError):
    """A whole batch failed before per-item classification was possible."""


class MultiError(StratumError):
    """Per-index outcome of a batch: one slot per input, None for success.

    The slot list always has the same length as the batch that produced it.
    """

    def __init__(self, errors: Sequence[ItemError | None]) -> None:
        self.errors: list[ItemError | None] = list(errors)
        super().__init__(self._describe())

    def _describe(self) -> str:
        failures = [f"[{i}] {e.kind.name}: {e}" for i, e in self.failures()]
        if not failures:
            return f"0 of {len(self.errors)} items failed"
        return f"{len(failures)} of {len(self.errors)} items failed: " + "; ".join(failures)

    def failures(self) -> Iterator[tuple[int, ItemError]]:
        """Yield (index, error) for every failed slot, in batch order."""
        for index, error in enumerate(self.errors):
            if error is not None:
                yield index, error

    def kind_at(self, index: int) -> ErrorKind | None:
        """Classification at index, or None for success, a non-int or out-of-range index."""
        if not isinstance(index, int) or not 0 <= index < len(self.errors):
            return None
        error = self.errors[index]
        return None if error is None else error.kind

    def __len__(self) -> int:
        return len(self.errors)

    def __iter__(self) -> Iterator[ItemError | None]:
        return iter(self.errors)

    def __getitem__(self, index: int) -> ItemError | None:
        return self.errors[index]


def is_not_found_at(err: BaseException | None, index: int) -> bool:
    """Check whether item `index` of a batch failed specifically as not-found.

    Returns False for any other classification, for an out-of-range or
    non-integer index, and for anything that is not a MultiError (call-level
    errors carry no per-item information).
    """
    if not isinstance(err, MultiError):
        return False
    return err.kind_at(index) is ErrorKind.NOT_FOUND


def classify(exc: BaseException) -> ErrorKind:
    """Map an exception raised by a backend onto an ErrorKind."""
    if isinstance(exc, ItemError):
        return exc.kind
    if isinstance(exc, TimeoutError | ConnectionError):
        return ErrorKind.TRANSIENT
    return ErrorKind.OTHER


def as_item_error(exc: BaseException, identity: Identity | None = None) -> ItemError:
    """Wrap a backend exception as the ItemError matching its classification."""
    if isinstance(exc, ItemError) and exc.identity == identity:
        return exc
    kind = classify(exc)
    message = str(exc) if isinstance(exc, ItemError) else f"{type(exc).__name__}: {exc}"
    wrapped: ItemError
    if kind is ErrorKind.NOT_FOUND:
        wrapped = NotFoundError(identity)
    elif kind is ErrorKind.TRANSIENT:
        wrapped = TransientError(message, identity)
    else:
        wrapped = ItemError(message, identity)
    wrapped.__cause__ = exc
    return wrapped
