"""Tests for the error taxonomy and MultiError reporting.

Focus: per-index classification must survive intact, and the not-found
predicate must never raise on malformed input.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from stratum import (
    CallLevelError,
    ErrorKind,
    Identity,
    ItemError,
    MultiError,
    NotFoundError,
    TransientError,
    is_not_found_at,
)
from stratum.core.errors import as_item_error, classify

USER = Identity.numeric("User", 1)


def test_multi_error_keeps_batch_length_and_order():
    err = MultiError([None, NotFoundError(USER), None, TransientError("deadline", USER)])

    assert len(err) == 4
    assert [e is None for e in err] == [True, False, True, False]
    assert [index for index, _ in err.failures()] == [1, 3]


def test_is_not_found_at_matches_only_not_found_slots():
    err = MultiError([None, NotFoundError(USER), TransientError("quota", USER)])

    assert not is_not_found_at(err, 0)
    assert is_not_found_at(err, 1)
    assert not is_not_found_at(err, 2), "transient must not read as not-found"


@pytest.mark.parametrize("index", [3, 100, -1])
def test_is_not_found_at_out_of_range_is_false(index):
    err = MultiError([NotFoundError(USER), NotFoundError(USER), NotFoundError(USER)])

    assert not is_not_found_at(err, index)


@pytest.mark.parametrize(
    "err",
    [None, CallLevelError("transport down"), NotFoundError(USER), ValueError("x")],
)
def test_is_not_found_at_without_multi_error_is_false(err):
    """A call-level error carries no per-item information."""
    assert not is_not_found_at(err, 0)


@pytest.mark.parametrize("index", ["0", 0.0, None, slice(0, 1)])
def test_is_not_found_at_with_non_integer_index_is_false(index):
    """The predicate answers for any index argument instead of raising."""
    err = MultiError([NotFoundError(USER)])

    assert not is_not_found_at(err, index)
    assert err.kind_at(index) is None


def test_string_form_enumerates_failures():
    err = MultiError([NotFoundError(USER), None, TransientError("deadline exceeded", USER)])
    text = str(err)

    assert "2 of 3 items failed" in text
    assert "[0] NOT_FOUND" in text
    assert "[2] TRANSIENT: deadline exceeded" in text
    assert "[1]" not in text


_slots = st.lists(
    st.sampled_from([None, ErrorKind.NOT_FOUND, ErrorKind.TRANSIENT, ErrorKind.OTHER]),
    max_size=20,
)


def _error_for(kind):
    if kind is None:
        return None
    if kind is ErrorKind.NOT_FOUND:
        return NotFoundError(USER)
    if kind is ErrorKind.TRANSIENT:
        return TransientError("t", USER)
    return ItemError("o", USER)


@given(_slots, st.integers(min_value=-5, max_value=25))
def test_is_not_found_at_agrees_with_classification(kinds, index):
    err = MultiError([_error_for(k) for k in kinds])

    expected = 0 <= index < len(kinds) and kinds[index] is ErrorKind.NOT_FOUND
    assert is_not_found_at(err, index) is expected


@pytest.mark.parametrize(
    ("exc", "kind"),
    [
        (TimeoutError("deadline"), ErrorKind.TRANSIENT),
        (ConnectionRefusedError("down"), ErrorKind.TRANSIENT),
        (TransientError("quota"), ErrorKind.TRANSIENT),
        (NotFoundError(), ErrorKind.NOT_FOUND),
        (ValueError("bad"), ErrorKind.OTHER),
    ],
)
def test_classify(exc, kind):
    assert classify(exc) is kind


def test_as_item_error_wraps_and_chains():
    cause = TimeoutError("deadline")
    wrapped = as_item_error(cause, USER)

    assert isinstance(wrapped, TransientError)
    assert wrapped.identity == USER
    assert wrapped.__cause__ is cause


def test_as_item_error_gives_each_identity_its_own_error():
    """One chunk-level failure must not share a single mutable error object."""
    shared_cause = NotFoundError()
    other = Identity.numeric("User", 2)

    first = as_item_error(shared_cause, USER)
    second = as_item_error(shared_cause, other)

    assert first is not second
    assert first.identity == USER
    assert second.identity == other
