"""End-to-end journey through the blocking Session API.

Walks one request through a cold read, a batch miss, a write, a cached
re-read and a partial refetch after the shared cache is flushed.
"""

import asyncio
from dataclasses import dataclass
from typing import Annotated

import pytest

from stratum import (
    Identity,
    IdField,
    IncompleteIdentityError,
    MultiError,
    NotFoundError,
    Session,
    is_not_found_at,
)
from stratum.session import SyncRunner


@dataclass
class HasId:
    id: Annotated[int, IdField()] = 0
    name: str = ""


def test_blocking_journey(store, session):
    with pytest.raises(IncompleteIdentityError):
        session.get(HasId(id=0))

    with pytest.raises(NotFoundError):
        session.get(HasId(id=1))
    # Twice, to exercise the cached negative entry
    with pytest.raises(NotFoundError):
        session.get(HasId(id=1))
    assert store.reads == 1

    written = [HasId(id=1, name="one"), HasId(id=2, name="two")]
    with pytest.raises(MultiError) as info:
        session.get_multi(written)
    assert is_not_found_at(info.value, 0)
    assert is_not_found_at(info.value, 1)
    assert not is_not_found_at(info.value, 2)

    session.put_multi(written)
    loaded = [HasId(id=1), HasId(id=2)]
    session.get_multi(loaded)
    assert loaded == written
    assert [session.resolve(u) for u in loaded] == [
        Identity.numeric("HasId", 1),
        Identity.numeric("HasId", 2),
    ]

    # Partial fetch: local cache first, store for what it cannot serve
    session.flush_shared_cache()
    session.flush_local_cache()
    session.get(loaded[0])
    session.get_multi(loaded)
    assert loaded == written
    assert store.get_calls[-1] == [Identity.numeric("HasId", 2)]


def test_blocking_put_and_delete(store, session, new_session):
    user = HasId(name="ada")

    identity = session.put(user)
    assert identity == Identity.numeric("HasId", user.id)

    session.delete(user)
    with pytest.raises(NotFoundError):
        new_session().get(HasId(id=user.id))


def test_blocking_call_from_runner_loop_is_refused(session):
    """CRITICAL: a blocking call on the runner's own loop would deadlock."""

    async def nested() -> None:
        session.get(HasId(id=1))

    runner = SyncRunner.get()
    with pytest.raises(RuntimeError, match="own event loop"):
        runner.run(nested())


def test_runner_is_a_process_singleton():
    assert SyncRunner.get() is SyncRunner.get()


def test_blocking_call_from_foreign_loop_works(session):
    session.put(HasId(id=5, name="five"))
    loaded = HasId(id=5)

    async def inside_other_loop() -> None:
        session.get(loaded)

    asyncio.run(inside_other_loop())
    assert loaded.name == "five"


def test_sessions_are_independent(store, shared):
    first = Session(store, shared_cache=shared)
    second = Session(store, shared_cache=shared)

    first.put(HasId(id=1, name="one"))

    assert Identity.numeric("HasId", 1) in first.local_cache
    assert Identity.numeric("HasId", 1) not in second.local_cache
