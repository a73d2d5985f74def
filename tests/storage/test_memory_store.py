"""Tests for MemoryStore and IdAllocator.

Critical Invariants:
- Allocated ids are unique, non-zero and never collide with explicit ids
- Stored state is isolated from caller mutation
- Lookups are strict: value or NotFoundError, never a silent miss
"""

import pytest

from stratum import Identity, IdAllocator, MemoryStore, NotFoundError
from stratum.core.errors import ItemError


@pytest.fixture
def allocator():
    return IdAllocator()


def test_allocation_is_scoped_per_kind_and_parent(allocator):
    blog = Identity.numeric("Blog", 1)

    assert allocator.allocate("User") == 1
    assert allocator.allocate("User") == 2
    assert allocator.allocate("Post") == 1
    assert allocator.allocate("Post", parent=blog) == 1


def test_allocation_skips_observed_ids(allocator):
    """CRITICAL: an explicitly written id is never handed out again."""
    allocator.observe(Identity.numeric("User", 10))

    assert allocator.allocate("User") == 11


def test_complete_rejects_incomplete_string_identity(allocator):
    with pytest.raises(ValueError, match="string id"):
        allocator.complete(Identity.named("Page"))


@pytest.mark.asyncio
async def test_put_assigns_distinct_ids_in_input_order():
    store = MemoryStore()

    assigned = await store.put_multi(
        [(Identity.numeric("User"), {"n": i}) for i in range(3)]
        + [(Identity.numeric("User", 50), {"n": 3})]
    )

    assert [i.int_id for i in assigned] == [1, 2, 3, 50]
    assert len(store) == 4


@pytest.mark.asyncio
async def test_get_returns_value_or_not_found():
    store = MemoryStore()
    user = Identity.numeric("User", 1)
    await store.put_multi([(user, {"name": "ada"})])

    results = await store.get_multi([user, Identity.numeric("User", 2)])

    assert results[0] == {"name": "ada"}
    assert isinstance(results[1], NotFoundError)
    assert results[1].identity == Identity.numeric("User", 2)


@pytest.mark.asyncio
async def test_get_of_incomplete_identity_is_an_item_error():
    results = await MemoryStore().get_multi([Identity.numeric("User")])

    assert isinstance(results[0], ItemError)
    assert not isinstance(results[0], NotFoundError)


@pytest.mark.asyncio
async def test_stored_values_are_isolated_from_callers():
    store = MemoryStore()
    user = Identity.numeric("User", 1)
    props = {"tags": ["a"]}
    await store.put_multi([(user, props)])

    props["tags"].append("b")
    fetched = (await store.get_multi([user]))[0]
    fetched["tags"].append("c")  # type: ignore[index]

    assert (await store.get_multi([user]))[0] == {"tags": ["a"]}


@pytest.mark.asyncio
async def test_delete_is_idempotent():
    store = MemoryStore()
    user = Identity.numeric("User", 1)
    await store.put_multi([(user, {})])

    await store.delete_multi([user, user])

    assert user not in store


@pytest.mark.asyncio
async def test_batch_limit_is_enforced():
    store = MemoryStore(max_batch=2)

    with pytest.raises(ValueError, match="exceeds batch limit 2"):
        await store.get_multi([Identity.numeric("User", i) for i in range(1, 4)])
