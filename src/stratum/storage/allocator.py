"""Numeric id allocation service.

IdAllocator is a stateful service that hands out ids for incomplete
identities, scoped per (kind, parent) the way a datastore scopes them.
"""

from __future__ import annotations

from stratum.core.identity import MAX_INT_ID, Identity, IdKind

Scope = tuple[str, Identity | None]


class IdAllocator:
    """Allocates numeric ids per (kind, parent) scope, never reusing one.

    Explicitly chosen ids are reported through observe() so allocation
    skips past them.
    """

    def __init__(self) -> None:
        """Initialize allocator with every scope starting at id 1."""
        self._last: dict[Scope, int] = {}

    def allocate(self, kind: str, parent: Identity | None = None) -> int:
        """Allocate the next unused id in a scope.

        Args:
            kind: Entity kind.
            parent: Parent identity, if any.

        Returns:
            A positive id never returned before for this scope.

        Raises:
            OverflowError: If the scope has exhausted the int64 range.
        """
        scope = (kind, parent)
        next_id = self._last.get(scope, 0) + 1
        if next_id > MAX_INT_ID:
            raise OverflowError(f"Id space exhausted for kind {kind!r}")
        self._last[scope] = next_id
        return next_id

    def observe(self, identity: Identity) -> None:
        """Record an explicitly chosen numeric id so it is never allocated.

        Args:
            identity: Identity written with a caller-chosen id.
        """
        if identity.id_kind is not IdKind.NUMERIC or not identity.complete:
            return
        scope = (identity.kind, identity.parent)
        if identity.int_id > self._last.get(scope, 0):
            self._last[scope] = identity.int_id

    def complete(self, identity: Identity) -> Identity:
        """Return identity unchanged if complete, else with a fresh numeric id.

        Raises:
            ValueError: If identity is an incomplete string identity.
        """
        if identity.complete:
            self.observe(identity)
            return identity
        if identity.id_kind is IdKind.STRING:
            raise ValueError(f"Cannot allocate a string id for kind {identity.kind!r}")
        return identity.with_id(self.allocate(identity.kind, identity.parent))
