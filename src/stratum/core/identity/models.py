"""Entity identity models.

Usage:
    user = Identity.numeric("User", 42)
    post = Identity.named("Post", "hello-world", parent=user)
    pending = Identity.numeric("User", 0)  # incomplete, store assigns the id
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from urllib.parse import quote

MAX_INT_ID = 2**63 - 1


class IdKind(Enum):
    """Which id slot an identity uses."""

    NUMERIC = "n"
    STRING = "s"


@dataclass(frozen=True, slots=True)
class Identity:
    """Derived (kind, id, parent) tuple identifying a stored entity.

    Exactly one id slot is meaningful per id_kind. An identity with a zero
    numeric id or empty string id is incomplete: usable for creation only.
    """

    kind: str
    id_kind: IdKind = IdKind.NUMERIC
    int_id: int = 0
    string_id: str = ""
    parent: Identity | None = None

    def __post_init__(self) -> None:
        if not self.kind:
            raise ValueError("Identity kind must be a non-empty string")
        if self.id_kind is IdKind.NUMERIC and self.string_id:
            raise ValueError(f"Numeric identity for {self.kind!r} cannot carry a string id")
        if self.id_kind is IdKind.STRING and self.int_id:
            raise ValueError(f"String identity for {self.kind!r} cannot carry a numeric id")
        if not 0 <= self.int_id <= MAX_INT_ID:
            raise ValueError(f"Numeric id {self.int_id} out of range for {self.kind!r}")
        if self.parent is not None and not self.parent.complete:
            raise ValueError(f"Parent of {self.kind!r} must be a complete identity")

    @classmethod
    def numeric(cls, kind: str, int_id: int = 0, parent: Identity | None = None) -> Identity:
        """Build an identity keyed by a numeric id (0 = incomplete)."""
        return cls(kind=kind, id_kind=IdKind.NUMERIC, int_id=int_id, parent=parent)

    @classmethod
    def named(cls, kind: str, string_id: str = "", parent: Identity | None = None) -> Identity:
        """Build an identity keyed by a string id ("" = incomplete)."""
        return cls(kind=kind, id_kind=IdKind.STRING, string_id=string_id, parent=parent)

    @property
    def complete(self) -> bool:
        """True when the identity carries a concrete id."""
        return self.int_id != 0 or self.string_id != ""

    @property
    def id(self) -> int | str:
        """The populated id slot."""
        return self.string_id if self.id_kind is IdKind.STRING else self.int_id

    def with_id(self, int_id: int) -> Identity:
        """Return a copy carrying a store-assigned numeric id."""
        return replace(self, id_kind=IdKind.NUMERIC, int_id=int_id, string_id="")

    def path(self) -> tuple[Identity, ...]:
        """Ancestors first, self last."""
        chain: list[Identity] = []
        node: Identity | None = self
        while node is not None:
            chain.append(node)
            node = node.parent
        return tuple(reversed(chain))

    def encode(self) -> str:
        """Stable string form, e.g. ``Blog:n:1/Post:s:hello``.

        Kinds and string ids are percent-escaped so separators never collide.
        """
        return "/".join(
            f"{quote(node.kind, safe='')}:{node.id_kind.value}:{quote(str(node.id), safe='')}"
            for node in self.path()
        )

    def __str__(self) -> str:
        return self.encode()
