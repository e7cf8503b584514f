"""Merge directives and the snapshot materialised from them."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from .primitives import Handle

PAIR_KEY_SEPARATOR = "\x1f"


def new_id() -> UUID:
    return uuid4()


def pair_key(first: Handle, second: Handle) -> str:
    """Orientation-independent key for a pair of handles."""
    low, high = sorted((first, second))
    return f"{low}{PAIR_KEY_SEPARATOR}{high}"


@dataclass(eq=False, kw_only=True)
class MergeDirective:
    """Administrator-declared pairing: fold ``secondary_handle`` into ``primary_handle``."""

    primary_handle: Handle
    secondary_handle: Handle
    id: UUID = field(default_factory=new_id)
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
    _pair_key: str = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._pair_key = pair_key(self.primary_handle, self.secondary_handle)

    @property
    def pair_key(self) -> str:
        return self._pair_key


@dataclass(frozen=True, slots=True)
class MergeSnapshot:
    """Immutable point-in-time view of all active merge directives.

    ``built_at`` is a monotonic clock reading; snapshots are compared by age only.
    """

    hidden_handles: frozenset[Handle]
    merge_map: Mapping[Handle, tuple[Handle, ...]]
    built_at: float

    @classmethod
    def build(cls, directives: Iterable[MergeDirective], *, built_at: float) -> MergeSnapshot:
        """Secondaries of each primary are kept oldest first, whatever the input order."""
        hidden: set[Handle] = set()
        merge_map: dict[Handle, list[Handle]] = {}
        for directive in sorted(directives, key=lambda item: (item.created_at, item.id)):
            hidden.add(directive.secondary_handle)
            merge_map.setdefault(directive.primary_handle, []).append(directive.secondary_handle)
        return cls(
            hidden_handles=frozenset(hidden),
            merge_map=MappingProxyType(
                {primary: tuple(secondaries) for primary, secondaries in merge_map.items()}
            ),
            built_at=built_at,
        )

    @classmethod
    def empty(cls, *, built_at: float = 0.0) -> MergeSnapshot:
        return cls(hidden_handles=frozenset(), merge_map=MappingProxyType({}), built_at=built_at)

    def is_hidden(self, handle: Handle) -> bool:
        return handle in self.hidden_handles

    def secondaries_of(self, primary: Handle) -> list[Handle]:
        return list(self.merge_map.get(primary, ()))

    def primary_of(self, secondary: Handle) -> Handle | None:
        if secondary not in self.hidden_handles:
            return None
        for primary, secondaries in self.merge_map.items():
            if secondary in secondaries:
                return primary
        return None
