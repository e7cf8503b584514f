"""Ports for persisting merge directives."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from catalogmerge.domain.model import MergeDirective

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from catalogmerge.domain.model import Handle


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class MergeDirectiveRepository(Repository[MergeDirective], Protocol):
    """Persistence contract for merge directives.

    Lookups must support the pair and secondary queries the uniqueness checks need.
    """

    def get(self, directive_id: UUID) -> MergeDirective | None: ...

    def remove(self, entity: MergeDirective) -> None: ...

    def list_all(self) -> Sequence[MergeDirective]:
        """Return all directives, most recently created first."""
        ...

    def find_pair(self, first: Handle, second: Handle) -> MergeDirective | None:
        """Return a directive joining both handles in either orientation."""
        ...

    def find_by_secondary(self, secondary: Handle) -> MergeDirective | None: ...

    def list_by_primary(self, primary: Handle) -> Sequence[MergeDirective]: ...
