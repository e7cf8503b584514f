"""Administration of merge directives with uniqueness enforced on write."""

from __future__ import annotations

import builtins
import threading
from logging import getLogger
from typing import TYPE_CHECKING

from catalogmerge.domain.errors import (
    DuplicateDirectiveError,
    MergeErrorCode,
    MergeNotFoundError,
    MergeValidationError,
)
from catalogmerge.domain.model import MergeDirective
from catalogmerge.domain.results import Err, Ok

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID

    from catalogmerge.domain.model import Handle
    from catalogmerge.domain.ports.persistence import MergeDirectiveRepository
    from catalogmerge.domain.ports.unit_of_work import MergeUnitOfWork
    from catalogmerge.domain.results import Result

type UnitOfWorkFactory = Callable[[], MergeUnitOfWork]
type ChangeListener = Callable[[], None]

log = getLogger(__name__)


class MergeRegistry:
    """Durable store of merge directives.

    ``create`` and ``delete`` run their checks and their write inside a single unit of
    work and are serialised within the process; the store's unique constraints cover
    concurrent writers in other processes. Registered listeners are notified after
    every successful write.
    """

    def __init__(self, unit_of_work_factory: UnitOfWorkFactory) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self._write_lock = threading.Lock()
        self._listeners: builtins.list[ChangeListener] = []

    def add_listener(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def create(
        self, primary: Handle, secondary: Handle
    ) -> Result[MergeDirective, MergeValidationError]:
        primary = primary.strip()
        secondary = secondary.strip()
        log.info("Creating merge: %s -> %s", primary, secondary)

        with self._write_lock:
            try:
                with self._unit_of_work_factory() as uow:
                    repository = uow.repositories.merges
                    code = _validate(repository, primary, secondary)
                    if code is not None:
                        log.info("Rejected merge %s -> %s: %s", primary, secondary, code)
                        return Err(MergeValidationError(code, primary, secondary))
                    directive = MergeDirective(
                        primary_handle=primary,
                        secondary_handle=secondary,
                    )
                    repository.add(directive)
                    uow.commit()
            except DuplicateDirectiveError:
                # another writer got there between our checks and the insert
                code = self._classify_conflict(primary, secondary)
                log.info("Rejected merge %s -> %s at commit: %s", primary, secondary, code)
                return Err(MergeValidationError(code, primary, secondary))

        log.info("Created merge %s", directive.id)
        self._notify()
        return Ok(directive)

    def delete(self, directive_id: UUID) -> Result[UUID, MergeNotFoundError]:
        log.info("Deleting merge %s", directive_id)
        with self._write_lock, self._unit_of_work_factory() as uow:
            repository = uow.repositories.merges
            directive = repository.get(directive_id)
            if directive is None:
                return Err(MergeNotFoundError(directive_id))
            repository.remove(directive)
            uow.commit()

        self._notify()
        return Ok(directive_id)

    def get(self, directive_id: UUID) -> MergeDirective | None:
        with self._unit_of_work_factory() as uow:
            return uow.repositories.merges.get(directive_id)

    def list(self) -> builtins.list[MergeDirective]:
        with self._unit_of_work_factory() as uow:
            directives = list(uow.repositories.merges.list_all())
        log.debug("Found %s merge directives", len(directives))
        return directives

    def hidden_handles(self) -> frozenset[Handle]:
        return frozenset(directive.secondary_handle for directive in self.list())

    def secondaries_of(self, primary: Handle) -> builtins.list[Handle]:
        with self._unit_of_work_factory() as uow:
            return [
                directive.secondary_handle
                for directive in uow.repositories.merges.list_by_primary(primary)
            ]

    def primary_of(self, secondary: Handle) -> Handle | None:
        with self._unit_of_work_factory() as uow:
            directive = uow.repositories.merges.find_by_secondary(secondary)
            return directive.primary_handle if directive is not None else None

    def _classify_conflict(self, primary: Handle, secondary: Handle) -> MergeErrorCode:
        with self._unit_of_work_factory() as uow:
            code = _validate(uow.repositories.merges, primary, secondary)
        return code or MergeErrorCode.ALREADY_MERGED

    def _notify(self) -> None:
        for listener in self._listeners:
            listener()


def _validate(
    repository: MergeDirectiveRepository,
    primary: Handle,
    secondary: Handle,
) -> MergeErrorCode | None:
    if not primary or not secondary:
        return MergeErrorCode.BLANK_HANDLE
    if primary == secondary:
        return MergeErrorCode.SELF_MERGE
    if repository.find_pair(primary, secondary) is not None:
        return MergeErrorCode.ALREADY_MERGED
    if repository.find_by_secondary(secondary) is not None:
        return MergeErrorCode.SECONDARY_IN_USE
    return None
