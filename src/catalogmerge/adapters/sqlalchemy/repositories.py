"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, cast

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from catalogmerge.adapters.sqlalchemy.mappings import merge_directive_table
from catalogmerge.domain.errors import DuplicateDirectiveError, StoreUnavailableError
from catalogmerge.domain.model import MergeDirective, pair_key

if TYPE_CHECKING:
    from collections.abc import Iterator
    from uuid import UUID

    from sqlalchemy import Select
    from sqlalchemy.orm import Session

    from catalogmerge.domain.model import Handle


@contextmanager
def translate_store_errors() -> Iterator[None]:
    """Re-raise driver failures as domain store errors."""

    try:
        yield
    except IntegrityError as exc:
        raise DuplicateDirectiveError(str(exc.orig)) from exc
    except SQLAlchemyError as exc:
        raise StoreUnavailableError(f"Merge store unavailable: {exc}") from exc


class SqlAlchemyMergeDirectiveRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: MergeDirective) -> None:
        self.session.add(entity)

    def remove(self, entity: MergeDirective) -> None:
        with translate_store_errors():
            self.session.delete(entity)

    def get(self, directive_id: UUID) -> MergeDirective | None:
        with translate_store_errors():
            return self.session.get(MergeDirective, directive_id)

    def list_all(self) -> list[MergeDirective]:
        stmt = select(MergeDirective).order_by(
            merge_directive_table.c.created_at.desc(),
            merge_directive_table.c.id,
        )
        return self._all(stmt)

    def find_pair(self, first: Handle, second: Handle) -> MergeDirective | None:
        stmt = select(MergeDirective).where(
            merge_directive_table.c._pair_key == pair_key(first, second)  # noqa: SLF001
        )
        return self._first(stmt)

    def find_by_secondary(self, secondary: Handle) -> MergeDirective | None:
        stmt = select(MergeDirective).where(
            merge_directive_table.c.secondary_handle == secondary
        )
        return self._first(stmt)

    def list_by_primary(self, primary: Handle) -> list[MergeDirective]:
        stmt = (
            select(MergeDirective)
            .where(merge_directive_table.c.primary_handle == primary)
            .order_by(merge_directive_table.c.created_at, merge_directive_table.c.id)
        )
        return self._all(stmt)

    def _first(self, stmt: Select[tuple[MergeDirective]]) -> MergeDirective | None:
        with translate_store_errors():
            return self.session.execute(stmt).scalars().first()

    def _all(self, stmt: Select[tuple[MergeDirective]]) -> list[MergeDirective]:
        with translate_store_errors():
            rows = self.session.execute(stmt).scalars().all()
        return list(rows)


if TYPE_CHECKING:
    from catalogmerge.domain.ports.persistence import MergeDirectiveRepository

    _session_stub = cast("Session", object())
    _repo_check: MergeDirectiveRepository = SqlAlchemyMergeDirectiveRepository(_session_stub)
