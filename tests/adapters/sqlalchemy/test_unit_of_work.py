from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine, inspect

from catalogmerge.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from catalogmerge.domain.errors import DuplicateDirectiveError
from catalogmerge.domain.model import MergeDirective

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_sqlalchemy_unit_of_work_requires_startup() -> None:
    with pytest.raises(StartupError):
        SqlAlchemyUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b
    assert is_started()


def test_startup_applies_migrations(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    inspector = inspect(sqlite_engine)
    assert "merge_directive" in inspector.get_table_names()
    unique_names = {
        constraint["name"] for constraint in inspector.get_unique_constraints("merge_directive")
    }
    assert {
        "uq_merge_directive_secondary_handle",
        "uq_merge_directive_pair_key",
    } <= unique_names


def test_unit_of_work_persists_directives(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyUnitOfWork() as uow:
        directive = MergeDirective(primary_handle="tee-black", secondary_handle="tee-white")
        uow.repositories.merges.add(directive)
        uow.commit()

    with SqlAlchemyUnitOfWork() as uow:
        loaded = uow.repositories.merges.find_by_secondary("tee-white")
        assert loaded is not None
        assert loaded.id == directive.id


def test_uncommitted_work_is_discarded(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyUnitOfWork() as uow:
        uow.repositories.merges.add(
            MergeDirective(primary_handle="tee-black", secondary_handle="tee-white")
        )

    with SqlAlchemyUnitOfWork() as uow:
        assert uow.repositories.merges.list_all() == []


def test_commit_conflict_rolls_back_and_raises(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    with SqlAlchemyUnitOfWork() as uow:
        uow.repositories.merges.add(
            MergeDirective(primary_handle="tee-black", secondary_handle="tee-white")
        )
        uow.commit()

    with pytest.raises(DuplicateDirectiveError), SqlAlchemyUnitOfWork() as uow:
        uow.repositories.merges.add(
            MergeDirective(primary_handle="tee-red", secondary_handle="tee-white")
        )
        uow.commit()

    with SqlAlchemyUnitOfWork() as uow:
        assert len(uow.repositories.merges.list_all()) == 1


def test_repositories_require_an_open_session(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    uow = SqlAlchemyUnitOfWork()

    with pytest.raises(StartupError):
        _ = uow.repositories
