"""SQLAlchemy-backed units of work for merge administration."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from catalogmerge.adapters.sqlalchemy.mappings import start_mappers
from catalogmerge.adapters.sqlalchemy.migrations import upgrade_head
from catalogmerge.adapters.sqlalchemy.repositories import (
    SqlAlchemyMergeDirectiveRepository,
    translate_store_errors,
)
from catalogmerge.config.storage import get_database_config
from catalogmerge.domain.ports.unit_of_work import MergeRepositories, RepositoryCollection

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine


class StartupError(RuntimeError):
    """Raised when a SQLAlchemy unit of work is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None
    _session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @engine.setter
    def engine(self, value: Engine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call catalogmerge.adapters.sqlalchemy."
                "unit_of_work.startup() before requesting a unit of work."
            )
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Initialise the SQLAlchemy engine, schema, and session factory."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    if engine is None:
        database = get_database_config()
        if database_uri is not None:
            database = replace(database, uri=database_uri)
        engine = create_engine(
            database.uri,
            connect_args=database.connect_args(),
            future=True,
        )
    start_mappers()
    with translate_store_errors():
        upgrade_head(engine=engine)

    _STATE.engine = engine


def configured_engine() -> Engine | None:
    """Return the engine currently managed by the adapter (if any)."""

    return _STATE.engine


def is_started() -> bool:
    """Return whether the adapter has been initialised."""

    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """Generic SQLAlchemy unit of work with pluggable repository collections."""

    def __init__(self) -> None:
        self.session_factory: sessionmaker[Session] = _STATE.session_factory
        self._session: Session | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        self.session = self.session_factory()
        self._repositories = self._build_repositories(self.session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        self.session.close()
        self.session = None
        return False

    def commit(self) -> None:
        try:
            with translate_store_errors():
                self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> TRepositories:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._repositories

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    @session.setter
    def session(self, session: Session | None) -> None:
        if self._session is not None and session is not None:
            raise StartupError("Unit of work session already initialised")
        self._session = session


class SqlAlchemyUnitOfWork(BaseSqlAlchemyUnitOfWork[MergeRepositories]):
    """Unit of work managing SQLAlchemy sessions for merge directives."""

    def _build_repositories(self, session: Session) -> MergeRepositories:
        return MergeRepositories(merges=SqlAlchemyMergeDirectiveRepository(session))


if TYPE_CHECKING:
    from catalogmerge.domain.ports.unit_of_work import MergeUnitOfWork

    _uow_check: MergeUnitOfWork = SqlAlchemyUnitOfWork()
