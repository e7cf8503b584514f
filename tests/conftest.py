from __future__ import annotations

import json
import os
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from catalogmerge.adapters.sqlalchemy import start_mappers
from catalogmerge.adapters.sqlalchemy.migrations import upgrade_head
from catalogmerge.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, shutdown, startup
from catalogmerge.domain.merge_registry import MergeRegistry

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

DATA_DIR = Path(__file__).resolve().parent / "data"


def load_json(relative_path: str) -> dict[str, object]:
    return json.loads((DATA_DIR / relative_path).read_text())


@pytest.fixture(scope="session")
def shopify_product_payload() -> dict[str, object]:
    return load_json("shopify/product_by_handle.json")


@pytest.fixture(scope="session")
def shopify_images_payload() -> dict[str, object]:
    return load_json("shopify/product_images.json")


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    # one shared connection so every session sees the same in-memory database
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    start_mappers()
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()


@pytest.fixture
def registry(sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork]) -> MergeRegistry:
    return MergeRegistry(sqlite_unit_of_work)
