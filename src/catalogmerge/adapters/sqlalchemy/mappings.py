"""SQLAlchemy mapping metadata for merge directives."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Index,
    String,
    Table,
    TypeDecorator,
    Uuid,
    func,
    orm,
)
from sqlalchemy.orm import configure_mappers

from catalogmerge.domain.model import MergeDirective

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

merge_directive_table = Table(
    "merge_directive",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("primary_handle", String, nullable=False),
    # a catalog entry is a secondary in at most one merge
    Column("secondary_handle", String, nullable=False, unique=True),
    # sorted handle pair, rejects mirrored duplicates
    Column("pair_key", String, key="_pair_key", nullable=False, unique=True),
    Column("created_at", UTCDateTime(), nullable=False, server_default=func.now()),
    Index("ix_merge_directive_primary_handle", "primary_handle"),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(
        MergeDirective,
        merge_directive_table,
    )

    configure_mappers()
    return mapper_registry
