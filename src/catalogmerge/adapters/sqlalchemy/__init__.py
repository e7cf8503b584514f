"""SQLAlchemy adapter package for catalogmerge."""

from __future__ import annotations

from .mappings import mapper_registry, merge_directive_table, start_mappers
from .repositories import SqlAlchemyMergeDirectiveRepository, translate_store_errors

__all__ = [
    "SqlAlchemyMergeDirectiveRepository",
    "mapper_registry",
    "merge_directive_table",
    "start_mappers",
    "translate_store_errors",
]
