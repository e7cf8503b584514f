"""Domain port definitions for adapters."""

from __future__ import annotations

from .catalog import CatalogSource, ProductImageFetcher
from .persistence import MergeDirectiveRepository, Repository
from .unit_of_work import (
    MergeRepositories,
    MergeUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "CatalogSource",
    "MergeDirectiveRepository",
    "MergeRepositories",
    "MergeUnitOfWork",
    "ProductImageFetcher",
    "Repository",
    "RepositoryCollection",
    "UnitOfWork",
]
