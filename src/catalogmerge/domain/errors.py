"""Error taxonomy for merge administration and upstream access."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


class MergeErrorCode(StrEnum):
    BLANK_HANDLE = "blank_handle"
    SELF_MERGE = "self_merge"
    ALREADY_MERGED = "already_merged"
    SECONDARY_IN_USE = "secondary_in_use"


_MESSAGES: dict[MergeErrorCode, str] = {
    MergeErrorCode.BLANK_HANDLE: "Both product handles are required",
    MergeErrorCode.SELF_MERGE: "Cannot merge a product with itself",
    MergeErrorCode.ALREADY_MERGED: "These products are already merged",
    MergeErrorCode.SECONDARY_IN_USE: (
        "This product is already used as a secondary in another merge"
    ),
}


@dataclass(frozen=True, slots=True)
class MergeValidationError:
    """A rejected ``create``; nothing was written."""

    code: MergeErrorCode
    primary_handle: str
    secondary_handle: str

    @property
    def message(self) -> str:
        return _MESSAGES[self.code]

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class MergeNotFoundError:
    """A ``delete`` for an id that does not exist."""

    directive_id: UUID

    @property
    def message(self) -> str:
        return f"Merge {self.directive_id} not found"

    def __str__(self) -> str:
        return self.message


class StoreUnavailableError(RuntimeError):
    """Raised when the durable merge store cannot be read or written."""


class DuplicateDirectiveError(RuntimeError):
    """Raised by a store when a write violates a uniqueness constraint."""


class UpstreamUnavailableError(RuntimeError):
    """Raised when the upstream catalog (products, variants, images) cannot be reached."""
