"""Tagged success/failure values for administrative operations.

Administrative callers get expected failures (validation, not found) back as values
instead of exceptions, so they can be matched exhaustively::

    match registry.create("tee-black", "tee-white"):
        case Ok(directive):
            ...
        case Err(error):
            ...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True, slots=True)
class Ok[T]:
    value: T

    @property
    def ok(self) -> Literal[True]:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err[E]:
    error: E

    @property
    def ok(self) -> Literal[False]:
        return False

    def unwrap(self) -> object:
        raise UnwrapError(self.error)


class UnwrapError(RuntimeError):
    """Raised when ``unwrap`` is called on an ``Err``."""

    def __init__(self, error: object) -> None:
        super().__init__(f"Called unwrap on Err: {error}")
        self.error = error


type Result[T, E] = Ok[T] | Err[E]
