"""Environment variable loaders for configuration."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from .errors import ConfigurationError, MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Sequence


def require_env_vars(names: Sequence[str]) -> dict[str, str]:
    """Return the given environment variables or raise if any are missing/blank."""

    missing: list[str] = []
    values: dict[str, str] = {}
    for name in names:
        value = os.getenv(name)
        if value is None or not value.strip():
            missing.append(name)
            continue
        values[name] = value.strip()

    if missing:
        missing_list = ", ".join(sorted(missing))
        raise MissingConfigurationError(f"Missing configuration for: {missing_list}")

    return values


def require_env_var(name: str) -> str:
    """Return a required environment variable by name."""

    return require_env_vars([name])[name]


def optional_env_var(name: str) -> str | None:
    """Return an environment variable, treating blank values as unset."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def env_float(name: str, default: float, *, minimum: float | None = None) -> float:
    """Read a float from the environment, falling back to ``default`` when unset."""

    raw = optional_env_var(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc
    if minimum is not None and value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {value}")
    return value
