"""Shared logging helpers for catalogmerge."""

from __future__ import annotations

import logging


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once with a terse CLI-friendly format.

    Pass ``force=True`` to reconfigure during tests or specialised entry points.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
