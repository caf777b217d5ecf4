"""Shared logging helpers for dnssecsync."""

from __future__ import annotations

import logging
import os
from typing import Final

from .errors import ConfigurationError

DEFAULT_VERBOSITY: Final[int] = 2

_VERBOSITY_LEVELS: Final[dict[int, int]] = {
    0: logging.WARNING,
    1: logging.INFO,
    2: logging.INFO,
    3: logging.DEBUG,
}


def level_for_verbosity(verbosity: int) -> int:
    """Map the 0-3 ``VERBOSITY`` scale onto a logging level (values are clamped)."""

    clamped = min(max(verbosity, 0), max(_VERBOSITY_LEVELS))
    return _VERBOSITY_LEVELS[clamped]


def get_log_level() -> int:
    raw = os.getenv("VERBOSITY")
    if raw is None or not raw.strip():
        return level_for_verbosity(DEFAULT_VERBOSITY)
    try:
        verbosity = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid VERBOSITY value: {raw!r}") from exc
    return level_for_verbosity(verbosity)


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Initialise the root logger once with sensible defaults.

    Parameters mirror ``logging.basicConfig`` with a simplified contract: the level
    defaults to the one derived from ``VERBOSITY`` and the format is terse enough for
    CLI output. Pass ``force=True`` to reconfigure during tests or specialised entry
    points.
    """

    logging.basicConfig(
        level=level if level is not None else get_log_level(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
