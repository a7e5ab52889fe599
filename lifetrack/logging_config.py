"""Logging setup for the CLI and GUI entry points."""

from __future__ import annotations

import logging
import os
from typing import Optional

from rich.logging import RichHandler

from lifetrack.config import DEFAULT_LOG_LEVEL, load_config, normalize_log_level
from lifetrack.display import err_console

LOG_LEVEL_ENV = "LIFETRACK_LOG_LEVEL"


def configure_logging(level: Optional[str] = None) -> None:
    """Route the root logger through Rich.

    Precedence: explicit ``level``, then ``LIFETRACK_LOG_LEVEL``, then the
    saved config. An unrecognised level falls back to WARNING.
    """
    if level is None:
        level = os.getenv(LOG_LEVEL_ENV)
    if level is None:
        level = load_config().log_level

    name = normalize_log_level(level)
    logging.basicConfig(
        level=name or DEFAULT_LOG_LEVEL,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )
    if name is None:
        logging.getLogger(__name__).warning(
            "Unknown log level %r; using %s.", level, DEFAULT_LOG_LEVEL
        )
