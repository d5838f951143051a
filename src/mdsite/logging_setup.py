"""Centralized logging configuration with a Rich handler"""

from __future__ import annotations

import logging
import os
from typing import Final

from rich.console import Console
from rich.logging import RichHandler

__all__ = ["console", "configure_logging"]

_LOG_LEVEL_ENV: Final[str] = "MDSITE_LOG_LEVEL"
_DEFAULT_LEVEL_NAME: Final[str] = "INFO"

console = Console(stderr=True)


def _resolve_level() -> int:
    """Return the logging level defined via environment variable."""
    level_name = os.getenv(_LOG_LEVEL_ENV, _DEFAULT_LEVEL_NAME).upper()
    return getattr(logging, level_name, logging.INFO)


def configure_logging() -> None:
    """Configure the root logger once with a managed Rich handler."""
    root_logger = logging.getLogger()

    managed = [h for h in root_logger.handlers if getattr(h, "_mdsite_managed", False)]
    if not managed:
        handler = RichHandler(console=console, rich_tracebacks=True, show_path=False, markup=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        handler._mdsite_managed = True
        root_logger.addHandler(handler)

    root_logger.setLevel(_resolve_level())
    logging.captureWarnings(True)
