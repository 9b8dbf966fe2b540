from __future__ import annotations

import logging
import logging.handlers

from .config import Settings

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def configure_logging(settings: Settings) -> logging.Handler:
    """Route the root logger to a size-bounded rotating file.

    Falls back to stderr when no log file is configured. Returns the installed
    handler so callers can remove it again.
    """
    if settings.log_file:
        handler: logging.Handler = logging.handlers.RotatingFileHandler(
            settings.log_file,
            maxBytes=settings.log_max_bytes,
            backupCount=settings.log_backup_count,
            encoding="utf-8",
        )
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.setLevel(settings.log_level.upper())
    root.addHandler(handler)
    return handler
