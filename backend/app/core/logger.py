"""
Logging setup shared by the whole service.

Every module logs through ``logging.getLogger(__name__)``; those loggers are
children of the ``app`` logger configured here, so one handler set covers
services, endpoints and middleware alike.
"""
from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler

from app.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str | int = "INFO", log_dir: str = "") -> logging.Logger:
    root = logging.getLogger("app")
    root.setLevel(level if isinstance(level, int) else level.upper())

    if not root.handlers:
        fmt = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

        stream = logging.StreamHandler()
        stream.setFormatter(fmt)
        root.addHandler(stream)

        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            handler = RotatingFileHandler(
                os.path.join(log_dir, "hearing-relay.log"),
                maxBytes=2_000_000,
                backupCount=3,
                encoding="utf-8",
            )
            handler.setFormatter(fmt)
            root.addHandler(handler)

    return root


logger = setup_logging(settings.LOG_LEVEL, settings.LOG_DIR)
