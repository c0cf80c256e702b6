"""Logging setup for the API process."""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from chatapp.core.settings import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(log_dir: str | None = None) -> None:
    """Install console and rotating file handlers on the root logger.

    Safe to call more than once: handlers are only added the first time.
    """
    root = logging.getLogger()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    root.setLevel(level)
    if getattr(root, "_chatapp_configured", False):
        return

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    root.addHandler(console_handler)

    target_dir = log_dir or settings.log_dir
    try:
        os.makedirs(target_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(target_dir, "app.log"),
            maxBytes=1_000_000,
            backupCount=5,
        )
    except OSError as exc:  # pragma: no cover - read-only filesystems
        root.warning("File logging disabled: %s", exc)
    else:
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        root.addHandler(file_handler)

    root._chatapp_configured = True  # type: ignore[attr-defined]
