"""Logging setup shared by the TourLedger entry points."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(levelname)s - %(name)s - %(message)s"


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach a single stream handler to the root logger and set its level."""

    root = logging.getLogger()
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(level)
    if not any(getattr(handler, "_tourledger", False) for handler in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._tourledger = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    return root
