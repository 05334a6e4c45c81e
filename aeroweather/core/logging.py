"""Logging configuration utilities."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the root logger.

    Safe to call more than once (e.g. one app per test); the handler is only
    added the first time, later calls just adjust the level.
    """
    root = logging.getLogger()
    if not any(getattr(h, "_aeroweather", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._aeroweather = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    root.setLevel((level or "INFO").upper())
