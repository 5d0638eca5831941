"""Root logger configuration."""

from __future__ import annotations

import logging

from .config import LOG_LEVEL

_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "NOTSET": logging.NOTSET,
}


def _level(name: str) -> int:
    return _LEVELS.get((name or "").strip().upper(), logging.INFO)


def setup_logging(level: str = LOG_LEVEL) -> None:
    """Configure root logging once. Idempotent.

    When handlers already exist (uvicorn, pytest) only the level is applied.
    """

    root = logging.getLogger()
    if root.handlers:
        root.setLevel(_level(level))
        return

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s.%(msecs)03d %(levelname)-8s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    root.setLevel(_level(level))
    root.addHandler(handler)


__all__ = ["setup_logging"]
