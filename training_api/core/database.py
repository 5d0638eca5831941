"""Database configuration and engine helpers."""

from __future__ import annotations

from pathlib import Path

from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from .config import DATABASE_URL


def make_engine(url: str = DATABASE_URL) -> Engine:
    """Create an engine for ``url``.

    SQLite connections are shared across the threadpool FastAPI runs sync
    handlers on, and in-memory databases need a single static connection
    so every session sees the same tables.
    """

    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return create_engine(url)

    database = parsed.database
    if not database or database == ":memory:":
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    Path(database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(url, connect_args={"check_same_thread": False})


__all__ = ["make_engine"]
