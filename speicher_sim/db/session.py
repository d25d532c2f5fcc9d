"""
Engine and session factory of the calculation history database.

Nothing connects on import: the configured engine is built on first use
from :func:`speicher_sim.config.load_settings`.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config import load_settings

Base = declarative_base()


def build_engine(database_url: str) -> Engine:
    """
    Create an engine for ``database_url``.

    SQLite connections may be used from worker threads; an in-memory SQLite
    database is pinned to a single connection so every session sees the
    same tables.
    """
    options: Dict[str, Any] = {"echo": False}
    if database_url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
        if ":memory:" in database_url:
            options["poolclass"] = StaticPool
    return create_engine(database_url, **options)


def build_session_factory(engine: Engine) -> sessionmaker:
    """Sessions whose loaded records stay readable after commit."""
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@lru_cache()
def get_engine() -> Engine:
    return build_engine(load_settings().database_url)


@lru_cache()
def get_session_factory() -> sessionmaker:
    return build_session_factory(get_engine())


def init_db(engine: Optional[Engine] = None) -> None:
    """
    Create the calculation tables when missing.

    Args:
        engine: Target engine; defaults to the configured database.
    """
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=engine or get_engine())
