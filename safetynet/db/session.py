"""Engine/session helpers for the SQL storage backend."""
from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from safetynet.core.config import get_settings

Base = declarative_base()


@lru_cache
def get_engine() -> Engine:
    url = (get_settings().database_url or "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL must be configured when SAFETYNET_STORAGE=sql.")
    connect_args = {}
    if url.startswith("sqlite"):
        # the store persists from whichever request thread holds the write lock
        connect_args["check_same_thread"] = False
    return create_engine(url, future=True, pool_pre_ping=True, connect_args=connect_args)


@lru_cache
def _get_sessionmaker() -> sessionmaker:
    return sessionmaker(bind=get_engine(), autoflush=False, expire_on_commit=False, future=True)


def reset_engine() -> None:
    """Dispose the cached engine so the next call re-reads DATABASE_URL."""
    if get_engine.cache_info().currsize:
        get_engine().dispose()
    get_engine.cache_clear()
    _get_sessionmaker.cache_clear()


@contextmanager
def get_session() -> Iterator[Session]:
    session: Session = _get_sessionmaker()()
    try:
        yield session
    finally:
        session.close()
