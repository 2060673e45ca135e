"""Audit database: lazily created engine and the FastAPI session dependency."""
from typing import Generator

from sqlmodel import Session, SQLModel, create_engine

from healthnotes.config import get_settings
from healthnotes.models.sync import SyncLog

_engine = None


def _connect_args(url: str) -> dict:
    # The sync run and the API use the engine from different threads.
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


def get_engine():
    """Return the audit engine, creating it and the SyncLog table on first call."""
    global _engine
    if _engine is None:
        url = get_settings().database_url
        _engine = create_engine(url, connect_args=_connect_args(url))
        SQLModel.metadata.create_all(_engine, tables=[SyncLog.__table__])
    return _engine


def get_session() -> Generator[Session, None, None]:
    with Session(get_engine()) as session:
        yield session
