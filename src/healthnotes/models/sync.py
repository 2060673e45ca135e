"""Sync run audit log model."""
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SyncLog(SQLModel, table=True):
    """One row per sync run, including runs skipped while another was active."""

    id: Optional[int] = Field(default=None, primary_key=True)
    trigger: str = "manual"  # "manual", "scheduled", "api"
    started_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    finished_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    status: str = "running"  # "running", "success", "partial", "no_data", "error", "skipped"
    dates_updated: int = 0
    failures: int = 0
    error_message: Optional[str] = None
