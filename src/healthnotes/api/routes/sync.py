"""Sync trigger and status routes."""
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends
from pydantic import BaseModel
from sqlmodel import Session, select

from healthnotes.db.engine import get_session
from healthnotes.models.sync import SyncLog
from healthnotes.sync.service import get_service

logger = logging.getLogger(__name__)

router = APIRouter()


class SyncStatusResponse(BaseModel):
    status: str
    trigger: Optional[str]
    started_at: Optional[datetime]
    finished_at: Optional[datetime]
    dates_updated: Optional[int]
    failures: Optional[int]
    error_message: Optional[str]


async def _do_sync() -> None:
    """Background task: run one sync pass."""
    try:
        await get_service().run(trigger="api")
    except Exception:
        logger.exception("Sync triggered over HTTP failed")


@router.post("/trigger")
async def trigger_sync(background_tasks: BackgroundTasks):
    """
    Trigger an on-demand sync.
    Returns immediately; sync runs in background.
    """
    background_tasks.add_task(_do_sync)
    return {"message": "Sync started"}


@router.get("/status", response_model=SyncStatusResponse)
def sync_status(session: Session = Depends(get_session)):
    """Return the status of the most recent sync run."""
    log = session.exec(
        select(SyncLog).order_by(SyncLog.started_at.desc())
    ).first()
    if not log:
        return SyncStatusResponse(
            status="never_run",
            trigger=None,
            started_at=None,
            finished_at=None,
            dates_updated=None,
            failures=None,
            error_message=None,
        )
    return SyncStatusResponse(
        status=log.status,
        trigger=log.trigger,
        started_at=log.started_at,
        finished_at=log.finished_at,
        dates_updated=log.dates_updated,
        failures=log.failures,
        error_message=log.error_message,
    )
