"""
APScheduler job for recurring background sync.

Runs a sync every REFRESH_INTERVAL_MINUTES (disabled when 0). The job is
limited to one instance and coalesces missed runs; the service itself also
skips a trigger while a run is in progress.

The scheduler runs inside the same process as the entrypoint (wired in
__main__.py).
"""
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from healthnotes.config import get_settings

logger = logging.getLogger(__name__)


def build_scheduler(service) -> AsyncIOScheduler:
    """
    Create and configure the APScheduler.

    Args:
        service: HealthSyncService to run on each tick.

    Returns:
        Configured AsyncIOScheduler (not yet started).
    """
    settings = get_settings()
    scheduler = AsyncIOScheduler()

    if settings.refresh_interval_minutes > 0:
        scheduler.add_job(
            _scheduled_sync,
            trigger="interval",
            minutes=settings.refresh_interval_minutes,
            id="health_sync",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            kwargs={"service": service},
        )
    else:
        logger.info("Recurring sync disabled (refresh interval is 0)")

    return scheduler


async def _scheduled_sync(service) -> None:
    """Recurring job body. Never raises, so the scheduler stays alive."""
    try:
        result = await service.run(trigger="scheduled")
        logger.info("Scheduled sync finished with status %s", result.status)
    except Exception as exc:
        logger.error("Scheduled sync failed: %s", exc)
