"""
Main entrypoint.

Usage:
    python -m healthnotes sync      # run one sync now and exit
    python -m healthnotes           # starts the recurring sync scheduler
    uvicorn healthnotes.api.main:app --host 0.0.0.0 --port 8000  # starts API
"""
import asyncio
import logging
import sys

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)
logger = logging.getLogger(__name__)


async def _run_once() -> int:
    from healthnotes.sync.service import get_service

    result = await get_service().run(trigger="manual")
    logger.info(
        "Sync %s: %d days updated, %d failures",
        result.status, len(result.dates_updated), result.failures,
    )
    return 1 if result.status == "error" else 0


async def _serve() -> None:
    from healthnotes.config import get_settings
    from healthnotes.scheduler.jobs import _scheduled_sync, build_scheduler
    from healthnotes.sync.service import get_service

    settings = get_settings()
    if not settings.instance_uri or not settings.token:
        logger.error(
            "HEALTHNOTES_INSTANCE_URI and HEALTHNOTES_TOKEN must be set."
        )
        sys.exit(1)

    service = get_service()
    scheduler = build_scheduler(service)
    scheduler.start()
    logger.info(
        "Scheduler started (sync every %d minutes)",
        settings.refresh_interval_minutes,
    )

    # Sync once on startup so the vault is current before the first tick.
    await _scheduled_sync(service)

    try:
        await asyncio.Event().wait()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Shutting down...")
    finally:
        scheduler.shutdown()
        logger.info("Goodbye.")


if __name__ == "__main__":
    # Dispatch on first argument: `python -m healthnotes sync` or just `python -m healthnotes`
    if len(sys.argv) > 1 and sys.argv[1] == "sync":
        sys.exit(asyncio.run(_run_once()))
    else:
        asyncio.run(_serve())
