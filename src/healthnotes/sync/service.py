"""
HealthSyncService: one fetch-and-project pass over the vault.

Flow for a single run:
  1. Create SyncLog (status="running")
  2. Fetch the sensor snapshot
       404          -> status="no_data", stop
       other error  -> notify the user, status="error", stop (nothing written)
  3. Project each category in a fixed order (calories, exercise, heart rate,
     hydration, oxygen, sleep, steps, weight) in the default executor
  4. Flush the run summary into each date's summary section (if configured)
  5. Update SyncLog (status="success", or "partial" if any date failed)

Only one run is active at a time. A trigger that arrives while a run is in
progress is skipped rather than queued.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

from sqlmodel import Session

from healthnotes.config import Settings, get_settings
from healthnotes.hass.client import NoNewDataError, SensorClient, SensorFetchError
from healthnotes.models.sync import SyncLog, utcnow
from healthnotes.notify import Notifier, build_notifier
from healthnotes.sync.notes import NoteUpdater
from healthnotes.sync.projectors import Projector, build_projectors
from healthnotes.sync.summary import RunSummary, render_summary
from healthnotes.vault.locator import DocumentLocator
from healthnotes.vault.store import VaultStore

logger = logging.getLogger(__name__)

FETCH_FAILED_MESSAGE = "Unable to fetch Health Connect data; check the sensor configuration."


@dataclass
class RunResult:
    status: str
    dates_updated: List[str] = field(default_factory=list)
    failures: int = 0
    summary: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    error_message: Optional[str] = None


class HealthSyncService:
    """Orchestrates sensor → vault sync runs."""

    def __init__(
        self,
        client,
        store: VaultStore,
        settings: Settings,
        notifier: Optional[Notifier] = None,
        engine=None,
        projectors: Optional[List[Projector]] = None,
    ):
        """
        Args:
            client: SensorClient instance (or AsyncMock in tests).
            store: Vault the notes live in.
            settings: Field/section names and note policy.
            notifier: Where user-facing notices go. Defaults to logging only.
            engine: SQLAlchemy engine for the SyncLog audit trail, or None to
                    skip auditing.
            projectors: Override the default category projectors.
        """
        self.client = client
        self.store = store
        self.settings = settings
        self.notifier = notifier or build_notifier(settings)
        self.engine = engine
        self.projectors = projectors if projectors is not None else build_projectors(settings)
        self._lock = asyncio.Lock()

    @property
    def running(self) -> bool:
        return self._lock.locked()

    async def run(self, trigger: str = "manual") -> RunResult:
        """
        Run one sync pass unless another is already in progress.

        Raises:
            Any unexpected exception (after recording an error log). Expected
            failures (fetch errors, per-date failures) are reported in the
            result instead.
        """
        if self._lock.locked():
            logger.info("Sync already running; skipping %s trigger", trigger)
            log = self._create_sync_log(trigger)
            self._finish_sync_log(log, status="skipped")
            return RunResult(status="skipped")

        async with self._lock:
            log = self._create_sync_log(trigger)
            try:
                result = await self._run()
            except Exception as exc:
                self._finish_sync_log(log, status="error", error_message=str(exc))
                raise
            self._finish_sync_log(
                log,
                status=result.status,
                dates_updated=len(result.dates_updated),
                failures=result.failures,
                error_message=result.error_message,
            )
            return result

    # ─── Internal helpers ─────────────────────────────────────────────────────

    async def _run(self) -> RunResult:
        try:
            snapshot = await self.client.fetch_snapshot()
        except NoNewDataError as exc:
            logger.info("No new Health Connect data: %s", exc)
            return RunResult(status="no_data")
        except SensorFetchError as exc:
            logger.error("Health Connect fetch failed: %s", exc)
            await self.notifier.notify(FETCH_FAILED_MESSAGE)
            return RunResult(status="error", error_message=str(exc))

        summary = RunSummary()
        # Note I/O is blocking; keep it off the event loop.
        loop = asyncio.get_event_loop()
        dates, failures = await loop.run_in_executor(None, self._project, snapshot, summary)
        recorded = summary.as_dict()
        summary.clear()

        result = RunResult(
            status="partial" if failures else "success",
            dates_updated=sorted(dates),
            failures=failures,
            summary=recorded,
        )
        logger.info(
            "Sync finished: %d dates updated, %d failures",
            len(result.dates_updated), failures,
        )
        if self.settings.notify_on_success:
            await self.notifier.notify(
                f"Health Connect sync complete: {len(result.dates_updated)} days updated"
                + (f", {failures} failed" if failures else "")
            )
        return result

    def _project(self, snapshot, summary: RunSummary) -> Tuple[Set[str], int]:
        """Project every category, then flush the summary. Returns (dates, failures)."""
        notes = NoteUpdater(DocumentLocator(self.store, self.settings), self.store, summary)
        dates: Set[str] = set()
        failures = 0
        for projector in self.projectors:
            stats = projector.project(getattr(snapshot, projector.category), notes)
            dates |= stats.dates_updated
            failures += stats.failures
        failures += self._flush_summary(summary, notes)
        return dates, failures

    def _flush_summary(self, summary: RunSummary, notes: NoteUpdater) -> int:
        """Write each date's recorded fields to its summary section. Returns failures."""
        heading = self.settings.summary_section
        if not heading:
            return 0

        failures = 0
        for date in summary.dates():
            try:
                notes.rewrite_section(date, heading, render_summary(summary.fields_for(date)))
            except Exception as exc:
                logger.warning("Failed to write summary for %s: %s", date, exc)
                failures += 1
        return failures

    def _create_sync_log(self, trigger: str) -> Optional[SyncLog]:
        if self.engine is None:
            return None
        log = SyncLog(trigger=trigger, started_at=utcnow(), status="running")
        with Session(self.engine) as s:
            s.add(log)
            s.commit()
            s.refresh(log)
        return log

    def _finish_sync_log(
        self,
        log: Optional[SyncLog],
        *,
        status: str,
        dates_updated: int = 0,
        failures: int = 0,
        error_message: Optional[str] = None,
    ) -> None:
        if log is None:
            return
        with Session(self.engine) as s:
            db_log = s.get(SyncLog, log.id)
            db_log.status = status
            db_log.finished_at = utcnow()
            db_log.dates_updated = dates_updated
            db_log.failures = failures
            db_log.error_message = error_message
            s.add(db_log)
            s.commit()


_service: Optional[HealthSyncService] = None


def get_service() -> HealthSyncService:
    """Return the process-wide service, creating it on first call.

    The scheduler and the HTTP API share this instance so they share its
    one-run-at-a-time lock.
    """
    global _service
    if _service is None:
        from healthnotes.db.engine import get_engine

        settings = get_settings()
        _service = HealthSyncService(
            client=SensorClient.from_settings(settings),
            store=VaultStore(settings.vault_path),
            settings=settings,
            notifier=build_notifier(settings),
            engine=get_engine(),
        )
    return _service
