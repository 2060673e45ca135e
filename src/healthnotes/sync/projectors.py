"""
Category projectors: one per Health Connect measurement category.

Each projector takes that category's reading collection from the sensor
snapshot and writes it into the vault through a NoteUpdater, either as
front-matter fields, a rendered list, or a rendered table.

Dates are independent. Each date's raw reading is validated on its own; a
malformed reading or a failure while updating one date is logged and counted
and the projector moves on to the next date.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Set
from zoneinfo import ZoneInfo

from healthnotes.config import Settings
from healthnotes.models.readings import (
    IGNORED_DATES,
    CaloriesDay,
    ExerciseDay,
    HeartRateReading,
    HydrationDay,
    SleepDay,
    StepDay,
    parse_reading,
)
from healthnotes.sync.notes import NoteUpdater
from healthnotes.sync.render import render_exercise_list, render_sample_table

logger = logging.getLogger(__name__)

# Sleep stages that don't count towards time asleep.
EXCLUDED_SLEEP_STAGES = frozenset({"awake", "out_of_bed", "unknown"})


@dataclass
class ProjectionStats:
    """Outcome of projecting one category."""
    category: str
    dates_updated: Set[str] = field(default_factory=set)
    failures: int = 0
    skipped: bool = False


class Projector:
    """Base class. Subclasses set `category` and implement project_day()."""

    category: str = ""

    def __init__(self, settings: Settings):
        self.settings = settings

    def project(self, readings: Optional[Any], notes: NoteUpdater) -> ProjectionStats:
        stats = ProjectionStats(category=self.category)
        if readings is None:
            logger.info("No %s data in snapshot; skipping", self.category)
            stats.skipped = True
            return stats
        if not isinstance(readings, Mapping):
            logger.warning(
                "Ignoring %s data: expected readings keyed by date, got %s",
                self.category, type(readings).__name__,
            )
            stats.failures += 1
            return stats

        for date, raw in readings.items():
            if date in IGNORED_DATES:
                continue
            try:
                reading = parse_reading(self.category, raw)
                if self.project_day(date, reading, notes):
                    stats.dates_updated.add(date)
            except Exception as exc:
                logger.warning("Failed to update %s for %s: %s", self.category, date, exc)
                stats.failures += 1

        logger.info(
            "Projected %s: %d dates updated, %d failed",
            self.category, len(stats.dates_updated), stats.failures,
        )
        return stats

    def project_day(self, date: str, reading: Any, notes: NoteUpdater) -> bool:
        raise NotImplementedError


# ─── Scalar categories ────────────────────────────────────────────────────────

class ScalarProjector(Projector):
    """Writes one computed value per date into a single front-matter field."""

    field_setting: str = ""

    @property
    def field_name(self) -> str:
        return getattr(self.settings, self.field_setting)

    def select(self, reading: Any) -> Optional[Any]:
        raise NotImplementedError

    def project_day(self, date: str, reading: Any, notes: NoteUpdater) -> bool:
        value = self.select(reading)
        if value is None:
            return False
        return notes.set_field(date, self.field_name, value)


def _rounded(value: Optional[float]) -> Optional[int]:
    return None if value is None else int(round(value))


class CaloriesProjector(ScalarProjector):
    category = "calories"
    field_setting = "calorie_field"

    def select(self, reading: CaloriesDay) -> Optional[int]:
        return _rounded(reading.energy)


class HydrationProjector(ScalarProjector):
    category = "hydration"
    field_setting = "hydration_field"

    def select(self, reading: HydrationDay) -> Optional[int]:
        return _rounded(reading.volume)


class StepsProjector(ScalarProjector):
    category = "steps"
    field_setting = "steps_field"

    def select(self, reading: StepDay) -> Optional[int]:
        return _rounded(reading.count)


class WeightProjector(ScalarProjector):
    """The day's weight is its latest reading."""

    category = "weight"
    field_setting = "weight_field"

    def select(self, reading: Mapping[int, float]) -> Optional[float]:
        if not reading:
            return None
        return reading[max(reading)]


# ─── Exercise ─────────────────────────────────────────────────────────────────

class ExerciseProjector(Projector):
    """Session list into the exercise section, total minutes into front matter.

    The total comes from the provider rather than summing the listed sessions,
    so days whose sessions aren't enumerated still get a total.
    """

    category = "exercise"

    def project_day(self, date: str, reading: ExerciseDay, notes: NoteUpdater) -> bool:
        updated = notes.rewrite_section(
            date,
            self.settings.exercise_section,
            render_exercise_list(reading.sessions),
        )
        if reading.totalDuration is not None:
            minutes = reading.totalDuration // 60
            updated = notes.set_field(date, self.settings.exercise_field, minutes) or updated
        return updated


# ─── Intraday tables ──────────────────────────────────────────────────────────

class TableProjector(Projector):
    """Renders a day's timestamped samples as a table in the table note."""

    section_setting: str = ""
    value_header: str = ""
    anchor_prefix: str = ""

    def __init__(self, settings: Settings):
        super().__init__(settings)
        self._tz = ZoneInfo(settings.timezone)

    def format_value(self, sample: Any) -> str:
        raise NotImplementedError

    def project_day(self, date: str, reading: Mapping[int, Any], notes: NoteUpdater) -> bool:
        if not reading:
            return False
        body = render_sample_table(
            reading,
            value_header=self.value_header,
            format_value=self.format_value,
            anchor=f"{self.anchor_prefix}-{date}",
            tz=self._tz,
            use_24h=self.settings.time_format_24h,
        )
        return notes.rewrite_section(
            date,
            getattr(self.settings, self.section_setting),
            body,
            table_category=self.category,
        )


class HeartRateProjector(TableProjector):
    category = "heart"
    section_setting = "heart_rate_section"
    value_header = "BPM"
    anchor_prefix = "heart-rate"

    def format_value(self, sample: HeartRateReading) -> str:
        return f"{int(round(sample.bpm)):>3d}"


class BloodOxygenProjector(TableProjector):
    category = "oxygen"
    section_setting = "oxygen_section"
    value_header = "SpO2"
    anchor_prefix = "blood-oxygen"

    def format_value(self, sample: float) -> str:
        return f"{sample:>5.1f}"


# ─── Sleep ────────────────────────────────────────────────────────────────────

def stage_slug(name: str) -> str:
    """Normalized stage name for matching, e.g. 'Out of bed' -> 'out_of_bed'."""
    return re.sub(r"[^a-z0-9]+", "_", name.lower()).strip("_")


class SleepProjector(Projector):
    """One field per counted stage, named by its display name, plus the day's total.

    Stage minutes are whole minutes of the summed session seconds.
    """

    category = "sleep"

    def stage_minutes(self, reading: SleepDay) -> Dict[str, int]:
        minutes: Dict[str, int] = {}
        for stage in reading.stage:
            name = stage.stageFormat.strip()
            slug = stage_slug(name)
            if not slug or slug in EXCLUDED_SLEEP_STAGES:
                continue
            seconds = sum(session.duration for session in stage.sessions)
            minutes[name] = minutes.get(name, 0) + seconds // 60
        return minutes

    def project_day(self, date: str, reading: SleepDay, notes: NoteUpdater) -> bool:
        minutes = self.stage_minutes(reading)
        if not minutes:
            return False

        updated = False
        total = 0
        for name, stage_total in minutes.items():
            updated = notes.set_field(date, name, stage_total) or updated
            total += stage_total
        updated = notes.set_field(date, self.settings.sleep_field, total) or updated
        return updated


# Snapshot categories in the order they are projected on every run.
PROJECTOR_TYPES: List[type] = [
    CaloriesProjector,
    ExerciseProjector,
    HeartRateProjector,
    HydrationProjector,
    BloodOxygenProjector,
    SleepProjector,
    StepsProjector,
    WeightProjector,
]


def build_projectors(settings: Settings) -> List[Projector]:
    return [projector_type(settings) for projector_type in PROJECTOR_TYPES]
