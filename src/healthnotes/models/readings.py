"""
Reading models for the Health Connect sensor snapshot.

Shapes match the attributes published by the Health Connect to Home Assistant
uploader. Every category is keyed by a "YYYY-MM-DD" date string; the intraday
categories (heart rate, blood oxygen, weight) nest one level deeper, keyed by
unix timestamp in seconds.

Timestamp keys arrive as JSON strings and are coerced to int so tables can be
sorted numerically.

The snapshot itself only checks that it is a mapping of categories. Each
date is validated on its own by parse_reading() when it is projected, so one
malformed day never rejects the rest of the snapshot.
"""
from functools import lru_cache
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, TypeAdapter

# Health Connect publishes a few special keys where it otherwise uses dates.
IGNORED_DATES = frozenset({"lastSleep"})


class _Reading(BaseModel):
    model_config = ConfigDict(extra="ignore")


# ─── Scalar categories ────────────────────────────────────────────────────────

class CaloriesDay(_Reading):
    energy: Optional[float] = None
    format: Optional[str] = None  # unit name, e.g. "kcal"
    startTime: Optional[int] = None
    endTime: Optional[int] = None


class HydrationDay(_Reading):
    volume: Optional[float] = None
    format: Optional[str] = None  # unit name, e.g. "mL"
    startTime: Optional[int] = None
    endTime: Optional[int] = None


class StepDay(_Reading):
    count: Optional[float] = None
    start: Optional[int] = None
    end: Optional[int] = None


# ─── Exercise ─────────────────────────────────────────────────────────────────

class ExerciseSession(_Reading):
    duration: int = 0  # seconds
    durationFormatted: Optional[str] = None
    exerciseName: str = ""
    exerciseType: Optional[str] = None
    title: Optional[str] = None
    notes: Optional[str] = None
    startTime: Optional[int] = None
    endTime: Optional[int] = None


class ExerciseDay(_Reading):
    sessions: List[ExerciseSession] = []
    totalSessions: int = 0
    totalDuration: Optional[int] = None  # seconds
    totalDurationFormatted: Optional[str] = None


# ─── Intraday samples ─────────────────────────────────────────────────────────

class HeartRateReading(_Reading):
    bpm: float
    time: int


HeartRateReadingDay = Dict[int, HeartRateReading]
BloodOxygenReadingDay = Dict[int, float]  # timestamp -> percent
WeightReadingDay = Dict[int, float]  # timestamp -> kilograms


# ─── Sleep ────────────────────────────────────────────────────────────────────

class SleepSession(_Reading):
    duration: int = 0  # seconds
    startTime: Optional[int] = None
    endTime: Optional[int] = None


class SleepStage(_Reading):
    stage: Optional[str] = None  # numeric stage code; stageFormat carries the name
    stageFormat: str = ""
    totalTime: Optional[int] = None
    occurrences: Optional[int] = None
    percentage: Optional[float] = None
    sessions: List[SleepSession] = []


class SleepDay(_Reading):
    start: Optional[int] = None
    end: Optional[int] = None
    stage: List[SleepStage] = []


# ─── Snapshot ─────────────────────────────────────────────────────────────────

class SensorData(_Reading):
    """The `attributes` object of the Health Connect sensor state.

    Any category may be missing or null; projectors treat that as "no data".
    Categories hold the raw date-keyed readings.
    """

    calories: Optional[Any] = None
    exercise: Optional[Any] = None
    heart: Optional[Any] = None
    hydration: Optional[Any] = None
    oxygen: Optional[Any] = None
    sleep: Optional[Any] = None
    steps: Optional[Any] = None
    weight: Optional[Any] = None


# Shape of one date's reading, per category.
READING_TYPES: Dict[str, Any] = {
    "calories": CaloriesDay,
    "exercise": ExerciseDay,
    "heart": HeartRateReadingDay,
    "hydration": HydrationDay,
    "oxygen": BloodOxygenReadingDay,
    "sleep": SleepDay,
    "steps": StepDay,
    "weight": WeightReadingDay,
}


@lru_cache(maxsize=None)
def _adapter(category: str) -> TypeAdapter:
    return TypeAdapter(READING_TYPES[category])


def parse_reading(category: str, raw: Any) -> Any:
    """Validate one date's raw reading. Raises pydantic.ValidationError."""
    return _adapter(category).validate_python(raw)
