"""
Markdown rendering for section bodies: exercise lists and sample tables.

Section bodies start and end with a blank line so the rewritten section keeps
the spacing between its heading and the next one.
"""
from datetime import datetime, tzinfo
from typing import Callable, Dict, Iterable, List, Mapping, TypeVar

from healthnotes.models.readings import ExerciseSession

T = TypeVar("T")

# Health Connect exercise names that read badly in a note.
EXERCISE_LABELS: Dict[str, str] = {
    "Biking": "Cycling",
    "Biking stationary": "Stationary cycling",
    "Running treadmill": "Treadmill running",
    "Other workout": "Workout",
    "Strength training": "Strength",
    "Weightlifting": "Weights",
}


def format_duration(seconds: int) -> str:
    """Render a duration as "45m" or "1h 05m"."""
    minutes = int(seconds) // 60
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes:02d}m"
    return f"{minutes}m"


def exercise_label(session: ExerciseSession) -> str:
    name = session.exerciseName or session.exerciseType or "Exercise"
    return EXERCISE_LABELS.get(name, name)


def render_exercise_list(sessions: Iterable[ExerciseSession]) -> str:
    lines = [
        f"- {session.durationFormatted or format_duration(session.duration)} — {exercise_label(session)}"
        for session in sessions
    ]
    if not lines:
        return "\n"
    return "\n" + "\n".join(lines) + "\n\n"


def format_time(timestamp: int, tz: tzinfo, use_24h: bool = True) -> str:
    moment = datetime.fromtimestamp(timestamp, tz=tz)
    return moment.strftime("%H:%M" if use_24h else "%I:%M %p")


def render_sample_table(
    samples: Mapping[int, T],
    value_header: str,
    format_value: Callable[[T], str],
    anchor: str,
    tz: tzinfo,
    use_24h: bool = True,
) -> str:
    """
    Render a two-column time/value table, rows in ascending timestamp order.

    The table is followed by a block identifier line (`^anchor`) that charting
    plugins can use to reference the table.
    """
    rows: List[str] = [
        f"| Time | {value_header} |",
        "| ---- | " + "-" * len(value_header) + " |",
    ]
    for timestamp in sorted(samples):
        time_text = format_time(timestamp, tz, use_24h)
        rows.append(f"| {time_text} | {format_value(samples[timestamp])} |")
    return "\n" + "\n".join(rows) + f"\n\n^{anchor}\n\n"
