"""Per-run accumulator of every front-matter field written, grouped by date."""
from typing import Any, Dict, List


class RunSummary:
    """
    Collects field writes during one sync run.

    Records reflect what the run observed, not what changed: writing a value
    that was already in the note is still recorded. A later write of the same
    field for the same date replaces the earlier value.
    """

    def __init__(self) -> None:
        self._by_date: Dict[str, Dict[str, Any]] = {}

    def record(self, date: str, field: str, value: Any) -> None:
        self._by_date.setdefault(date, {})[field] = value

    def dates(self) -> List[str]:
        return list(self._by_date)

    def fields_for(self, date: str) -> Dict[str, Any]:
        return dict(self._by_date.get(date, {}))

    def as_dict(self) -> Dict[str, Dict[str, Any]]:
        return {d: dict(fields) for d, fields in self._by_date.items()}

    def clear(self) -> None:
        self._by_date.clear()

    def __len__(self) -> int:
        return len(self._by_date)


def render_summary(fields: Dict[str, Any]) -> str:
    """Render one date's fields as a section body of `- field: value` lines."""
    lines = [f"- {field}: {value}" for field, value in fields.items()]
    return "\n" + "\n".join(lines) + "\n\n"
