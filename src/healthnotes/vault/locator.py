"""
Resolves a Health Connect date to the note that should receive its data.

Two kinds of note exist per day:

  - the daily note:  <daily_note_folder>/<formatted date>.md
  - a table note:    <daily_note_folder>/<table_subfolder>/<category>/<formatted date>.md

Table notes keep long intraday tables (heart rate, blood oxygen) out of the
daily note. They are only used when a table subfolder is configured; otherwise
tables go into the daily note like everything else.

When a note is missing and note creation is enabled, daily notes are created
from the configured template and table notes are seeded with their section
headings so the section rewriter always has a heading to target.
"""
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Dict, List, Optional

from healthnotes.config import Settings
from healthnotes.vault.store import VaultStore

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"

# Folder names for the table-note categories.
TABLE_FOLDERS: Dict[str, str] = {
    "heart": "Heart Rate",
    "oxygen": "Blood Oxygen",
}


def parse_date(raw_date: str) -> Optional[date]:
    """Parse a zero-padded "YYYY-MM-DD" key, returning None for anything else.

    strptime also accepts "2024-1-20"; such keys are rejected so two spellings
    of a day never resolve to the same note.
    """
    try:
        day = datetime.strptime(raw_date, DATE_FORMAT).date()
    except ValueError:
        return None
    if day.strftime(DATE_FORMAT) != raw_date:
        return None
    return day


class DocumentLocator:
    def __init__(self, store: VaultStore, settings: Settings):
        self.store = store
        self.settings = settings

    # ── Paths ─────────────────────────────────────────────────────────────────

    def _filename(self, day: date) -> str:
        return day.strftime(self.settings.daily_note_format) + ".md"

    def daily_note_path(self, day: date) -> Path:
        return Path(self.settings.daily_note_folder) / self._filename(day)

    def table_note_path(self, day: date, category: str) -> Path:
        folder = TABLE_FOLDERS.get(category, category)
        return (
            Path(self.settings.daily_note_folder)
            / self.settings.table_subfolder
            / folder
            / self._filename(day)
        )

    def _uses_table_note(self, table_category: Optional[str]) -> bool:
        return bool(table_category) and bool(self.settings.table_subfolder)

    # ── Lookup ────────────────────────────────────────────────────────────────

    def locate(self, raw_date: str, table_category: Optional[str] = None) -> Optional[Path]:
        """
        Return the vault path of the note for `raw_date`, creating it if allowed.

        Args:
            raw_date: Health Connect date key ("YYYY-MM-DD").
            table_category: category tag ("heart", "oxygen") when the caller
                wants the table-note variant.

        Returns:
            The note path, or None when the date is not a real date or the note
            is missing and note creation is disabled.

        Raises:
            DocumentError: if the note had to be created and creation failed.
        """
        day = parse_date(raw_date)
        if day is None:
            logger.warning("Ignoring non-date key %r", raw_date)
            return None

        table = self._uses_table_note(table_category)
        path = self.table_note_path(day, table_category) if table else self.daily_note_path(day)
        if self.store.exists(path):
            return path

        if not self.settings.create_daily_notes:
            logger.debug("No note for %s and note creation is disabled", raw_date)
            return None

        self.store.create_folder(path.parent)
        if table:
            content = self._table_note_content(table_category)
        else:
            content = self._daily_note_content(day)
        self.store.create(path, content)
        return path

    # ── Initial content ───────────────────────────────────────────────────────

    def _table_headings(self, category: str) -> List[str]:
        headings = {
            "heart": [self.settings.heart_rate_section],
            "oxygen": [self.settings.oxygen_section],
        }.get(category, [])
        return [h for h in headings if h]

    def _table_note_content(self, category: str) -> str:
        return "".join(f"# {heading}\n\n" for heading in self._table_headings(category))

    def _daily_note_content(self, day: date) -> str:
        template = self.settings.daily_note_template
        if not template:
            return ""
        content = self.store.read(template)
        return (
            content
            .replace("{{date}}", day.strftime(DATE_FORMAT))
            .replace("{{title}}", day.strftime(self.settings.daily_note_format))
        )
