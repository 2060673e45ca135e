"""
Note-level write operations used by the category projectors.

NoteUpdater combines the locator with the two kinds of write a projector can
make: setting a front-matter field, and rewriting a named section.
"""
import logging
from typing import Any, Optional

from healthnotes.sync.summary import RunSummary
from healthnotes.vault.locator import DocumentLocator
from healthnotes.vault.sections import replace_section
from healthnotes.vault.store import VaultStore

logger = logging.getLogger(__name__)


class NoteUpdater:
    def __init__(self, locator: DocumentLocator, store: VaultStore, summary: RunSummary):
        self.locator = locator
        self.store = store
        self.summary = summary

    def set_field(self, date: str, field: str, value: Any) -> bool:
        """
        Set `field = value` in the front matter of the daily note for `date`.

        Every successful write is recorded in the run summary, even when the
        note already held the same value.

        Returns:
            True if the note was located and the field set; False if the field
            is disabled or the note is unavailable.
        """
        if not field:
            return False
        if value is None:
            raise ValueError(f"refusing to write empty value to {field!r} for {date}")

        path = self.locator.locate(date)
        if path is None:
            return False

        with self.store.front_matter(path) as front_matter:
            front_matter[field] = value

        self.summary.record(date, field, value)
        logger.debug("Set %s=%s for %s", field, value, date)
        return True

    def rewrite_section(
        self,
        date: str,
        heading: str,
        body: str,
        table_category: Optional[str] = None,
    ) -> bool:
        """
        Replace the body of the section titled `heading` in the note for `date`.

        A missing heading leaves the note untouched.

        Returns:
            True if the section was found (whether or not its body changed).
        """
        if not heading:
            return False

        path = self.locator.locate(date, table_category)
        if path is None:
            return False

        text = self.store.read(path)
        rewritten = replace_section(text, heading, body)
        if rewritten is None:
            logger.debug("No %r section in %s", heading, path)
            return False
        if rewritten != text:
            self.store.write(path, rewritten)
        return True
