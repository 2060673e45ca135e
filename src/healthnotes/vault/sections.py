"""
Named-section rewriting for Markdown notes.

A section starts at a heading line (one or more `#`, then the heading text)
and its body runs up to, but not including, the next heading line or the end
of the document. Rewriting replaces only that body; the heading line and
everything from the next heading onward are preserved byte-for-byte.
"""
import re
from typing import Dict, Optional

_PATTERN_CACHE: Dict[str, "re.Pattern[str]"] = {}


def section_pattern(heading: str) -> "re.Pattern[str]":
    """Compiled pattern with two groups: the heading line and the section body."""
    if heading not in _PATTERN_CACHE:
        _PATTERN_CACHE[heading] = re.compile(
            rf"(^#+[ \t]*{re.escape(heading)}[ \t]*(?:\r?\n|\Z))(.*?)(?=^#+[ \t]|\Z)",
            re.DOTALL | re.MULTILINE,
        )
    return _PATTERN_CACHE[heading]


def find_section(text: str, heading: str) -> Optional[str]:
    """Return the body of the first section titled `heading`, or None."""
    match = section_pattern(heading).search(text)
    return match.group(2) if match else None


def replace_section(text: str, heading: str, body: str) -> Optional[str]:
    """Replace the body of the first section titled `heading`.

    `body` is inserted verbatim; backslashes and group references in it are
    never interpreted.

    Returns:
        The rewritten text, or None when no such heading exists.
    """
    match = section_pattern(heading).search(text)
    if match is None:
        return None
    return text[:match.start(2)] + body + text[match.end(2):]
