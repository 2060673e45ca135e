"""
YAML front matter parsing for Markdown notes.

A note's front matter is the block between a leading `---` line and the next
`---` line. Everything after the closing delimiter is the body and is never
touched by these helpers.

Setting a field rewrites only that field's lines. Other fields keep their
original text, so values PyYAML would reinterpret on a full re-dump (dates,
`yes`/`no`, quoting, comments) are left exactly as the user wrote them.
"""
import re
from typing import Any, Dict, List, Optional, Tuple

import yaml

_FRONT_MATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)


class FrontMatterError(ValueError):
    """Raised when a note's front matter is not a YAML mapping."""


def _load_block(block: str) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as exc:
        raise FrontMatterError(f"invalid front matter: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise FrontMatterError(
            f"front matter must be a mapping, got {type(data).__name__}"
        )
    return data


def split_front_matter(text: str) -> Tuple[Dict[str, Any], str]:
    """Split a note into (front matter mapping, body).

    Notes without front matter return an empty mapping and the full text.

    Raises:
        FrontMatterError: if the block parses to something other than a mapping.
    """
    match = _FRONT_MATTER_RE.match(text)
    if not match:
        return {}, text
    return _load_block(match.group(1)), text[match.end():]


def _dump(data: Dict[str, Any]) -> str:
    return yaml.safe_dump(
        data,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )


def join_front_matter(data: Dict[str, Any], body: str) -> str:
    """Render a mapping as a front matter block followed by the body."""
    if not data:
        return "---\n---\n" + body
    return f"---\n{_dump(data)}---\n{body}"


def _continues_value(line: str) -> bool:
    # Indented and sequence-item lines continue the previous key's value.
    stripped = line.rstrip("\r\n")
    return not stripped.strip() or stripped[0] in " \t" or stripped == "-" or stripped.startswith("- ")


def _field_span(lines: List[str], key: str) -> Optional[Tuple[int, int]]:
    """Line range [start, end) holding top-level `key` and its value."""
    name = re.escape(key)
    key_re = re.compile(rf"(?:{name}|'{name}'|\"{name}\")[ \t]*:(?:[ \t\r]|$)")
    for start, line in enumerate(lines):
        if not key_re.match(line):
            continue
        end = start + 1
        while end < len(lines) and _continues_value(lines[end]):
            end += 1
        while end > start + 1 and not lines[end - 1].strip():
            end -= 1
        return start, end
    return None


def set_front_matter_field(text: str, key: str, value: Any) -> str:
    """Return `text` with front matter field `key` set to `value`.

    Only the lines of `key` change. A note without front matter gets a new
    block holding just that field. If the field already holds an equal value
    the text is returned unchanged.

    Raises:
        FrontMatterError: if existing front matter is not a YAML mapping.
    """
    match = _FRONT_MATTER_RE.match(text)
    if not match:
        return join_front_matter({key: value}, text)

    block = match.group(1)
    data = _load_block(block)
    if key in data and data[key] == value and type(data[key]) is type(value):
        return text

    lines = block.splitlines(keepends=True)
    span = _field_span(lines, key)
    if span is None and key in data:
        # Key not written as a plain top-level line (flow mapping, complex
        # key); fall back to re-rendering the block.
        data[key] = value
        return join_front_matter(data, text[match.end():])

    newline = "\r\n" if "\r\n" in block else "\n"
    rendered = _dump({key: value}).replace("\n", newline)
    if span is None:
        lines.append(rendered)
    else:
        start, end = span
        lines[start:end] = [rendered]

    start, end = match.span(1)
    return text[:start] + "".join(lines) + text[end:]
