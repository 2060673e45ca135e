"""
Filesystem-backed note store.

All paths are vault-relative; the store resolves them against the vault root.
Storage failures surface as DocumentError so callers can isolate them to the
date being updated.
"""
import copy
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Union

from healthnotes.vault.frontmatter import (
    join_front_matter,
    set_front_matter_field,
    split_front_matter,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class DocumentError(RuntimeError):
    """Raised when a note cannot be read, written, or created."""


class VaultStore:
    """Read/write access to Markdown notes under a vault root."""

    def __init__(self, root: PathLike):
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def _resolve(self, path: PathLike) -> Path:
        return self._root / Path(path)

    def exists(self, path: PathLike) -> bool:
        return self._resolve(path).is_file()

    def read(self, path: PathLike) -> str:
        try:
            return self._resolve(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise DocumentError(f"cannot read {path}: {exc}") from exc

    def write(self, path: PathLike, text: str) -> None:
        try:
            self._resolve(path).write_text(text, encoding="utf-8")
        except OSError as exc:
            raise DocumentError(f"cannot write {path}: {exc}") from exc

    def create(self, path: PathLike, content: str = "") -> None:
        """Create a new note; fails if one already exists at `path`."""
        try:
            with self._resolve(path).open("x", encoding="utf-8") as f:
                f.write(content)
        except OSError as exc:
            raise DocumentError(f"cannot create {path}: {exc}") from exc
        logger.info("Created note %s", path)

    def create_folder(self, path: PathLike) -> None:
        try:
            self._resolve(path).mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise DocumentError(f"cannot create folder {path}: {exc}") from exc

    @contextmanager
    def front_matter(self, path: PathLike) -> Iterator[Dict[str, Any]]:
        """Read-modify-write scope over a note's front matter.

        Mutations made to the yielded mapping are committed when the block
        exits. The note is only rewritten if the mapping actually changed, and
        only the lines of changed fields are rewritten. Removing a field
        re-renders the whole block.
        """
        text = self.read(path)
        data, body = split_front_matter(text)
        before = copy.deepcopy(data)
        yield data
        if data == before:
            return
        if before.keys() - data.keys():
            self.write(path, join_front_matter(data, body))
            return
        updated = text
        for key, value in data.items():
            if key not in before or before[key] != value:
                updated = set_front_matter_field(updated, key, value)
        self.write(path, updated)
