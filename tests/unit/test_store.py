"""Tests for the filesystem note store."""
from pathlib import Path

import pytest

from healthnotes.vault.store import DocumentError, VaultStore


class TestVaultStore:
    def test_create_then_read(self, store: VaultStore):
        store.create("note.md", "hello\n")
        assert store.exists("note.md")
        assert store.read("note.md") == "hello\n"

    def test_create_refuses_to_overwrite(self, store: VaultStore):
        store.create("note.md", "first")
        with pytest.raises(DocumentError):
            store.create("note.md", "second")
        assert store.read("note.md") == "first"

    def test_create_in_missing_folder_raises(self, store: VaultStore):
        with pytest.raises(DocumentError):
            store.create("missing/note.md", "")

    def test_create_folder_is_idempotent(self, store: VaultStore, tmp_path: Path):
        store.create_folder("a/b")
        store.create_folder("a/b")
        assert (tmp_path / "a" / "b").is_dir()

    def test_read_missing_raises(self, store: VaultStore):
        with pytest.raises(DocumentError):
            store.read("nope.md")

    def test_exists_is_false_for_folders(self, store: VaultStore):
        store.create_folder("Daily")
        assert not store.exists("Daily")


class TestFrontMatterScope:
    def test_inserts_front_matter_into_plain_note(self, store: VaultStore):
        store.create("day.md", "# Day\n")
        with store.front_matter("day.md") as fm:
            fm["steps"] = 100
        assert store.read("day.md") == "---\nsteps: 100\n---\n# Day\n"

    def test_overwrites_existing_field_and_keeps_others(self, store: VaultStore):
        store.create("day.md", "---\nmood: good\nsteps: 1\n---\nbody\n")
        with store.front_matter("day.md") as fm:
            fm["steps"] = 2
        assert store.read("day.md") == "---\nmood: good\nsteps: 2\n---\nbody\n"

    def test_unchanged_mapping_leaves_file_untouched(self, store: VaultStore):
        original = "---\nsteps:   100   # hand formatted\n---\nbody\n"
        store.create("day.md", original)
        with store.front_matter("day.md") as fm:
            fm["steps"] = 100
        assert store.read("day.md") == original

    def test_exception_inside_scope_does_not_write(self, store: VaultStore):
        store.create("day.md", "body\n")
        with pytest.raises(RuntimeError):
            with store.front_matter("day.md") as fm:
                fm["steps"] = 1
                raise RuntimeError("boom")
        assert store.read("day.md") == "body\n"

    def test_rewrites_only_changed_fields(self, store: VaultStore):
        store.create("day.md", "---\ncreated: 2024-01-20T10:00:00\nreviewed: no\n---\nbody\n")
        with store.front_matter("day.md") as fm:
            fm["steps"] = 5
        assert store.read("day.md") == (
            "---\ncreated: 2024-01-20T10:00:00\nreviewed: no\nsteps: 5\n---\nbody\n"
        )

    def test_removed_field_rerenders_block(self, store: VaultStore):
        store.create("day.md", "---\nmood: good\nsteps: 1\n---\nbody\n")
        with store.front_matter("day.md") as fm:
            del fm["mood"]
        assert store.read("day.md") == "---\nsteps: 1\n---\nbody\n"
