"""Tests for YAML front matter parsing and rendering."""
import pytest

from healthnotes.vault.frontmatter import (
    FrontMatterError,
    join_front_matter,
    set_front_matter_field,
    split_front_matter,
)


class TestSplitFrontMatter:
    def test_parses_mapping_and_body(self):
        data, body = split_front_matter("---\nsteps: 10\nmood: ok\n---\n# Day\n")
        assert data == {"steps": 10, "mood": "ok"}
        assert body == "# Day\n"

    def test_no_front_matter(self):
        data, body = split_front_matter("# Day\ntext\n")
        assert data == {}
        assert body == "# Day\ntext\n"

    def test_empty_front_matter(self):
        data, body = split_front_matter("---\n---\nbody\n")
        assert data == {}
        assert body == "body\n"

    def test_horizontal_rule_later_in_note_is_not_front_matter(self):
        text = "intro\n---\nsteps: 1\n---\n"
        data, body = split_front_matter(text)
        assert data == {}
        assert body == text

    def test_non_mapping_raises(self):
        with pytest.raises(FrontMatterError):
            split_front_matter("---\n- a\n- b\n---\nbody\n")

    def test_invalid_yaml_raises(self):
        with pytest.raises(FrontMatterError):
            split_front_matter("---\nsteps: [1, 2\n---\nbody\n")


class TestJoinFrontMatter:
    def test_preserves_key_order(self):
        text = join_front_matter({"b": 1, "a": 2}, "body\n")
        assert text == "---\nb: 1\na: 2\n---\nbody\n"

    def test_empty_mapping(self):
        assert join_front_matter({}, "body\n") == "---\n---\nbody\n"

    def test_reparses_to_same_mapping(self):
        data = {"steps": 8123, "weight": 80.9, "note": "10: 20"}
        parsed, body = split_front_matter(join_front_matter(data, "# Day\n"))
        assert parsed == data
        assert body == "# Day\n"


class TestSetFrontMatterField:
    def test_other_fields_keep_their_text(self):
        text = "---\ncreated: 2024-01-20T10:00:00\nreviewed: yes\n---\n# Day\n"
        assert set_front_matter_field(text, "steps", 5) == (
            "---\ncreated: 2024-01-20T10:00:00\nreviewed: yes\nsteps: 5\n---\n# Day\n"
        )

    def test_replaces_only_the_target_line(self):
        text = "---\n# mood tracker\nmood: 'ok'   # quoted\nsteps: 1\ntags: [a, b]\n---\nbody\n"
        assert set_front_matter_field(text, "steps", 2) == (
            "---\n# mood tracker\nmood: 'ok'   # quoted\nsteps: 2\ntags: [a, b]\n---\nbody\n"
        )

    def test_replaces_multiline_value(self):
        text = "---\nsteps:\n  - 1\n  - 2\nmood: ok\n---\n"
        assert set_front_matter_field(text, "steps", 3) == "---\nsteps: 3\nmood: ok\n---\n"

    def test_equal_value_returns_text_unchanged(self):
        text = "---\nsteps:   100   # hand formatted\n---\n"
        assert set_front_matter_field(text, "steps", 100) == text

    def test_adds_block_to_plain_note(self):
        assert set_front_matter_field("# Day\n", "steps", 1) == "---\nsteps: 1\n---\n# Day\n"

    def test_adds_field_to_empty_block(self):
        assert set_front_matter_field("---\n---\nbody\n", "weight", 80.9) == "---\nweight: 80.9\n---\nbody\n"

    def test_key_prefix_is_not_a_match(self):
        text = "---\nsteps_goal: 10000\n---\n"
        assert set_front_matter_field(text, "steps", 5) == "---\nsteps_goal: 10000\nsteps: 5\n---\n"

    def test_keeps_crlf_line_endings(self):
        text = "---\r\nmood: ok\r\nsteps: 1\r\n---\r\nbody\r\n"
        assert set_front_matter_field(text, "steps", 2) == "---\r\nmood: ok\r\nsteps: 2\r\n---\r\nbody\r\n"

    def test_non_mapping_raises(self):
        with pytest.raises(FrontMatterError):
            set_front_matter_field("---\n- a\n---\n", "steps", 1)
