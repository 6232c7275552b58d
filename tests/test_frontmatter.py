"""Tests for SKILL.md frontmatter parsing."""

import pytest

from skill_palette.frontmatter import parse_frontmatter, strip_frontmatter


class TestParseFrontmatter:
    def test_parse_basic_frontmatter(self):
        content = """---
name: ad-creative
description: Write ad copy
---

Skill body here.
"""
        fm, body = parse_frontmatter(content, "fallback")
        assert fm.name == "ad-creative"
        assert fm.description == "Write ad copy"
        assert body.strip() == "Skill body here."

    def test_name_falls_back_to_directory(self):
        content = "---\ndescription: Something\n---\nBody\n"
        fm, _ = parse_frontmatter(content, "my-skill")
        assert fm.name == "my-skill"

    def test_no_frontmatter(self):
        content = "Just plain content."
        fm, body = parse_frontmatter(content, "plain")
        assert fm.name == "plain"
        assert fm.description == ""
        assert body == content

    def test_empty_frontmatter(self):
        fm, body = parse_frontmatter("---\n---\nContent only.\n", "x")
        assert fm.name == "x"
        assert fm.description == ""
        assert body.strip() == "Content only."

    def test_unquoted_colon_in_description(self):
        content = "---\nname: review\ndescription: Use when: reviewing a PR\n---\nBody\n"
        fm, _ = parse_frontmatter(content, "fallback")
        assert fm.name == "review"
        assert fm.description == "Use when: reviewing a PR"

    def test_extra_fields_ignored(self):
        content = "---\nname: a\ndescription: b\nallowed-tools: [Bash]\n---\n"
        fm, _ = parse_frontmatter(content, "x")
        assert (fm.name, fm.description) == ("a", "b")

    def test_hash_kept_in_description(self):
        content = "---\nname: tags\ndescription: Suggest tags like #marketing and #growth\n---\n"
        fm, _ = parse_frontmatter(content, "x")
        assert fm.description == "Suggest tags like #marketing and #growth"

    @pytest.mark.parametrize("value", ["yes", "on", "2024-01-01", "[1, 2]", "42"])
    def test_plain_values_verbatim(self, value):
        fm, _ = parse_frontmatter(f"---\nname: a\ndescription: {value}\n---\n", "x")
        assert fm.description == value

    def test_quoted_description(self):
        content = "---\nname: 'quoted'\ndescription: \"Use when: \\\"reviewing\\\"\"\n---\n"
        fm, _ = parse_frontmatter(content, "x")
        assert fm.name == "quoted"
        assert fm.description == 'Use when: "reviewing"'

    def test_folded_block_description(self):
        content = "---\nname: a\ndescription: >\n  Write ad copy\n  for campaigns\nlicense: MIT\n---\n"
        fm, _ = parse_frontmatter(content, "x")
        assert fm.description == "Write ad copy for campaigns"

    def test_literal_block_description(self):
        content = "---\nname: a\ndescription: |\n  Line one\n  Line two\n---\n"
        fm, _ = parse_frontmatter(content, "x")
        assert fm.description == "Line one\nLine two"

    def test_broken_quote_kept_raw(self):
        fm, _ = parse_frontmatter("---\nname: a\ndescription: \"unterminated\n---\n", "x")
        assert fm.description == '"unterminated'

    def test_indented_keys_ignored(self):
        content = "---\nname: a\nmetadata:\n  description: nested\ndescription: top\n---\n"
        fm, _ = parse_frontmatter(content, "x")
        assert fm.description == "top"

    def test_list_header_has_no_fields(self):
        fm, _ = parse_frontmatter("---\n- a\n- b\n---\nBody\n", "x")
        assert (fm.name, fm.description) == ("x", "")


class TestStripFrontmatter:
    def test_strips_header(self):
        assert strip_frontmatter("---\nname: a\n---\n\nDo the thing.\n\n") == "Do the thing."

    def test_without_header(self):
        assert strip_frontmatter("No header\n") == "No header\n"
