"""Tests for frontmatter extraction, previews, and rendering."""

import pytest

from promptdir.frontmatter import extract, make_preview, render_prompt


# ---------------------------------------------------------------------------
# extract
# ---------------------------------------------------------------------------


class TestExtract:
    def test_no_header(self):
        parsed = extract("Just a body\nwith two lines")
        assert parsed.metadata == {}
        assert parsed.body == "Just a body\nwith two lines"

    def test_header_and_body(self):
        text = "---\ntitle: Code Review\nauthor: sam\n---\nReview this.\n"
        parsed = extract(text)
        assert parsed.metadata == {"title": "Code Review", "author": "sam"}
        assert parsed.body == "Review this.\n"

    def test_metadata_keeps_file_order(self):
        parsed = extract("---\nzeta: 1\nalpha: 2\nmid: 3\n---\nbody")
        assert list(parsed.metadata) == ["zeta", "alpha", "mid"]

    def test_structured_values(self):
        parsed = extract("---\ntags:\n  - a\n  - b\nnested:\n  k: v\n---\nbody")
        assert parsed.metadata["tags"] == ["a", "b"]
        assert parsed.metadata["nested"] == {"k": "v"}

    def test_empty_header(self):
        parsed = extract("---\n---\nbody")
        assert parsed.metadata == {}
        assert parsed.body == "body"

    def test_crlf_delimiters(self):
        parsed = extract("---\r\ntitle: x\r\n---\r\nbody")
        assert parsed.metadata == {"title": "x"}
        assert parsed.body == "body"

    def test_unclosed_header_is_body(self):
        text = "---\ntitle: x\nno closing line"
        parsed = extract(text)
        assert parsed.metadata == {}
        assert parsed.body == text

    def test_invalid_yaml_is_body(self):
        text = "---\ntitle: [unclosed\n---\nbody"
        parsed = extract(text)
        assert parsed.metadata == {}
        assert parsed.body == text

    def test_non_mapping_yaml_is_body(self):
        text = "---\n- just\n- a list\n---\nbody"
        parsed = extract(text)
        assert parsed.metadata == {}
        assert parsed.body == text

    def test_delimiter_not_on_first_line(self):
        text = "intro\n---\ntitle: x\n---\nbody"
        parsed = extract(text)
        assert parsed.metadata == {}
        assert parsed.body == text

    def test_body_may_contain_delimiters(self):
        parsed = extract("---\ntitle: x\n---\nabove\n---\nbelow")
        assert parsed.metadata == {"title": "x"}
        assert parsed.body == "above\n---\nbelow"

    def test_non_string_keys_coerced(self):
        parsed = extract("---\n1: one\ntrue: yes\n---\n")
        assert set(parsed.metadata) == {"1", "True"}

    def test_empty_text(self):
        parsed = extract("")
        assert parsed.metadata == {}
        assert parsed.body == ""


# ---------------------------------------------------------------------------
# make_preview
# ---------------------------------------------------------------------------


class TestMakePreview:
    def test_short_body_gets_ellipsis(self):
        body = "x" * 50
        preview = make_preview(body)
        assert len(preview) == 53
        assert preview.endswith("...")

    def test_long_body_truncated(self):
        body = "abcdefghij" * 50
        preview = make_preview(body)
        assert preview == body[:100] + "..."
        assert len(preview) == 103

    def test_newlines_collapsed(self):
        assert make_preview("line one\nline two") == "line one line two..."

    def test_truncates_before_collapsing(self):
        body = "a" * 99 + "\n" + "b" * 10
        assert make_preview(body) == "a" * 99 + "..."

    def test_whitespace_trimmed(self):
        assert make_preview("\n  hello  \n") == "hello..."

    def test_empty_body(self):
        assert make_preview("") == "..."

    def test_custom_length(self):
        assert make_preview("abcdef", length=3) == "abc..."


# ---------------------------------------------------------------------------
# render_prompt
# ---------------------------------------------------------------------------


class TestRenderPrompt:
    def test_without_metadata_is_body(self):
        assert render_prompt({}, "Body text") == "Body text"

    def test_metadata_round_trips(self):
        metadata = {"title": "Review", "tags": ["a", "b"], "difficulty": "advanced"}
        text = render_prompt(metadata, "Body text")
        assert text.startswith("---\n")
        parsed = extract(text)
        assert parsed.metadata == metadata
        assert parsed.body.strip() == "Body text"

    def test_keeps_field_order(self):
        text = render_prompt({"title": "t", "author": "a", "category": "c"}, "b")
        assert list(extract(text).metadata) == ["title", "author", "category"]

    @pytest.mark.parametrize("title", ["Café ☕", "colon: inside", "- dash"])
    def test_awkward_values(self, title):
        parsed = extract(render_prompt({"title": title}, "body"))
        assert parsed.metadata["title"] == title
