"""Unit tests for input sanitization."""
import re

import pytest

from report_editor.config import Settings
from report_editor.services import sanitization
from report_editor.services.sanitization import (
    allow_list_clean,
    filter_numeric_text,
    is_acceptable,
    sanitize_abn,
    sanitize_text,
)

NUMERIC_CHARSET = re.compile(r"[0-9,.()\-\s]*")
TAG_OPENER = re.compile(r"<[a-zA-Z/!?]")
EVENT_HANDLER = re.compile(r"on\w+=", re.IGNORECASE)

HOSTILE_INPUTS = [
    "<script>alert(1)</script>hello",
    "<SCRIPT type='text/javascript'>steal()</SCRIPT>Revenue",
    "<img src=x onerror=alert(1)>caption",
    "<a href=\"javascript:alert(1)\">link</a>",
    "javascript:alert(document.cookie)",
    "javajavascript:script:alert(1)",
    "click onclick=steal() here",
    "ononclick=click=bad",
    "<scr<script>ipt>alert(1)</script>",
    "unterminated </script",
    "<<a>b>",
    "<style>body {display:none}</style>Notes",
    "plain text with a < b comparison",
    "**Note 1: Basis**\n| A | B |\n|---|---|\n| 1 | 2 |",
    "",
]


class TestSanitizeText:
    """Test sanitize_text."""

    def test_script_block_removed_with_contents(self):
        """Script blocks disappear along with their body."""
        assert sanitize_text("<script>alert(1)</script>hello") == "hello"

    def test_tags_stripped(self):
        """Formatting tags are stripped, leaving their text."""
        assert sanitize_text("<b>Sales</b> revenue") == "Sales revenue"

    def test_event_handler_attribute_removed(self):
        """A tag carrying an event handler is dropped entirely."""
        assert sanitize_text("<img src=x onerror=alert(1)>caption") == "caption"

    def test_javascript_scheme_removed(self):
        assert sanitize_text("javascript:alert(1)") == "alert(1)"

    def test_spliced_scheme_removed(self):
        """Removing one scheme prefix must not leave another behind."""
        assert sanitize_text("javajavascript:script:alert(1)") == "alert(1)"

    def test_inline_handler_pattern_removed(self):
        assert sanitize_text("click onclick=steal() here") == "click steal() here"

    def test_unterminated_tag_opener_removed(self):
        assert sanitize_text("unterminated </script") == "unterminated /script"

    def test_plain_comparison_untouched(self):
        """A lone '<' followed by a space is ordinary text."""
        text = "plain text with a < b comparison"
        assert sanitize_text(text) == text

    def test_markdown_subset_preserved(self):
        """Notes markdown passes through unchanged."""
        notes = "**Note 1: Basis**\n| A | B |\n|:---|---:|\n| 1 | 2 |"
        assert sanitize_text(notes) == notes

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty_input(self, value):
        assert sanitize_text(value) == ""

    @pytest.mark.parametrize("value", HOSTILE_INPUTS)
    def test_output_has_no_markup_or_handlers(self, value):
        """No tag opener, javascript: scheme or on<word>= survives."""
        cleaned = sanitize_text(value)
        assert not TAG_OPENER.search(cleaned)
        assert "javascript:" not in cleaned.lower()
        assert not EVENT_HANDLER.search(cleaned)

    @pytest.mark.parametrize("value", HOSTILE_INPUTS)
    def test_idempotent(self, value):
        once = sanitize_text(value)
        assert sanitize_text(once) == once


class TestAllowListClean:
    """Test the allow-list cleaner used as a second line of defense."""

    def test_keeps_allowed_tags_and_attributes(self):
        cleaned = allow_list_clean('<b class="x" onclick="y">hi</b><img src=x>')
        assert cleaned == '<b class="x">hi</b>'

    def test_drops_unknown_tags(self):
        assert allow_list_clean("<iframe>x</iframe>") == "x"


class TestNumericAndLength:
    """Test numeric filtering, ABN cleaning and length checks."""

    @pytest.mark.parametrize(
        "value",
        ["$1,234.50 AUD", "(1,234)", "-500", "12abc34", "<b>99</b>", "€ 1.000,00", "\t42\n"],
    )
    def test_filter_numeric_charset(self, value):
        assert NUMERIC_CHARSET.fullmatch(filter_numeric_text(value))

    def test_filter_numeric_keeps_allowed_characters(self):
        assert filter_numeric_text("$1,234.50 AUD") == "1,234.50 "
        assert filter_numeric_text("(1,234)") == "(1,234)"

    def test_filter_numeric_empty(self):
        assert filter_numeric_text(None) == ""

    def test_sanitize_abn(self):
        assert sanitize_abn("<b>51 824</b> abc 753") == "51 824  753"

    def test_is_acceptable_bounds(self):
        assert not is_acceptable("", 10)
        assert is_acceptable("a", 10)
        assert is_acceptable("a" * 10, 10)
        assert not is_acceptable("a" * 11, 10)

    def test_is_acceptable_default_limit(self):
        assert is_acceptable("a" * 1000)
        assert not is_acceptable("a" * 1001)

    def test_is_acceptable_default_follows_settings(self, monkeypatch):
        monkeypatch.setattr(sanitization, "get_settings", lambda: Settings(max_input_length=5))
        assert is_acceptable("a" * 5)
        assert not is_acceptable("a" * 6)
        assert is_acceptable("a" * 6, 10)
