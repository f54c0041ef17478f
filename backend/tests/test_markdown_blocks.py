"""Unit tests for the notes markdown parser."""
import time

import pytest

from report_editor.models.schemas import HeadingBlock, ParagraphBlock, TableBlock, TableCell
from report_editor.services.markdown_blocks import (
    LineKind,
    detect_table,
    lex_line,
    lex_lines,
    note_anchors,
    parse_markdown_blocks,
    split_table_row,
)


@pytest.fixture
def notes_text():
    """Notes with a heading, a paragraph and a ragged table."""
    return "**Note 1: Basis**\nSome text\n| A | B |\n|---|---|\n| 1 | 2 |\n| x |"


class TestLexer:
    """Test line classification."""

    def test_note_heading(self):
        line = lex_line("  **Note 12: Revenue**  ")
        assert line.kind is LineKind.NOTE_HEADING
        assert line.anchor_id == "12"
        assert line.heading_text == "Note 12: Revenue"

    def test_minor_heading(self):
        line = lex_line("**(a) Basis of Preparation**")
        assert line.kind is LineKind.MINOR_HEADING
        assert line.heading_text == "(a) Basis of Preparation"

    def test_section_heading(self):
        line = lex_line("**Events After the Reporting Period**")
        assert line.kind is LineKind.SECTION_HEADING
        assert line.heading_text == "Events After the Reporting Period"

    def test_blank_line(self):
        assert lex_line("   ").kind is LineKind.BLANK

    def test_table_flags(self):
        assert lex_line("| A | B |").has_delimiter
        assert lex_line("|:---|---:|").is_separator
        assert not lex_line("| not-a-sep |").is_separator
        assert lex_line("---").is_separator
        assert not lex_line("--- see Note 4").is_separator

    def test_empty_text(self):
        assert lex_lines("") == []


class TestSplitTableRow:
    """Test split_table_row."""

    @pytest.mark.parametrize(
        "line, expected",
        [
            ("| a | b |", ["a", "b"]),
            ("a | b", ["a", "b"]),
            ("|a||b|", ["a", "", "b"]),
            ("  | only |  ", ["only"]),
        ],
    )
    def test_split(self, line, expected):
        assert split_table_row(line) == expected


class TestDetectTable:
    """Test the one-line table lookahead."""

    def test_detects_table_and_returns_next_index(self):
        lines = lex_lines("| A | B |\n|---|---|\n| 1 | 2 |\nAfter")
        table, next_index = detect_table(lines, 0)
        assert table.header_cells == ["A", "B"]
        assert table.rows == [["1", "2"]]
        assert next_index == 3

    def test_no_table_without_separator(self):
        lines = lex_lines("| A | B |\nText")
        assert detect_table(lines, 0) is None

    def test_no_table_on_last_line(self):
        lines = lex_lines("| A | B |")
        assert detect_table(lines, 0) is None

    def test_separator_cell_validation(self):
        """A row that looks like a separator but has a bad cell is rejected."""
        lines = lex_lines("| A | B |\n|--- -|---|")
        assert lines[1].is_separator
        assert detect_table(lines, 0) is None


class TestParseMarkdownBlocks:
    """Test parse_markdown_blocks end to end."""

    def test_heading_paragraph_and_padded_table(self, notes_text):
        blocks = parse_markdown_blocks(notes_text)

        assert blocks == [
            HeadingBlock(level=3, text="Note 1: Basis", anchor_id="1"),
            ParagraphBlock(text="Some text"),
            TableBlock(header_cells=["A", "B"], rows=[["1", "2"], ["x", ""]]),
        ]

    def test_malformed_separator_gives_paragraphs(self):
        blocks = parse_markdown_blocks("| A | B |\n| not-a-sep |")
        assert blocks == [
            ParagraphBlock(text="| A | B |"),
            ParagraphBlock(text="| not-a-sep |"),
        ]

    def test_dash_rule_with_text_parses_quickly(self):
        line = "-" * 60 + " see Note 4"

        started = time.perf_counter()
        blocks = parse_markdown_blocks(f"| A | B |\n{line}")
        elapsed = time.perf_counter() - started

        assert blocks == [ParagraphBlock(text="| A | B |"), ParagraphBlock(text=line)]
        assert elapsed < 0.5

    def test_long_rows_truncated(self):
        blocks = parse_markdown_blocks("| A | B |\n|---|---|\n| 1 | 2 | 3 |")
        assert blocks[0].rows == [["1", "2"]]

    def test_alignment_separator(self):
        blocks = parse_markdown_blocks("| Item | 2025 |\n|:---|---:|\n| Cash | 10 |")
        assert isinstance(blocks[0], TableBlock)
        assert blocks[0].rows == [["Cash", "10"]]

    def test_table_ends_at_line_without_delimiter(self):
        blocks = parse_markdown_blocks("| A |\n|---|\n| 1 |\n\nAfter the table")
        assert blocks == [
            TableBlock(header_cells=["A"], rows=[["1"]]),
            ParagraphBlock(text="After the table"),
        ]

    def test_blank_lines_dropped(self):
        blocks = parse_markdown_blocks("\n\nFirst\n   \n\nSecond\n")
        assert blocks == [ParagraphBlock(text="First"), ParagraphBlock(text="Second")]

    def test_malformed_headings_fall_back_to_paragraphs(self):
        blocks = parse_markdown_blocks("**Unclosed heading\n**Note 2: Revenue** continued")
        assert blocks == [
            ParagraphBlock(text="**Unclosed heading"),
            ParagraphBlock(text="**Note 2: Revenue** continued"),
        ]

    def test_bold_in_paragraph_is_literal(self):
        blocks = parse_markdown_blocks("Revenue was **up** this year")
        assert blocks == [ParagraphBlock(text="Revenue was **up** this year")]

    def test_minor_and_section_headings(self):
        blocks = parse_markdown_blocks("**(a) Basis**\n**Events After**")
        assert blocks == [
            HeadingBlock(level=4, text="(a) Basis"),
            HeadingBlock(level=3, text="Events After"),
        ]

    def test_windows_line_endings(self):
        blocks = parse_markdown_blocks("**Note 3: Cash**\r\nCash at bank\r\n")
        assert blocks[0].anchor == "note-3"
        assert blocks[1] == ParagraphBlock(text="Cash at bank")

    def test_separator_alone_is_paragraph(self):
        assert parse_markdown_blocks("|---|---|") == [ParagraphBlock(text="|---|---|")]

    def test_bold_table_cells(self):
        blocks = parse_markdown_blocks("| Item | 2025 |\n|---|---|\n| **Total** | **12** k |\n| Cash | 10 |")
        rows = blocks[0].display_rows()
        assert rows[0] == [TableCell(text="Total", bold=True), TableCell(text="12 k", bold=True)]
        assert rows[1] == [TableCell(text="Cash"), TableCell(text="10")]

    def test_note_anchors(self):
        blocks = parse_markdown_blocks("**Note 1: A**\n**Note 2: B**\n**Other**")
        assert note_anchors(blocks) == {"note-1", "note-2"}
