"""
Parser for the markdown subset used in the notes to the financial statements.

Supported syntax:
    | cell | cell |        table rows, followed by a separator row
    |---|:--:|             separator (dashes, optional colon at either end)
    **text**                bold, only meaningful in headings and table cells
    **Note 3: Title**       note heading, addressable as ``note-3``

Parsing runs in two steps. ``lex_lines`` classifies each line on its own;
``BlockBuilder`` groups the classified lines into blocks, using
``detect_table`` for the one-line lookahead that recognises a table.
Nothing here raises on malformed input: a broken table or heading is
emitted as a paragraph instead.
"""
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from report_editor.models.schemas import Block, HeadingBlock, ParagraphBlock, TableBlock

logger = logging.getLogger(__name__)

TABLE_DELIMITER = "|"
BOLD_MARKER = "**"

NOTE_HEADING_LEVEL = 3
SECTION_HEADING_LEVEL = 3
MINOR_HEADING_LEVEL = 4

SEPARATOR_ROW_PATTERN = re.compile(r"^\|? *:?-+:? *(?:\| *:?-+:? *)*\|? *$")
SEPARATOR_CELL_PATTERN = re.compile(r"^:?-+:?$")
NOTE_HEADING_PATTERN = re.compile(r"^\*\*(Note\s*(\d+):.*)\*\*$")


class LineKind(str, Enum):
    """How a line reads outside of a table."""

    BLANK = "blank"
    NOTE_HEADING = "note_heading"
    MINOR_HEADING = "minor_heading"
    SECTION_HEADING = "section_heading"
    PARAGRAPH = "paragraph"


@dataclass(frozen=True)
class LexedLine:
    text: str
    kind: LineKind
    has_delimiter: bool = False
    is_separator: bool = False
    heading_text: Optional[str] = None
    anchor_id: Optional[str] = None


def _is_bold_wrapped(line: str) -> bool:
    return (
        len(line) > 2 * len(BOLD_MARKER)
        and line.startswith(BOLD_MARKER)
        and line.endswith(BOLD_MARKER)
    )


def lex_line(raw_line: str) -> LexedLine:
    """Classify a single line of notes text."""
    line = raw_line.strip()
    has_delimiter = TABLE_DELIMITER in line
    is_separator = bool(SEPARATOR_ROW_PATTERN.match(line))

    if not line:
        return LexedLine(text=line, kind=LineKind.BLANK)

    note_match = NOTE_HEADING_PATTERN.match(line)
    if note_match:
        title, note_id = note_match.groups()
        return LexedLine(
            text=line,
            kind=LineKind.NOTE_HEADING,
            has_delimiter=has_delimiter,
            is_separator=is_separator,
            heading_text=title,
            anchor_id=note_id,
        )

    if line.startswith(BOLD_MARKER + "("):
        kind = LineKind.MINOR_HEADING
    elif _is_bold_wrapped(line):
        kind = LineKind.SECTION_HEADING
    else:
        return LexedLine(
            text=line,
            kind=LineKind.PARAGRAPH,
            has_delimiter=has_delimiter,
            is_separator=is_separator,
        )

    return LexedLine(
        text=line,
        kind=kind,
        has_delimiter=has_delimiter,
        is_separator=is_separator,
        heading_text=line.replace(BOLD_MARKER, ""),
    )


def lex_lines(text: str) -> List[LexedLine]:
    """Split notes text into lines and classify each one."""
    if not text:
        return []
    return [lex_line(raw_line) for raw_line in text.split("\n")]


def split_table_row(line: str) -> List[str]:
    """
    Split a table row into trimmed cells.

    One leading and one trailing delimiter are dropped before splitting,
    so ``"| a | b |"`` and ``"a | b"`` both give ``["a", "b"]``.
    """
    cleaned = line.strip()
    if cleaned.startswith(TABLE_DELIMITER):
        cleaned = cleaned[1:]
    if cleaned.endswith(TABLE_DELIMITER):
        cleaned = cleaned[:-1]
    return [cell.strip() for cell in cleaned.strip().split(TABLE_DELIMITER)]


def _fit_row(cells: List[str], width: int) -> List[str]:
    if len(cells) < width:
        return cells + [""] * (width - len(cells))
    return cells[:width]


def detect_table(lines: Sequence[LexedLine], index: int) -> Optional[Tuple[TableBlock, int]]:
    """
    Try to read a table starting at ``lines[index]``.

    Args:
        lines: Lexed notes lines
        index: Position of the candidate header row

    Returns:
        The table and the index of the first line after it, or None when
        the header/separator pair does not form a valid table
    """
    if index + 1 >= len(lines):
        return None

    header, separator = lines[index], lines[index + 1]
    if not header.has_delimiter or not separator.is_separator:
        return None

    header_cells = split_table_row(header.text)
    separator_cells = split_table_row(separator.text)
    if not header_cells or not all(SEPARATOR_CELL_PATTERN.match(cell) for cell in separator_cells):
        logger.debug("Separator row %r failed validation; not a table", separator.text)
        return None

    width = len(header_cells)
    rows: List[List[str]] = []
    position = index + 2
    while position < len(lines) and lines[position].has_delimiter:
        rows.append(_fit_row(split_table_row(lines[position].text), width))
        position += 1

    return TableBlock(header_cells=header_cells, rows=rows), position


class BlockBuilder:
    """Group lexed lines into headings, paragraphs and tables."""

    def __init__(self, lines: Sequence[LexedLine]):
        self.lines = lines

    def build(self) -> List[Block]:
        blocks: List[Block] = []
        index = 0

        while index < len(self.lines):
            table = detect_table(self.lines, index)
            if table is not None:
                block, index = table
                blocks.append(block)
                continue

            block = self._line_block(self.lines[index])
            if block is not None:
                blocks.append(block)
            index += 1

        return blocks

    @staticmethod
    def _line_block(line: LexedLine) -> Optional[Block]:
        if line.kind is LineKind.BLANK:
            return None
        if line.kind is LineKind.NOTE_HEADING:
            return HeadingBlock(level=NOTE_HEADING_LEVEL, text=line.heading_text, anchor_id=line.anchor_id)
        if line.kind is LineKind.MINOR_HEADING:
            return HeadingBlock(level=MINOR_HEADING_LEVEL, text=line.heading_text)
        if line.kind is LineKind.SECTION_HEADING:
            return HeadingBlock(level=SECTION_HEADING_LEVEL, text=line.heading_text)
        return ParagraphBlock(text=line.text)


def parse_markdown_blocks(text: str) -> List[Block]:
    """Parse notes text into an ordered list of blocks."""
    return BlockBuilder(lex_lines(text)).build()


def note_anchors(blocks: Iterable[Block]) -> Set[str]:
    """Collect the ``note-<n>`` anchors defined by note headings."""
    return {
        block.anchor
        for block in blocks
        if isinstance(block, HeadingBlock) and block.anchor
    }
