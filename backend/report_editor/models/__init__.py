"""Report, notes and API schemas."""
from report_editor.models.schemas import (
    Block,
    FinancialItem,
    HeadingBlock,
    ParagraphBlock,
    RenderedReport,
    ReportData,
    ReportSection,
    TableBlock,
)

__all__ = [
    "Block",
    "FinancialItem",
    "HeadingBlock",
    "ParagraphBlock",
    "RenderedReport",
    "ReportData",
    "ReportSection",
    "TableBlock",
]
