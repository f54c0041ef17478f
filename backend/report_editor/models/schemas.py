"""Pydantic schemas for the report model, parsed notes and API payloads."""
from __future__ import annotations

from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, FiniteFloat, PositiveInt
from pydantic.alias_generators import to_camel

from report_editor.services.currency import CurrencyFormat
from report_editor.services.field_reconciler import FieldKind, FieldPhase


class CamelModel(BaseModel):
    """Accepts the generator's camelCase JSON as well as snake_case names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Report schemas
class FinancialItem(CamelModel):
    item: str
    amount_2025: FiniteFloat = Field(default=0.0, alias="amount2025")
    amount_2024: FiniteFloat = Field(default=0.0, alias="amount2024")
    note_ref: Optional[PositiveInt] = None

    @property
    def note_anchor(self) -> Optional[str]:
        return f"note-{self.note_ref}" if self.note_ref else None


class SingleFinancialValue(CamelModel):
    amount_2025: FiniteFloat = Field(default=0.0, alias="amount2025")
    amount_2024: FiniteFloat = Field(default=0.0, alias="amount2024")
    note_ref: Optional[PositiveInt] = None


class KPI(CamelModel):
    name: str
    value_2025: str = Field(alias="value2025")
    value_2024: str = Field(alias="value2024")
    change_percentage: float = 0.0


class Director(CamelModel):
    name: str
    title: str


class DirectorsDeclaration(CamelModel):
    directors: List[Director] = Field(default_factory=list)
    date: str = ""


class IncomeStatement(CamelModel):
    revenue: List[FinancialItem] = Field(default_factory=list)
    expenses: List[FinancialItem] = Field(default_factory=list)
    gross_profit: SingleFinancialValue = Field(default_factory=SingleFinancialValue)
    operating_income: SingleFinancialValue = Field(default_factory=SingleFinancialValue)
    net_profit: SingleFinancialValue = Field(default_factory=SingleFinancialValue)


class BalanceSheet(CamelModel):
    current_assets: List[FinancialItem] = Field(default_factory=list)
    non_current_assets: List[FinancialItem] = Field(default_factory=list)
    current_liabilities: List[FinancialItem] = Field(default_factory=list)
    non_current_liabilities: List[FinancialItem] = Field(default_factory=list)
    equity: List[FinancialItem] = Field(default_factory=list)
    total_assets: SingleFinancialValue = Field(default_factory=SingleFinancialValue)
    total_liabilities: SingleFinancialValue = Field(default_factory=SingleFinancialValue)
    total_equity: SingleFinancialValue = Field(default_factory=SingleFinancialValue)


class CashFlowStatement(CamelModel):
    operating_activities: List[FinancialItem] = Field(default_factory=list)
    investing_activities: List[FinancialItem] = Field(default_factory=list)
    financing_activities: List[FinancialItem] = Field(default_factory=list)
    net_change_in_cash: SingleFinancialValue = Field(default_factory=SingleFinancialValue)


class ReportData(CamelModel):
    """A generated financial report. Replaced wholesale on regeneration."""

    company_name: str = ""
    abn: Optional[str] = None
    summary: str = ""
    kpis: List[KPI] = Field(default_factory=list)
    directors_declaration: Optional[DirectorsDeclaration] = None
    income_statement: IncomeStatement = Field(default_factory=IncomeStatement)
    balance_sheet: BalanceSheet = Field(default_factory=BalanceSheet)
    cash_flow_statement: Optional[CashFlowStatement] = None
    notes_to_financial_statements: str = ""


class ReportSection(str, Enum):
    """Editable line-item lists of a report, in display order."""

    REVENUE = "revenue"
    EXPENSES = "expenses"
    CURRENT_ASSETS = "current_assets"
    NON_CURRENT_ASSETS = "non_current_assets"
    CURRENT_LIABILITIES = "current_liabilities"
    NON_CURRENT_LIABILITIES = "non_current_liabilities"
    EQUITY = "equity"
    OPERATING_ACTIVITIES = "operating_activities"
    INVESTING_ACTIVITIES = "investing_activities"
    FINANCING_ACTIVITIES = "financing_activities"


# Parsed notes schemas
class HeadingBlock(BaseModel):
    kind: Literal["heading"] = "heading"
    level: int
    text: str
    anchor_id: Optional[str] = None

    @property
    def anchor(self) -> Optional[str]:
        return f"note-{self.anchor_id}" if self.anchor_id else None


class ParagraphBlock(BaseModel):
    kind: Literal["paragraph"] = "paragraph"
    text: str


class TableCell(BaseModel):
    text: str
    bold: bool = False

    @classmethod
    def from_markdown(cls, cell: str) -> "TableCell":
        """Flag cells containing bold markers and drop the markers."""
        return cls(text=cell.replace("**", ""), bold="**" in cell)


class TableBlock(BaseModel):
    kind: Literal["table"] = "table"
    header_cells: List[str]
    rows: List[List[str]] = Field(default_factory=list)

    def display_header(self) -> List[TableCell]:
        return [TableCell.from_markdown(cell) for cell in self.header_cells]

    def display_rows(self) -> List[List[TableCell]]:
        return [[TableCell.from_markdown(cell) for cell in row] for row in self.rows]


Block = Annotated[Union[HeadingBlock, ParagraphBlock, TableBlock], Field(discriminator="kind")]


# Rendered view schemas
class RenderedRow(BaseModel):
    label: str
    value_2025: str
    value_2024: str
    row_index: Optional[int] = None
    bold: bool = False
    indent: int = 0
    note_ref: Optional[int] = None
    note_anchor: Optional[str] = None
    editable: bool = False


class RenderedSection(BaseModel):
    section: ReportSection
    title: str
    rows: List[RenderedRow] = Field(default_factory=list)


class RenderedComparison(BaseModel):
    section: Optional[ReportSection] = None
    currency_format: CurrencyFormat = CurrencyFormat.SYMBOL
    editing: bool = False
    busy: bool = False
    rows: List[RenderedRow] = Field(default_factory=list)


class RenderedReport(BaseModel):
    title: str
    period: str
    company_name: str
    abn: Optional[str] = None
    instructions: str
    editing: bool = False
    busy: bool = False
    currency_format: CurrencyFormat = CurrencyFormat.PLAIN
    statements: List[RenderedSection] = Field(default_factory=list)
    notes_text: str = ""
    notes_blocks: List[Block] = Field(default_factory=list)


# API schemas
class ReportSessionResponse(BaseModel):
    report_id: str
    report: RenderedReport


class ReportModeUpdate(BaseModel):
    editing: Optional[bool] = None
    busy: Optional[bool] = None


class EditEvent(BaseModel):
    view: Literal["preview", "comparison"] = "preview"
    section: Optional[ReportSection] = None
    row: Optional[int] = Field(default=None, ge=0)
    field: FieldKind
    value: Optional[str] = None


class EditResponse(BaseModel):
    accepted: bool
    phase: FieldPhase
    display_value: str


class NotesParseRequest(BaseModel):
    text: str = ""


class NotesParseResponse(BaseModel):
    blocks: List[Block] = Field(default_factory=list)
    anchors: List[str] = Field(default_factory=list)


class SanitizeRequest(BaseModel):
    text: str = ""
    numeric: bool = False
    max_length: Optional[int] = Field(default=None, ge=1)


class SanitizeResponse(BaseModel):
    text: str
    acceptable: bool
