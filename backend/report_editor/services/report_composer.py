"""Assemble editable report views from the report model, field state and parsed notes."""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from report_editor.models.schemas import (
    CashFlowStatement,
    FinancialItem,
    RenderedComparison,
    RenderedReport,
    RenderedRow,
    RenderedSection,
    ReportData,
    ReportSection,
)
from report_editor.services.currency import CurrencyFormat, format_currency
from report_editor.services.field_reconciler import (
    FieldKind,
    FieldPhase,
    FieldReconciler,
    ModelValue,
)
from report_editor.services.markdown_blocks import note_anchors, parse_markdown_blocks
from report_editor.services.report_exceptions import FieldAddressError

logger = logging.getLogger(__name__)

REPORT_TITLE = "2025 Financial Statement Report"
REPORT_PERIOD = "For the Year Ended 30 June 2025"

EDIT_INSTRUCTIONS = (
    "You are in edit mode. Click on any text or number to make changes. "
    "All input is sanitized for security. Click 'Finish Editing' to save."
)
PREVIEW_INSTRUCTIONS = (
    "This is a preview of the final AASB-compliant report. "
    "To make corrections, use the 'Edit Report' button."
)

ItemsCallback = Callable[[List[FinancialItem]], None]
DataCallback = Callable[[Dict[str, Any]], None]

_ROW_ATTRIBUTES = {
    FieldKind.ITEM: "item",
    FieldKind.AMOUNT_2025: "amount_2025",
    FieldKind.AMOUNT_2024: "amount_2024",
}

_DOCUMENT_ATTRIBUTES = {
    FieldKind.COMPANY_NAME: "company_name",
    FieldKind.ABN: "abn",
    FieldKind.NOTES: "notes_to_financial_statements",
}


@dataclass(frozen=True)
class SectionLayout:
    statement: str
    attribute: str
    title: str
    total_label: str


SECTION_LAYOUTS: Dict[ReportSection, SectionLayout] = {
    ReportSection.REVENUE: SectionLayout("income_statement", "revenue", "Income", "Total Income"),
    ReportSection.EXPENSES: SectionLayout("income_statement", "expenses", "Expenses", "Total Expenses"),
    ReportSection.CURRENT_ASSETS: SectionLayout(
        "balance_sheet", "current_assets", "Current Assets", "Total Current Assets"
    ),
    ReportSection.NON_CURRENT_ASSETS: SectionLayout(
        "balance_sheet", "non_current_assets", "Non-Current Assets", "Total Non-Current Assets"
    ),
    ReportSection.CURRENT_LIABILITIES: SectionLayout(
        "balance_sheet", "current_liabilities", "Current Liabilities", "Total Current Liabilities"
    ),
    ReportSection.NON_CURRENT_LIABILITIES: SectionLayout(
        "balance_sheet", "non_current_liabilities", "Non-Current Liabilities", "Total Non-Current Liabilities"
    ),
    ReportSection.EQUITY: SectionLayout("balance_sheet", "equity", "Equity", "Total Equity"),
    ReportSection.OPERATING_ACTIVITIES: SectionLayout(
        "cash_flow_statement", "operating_activities", "Operating Activities", "Net Cash from Operating Activities"
    ),
    ReportSection.INVESTING_ACTIVITIES: SectionLayout(
        "cash_flow_statement", "investing_activities", "Investing Activities", "Net Cash from Investing Activities"
    ),
    ReportSection.FINANCING_ACTIVITIES: SectionLayout(
        "cash_flow_statement", "financing_activities", "Financing Activities", "Net Cash from Financing Activities"
    ),
}


@dataclass(frozen=True)
class FieldEdit:
    """What a view reports back after an edit event."""

    accepted: bool
    phase: FieldPhase
    display_value: str


def section_items(data: ReportData, section: ReportSection) -> List[FinancialItem]:
    """Return the line items of ``section`` (empty when the statement is absent)."""
    layout = SECTION_LAYOUTS[section]
    statement = getattr(data, layout.statement)
    if statement is None:
        return []
    return list(getattr(statement, layout.attribute))


def section_update(data: ReportData, section: ReportSection, items: List[FinancialItem]) -> Dict[str, Any]:
    """
    Build the top-level partial update that replaces ``section``'s items.

    Args:
        data: Current report
        section: Section being replaced
        items: New items for the section

    Returns:
        Mapping of the changed top-level field to its new, copied statement
    """
    layout = SECTION_LAYOUTS[section]
    statement = getattr(data, layout.statement)
    if statement is None:
        # Only the cash flow statement is optional.
        statement = CashFlowStatement()
    return {layout.statement: statement.model_copy(update={layout.attribute: list(items)})}


def replace_item_field(
    items: Sequence[FinancialItem],
    row: int,
    kind: FieldKind,
    value: ModelValue,
) -> List[FinancialItem]:
    """Return a copy of ``items`` with one field of one row replaced."""
    updated = list(items)
    updated[row] = updated[row].model_copy(update={_ROW_ATTRIBUTES[kind]: value})
    return updated


def total_row(items: Sequence[FinancialItem], label: str, mode: CurrencyFormat) -> RenderedRow:
    """Sum both years over ``items``. Recomputed on every call."""
    return RenderedRow(
        label=label,
        value_2025=format_currency(sum(item.amount_2025 for item in items), mode),
        value_2024=format_currency(sum(item.amount_2024 for item in items), mode),
        bold=True,
    )


def _committed_item_value(item: FinancialItem, kind: FieldKind) -> ModelValue:
    return getattr(item, _ROW_ATTRIBUTES[kind])


def _check_row_address(items: Sequence[FinancialItem], row: Optional[int], kind: FieldKind) -> int:
    if not kind.is_row_field:
        raise FieldAddressError(f"Field {kind.value} is not a line item field", row=row)
    if row is None or not 0 <= row < len(items):
        raise FieldAddressError(f"Row {row} does not exist", row=row)
    return row


class _EditableView:
    """Shared gating for views: edits only land while editing and not busy."""

    def __init__(self, mode: CurrencyFormat, editing: bool, busy: bool):
        self.editing = editing
        self.busy = busy
        self.mode = mode
        self._reconcilers: List[FieldReconciler] = []

    def _new_reconciler(self) -> FieldReconciler:
        reconciler = FieldReconciler(self.mode)
        self._reconcilers.append(reconciler)
        return reconciler

    @property
    def interactive(self) -> bool:
        return self.editing and not self.busy

    def set_mode(self, editing: Optional[bool] = None, busy: Optional[bool] = None) -> None:
        if busy is not None:
            self.busy = busy
        if editing is not None:
            if self.editing and not editing:
                # Accepted values are already in the model.
                self._reset_fields()
            self.editing = editing

    def _reset_fields(self) -> None:
        for reconciler in self._reconcilers:
            reconciler.reset()

    def _gated(self, reconciler: FieldReconciler, key, committed: ModelValue) -> FieldEdit:
        logger.debug("Ignoring edit event for %s (editing=%s, busy=%s)", key, self.editing, self.busy)
        return FieldEdit(
            accepted=False,
            phase=reconciler.state(key).phase,
            display_value=reconciler.display_value(key, committed),
        )


class ComparisonTable(_EditableView):
    """
    Editable 2025/2024 comparison of one list of line items.

    Amounts are shown with the dollar symbol. Every accepted keystroke
    produces a fresh item list passed to ``on_items_change``.
    """

    def __init__(
        self,
        items: Sequence[FinancialItem],
        on_items_change: Optional[ItemsCallback] = None,
        section: Optional[ReportSection] = None,
        editing: bool = False,
        busy: bool = False,
    ):
        super().__init__(CurrencyFormat.SYMBOL, editing, busy)
        self.items: List[FinancialItem] = list(items)
        self.section = section
        self.on_items_change = on_items_change
        self.fields = self._new_reconciler()

    def replace_items(self, items: Sequence[FinancialItem]) -> None:
        """Swap in regenerated items and forget any edit state."""
        self.items = list(items)
        self.fields.reset()

    def start_edit(self, row: int, kind: FieldKind) -> FieldEdit:
        row = _check_row_address(self.items, row, kind)
        key = (row, kind)
        committed = _committed_item_value(self.items[row], kind)
        if not self.interactive:
            return self._gated(self.fields, key, committed)

        state = self.fields.start_edit(key)
        return FieldEdit(True, state.phase, self.fields.display_value(key, committed))

    def value_changed(self, row: int, kind: FieldKind, raw: Optional[str]) -> FieldEdit:
        row = _check_row_address(self.items, row, kind)
        key = (row, kind)
        if not self.interactive:
            return self._gated(self.fields, key, _committed_item_value(self.items[row], kind))

        outcome = self.fields.value_changed(key, raw)
        if outcome.accepted:
            self.items = replace_item_field(self.items, row, kind, outcome.value)
            if self.on_items_change:
                self.on_items_change(list(self.items))

        committed = _committed_item_value(self.items[row], kind)
        return FieldEdit(outcome.accepted, self.fields.state(key).phase, self.fields.display_value(key, committed))

    def end_edit(self, row: int, kind: FieldKind) -> FieldEdit:
        row = _check_row_address(self.items, row, kind)
        key = (row, kind)
        display = self.fields.end_edit(key, _committed_item_value(self.items[row], kind))
        return FieldEdit(True, FieldPhase.DISPLAY, display)

    def render(self) -> RenderedComparison:
        rows = []
        for index, item in enumerate(self.items):
            rows.append(
                RenderedRow(
                    label=self.fields.display_value((index, FieldKind.ITEM), item.item),
                    value_2025=self.fields.display_value((index, FieldKind.AMOUNT_2025), item.amount_2025),
                    value_2024=self.fields.display_value((index, FieldKind.AMOUNT_2024), item.amount_2024),
                    row_index=index,
                    note_ref=item.note_ref,
                    note_anchor=item.note_anchor,
                    editable=self.interactive,
                )
            )
        return RenderedComparison(
            section=self.section,
            currency_format=self.mode,
            editing=self.editing,
            busy=self.busy,
            rows=rows,
        )


class CompliancePreview(_EditableView):
    """
    The AASB report preview.

    Amounts use the plain convention with parentheses for negatives. Each
    section is followed by a derived total row, and the notes are parsed
    into blocks on every render. Accepted edits are applied as immutable
    copies of the report and announced through ``on_data_change`` with
    only the top-level fields that changed.
    """

    def __init__(
        self,
        data: ReportData,
        on_data_change: Optional[DataCallback] = None,
        editing: bool = False,
        busy: bool = False,
    ):
        super().__init__(CurrencyFormat.PLAIN, editing, busy)
        self.data = data
        self.on_data_change = on_data_change
        self.section_fields: Dict[ReportSection, FieldReconciler] = {
            section: self._new_reconciler() for section in ReportSection
        }
        self.document_fields = self._new_reconciler()

    def replace_data(self, data: ReportData) -> None:
        """Swap in a regenerated report and forget any edit state."""
        self.data = data
        self._reset_fields()

    def update(self, partial: Dict[str, Any]) -> None:
        """Apply a top-level partial update and notify the host."""
        self.data = self.data.model_copy(update=partial)
        if self.on_data_change:
            self.on_data_change(partial)

    def set_section_items(self, section: ReportSection, items: Sequence[FinancialItem]) -> None:
        self.update(section_update(self.data, section, list(items)))

    def _resolve(self, section: Optional[ReportSection], row: Optional[int], kind: FieldKind):
        if kind.is_row_field:
            if section is None:
                raise FieldAddressError(f"Field {kind.value} needs a section", row=row)
            items = section_items(self.data, section)
            row = _check_row_address(items, row, kind)
            return self.section_fields[section], (row, kind), _committed_item_value(items[row], kind)
        return self.document_fields, (None, kind), getattr(self.data, _DOCUMENT_ATTRIBUTES[kind])

    def _commit(self, section: Optional[ReportSection], row: Optional[int], kind: FieldKind, value: ModelValue) -> None:
        if kind.is_row_field:
            items = replace_item_field(section_items(self.data, section), row, kind, value)
            self.set_section_items(section, items)
        else:
            self.update({_DOCUMENT_ATTRIBUTES[kind]: value})

    def start_edit(self, kind: FieldKind, section: Optional[ReportSection] = None, row: Optional[int] = None) -> FieldEdit:
        reconciler, key, committed = self._resolve(section, row, kind)
        if not self.interactive:
            return self._gated(reconciler, key, committed)
        state = reconciler.start_edit(key)
        return FieldEdit(True, state.phase, reconciler.display_value(key, committed))

    def value_changed(
        self,
        kind: FieldKind,
        raw: Optional[str],
        section: Optional[ReportSection] = None,
        row: Optional[int] = None,
    ) -> FieldEdit:
        reconciler, key, committed = self._resolve(section, row, kind)
        if not self.interactive:
            return self._gated(reconciler, key, committed)

        outcome = reconciler.value_changed(key, raw)
        if outcome.accepted:
            self._commit(section, key[0], kind, outcome.value)
            committed = outcome.value
        return FieldEdit(outcome.accepted, reconciler.state(key).phase, reconciler.display_value(key, committed))

    def end_edit(self, kind: FieldKind, section: Optional[ReportSection] = None, row: Optional[int] = None) -> FieldEdit:
        reconciler, key, committed = self._resolve(section, row, kind)
        return FieldEdit(True, FieldPhase.DISPLAY, reconciler.end_edit(key, committed))

    def _render_section(self, section: ReportSection) -> RenderedSection:
        layout = SECTION_LAYOUTS[section]
        items = section_items(self.data, section)
        fields = self.section_fields[section]
        rows = [
            RenderedRow(
                label=fields.display_value((index, FieldKind.ITEM), item.item),
                value_2025=fields.display_value((index, FieldKind.AMOUNT_2025), item.amount_2025),
                value_2024=fields.display_value((index, FieldKind.AMOUNT_2024), item.amount_2024),
                row_index=index,
                indent=1,
                note_ref=item.note_ref,
                note_anchor=item.note_anchor,
                editable=self.interactive,
            )
            for index, item in enumerate(items)
        ]
        rows.append(total_row(items, layout.total_label, self.mode))
        return RenderedSection(section=section, title=layout.title, rows=rows)

    def render(self) -> RenderedReport:
        blocks = parse_markdown_blocks(self.data.notes_to_financial_statements)
        anchors = note_anchors(blocks)

        statements = []
        for section in ReportSection:
            if section is not ReportSection.REVENUE and not section_items(self.data, section):
                continue
            rendered = self._render_section(section)
            for row in rendered.rows:
                if row.note_anchor and row.note_anchor not in anchors:
                    logger.debug("Note reference %s has no matching note heading", row.note_anchor)
            statements.append(rendered)

        abn = self.data.abn
        if abn is not None:
            abn = self.document_fields.display_value((None, FieldKind.ABN), abn)

        return RenderedReport(
            title=REPORT_TITLE,
            period=REPORT_PERIOD,
            company_name=self.document_fields.display_value((None, FieldKind.COMPANY_NAME), self.data.company_name),
            abn=abn,
            instructions=EDIT_INSTRUCTIONS if self.editing else PREVIEW_INSTRUCTIONS,
            editing=self.editing,
            busy=self.busy,
            currency_format=self.mode,
            statements=statements,
            notes_text=self.document_fields.display_value(
                (None, FieldKind.NOTES), self.data.notes_to_financial_statements
            ),
            notes_blocks=blocks,
        )
