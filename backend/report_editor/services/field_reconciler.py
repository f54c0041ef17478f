"""
Per-field edit state for report views.

Each editable field moves between three phases:

    DISPLAY            the committed value is shown, formatted
    EDITING            the user is typing; the raw text is held as pending
    COMMITTED_PENDING  the pending text passed validation and was pushed
                       to the report model, but is still shown raw

The pending text lives on the field's own ``FieldState``, so there is a
single record per field for both the phase and the in-progress value.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple, Union

from report_editor.config import get_settings
from report_editor.services.currency import (
    CurrencyFormat,
    format_currency,
    parse_amount,
    strip_currency_decoration,
)
from report_editor.services.sanitization import (
    filter_numeric_text,
    is_acceptable,
    sanitize_abn,
    sanitize_text,
)

logger = logging.getLogger(__name__)

ModelValue = Union[str, float]


class FieldKind(str, Enum):
    """Every kind of editable field, with its own sanitize/parse/format rules."""

    ITEM = "item"
    AMOUNT_2025 = "amount2025"
    AMOUNT_2024 = "amount2024"
    COMPANY_NAME = "companyName"
    ABN = "abn"
    NOTES = "notes"

    @property
    def is_numeric(self) -> bool:
        return self in (FieldKind.AMOUNT_2025, FieldKind.AMOUNT_2024)

    @property
    def is_row_field(self) -> bool:
        return self in (FieldKind.ITEM, FieldKind.AMOUNT_2025, FieldKind.AMOUNT_2024)

    @property
    def max_length(self) -> int:
        settings = get_settings()
        if self.is_numeric:
            return settings.max_amount_length
        if self is FieldKind.ITEM:
            return settings.max_label_length
        if self is FieldKind.COMPANY_NAME:
            return settings.max_company_name_length
        if self is FieldKind.ABN:
            return settings.max_abn_length
        return settings.max_notes_length

    def sanitize(self, raw: Optional[str]) -> str:
        if self.is_numeric:
            return filter_numeric_text(raw)
        if self is FieldKind.ABN:
            return sanitize_abn(raw)
        return sanitize_text(raw)

    def to_model_value(self, text: str) -> ModelValue:
        return parse_amount(text) if self.is_numeric else text

    def format(self, value: Optional[ModelValue], mode: CurrencyFormat) -> str:
        if self.is_numeric:
            return format_currency(value, mode)
        return "" if value is None else str(value)

    def to_editable(self, text: str) -> str:
        """Raw form of a pending value when editing resumes."""
        return strip_currency_decoration(text) if self.is_numeric else text


class FieldPhase(str, Enum):
    DISPLAY = "display"
    EDITING = "editing"
    COMMITTED_PENDING = "committed_pending"


FieldKey = Tuple[Optional[int], FieldKind]


@dataclass
class FieldState:
    phase: FieldPhase = FieldPhase.DISPLAY
    pending: Optional[str] = None


@dataclass(frozen=True)
class EditOutcome:
    """Result of a keystroke: whether it reached the model, and with what value."""

    accepted: bool
    value: Optional[ModelValue] = None


@dataclass
class FieldReconciler:
    """
    Bridges committed model values and in-progress edits for one view.

    The reconciler never writes to the report itself; ``value_changed``
    hands back an ``EditOutcome`` and the owning view applies accepted
    values to its model.
    """

    mode: CurrencyFormat
    fields: Dict[FieldKey, FieldState] = field(default_factory=dict)

    def state(self, key: FieldKey) -> FieldState:
        return self.fields.get(key) or FieldState()

    def start_edit(self, key: FieldKey) -> FieldState:
        _, kind = key
        state = self.fields.setdefault(key, FieldState())
        if state.pending is not None:
            state.pending = kind.to_editable(state.pending)
        state.phase = FieldPhase.EDITING
        return state

    def value_changed(self, key: FieldKey, raw: Optional[str]) -> EditOutcome:
        """
        Run a keystroke through the pipeline and stage it.

        Args:
            key: (row index or None, field kind)
            raw: Text exactly as typed

        Returns:
            Accepted outcome carrying the model value, or a rejected outcome
            when the sanitized text is empty or too long
        """
        _, kind = key
        state = self.fields.setdefault(key, FieldState())
        sanitized = kind.sanitize(raw)
        state.pending = sanitized

        if not is_acceptable(sanitized, kind.max_length):
            state.phase = FieldPhase.EDITING
            logger.debug("Rejected %s edit for row %s (length %d)", kind.value, key[0], len(sanitized))
            return EditOutcome(accepted=False)

        state.phase = FieldPhase.COMMITTED_PENDING
        return EditOutcome(accepted=True, value=kind.to_model_value(sanitized))

    def end_edit(self, key: FieldKey, committed: Optional[ModelValue]) -> str:
        """
        Leave edit mode and return the text the field now displays.

        A committed numeric value is reformatted for this view's currency
        format; committed text is shown as typed. A pending value that never
        passed validation is discarded and the committed value is shown.
        """
        _, kind = key
        state = self.fields.pop(key, None)
        if state is None or state.phase is not FieldPhase.COMMITTED_PENDING:
            return kind.format(committed, self.mode)
        if kind.is_numeric:
            return format_currency(parse_amount(state.pending), self.mode)
        return state.pending

    def display_value(self, key: FieldKey, committed: Optional[ModelValue]) -> str:
        """Pending text while a field is being edited, else the formatted committed value."""
        _, kind = key
        state = self.fields.get(key)
        if state is not None and state.pending is not None:
            return state.pending
        return kind.format(committed, self.mode)

    def reset(self) -> None:
        self.fields.clear()
