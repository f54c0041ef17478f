"""Unit tests for the editable-field reconciler."""
import pytest

from report_editor.services.currency import CurrencyFormat
from report_editor.services.field_reconciler import FieldKind, FieldPhase, FieldReconciler

AMOUNT_KEY = (0, FieldKind.AMOUNT_2025)
LABEL_KEY = (0, FieldKind.ITEM)


@pytest.fixture
def symbol_fields():
    return FieldReconciler(CurrencyFormat.SYMBOL)


@pytest.fixture
def plain_fields():
    return FieldReconciler(CurrencyFormat.PLAIN)


class TestFieldKind:
    """Test the per-kind behaviour."""

    def test_numeric_kinds(self):
        assert FieldKind.AMOUNT_2025.is_numeric
        assert FieldKind.AMOUNT_2024.is_numeric
        assert not FieldKind.ITEM.is_numeric
        assert not FieldKind.NOTES.is_numeric

    def test_row_kinds(self):
        assert FieldKind.ITEM.is_row_field
        assert not FieldKind.COMPANY_NAME.is_row_field

    def test_max_lengths(self):
        assert FieldKind.ITEM.max_length == 200
        assert FieldKind.AMOUNT_2024.max_length == 20
        assert FieldKind.COMPANY_NAME.max_length == 100
        assert FieldKind.ABN.max_length == 20
        assert FieldKind.NOTES.max_length == 10000

    def test_sanitize_per_kind(self):
        assert FieldKind.AMOUNT_2025.sanitize("$1,500abc") == "1,500"
        assert FieldKind.ITEM.sanitize("<b>Sales</b>") == "Sales"
        assert FieldKind.ABN.sanitize("51 824 abc") == "51 824 "

    def test_to_editable_only_strips_numbers(self):
        assert FieldKind.AMOUNT_2025.to_editable("$1,500") == "1500"
        assert FieldKind.ITEM.to_editable("Sales revenue, net") == "Sales revenue, net"


class TestReconciler:
    """Test the display / editing / committed-pending transitions."""

    def test_round_trip_without_change_is_noop(self, symbol_fields):
        """Entering and leaving edit mode leaves the formatted value as it was."""
        before = symbol_fields.display_value(AMOUNT_KEY, 1234.0)
        symbol_fields.start_edit(AMOUNT_KEY)
        after = symbol_fields.end_edit(AMOUNT_KEY, 1234.0)

        assert before == "$1,234"
        assert after == before
        assert symbol_fields.display_value(AMOUNT_KEY, 1234.0) == before
        assert symbol_fields.state(AMOUNT_KEY).phase is FieldPhase.DISPLAY

    def test_start_edit_enters_editing(self, symbol_fields):
        state = symbol_fields.start_edit(AMOUNT_KEY)
        assert state.phase is FieldPhase.EDITING
        assert state.pending is None

    def test_accepted_numeric_change(self, symbol_fields):
        symbol_fields.start_edit(AMOUNT_KEY)
        outcome = symbol_fields.value_changed(AMOUNT_KEY, "1,500abc")

        assert outcome.accepted
        assert outcome.value == 1500.0
        assert symbol_fields.state(AMOUNT_KEY).phase is FieldPhase.COMMITTED_PENDING
        assert symbol_fields.display_value(AMOUNT_KEY, 1500.0) == "1,500"

    def test_end_edit_reformats_for_mode(self, symbol_fields, plain_fields):
        symbol_fields.start_edit(AMOUNT_KEY)
        symbol_fields.value_changed(AMOUNT_KEY, "1500")
        assert symbol_fields.end_edit(AMOUNT_KEY, 1500.0) == "$1,500"

        plain_fields.start_edit(AMOUNT_KEY)
        plain_fields.value_changed(AMOUNT_KEY, "-2500")
        assert plain_fields.end_edit(AMOUNT_KEY, -2500.0) == "(2,500)"

    def test_rejected_empty_edit_reverts(self, symbol_fields):
        symbol_fields.start_edit(AMOUNT_KEY)
        outcome = symbol_fields.value_changed(AMOUNT_KEY, "abc")

        assert not outcome.accepted
        assert outcome.value is None
        assert symbol_fields.state(AMOUNT_KEY).phase is FieldPhase.EDITING
        assert symbol_fields.display_value(AMOUNT_KEY, 1234.0) == ""
        assert symbol_fields.end_edit(AMOUNT_KEY, 1234.0) == "$1,234"
        assert symbol_fields.display_value(AMOUNT_KEY, 1234.0) == "$1,234"

    def test_too_long_amount_rejected(self, symbol_fields):
        outcome = symbol_fields.value_changed(AMOUNT_KEY, "1" * 21)
        assert not outcome.accepted

    def test_unparseable_accepted_amount_commits_zero(self, symbol_fields):
        outcome = symbol_fields.value_changed(AMOUNT_KEY, "(,")
        assert outcome.accepted
        assert outcome.value == 0.0
        assert symbol_fields.end_edit(AMOUNT_KEY, 0.0) == "$0"

    def test_resuming_edit_strips_decoration(self, symbol_fields):
        symbol_fields.value_changed(AMOUNT_KEY, "1,500")
        symbol_fields.start_edit(AMOUNT_KEY)
        assert symbol_fields.display_value(AMOUNT_KEY, 1500.0) == "1500"

    def test_text_field_keeps_sanitized_text(self, symbol_fields):
        symbol_fields.start_edit(LABEL_KEY)
        outcome = symbol_fields.value_changed(LABEL_KEY, "<b>Sales</b> revenue")

        assert outcome.accepted
        assert outcome.value == "Sales revenue"
        assert symbol_fields.end_edit(LABEL_KEY, "Sales revenue") == "Sales revenue"

    def test_resuming_text_edit_keeps_spaces(self, symbol_fields):
        symbol_fields.value_changed(LABEL_KEY, "Sales revenue, net")
        symbol_fields.start_edit(LABEL_KEY)
        assert symbol_fields.display_value(LABEL_KEY, "Old") == "Sales revenue, net"

    def test_script_only_label_rejected(self, symbol_fields):
        outcome = symbol_fields.value_changed(LABEL_KEY, "<script>alert(1)</script>")
        assert not outcome.accepted
        assert symbol_fields.end_edit(LABEL_KEY, "Sales") == "Sales"

    def test_fields_are_independent(self, symbol_fields):
        other = (1, FieldKind.AMOUNT_2025)
        symbol_fields.value_changed(AMOUNT_KEY, "10")
        assert symbol_fields.display_value(other, 99.0) == "$99"

    def test_reset(self, symbol_fields):
        symbol_fields.value_changed(AMOUNT_KEY, "10")
        symbol_fields.reset()
        assert symbol_fields.display_value(AMOUNT_KEY, 5.0) == "$5"
