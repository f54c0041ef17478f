"""In-memory report sessions held by the API while a report is being reviewed."""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Dict, List
from uuid import uuid4

from report_editor.config import get_settings
from report_editor.models.schemas import FinancialItem, ReportData, ReportSection
from report_editor.services.report_composer import ComparisonTable, CompliancePreview, section_items
from report_editor.services.report_exceptions import ReportNotFoundError

logger = logging.getLogger(__name__)


@dataclass
class ReportSession:
    """
    One open report: the preview, the comparison tables opened on it, and
    their field state. Comparison tables and the preview share one report;
    an edit in either is copied into the other.
    """

    report_id: str
    preview: CompliancePreview
    comparisons: Dict[ReportSection, ComparisonTable] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def open(cls, data: ReportData) -> "ReportSession":
        session = cls(report_id=str(uuid4()), preview=CompliancePreview(data))
        session.preview.on_data_change = session._sync_comparisons
        return session

    @property
    def data(self) -> ReportData:
        return self.preview.data

    def comparison(self, section: ReportSection) -> ComparisonTable:
        table = self.comparisons.get(section)
        if table is None:
            table = ComparisonTable(
                section_items(self.data, section),
                on_items_change=lambda items: self._apply_comparison_items(section, items),
                section=section,
                editing=self.preview.editing,
                busy=self.preview.busy,
            )
            self.comparisons[section] = table
        return table

    def set_mode(self, editing: bool | None = None, busy: bool | None = None) -> None:
        self.preview.set_mode(editing=editing, busy=busy)
        for table in self.comparisons.values():
            table.set_mode(editing=editing, busy=busy)

    def replace(self, data: ReportData) -> None:
        """Swap in a regenerated report."""
        self.preview.replace_data(data)
        for section, table in self.comparisons.items():
            table.replace_items(section_items(data, section))

    def _apply_comparison_items(self, section: ReportSection, items: List[FinancialItem]) -> None:
        self.preview.set_section_items(section, items)

    def _sync_comparisons(self, partial: Dict[str, Any]) -> None:
        for section, table in self.comparisons.items():
            table.items = section_items(self.data, section)


class ReportSessionRegistry:
    """Open sessions keyed by report id; the oldest is evicted past ``max_sessions``."""

    def __init__(self, max_sessions: int):
        self.max_sessions = max_sessions
        self._sessions: "OrderedDict[str, ReportSession]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, data: ReportData) -> ReportSession:
        session = ReportSession.open(data)
        self._sessions[session.report_id] = session
        while len(self._sessions) > self.max_sessions:
            evicted_id, _ = self._sessions.popitem(last=False)
            logger.info("Evicted report session %s", evicted_id)
        logger.info("Opened report session %s (%d open)", session.report_id, len(self._sessions))
        return session

    def get(self, report_id: str) -> ReportSession:
        session = self._sessions.get(report_id)
        if session is None:
            raise ReportNotFoundError(report_id)
        self._sessions.move_to_end(report_id)
        return session

    def delete(self, report_id: str) -> None:
        if self._sessions.pop(report_id, None) is None:
            raise ReportNotFoundError(report_id)
        logger.info("Closed report session %s", report_id)

    def clear(self) -> None:
        self._sessions.clear()


@lru_cache()
def get_session_registry() -> ReportSessionRegistry:
    """Get the process-wide session registry."""
    return ReportSessionRegistry(max_sessions=get_settings().max_sessions)
