"""Exceptions raised by the report editing services."""
from typing import Optional


class ReportEditorError(Exception):
    """Base exception for all report editor errors."""
    pass


class ReportNotFoundError(ReportEditorError):
    """Raised when a report session id is unknown or has been evicted."""

    def __init__(self, report_id: str):
        super().__init__(f"Report {report_id} not found")
        self.report_id = report_id


class FieldAddressError(ReportEditorError):
    """Raised when an edit event names a section, row or field that does not exist."""

    def __init__(self, message: str, section: Optional[str] = None, row: Optional[int] = None):
        """
        Initialize address error.

        Args:
            message: Error message
            section: Section named by the event, if any
            row: Row index named by the event, if any
        """
        super().__init__(message)
        self.section = section
        self.row = row
