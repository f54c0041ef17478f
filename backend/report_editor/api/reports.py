"""Report preview and editing endpoints."""
import logging

from fastapi import APIRouter, HTTPException, Response

from report_editor.models.schemas import (
    EditEvent,
    EditResponse,
    RenderedComparison,
    RenderedReport,
    ReportData,
    ReportModeUpdate,
    ReportSection,
    ReportSessionResponse,
)
from report_editor.services.report_composer import FieldEdit
from report_editor.services.report_exceptions import FieldAddressError, ReportNotFoundError
from report_editor.services.report_sessions import ReportSession, get_session_registry
from report_editor.services.sample_data import get_sample_report

logger = logging.getLogger(__name__)

router = APIRouter()

EDIT_ACTIONS = ("start", "change", "end")


def _get_session(report_id: str) -> ReportSession:
    try:
        return get_session_registry().get(report_id)
    except ReportNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


def _session_response(session: ReportSession) -> ReportSessionResponse:
    return ReportSessionResponse(report_id=session.report_id, report=session.preview.render())


@router.post("", response_model=ReportSessionResponse, status_code=201)
async def open_report(data: ReportData):
    """Open an editing session on a generated report."""
    return _session_response(get_session_registry().create(data))


@router.post("/sample", response_model=ReportSessionResponse, status_code=201)
async def open_sample_report():
    """Open an editing session on the bundled sample report."""
    return _session_response(get_session_registry().create(get_sample_report()))


@router.get("/{report_id}", response_model=RenderedReport)
async def get_report(report_id: str):
    """Render the AASB preview with derived totals and parsed notes."""
    return _get_session(report_id).preview.render()


@router.put("/{report_id}", response_model=RenderedReport)
async def replace_report(report_id: str, data: ReportData):
    """Replace the report wholesale, e.g. after regeneration."""
    session = _get_session(report_id)
    session.replace(data)
    logger.info("Replaced report data for session %s", report_id)
    return session.preview.render()


@router.get("/{report_id}/data", response_model=ReportData)
async def get_report_data(report_id: str):
    """Return the canonical report as it stands after accepted edits."""
    return _get_session(report_id).data


@router.delete("/{report_id}", status_code=204)
async def close_report(report_id: str):
    try:
        get_session_registry().delete(report_id)
    except ReportNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return Response(status_code=204)


@router.put("/{report_id}/mode", response_model=RenderedReport)
async def update_mode(report_id: str, update: ReportModeUpdate):
    """
    Toggle edit mode or the busy flag.

    ``busy`` mirrors the export collaborator's pending state; while it is
    set, edit events are ignored.
    """
    session = _get_session(report_id)
    session.set_mode(editing=update.editing, busy=update.busy)
    return session.preview.render()


@router.get("/{report_id}/comparison/{section}", response_model=RenderedComparison)
async def get_comparison(report_id: str, section: ReportSection):
    """Render the 2025/2024 comparison table for one section."""
    return _get_session(report_id).comparison(section).render()


def _dispatch(session: ReportSession, action: str, event: EditEvent) -> FieldEdit:
    if event.view == "comparison":
        if event.section is None:
            raise FieldAddressError("Comparison edits need a section", row=event.row)
        table = session.comparison(event.section)
        if action == "start":
            return table.start_edit(event.row, event.field)
        if action == "change":
            return table.value_changed(event.row, event.field, event.value)
        return table.end_edit(event.row, event.field)

    preview = session.preview
    if action == "start":
        return preview.start_edit(event.field, section=event.section, row=event.row)
    if action == "change":
        return preview.value_changed(event.field, event.value, section=event.section, row=event.row)
    return preview.end_edit(event.field, section=event.section, row=event.row)


@router.post("/{report_id}/edits/{action}", response_model=EditResponse)
async def handle_edit(report_id: str, action: str, event: EditEvent):
    """
    Deliver one edit event (start, change or end) to a field.

    Rejected and gated edits are not errors: the response reports
    ``accepted: false`` and the model keeps its last committed value.
    """
    if action not in EDIT_ACTIONS:
        raise HTTPException(status_code=404, detail=f"Unknown edit action: {action}")

    session = _get_session(report_id)
    try:
        edit = _dispatch(session, action, event)
    except FieldAddressError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return EditResponse(accepted=edit.accepted, phase=edit.phase, display_value=edit.display_value)
