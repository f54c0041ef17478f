"""Stateless endpoints for notes parsing and input cleaning."""
from fastapi import APIRouter

from report_editor.models.schemas import (
    NotesParseRequest,
    NotesParseResponse,
    SanitizeRequest,
    SanitizeResponse,
)
from report_editor.services.markdown_blocks import note_anchors, parse_markdown_blocks
from report_editor.services.sanitization import filter_numeric_text, is_acceptable, sanitize_text

router = APIRouter()


@router.post("/notes/blocks", response_model=NotesParseResponse)
async def parse_notes(request: NotesParseRequest):
    """Parse notes text into headings, paragraphs and tables."""
    blocks = parse_markdown_blocks(request.text)
    return NotesParseResponse(blocks=blocks, anchors=sorted(note_anchors(blocks)))


@router.post("/sanitize", response_model=SanitizeResponse)
async def sanitize(request: SanitizeRequest):
    """Clean a piece of input the same way a field edit would."""
    cleaned = filter_numeric_text(request.text) if request.numeric else sanitize_text(request.text)
    return SanitizeResponse(text=cleaned, acceptable=is_acceptable(cleaned, request.max_length))
