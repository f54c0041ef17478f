"""FastAPI application hosting the report editor."""
import logging

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware

from report_editor.api import notes, reports
from report_editor.config import DEFAULT_CORS_ORIGINS, get_settings
from report_editor.models.schemas import ReportSection

logger = logging.getLogger(__name__)

settings = get_settings()
api_prefix = f"/api/{settings.api_version}"

app = FastAPI(
    title=settings.app_name,
    description=settings.app_description,
    version=settings.app_version,
    debug=settings.debug,
)


def _cors_options() -> dict:
    allowed_origins = settings.cors_origins or DEFAULT_CORS_ORIGINS.copy()
    if settings.cors_allow_all or "*" in allowed_origins:
        logger.info("CORS open to all origins; credentials disabled")
        return {"allow_origins": ["*"], "allow_origin_regex": None, "allow_credentials": False}
    return {
        "allow_origins": allowed_origins,
        "allow_origin_regex": settings.cors_origin_regex,
        "allow_credentials": True,
    }


app.add_middleware(
    CORSMiddleware,
    allow_methods=["*"],
    allow_headers=["*"],
    **_cors_options(),
)


@app.get("/")
async def root():
    """Service summary with the entry points a client needs."""
    return {
        "message": settings.app_name,
        "version": settings.app_version,
        "status": "running",
        "reports": f"{api_prefix}/reports",
        "sample_report": f"{api_prefix}/reports/sample",
        "sections": [section.value for section in ReportSection],
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/favicon.ico")
async def favicon():
    return Response(status_code=204)


app.include_router(reports.router, prefix=f"{api_prefix}/reports", tags=["reports"])
app.include_router(notes.router, prefix=api_prefix, tags=["notes"])
