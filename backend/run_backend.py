"""Helper script to run the report editor backend locally."""

from __future__ import annotations

import os
from pathlib import Path

import uvicorn

from report_editor.config import get_settings


def str_to_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off"}


def main() -> None:
    backend_dir = Path(__file__).resolve().parent
    os.chdir(backend_dir)

    settings = get_settings()
    host = os.getenv("BACKEND_HOST", "0.0.0.0")
    port = int(os.getenv("BACKEND_PORT", "8000"))
    reload = str_to_bool(os.getenv("BACKEND_RELOAD"), True)

    uvicorn.run(
        "report_editor.main:app",
        host=host,
        port=port,
        reload=reload,
        reload_dirs=[str(backend_dir / "report_editor")],
        app_dir=str(backend_dir),
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
