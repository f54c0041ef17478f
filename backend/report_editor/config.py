"""Configuration settings for the report editor."""
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent
ROOT_DIR = BASE_DIR.parent.parent

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=str((ROOT_DIR / ".env").resolve()),
        case_sensitive=False,
    )

    app_name: str = "AASB Report Editor API"
    app_version: str = "1.0.0"
    app_description: str = "Preview and edit generated AASB financial reports"

    # API configuration
    api_version: str = "v1"
    debug: bool = False
    log_level: str = Field(default="info", description="Log level handed to uvicorn")

    # CORS configuration
    cors_origins: List[str] = Field(default_factory=lambda: DEFAULT_CORS_ORIGINS.copy())
    cors_origin_regex: str | None = Field(default=None)
    cors_allow_all: bool = Field(default=False)

    # Editable field limits (characters)
    max_input_length: int = Field(default=1000, ge=1)
    max_label_length: int = Field(default=200, ge=1)
    max_amount_length: int = Field(default=20, ge=1)
    max_company_name_length: int = Field(default=100, ge=1)
    max_abn_length: int = Field(default=20, ge=1)
    max_notes_length: int = Field(
        default=10000,
        ge=1,
        description="Maximum length of the notes to the financial statements",
    )

    # In-memory report sessions
    max_sessions: int = Field(
        default=100,
        ge=1,
        le=10000,
        description="Oldest sessions are evicted once this many are open",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
