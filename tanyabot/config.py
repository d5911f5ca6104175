"""Application configuration."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven settings validated at startup."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    telegram_bot_token: str = Field(..., alias="TELEGRAM_BOT_TOKEN")
    google_api_key: str = Field(..., alias="GOOGLE_API_KEY")
    gemini_text_model: str = Field(default="gemini-2.0-flash", alias="GEMINI_TEXT_MODEL")
    gemini_image_model: str = Field(
        default="gemini-2.0-flash-preview-image-generation",
        alias="GEMINI_IMAGE_MODEL",
    )
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        alias="GEMINI_BASE_URL",
    )
    persona_path: Path = Field(default=Path("persona.txt"), alias="PERSONA_PATH")
    request_timeout_seconds: float = Field(default=60.0, alias="REQUEST_TIMEOUT_SECONDS")
    # Author/channel lines shown above the command list in /help.
    help_header: str = Field(default="", alias="HELP_HEADER")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")


def load_settings() -> Settings:
    """Load and validate settings."""

    return Settings()
