"""
Application Configuration - settings loaded from the environment
"""

from typing import List
from pathlib import Path
from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Gemini API
    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("gemini_api_key", "GEMINI_API_KEY", "API_KEY"),
    )
    gemini_api_base_url: str = "https://generativelanguage.googleapis.com"
    text_model: str = "gemini-2.5-flash"
    image_model: str = "imagen-4.0-generate-001"
    video_model: str = "veo-2.0-generate-001"
    request_timeout: float = 60.0

    # Video polling
    video_poll_interval: float = 10.0
    # 0 disables the overall deadline
    video_poll_timeout: float = 1800.0

    # Storage
    state_file: Path = Path("./storage/view_state.json")
    media_dir: Path = Path("./storage/media")

    # Logging
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: List[str] = Field(default=["*"])

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.state_file.parent.mkdir(parents=True, exist_ok=True)
        self.media_dir.mkdir(parents=True, exist_ok=True)


@lru_cache()
def get_settings() -> Settings:
    """Return the settings singleton"""
    return Settings()
