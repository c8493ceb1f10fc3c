from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()

PROJECT_ROOT = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    replicate_api_token: Optional[str] = Field(default=None)
    replicate_api_base_url: str = Field("https://api.replicate.com/v1")
    replicate_model_version: str = Field(
        "1e205ea73084bd17a0a3b43396e49ba0d6bc2e754e9283b2df49fad2dcf95755"
    )

    fallback_video_url: str = Field(
        "https://sample-videos.com/video321/mp4/720/big_buck_bunny_720p_1mb.mp4"
    )

    poll_interval_seconds: float = Field(3.5, gt=0)
    generation_timeout_seconds: float = Field(55.0, gt=0)
    poll_fetch_retries: int = Field(0, ge=0)
    http_timeout_seconds: float = Field(30.0, gt=0)

    frames_per_second: int = Field(8, gt=0)
    max_frames: int = Field(160, gt=0)

    frontend_dir: str = Field(str(PROJECT_ROOT / "frontend"))
    log_level: str = Field("INFO")

    app_host: str = Field("127.0.0.1")
    app_port: int = Field(8000)

    # JSON list in the environment, e.g. CORS_ALLOW_ORIGINS='["https://studio.example"]'
    cors_allow_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:8000", "http://127.0.0.1:8000"]
    )

    @field_validator("replicate_api_token", mode="before")
    @classmethod
    def blank_token_is_missing(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @field_validator("replicate_api_base_url", mode="before")
    @classmethod
    def normalize_base_url(cls, value: str) -> str:
        value = value or ""
        return value.rstrip("/")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return (value or "INFO").upper()

    @property
    def mock_mode(self) -> bool:
        return self.replicate_api_token is None


@lru_cache()
def get_settings() -> Settings:
    try:
        return Settings()
    except Exception as exc:
        raise RuntimeError("Failed to load application settings. Ensure your .env file is configured.") from exc


settings = get_settings()
