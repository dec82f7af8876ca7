from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from typing import Any, ClassVar
import json
from pathlib import Path
import os


class Settings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore", case_sensitive=True)

    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Ticketing Chat API"

    # Database URL
    # Use an absolute path so running the app from different directories
    # (e.g., repo root or backend/) always resolves the same DB file.
    BASE_DIR: ClassVar[Path] = Path(__file__).resolve().parents[2]
    SQLALCHEMY_DATABASE_URL: str = f"sqlite:///{BASE_DIR / 'ticketing.db'}"

    # CORS origins
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    # Gemini intent extraction. An empty key disables the remote path and the
    # rule-based parser handles every message.
    GOOGLE_GENAI_API_KEY: str = ""
    GOOGLE_GENAI_MODEL: str = "gemini-2.5-flash"
    GOOGLE_GENAI_TIMEOUT_SECONDS: float = 6.0

    LOG_LEVEL: str = "INFO"

    @field_validator("CORS_ORIGINS", mode="before")
    def split_origins(cls, v: Any) -> list[str]:
        """Parse comma-separated or JSON list of origins from environment."""
        if isinstance(v, str):
            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return parsed
            except json.JSONDecodeError:
                pass
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @field_validator("GOOGLE_GENAI_API_KEY", "GOOGLE_GENAI_MODEL", "LOG_LEVEL", mode="before")
    def strip_whitespace(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("GOOGLE_GENAI_TIMEOUT_SECONDS")
    def positive_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("GOOGLE_GENAI_TIMEOUT_SECONDS must be positive")
        return v


def load_settings() -> "Settings":
    return Settings(_env_file=os.getenv("ENV_FILE", str(Path(__file__).resolve().parents[3] / ".env")))


settings = load_settings()
