from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    database_url: str
    sql_echo: bool = False

    # CORS / links back to the booking frontend
    frontend_url: str = "http://localhost:5173"

    # Auth (structure only, sessions are handled upstream)
    secret_key: str = "change-me-in-production"

    # Logging
    log_level: str = "INFO"

    # Flask environment
    flask_env: str = "development"

    def is_dev(self) -> bool:
        """True when running in development mode."""
        return (self.flask_env or "").strip().lower() == "development"

    def is_sqlite(self) -> bool:
        return str(self.database_url).strip().lower().startswith("sqlite")

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: Optional[str]) -> str:
        raw = (value or "").strip().upper()
        if raw not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            return "INFO"
        return raw


settings = Settings()
