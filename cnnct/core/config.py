"""Application configuration via environment variables."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or .env file."""
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="CNNCT_"
    )

    # Application
    app_name: str = "CNNCT"
    debug: bool = False
    log_to_file: bool = True

    # Database
    database_url: str = "sqlite:///./cnnct.db"

    # Scheduling
    default_timezone: str = "UTC"
    default_duration_minutes: int = 60

    # Identity matching
    match_threshold: float = 0.9  # similarity strictly above this is a match
    ambiguous_threshold: float = 0.7  # lower edge of the "maybe" band

    # Session context storage
    session_file: Path = Path.home() / ".cnnct" / "session.json"


settings = Settings()
