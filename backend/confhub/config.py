"""Application configuration via environment variables."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """App settings loaded from .env or environment."""

    DATABASE_URL: str = "sqlite:///./confhub.db"
    CORS_ORIGINS: str = "http://localhost:5173"
    LOG_LEVEL: str = "INFO"
    CONFERENCE_TIMEZONE: str = "UTC"  # IANA tz used to interpret event date/time
    NOTIFICATION_FEED_LIMIT: int = 50
    OUTBOX_MAX_ATTEMPTS: int = 5
    OUTBOX_BATCH_SIZE: int = 100

    model_config = SettingsConfigDict(env_file=".env")


settings = Settings()
