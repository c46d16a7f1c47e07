from pydantic_settings import BaseSettings
from pydantic import field_validator
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Remote notifications API
    NOTIFICATIONS_API_URL: str = "http://localhost:8000"
    NOTIFICATIONS_HTTP_TIMEOUT: float = 10.0

    @field_validator('NOTIFICATIONS_API_URL', mode='before')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Endpoint paths are joined with a leading slash."""
        if v and v.endswith('/'):
            return v.rstrip('/')
        return v

    # Local cache
    NOTIFICATIONS_STORAGE_KEY: str = "notifications"
    NOTIFICATIONS_FETCH_DEBOUNCE_MS: int = 3000

    @field_validator('NOTIFICATIONS_FETCH_DEBOUNCE_MS')
    @classmethod
    def validate_debounce(cls, v: int) -> int:
        if v < 0:
            raise ValueError("NOTIFICATIONS_FETCH_DEBOUNCE_MS must be >= 0")
        return v

    # Redis (durable store); in-memory store is used when unset
    REDIS_URL: str | None = None

    # Error tracking
    SENTRY_DSN: str | None = None

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    VERSION: str = "0.1.0"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
