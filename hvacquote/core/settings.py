# hvacquote/core/settings.py
import os
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # === General ===
    APP_NAME: str = "hvacquote"
    ENVIRONMENT: str = "local"  # local | development | production
    ALLOWED_ORIGINS: list[str] = ["http://localhost:5173", "http://localhost:8000"]

    # === Pricing ===
    PLATINUM_POLICY: str = Field(
        "additive", description="additive | multiplicative (platinum = silver x 1.25)"
    )

    # === Promo codes ===
    SEED_DEFAULT_PROMO_CODES: bool = True

    # === Quiz sessions ===
    QUIZ_MAX_SESSIONS: int = 1000
    QUIZ_SESSION_TTL_SECONDS: int = 1800

    # === Logging ===
    LOG_LEVEL: str = "INFO"

    # === Rate limiting (slowapi syntax) ===
    RATE_LIMIT_PROMO_LOOKUP: str = "60/minute"
    RATE_LIMIT_QUOTES: str = "120/minute"
    RATE_LIMIT_LEADS: str = "20/minute"
    RATE_LIMIT_QUIZ_SESSIONS: str = "30/minute"

    # === Observability ===
    METRICS_ENABLED: bool = True
    SENTRY_DSN: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton Settings instance with simple environment presets."""
    s = Settings()

    env = os.getenv("ENVIRONMENT", s.ENVIRONMENT).lower()
    if env == "production":
        s.LOG_LEVEL = "WARNING"
        s.RATE_LIMIT_PROMO_LOOKUP = "30/minute"
        s.RATE_LIMIT_LEADS = "10/minute"
        s.RATE_LIMIT_QUIZ_SESSIONS = "15/minute"
    elif env == "development":
        s.LOG_LEVEL = "DEBUG"
        s.RATE_LIMIT_PROMO_LOOKUP = "120/minute"
        s.RATE_LIMIT_QUOTES = "240/minute"

    return s


settings = get_settings()
