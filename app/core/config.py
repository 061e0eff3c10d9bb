# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Core configuration — all env-driven.
Single source of truth for every tunable parameter.
"""

import os


class Settings:
    """Application settings loaded from environment variables."""

    SERVICE_NAME: str = os.getenv("SERVICE_NAME", "member-directory")
    SERVICE_VERSION: str = os.getenv("SERVICE_VERSION", "1.0.0")
    SERVICE_PORT: int = int(os.getenv("SERVICE_PORT", "3001"))

    # Empty URL selects the in-process store.
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")
    POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "10"))
    MAX_OVERFLOW: int = int(os.getenv("DB_MAX_OVERFLOW", "5"))
    POOL_RECYCLE: int = int(os.getenv("DB_POOL_RECYCLE", "300"))
    SEED_FILE: str = os.getenv("SEED_FILE", "")

    DEFAULT_PAGE_LIMIT: int = int(os.getenv("DEFAULT_PAGE_LIMIT", "20"))
    MAX_PAGE_LIMIT: int = int(os.getenv("MAX_PAGE_LIMIT", "200"))
    STATS_TOP_N: int = int(os.getenv("STATS_TOP_N", "10"))

    SENDGRID_API_KEY: str = os.getenv("SENDGRID_API_KEY", "")
    SENDGRID_API_URL: str = os.getenv(
        "SENDGRID_API_URL", "https://api.sendgrid.com/v3/mail/send"
    )
    EMAIL_FROM: str = os.getenv("EMAIL_FROM", "noreply@example.org")
    EMAIL_FROM_NAME: str = os.getenv("EMAIL_FROM_NAME", "NAAM")
    EMAIL_SUBJECT_PREFIX: str = os.getenv(
        "EMAIL_SUBJECT_PREFIX", "NAAM - A New Event Has Been Posted - "
    )
    EMAIL_TIMEOUT: float = float(os.getenv("EMAIL_TIMEOUT", "10.0"))

    CORS_ORIGINS: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
