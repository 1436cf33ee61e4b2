"""Application configuration loaded from environment variables"""

import logging
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    app_name: str = "Membership Portal API"
    debug: bool = False
    environment: str = "development"  # "development" or "production"
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Record store
    database_path: str = "./data/portal.json"  # ":memory:" keeps everything in-process
    seed_defaults: bool = True
    default_admin_email: str = "admin@ran.org.ng"
    default_admin_password: str = "Admin@123"
    default_member_password: str = "Password@123"

    # Membership lifecycle
    membership_years: int = 1
    expiry_warning_days: int = 30
    reset_token_ttl_minutes: int = 60

    # Storage ceilings (bytes)
    session_max_bytes: int = 512 * 1024
    max_document_bytes: int = 5 * 1024 * 1024
    max_receipt_bytes: int = 2 * 1024 * 1024

    # API facade
    api_mode: str = "mock"  # "mock" (local record store) or "live" (remote HTTP)
    api_base_url: str = "http://localhost:5000/api"
    http_timeout_seconds: float = 30.0
    mock_latency_ms: int = 0
    poll_interval_seconds: float = 10.0

    # Outgoing email (SMTP)
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    email_from: Optional[str] = None
    email_from_name: str = "Membership Secretariat"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def email_configured(self) -> bool:
        return bool(self.smtp_host and self.smtp_username and self.smtp_password and self.email_from)


def validate_production_settings(settings: Settings) -> list:
    """Validate that all required settings are configured for production"""
    errors = []

    if settings.default_admin_password == "Admin@123":
        errors.append("DEFAULT_ADMIN_PASSWORD must be changed from default value")

    if settings.database_path == ":memory:":
        errors.append("DATABASE_PATH must point to a file in production")

    if not settings.email_configured:
        errors.append("SMTP_HOST, SMTP_USERNAME, SMTP_PASSWORD and EMAIL_FROM are required to send email")

    return errors


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    base_settings = Settings()

    if base_settings.environment == "production":
        errors = validate_production_settings(base_settings)
        if errors:
            for error in errors:
                logger.warning(f"Production config warning: {error}")

    return base_settings


# Convenience access
settings = get_settings()
