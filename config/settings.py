"""Configuration management using pydantic-settings."""
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = "sqlite:///./catalog.db"

    # Query cache TTLs (milliseconds)
    apps_cache_ttl_ms: int = 60000
    users_cache_ttl_ms: int = 60000

    # Accounts
    # Admin emails skip sign-up verification and always carry the admin role
    admin_emails: List[str] = []
    allowed_email_domains: List[str] = []

    # Tokens
    jwt_secret: str = "change-me-please"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 43200  # 30 days

    # Email verification
    verification_ttl_seconds: int = 3600
    public_base_url: str = "http://localhost:8000"

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
