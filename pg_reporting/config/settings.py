"""
Environment configuration for the PG reporting engine.
Uses Pydantic's settings management to handle environment variables
with proper type validation and default values.
"""

from typing import Any, Dict, Optional
from pathlib import Path
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path('.') / '.env'
load_dotenv(dotenv_path=env_path)


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application configuration
    APP_NAME: str = Field(default="PG Reporting Engine", alias="PROJECT_NAME")
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    # Database configuration - support both individual fields and DATABASE_URL
    DATABASE_URL: Optional[str] = None
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_NAME: str = "pg_reporting"
    DB_POOL_SIZE: int = 10
    DB_POOL_OVERFLOW: int = 5
    DB_ECHO: bool = False
    DB_CONNECT_ARGS: Dict[str, Any] = {}

    # Reporting
    REPORT_TIMEZONE: str = "Asia/Kolkata"
    PAYMENT_GRACE_DAYS: int = 5

    # Scheduled cache jobs (crontab expressions, evaluated in REPORT_TIMEZONE)
    WEEKLY_CACHE_CRON: str = "0 2 * * mon"
    MONTHLY_CACHE_CRON: str = "0 3 1 * *"
    ENABLE_CACHE_JOBS: bool = True

    # Monitoring and logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    SENTRY_DSN: Optional[str] = None

    @field_validator('LOG_LEVEL', mode='before')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept log levels in any case"""
        return str(v).upper()

    @field_validator('PAYMENT_GRACE_DAYS')
    @classmethod
    def validate_grace_days(cls, v: int) -> int:
        if v < 0:
            raise ValueError("PAYMENT_GRACE_DAYS must not be negative")
        return v

    def get_database_url(self) -> str:
        """Construct async database URL from components or use provided URL"""
        if self.DATABASE_URL:
            url = self.DATABASE_URL
            # Plain postgres URLs are upgraded to the asyncpg driver
            if url.startswith("postgresql://"):
                url = "postgresql+asyncpg://" + url[len("postgresql://"):]
            return url

        return (
            f"postgresql+asyncpg://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.ENVIRONMENT == "production"

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.ENVIRONMENT == "development"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
