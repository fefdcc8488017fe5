"""
Core configuration module using Pydantic Settings.
Supports environment variables and .env files.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow"
    )

    # Application
    app_name: str = Field(default="Spare Parts Inventory", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")

    # Database
    database_url: str = Field(
        default="sqlite:///./data/spare-parts.db",
        alias="DATABASE_URL"
    )
    db_echo: bool = Field(default=False, alias="DB_ECHO")

    # Sessions
    session_ttl_days: int = Field(default=7, alias="SESSION_TTL_DAYS")

    # Inventory
    default_min_quantity: int = Field(default=5, alias="DEFAULT_MIN_QUANTITY")
    default_page_size: int = Field(default=20, alias="DEFAULT_PAGE_SIZE")
    activity_page_size: int = Field(default=50, alias="ACTIVITY_PAGE_SIZE")
    recent_activity_limit: int = Field(default=20, alias="RECENT_ACTIVITY_LIMIT")
    seed_demo_data: bool = Field(default=True, alias="SEED_DEMO_DATA")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_dir: str = Field(default="./logs", alias="LOG_DIR")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return settings
