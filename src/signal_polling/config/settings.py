"""
Application settings using Pydantic Settings

Handles environment variables and signal polling configuration.
"""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Server Configuration
    host: str = Field(default="0.0.0.0", alias="HOST", description="Server host")
    port: int = Field(default=3001, alias="PORT", description="Server port")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL", description="Logging level")

    # Environment Settings
    environment: str = Field(default="development", alias="NODE_ENV")
    enable_remote_calls: bool = Field(default=True, alias="ENABLE_DATABASE_CONNECTIONS", description="Use the signals API instead of mock data")
    auto_start_polling: bool = Field(default=True, alias="AUTO_START_POLLING", description="Auto-start signal polling when a license key is configured")
    license_key: Optional[str] = Field(default=None, alias="LICENSE_KEY", description="License key polled on startup")

    # Signals API
    signals_api_url: str = Field(default="http://localhost:8081", alias="SIGNALS_API_URL", description="Base URL of the signals API")
    request_timeout_seconds: float = Field(default=10.0, alias="SIGNALS_REQUEST_TIMEOUT_SECONDS", description="Signals API request timeout in seconds")

    # Polling Configuration
    polling_interval_seconds: float = Field(default=30, alias="SIGNAL_POLLING_INTERVAL_SECONDS", description="Signal polling interval in seconds")
    max_consecutive_errors: int = Field(default=3, alias="MAX_CONSECUTIVE_ERRORS", description="Consecutive failures before polling is suspended")
    error_cooldown_seconds: float = Field(default=300, alias="ERROR_COOLDOWN_SECONDS", description="Suspension cooldown before polling resumes")
    initial_lookback_seconds: float = Field(default=3600, alias="INITIAL_LOOKBACK_SECONDS", description="Fetch window used when no poll has succeeded yet")

    # EA resolution cache
    ea_cache_ttl_seconds: float = Field(default=300, alias="EA_CACHE_TTL_SECONDS", description="License to EA cache TTL in seconds")
    ea_cache_max_size: int = Field(default=1000, alias="EA_CACHE_MAX_SIZE", description="Maximum cached license lookups")

    # Delivered signals kept for the control API
    inbox_max_size: int = Field(default=500, alias="SIGNAL_INBOX_MAX_SIZE", description="Recent signals/errors kept in memory")

    # Logging Configuration
    log_format: str = Field(default="json", alias="LOG_FORMAT", description="Log format (json or text)")
    log_file: Optional[str] = Field(default="./logs/combined.log", alias="LOG_FILE", description="Log file path")
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT", description="Number of backup log files to keep")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        populate_by_name = True
        extra = "ignore"


# Global settings instance
settings = Settings()
