"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "partsync.db"

    # SQLite settings
    pool_size: int = 5
    busy_timeout: int = 30000  # ms

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]


class MrpSettings(BaseSettings):
    """MRP planning configuration."""

    model_config = SettingsConfigDict(env_prefix="MRP_")

    # Sales orders whose lines count as demand
    open_sales_order_statuses: list[str] = ["RECEIVED", "CONFIRMED", "IN_PROGRESS"]
    # Purchase orders whose unreceived quantity counts as supply
    incoming_order_statuses: list[str] = ["APPROVED", "ORDERED", "PARTIAL"]

    # Urgency thresholds in days until the suggested order date
    high_days: int = 7
    medium_days: int = 14

    default_supplier_lead_time_days: int = 7
    picking_high_priority_days: int = 3


class NotificationSettings(BaseSettings):
    """Outbound notification configuration."""

    model_config = SettingsConfigDict(env_prefix="NOTIFY_")

    webhook_url: str | None = None
    timeout: float = 5.0

    # Retry settings
    max_retries: int = 3
    retry_delay: float = 0.5


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "PartSync"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    storage: StorageSettings = Field(default_factory=StorageSettings)
    api: APISettings = Field(default_factory=APISettings)
    mrp: MrpSettings = Field(default_factory=MrpSettings)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)

    @field_validator("storage", mode="before")
    @classmethod
    def ensure_data_dir(cls, v: Any) -> StorageSettings:
        if isinstance(v, dict):
            settings = StorageSettings(**v)
        else:
            settings = v or StorageSettings()
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        return settings


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
