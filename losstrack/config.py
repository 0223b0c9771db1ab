"""Application configuration management."""
from decimal import Decimal
from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application
    app_name: str = Field(default="Loss Tracker", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")

    # Database
    db_url: str = Field(default="sqlite:///./data/losstrack.db", alias="DB_URL")
    db_echo: bool = Field(default=False, alias="DB_ECHO")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_dir: str = Field(default="logs", alias="LOG_DIR")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")

    # Files
    upload_dir: str = Field(default="./data/uploads", alias="UPLOAD_DIR")
    export_dir: str = Field(default="./data/exports", alias="EXPORT_DIR")

    # Import
    import_max_file_size_mb: int = Field(default=50, alias="IMPORT_MAX_FILE_SIZE_MB")
    import_progress_interval: int = Field(default=10, ge=1, alias="IMPORT_PROGRESS_INTERVAL")

    # Export
    export_max_quantity: Decimal = Field(default=Decimal("9999.99"), alias="EXPORT_MAX_QUANTITY")

    # Product lookup cache
    product_cache_ttl_seconds: int = Field(default=300, alias="PRODUCT_CACHE_TTL_SECONDS")

    # Security
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")

    @property
    def import_max_file_size(self) -> int:
        return self.import_max_file_size_mb * 1024 * 1024


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
