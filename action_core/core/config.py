"""Application configuration using pydantic-settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Decision core settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Configuration
    log_level: str = "INFO"
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Format string passed to logging.basicConfig",
    )
    debug: bool = False

    # Merge Node Configuration
    merge_default_timeout_ms: int = Field(
        default=30000,
        ge=0,
        description="Timeout armed for merge nodes that do not set one",
    )

    # Code Node Sandbox Defaults
    sandbox_default_memory_limit_mb: int = Field(
        default=128,
        ge=0,
        le=1024,
        description="Memory limit for new sandbox configurations (0 = unlimited)",
    )
    sandbox_default_time_limit_ms: int = Field(
        default=5000,
        ge=0,
        le=60000,
        description="Time limit for new sandbox configurations (0 = unlimited)",
    )


# Global settings instance
settings = Settings()
