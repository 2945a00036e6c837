"""Configuration settings for the booking core service."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with Pydantic validation."""

    # Storage settings
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding one JSON file per collection"
    )

    lock_retry_delay_ms: int = Field(
        default=20,
        ge=1,
        description="Sleep between lock acquisition attempts in milliseconds"
    )

    lock_max_retries: int = Field(
        default=250,
        ge=1,
        description="Lock acquisition attempts before giving up (250 x 20ms = 5s)"
    )

    # Pricing settings
    default_currency: str = Field(
        default="EUR",
        pattern=r"^[A-Z]{3}$",
        description="ISO 4217 currency used for quotes"
    )

    client_price_tolerance: float = Field(
        default=5,
        ge=0,
        description="Accepted absolute difference between server and client totals"
    )

    reject_price_mismatch: bool = Field(
        default=False,
        description="Reject booking creation when the client total is out of tolerance"
    )

    # Session settings
    session_ttl_seconds: int = Field(
        default=7 * 24 * 60 * 60,
        ge=60,
        description="Lifetime of an admin session token"
    )

    session_cleanup_interval_seconds: int = Field(
        default=300,
        ge=1,
        description="How often expired sessions are purged"
    )

    # Environment settings
    environment: str = Field(
        default="development",
        description="Application environment"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Application log level"
    )

    otlp_endpoint: str | None = Field(
        default=None,
        description="OTLP collector endpoint; tracing export is disabled when unset"
    )

    # CORS settings
    cors_origins: list[str] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins"
    )

    # Server settings
    host: str = Field(
        default="0.0.0.0",
        description="Server host"
    )

    port: int = Field(
        default=8000,
        description="Server port"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        valid_environments = ["development", "staging", "production"]
        if v.lower() not in valid_environments:
            raise ValueError(f"Environment must be one of: {valid_environments}")
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level value."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    @property
    def debug(self) -> bool:
        """Return True if in development mode."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Return True if in production mode."""
        return self.environment == "production"

    @property
    def lock_retry_delay_seconds(self) -> float:
        return self.lock_retry_delay_ms / 1000

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Global settings instance
settings = Settings()
