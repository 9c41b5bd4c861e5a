"""Configuration management for trustgate."""

from __future__ import annotations

from functools import lru_cache
from typing import Self

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_parse_none_str="",
    )

    # Application
    environment: str = Field(default="production", description="Environment name")
    log_level: str = Field(default="INFO", description="Logging level")

    # Logging Configuration
    log_to_file: bool = Field(default=False, description="Enable file-based logging")
    log_directory: str = Field(default="logs", description="Directory for log files")
    log_file_max_bytes: int = Field(
        default=10485760,  # 10MB
        description="Max size per log file before rotation",
    )
    log_file_backup_count: int = Field(
        default=5, description="Number of rotated log files to keep"
    )
    log_file_prefix: str = Field(default="trustgate", description="Prefix for log file names")

    # HTTP API
    api_host: str = Field(
        default="0.0.0.0",  # nosec B104 - Intentional for Docker container
        description="Bind address for the trust API",
    )
    api_port: int = Field(default=8080, description="Port for the trust API")
    allowed_origins_str: str | None = Field(
        default=None,
        alias="ALLOWED_ORIGINS",
        description="Origins allowed to call the API from a browser (comma-separated)",
    )
    block_bots: bool = Field(
        default=True, description="Reject evaluate calls whose verdict is a bot with HTTP 403"
    )

    # Rate limiting for the evaluation endpoints
    rate_limit_max_requests: int = Field(
        default=30, description="Requests allowed per client per window"
    )
    rate_limit_window_seconds: float = Field(
        default=60.0, description="Length of the rate-limit window in seconds"
    )

    # Trust scoring policy. Empirical defaults; tune against real traffic.
    trust_weight_behavioral: float = Field(default=0.30, description="Behavioral weight")
    trust_weight_browser: float = Field(default=0.35, description="Browser fingerprint weight")
    trust_weight_honeypot: float = Field(default=0.20, description="Honeypot weight")
    trust_weight_request: float = Field(default=0.15, description="Request metadata weight")
    trust_threshold_definite: int = Field(default=80, description="Score for definite_bot")
    trust_threshold_likely: int = Field(default=60, description="Score for likely_bot")
    trust_threshold_suspicious: int = Field(default=40, description="Score for suspicious")
    trust_quick_check_threshold: int = Field(
        default=70, description="Behavioral score that flags a bot in quick checks"
    )

    @property
    def allowed_origins(self) -> list[str]:
        """Parse and return allowed origins as a list."""
        if self.allowed_origins_str is None:
            return []
        return [o.strip() for o in self.allowed_origins_str.split(",") if o.strip()]

    @field_validator(
        "trust_weight_behavioral",
        "trust_weight_browser",
        "trust_weight_honeypot",
        "trust_weight_request",
    )
    @classmethod
    def validate_weight(cls, v: float) -> float:
        """Validate weights are between 0 and 1."""
        if not 0 <= v <= 1:
            raise ValueError(f"Weight must be between 0 and 1, got: {v}")
        return v

    @field_validator(
        "trust_threshold_definite",
        "trust_threshold_likely",
        "trust_threshold_suspicious",
        "trust_quick_check_threshold",
    )
    @classmethod
    def validate_threshold(cls, v: int) -> int:
        """Validate score thresholds are between 0 and 100."""
        if not 0 <= v <= 100:
            raise ValueError(f"Threshold must be between 0 and 100, got: {v}")
        return v

    @field_validator("rate_limit_max_requests")
    @classmethod
    def validate_rate_limit(cls, v: int) -> int:
        """Validate the rate limit allows at least one request."""
        if v < 1:
            raise ValueError(f"rate_limit_max_requests must be at least 1, got: {v}")
        return v

    @model_validator(mode="after")
    def validate_trust_policy(self) -> Self:
        """Validate weights sum to 1 and thresholds are ordered."""
        total = (
            self.trust_weight_behavioral
            + self.trust_weight_browser
            + self.trust_weight_honeypot
            + self.trust_weight_request
        )
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"trust weights must sum to 1.0, got: {total:.4f}")
        if not (
            self.trust_threshold_suspicious
            < self.trust_threshold_likely
            < self.trust_threshold_definite
        ):
            raise ValueError("trust thresholds must satisfy suspicious < likely < definite")
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"

    @property
    def log_file_path(self) -> str:
        """Get the full log file path."""
        return f"{self.log_directory}/{self.log_file_prefix}.log"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
