"""Application settings and configuration."""
import json
from functools import lru_cache
from typing import Optional
from urllib.parse import urlparse

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Tenant Console"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"  # development, staging, production

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Hosted backend (REST + RPC + auth)
    backend_url: str = "http://localhost:54321"
    backend_anon_key: str = ""
    backend_timeout: float = 30.0

    @field_validator("backend_url", mode="before")
    @classmethod
    def strip_backend_url(cls, v: str) -> str:
        """Drop trailing slashes so endpoint paths can be appended directly."""
        if isinstance(v, str):
            return v.strip().rstrip("/")
        return v

    # CORS - stored as str to prevent pydantic-settings auto-JSON-parse failures
    cors_origins: str = "http://localhost:3000,http://localhost:8000"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list, stripping trailing slashes."""
        v = self.cors_origins.strip()
        if v.startswith("["):
            try:
                origins = json.loads(v)
                return [o.rstrip("/") for o in origins]
            except json.JSONDecodeError:
                pass
        return [origin.strip().strip("'\"").rstrip("/") for origin in v.split(",") if origin.strip()]

    # Frontend URL (password reset redirects)
    frontend_url: str = "http://localhost:3000"

    # Sentry
    sentry_dsn: Optional[str] = None

    # Mock webhook simulator
    webhook_max_retries: int = 3
    webhook_failure_rate: float = 0.05
    webhook_min_latency_ms: int = 200
    webhook_max_latency_ms: int = 1200
    webhook_poll_interval: float = 2.0

    # Bulk operations
    bulk_poll_interval: float = 2.0

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development."""
        return self.environment == "development"

    def validate_production_secrets(self) -> None:
        """Validate that production deployments point at a real backend.

        Called automatically by get_settings().  In production/staging the
        app refuses to start without an anon key and an https backend URL.
        """
        if self.environment in ("production", "staging"):
            if not self.backend_anon_key:
                raise ValueError("BACKEND_ANON_KEY is required in production!")
            parsed = urlparse(self.backend_url)
            if parsed.scheme != "https":
                raise ValueError(
                    f"BACKEND_URL must be an https:// URL in production (got: {self.backend_url!r})"
                )

        if not 0.0 <= self.webhook_failure_rate <= 1.0:
            raise ValueError("WEBHOOK_FAILURE_RATE must be between 0 and 1")
        if self.webhook_min_latency_ms > self.webhook_max_latency_ms:
            raise ValueError("WEBHOOK_MIN_LATENCY_MS must not exceed WEBHOOK_MAX_LATENCY_MS")
        if self.webhook_max_retries < 1:
            raise ValueError("WEBHOOK_MAX_RETRIES must be at least 1")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Automatically validates the configuration; the app will refuse to
    start when production settings are incomplete.
    """
    s = Settings()
    s.validate_production_secrets()
    return s


# Global settings instance
settings = get_settings()
