from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from skycast.exceptions.weather.auth_error import AuthError


class Config(BaseSettings):
    """
    Application settings loaded from environment variables and .env files.

    This class handles all configuration for SkyCast including the upstream
    Weatherstack endpoint, the same-origin relay, retry and refresh timing,
    persistent storage and the hosting surface.
    """

    # Weatherstack Configuration
    weatherstack_base_url: str = Field(
        default="http://api.weatherstack.com",
        description="Weatherstack API base URL (HTTP only on the free tier)",
    )
    weatherstack_access_key: str = Field(
        default="34492e3cb3c0a2e5f567c98c1f89551f",
        description="Fallback access key used when no credential has been stored",
    )
    request_timeout_seconds: float = Field(default=30.0, gt=0, description="Upstream request timeout")

    # Transport Configuration
    hosting_scheme: str = Field(default="http", description="Scheme the client is served over (http/https)")
    relay_url: str = Field(
        default="http://localhost:8000/api/weather",
        description="Relay endpoint on the same origin as the client",
    )

    # Orchestration Configuration
    retry_delay_seconds: float = Field(default=2.0, gt=0, description="Delay before the tier-downgrade retry")
    refresh_interval_seconds: int = Field(default=300, ge=1, description="Seconds between auto refreshes")
    recent_searches_limit: int = Field(default=5, ge=1, description="Maximum remembered locations")

    # Storage Configuration
    storage_backend: str = Field(default="file", description="Key/value storage backend (memory/file)")
    storage_path: str = Field(default=".skycast/storage.json", description="Path of the JSON storage file")

    # Geolocation Configuration
    default_latitude: Optional[float] = Field(default=None, ge=-90, le=90, description="Static latitude")
    default_longitude: Optional[float] = Field(default=None, ge=-180, le=180, description="Static longitude")
    geolocation_url: Optional[str] = Field(default=None, description="IP geolocation lookup URL")

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="FastAPI host")
    api_port: int = Field(default=8000, ge=1, le=65535, description="FastAPI port")
    api_token: Optional[str] = Field(default=None, description="API authentication token")

    # Logging Configuration
    environment: str = Field(default="development", description="Environment name")
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="text", description="Log format (json/text)")

    @field_validator("weatherstack_access_key")
    def validate_weatherstack_access_key(cls, v):
        if not v or not v.strip():
            raise AuthError("Weatherstack access key is required")
        return v.strip()

    @field_validator("weatherstack_base_url", "relay_url")
    def strip_trailing_slash(cls, v):
        """Normalize URLs to avoid double slashes."""
        return str(v).rstrip("/")

    @field_validator("hosting_scheme")
    def validate_hosting_scheme(cls, v):
        scheme = v.lower().rstrip(":")
        if scheme not in ("http", "https"):
            raise ValueError(f"Invalid hosting scheme: {v}. Must be http or https")
        return scheme

    @field_validator("storage_backend")
    def validate_storage_backend(cls, v):
        if v.lower() not in ("memory", "file"):
            raise ValueError(f"Invalid storage backend: {v}. Must be memory or file")
        return v.lower()

    @field_validator("log_level")
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()

    @property
    def is_secure_context(self) -> bool:
        """Whether the client is hosted over an encrypted transport."""
        return self.hosting_scheme == "https"

    def get_storage_path(self) -> Path:
        """Get the absolute path to the JSON storage file."""
        return Path(self.storage_path).resolve()

    model_config = SettingsConfigDict(
        env_prefix="SKYCAST_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


config = Config()
