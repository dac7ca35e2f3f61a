"""
Client configuration settings.

Loads the Zoom connection and transport settings from environment variables,
falling back to sensible defaults.
"""

import os
from typing import Optional

from pydantic import BaseModel, Field, field_validator  # type: ignore

from zoom_webinars.config.constants.zoom import DEFAULT_BASE_URL, ZoomAuthType


class HTTPSettings(BaseModel):
    """Transport configuration."""

    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    max_retries: int = Field(default=0, ge=0, description="Retry attempts (0 disables retries)")
    base_delay: float = Field(default=1.0, ge=0, description="Initial backoff delay in seconds")
    max_delay: float = Field(default=32.0, ge=0, description="Maximum backoff delay in seconds")
    rate_limit: Optional[float] = Field(default=None, gt=0, description="Requests per second, None to disable")


class ZoomSettings(BaseModel):
    """
    Main client settings.

    Aggregates authentication and transport configuration.
    """

    auth_type: ZoomAuthType = Field(default=ZoomAuthType.TOKEN, description="Authentication method")
    base_url: str = Field(default=DEFAULT_BASE_URL, description="Zoom API base URL")
    access_token: Optional[str] = Field(default=None, description="Pre-generated access token")
    account_id: Optional[str] = Field(default=None, description="Server-to-server account ID")
    client_id: Optional[str] = Field(default=None, description="OAuth client ID")
    client_secret: Optional[str] = Field(default=None, description="OAuth client secret")
    log_level: str = Field(default="INFO", description="Logging level")
    http: HTTPSettings = Field(default_factory=HTTPSettings)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Ensure base URL doesn't end with trailing slash."""
        return v.rstrip("/")

    @classmethod
    def from_env(cls) -> "ZoomSettings":
        """
        Load settings from environment variables.

        Returns:
            ZoomSettings instance with values from environment
        """
        rate_limit = os.getenv("ZOOM_RATE_LIMIT")
        return cls(
            auth_type=ZoomAuthType(os.getenv("ZOOM_AUTH_TYPE", ZoomAuthType.TOKEN.value).upper()),
            base_url=os.getenv("ZOOM_BASE_URL", DEFAULT_BASE_URL),
            access_token=os.getenv("ZOOM_ACCESS_TOKEN"),
            account_id=os.getenv("ZOOM_ACCOUNT_ID"),
            client_id=os.getenv("ZOOM_CLIENT_ID"),
            client_secret=os.getenv("ZOOM_CLIENT_SECRET"),
            log_level=os.getenv("ZOOM_LOG_LEVEL", "INFO"),
            http=HTTPSettings(
                timeout=float(os.getenv("ZOOM_TIMEOUT", "30")),
                max_retries=int(os.getenv("ZOOM_MAX_RETRIES", "0")),
                base_delay=float(os.getenv("ZOOM_RETRY_BASE_DELAY", "1.0")),
                max_delay=float(os.getenv("ZOOM_RETRY_MAX_DELAY", "32.0")),
                rate_limit=float(rate_limit) if rate_limit else None,
            ),
        )


# Global settings instance
_settings: Optional[ZoomSettings] = None


def get_settings() -> ZoomSettings:
    """
    Get settings singleton.

    Returns:
        ZoomSettings instance
    """
    global _settings
    if _settings is None:
        _settings = ZoomSettings.from_env()
    return _settings


def reset_settings() -> None:
    """Reset settings singleton (useful for testing)."""
    global _settings
    _settings = None
