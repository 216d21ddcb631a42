"""
Configuration management module using Pydantic Settings.

This module provides type-safe configuration for the Shipping API client with
environment variable support. Every field can be overridden with a
``SHIPPINGAPI_`` prefixed environment variable or an entry in ``.env``.
"""

from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shippingapi.constants import (
    CONFIG_KEYS,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_RETRIES,
    DEFAULT_TIMEOUT_MILLISECONDS,
    SANDBOX_ENDPOINT,
)


class Settings(BaseSettings):
    """
    Client settings with environment variable support.

    All settings can be overridden via environment variables named after the
    field with a ``SHIPPINGAPI_`` prefix, e.g. ``SHIPPINGAPI_API_KEY``.
    """

    model_config = SettingsConfigDict(
        env_prefix="SHIPPINGAPI_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Account
    endpoint: str = Field(
        default=SANDBOX_ENDPOINT,
        description="Base URL of the Shipping API"
    )
    api_key: str = Field(
        default="",
        description="API key used to obtain OAuth tokens"
    )
    api_secret: str = Field(
        default="",
        description="API secret used to obtain OAuth tokens"
    )
    shipper_id: Optional[str] = Field(
        default=None,
        description="Merchant shipper id"
    )
    developer_id: Optional[str] = Field(
        default=None,
        description="Developer id used by ledger reports"
    )
    rate_plan: Optional[str] = Field(
        default=None,
        description="Custom shipper rate plan"
    )

    # Retry Policy
    retries: int = Field(
        default=DEFAULT_RETRIES,
        ge=1,
        le=10,
        description="Maximum number of attempts per API call"
    )
    timeout_milliseconds: int = Field(
        default=DEFAULT_TIMEOUT_MILLISECONDS,
        ge=0,
        description="Wall-clock budget across all attempts of one call"
    )
    throw_exceptions: bool = Field(
        default=False,
        description="Raise ShippingApiException instead of returning failed responses"
    )

    # HTTP Client Settings
    http_timeout: float = Field(
        default=DEFAULT_HTTP_TIMEOUT,
        gt=0,
        le=300,
        description="Timeout of a single HTTP exchange in seconds"
    )

    # Mock Transport
    mock: bool = Field(
        default=False,
        description="Use the mock requester instead of the network"
    )
    mock_dir: Optional[str] = Field(
        default=None,
        description="Directory of canned JSON responses for the mock requester"
    )

    # Logging Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level"
    )
    log_format: Literal["structured", "simple"] = Field(
        default="simple",
        description="Log format type"
    )
    sanitize_logs: bool = Field(
        default=True,
        description="Sanitize tokens and secrets from logs"
    )

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Require an http(s) endpoint and drop any trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("Endpoint must start with 'http://' or 'https://'")
        return v.rstrip("/")

    def config_item(self, key: str) -> Optional[str]:
        """
        Look up a configuration item by its Shipping API key name.

        Args:
            key: Configuration key such as ``ApiKey`` or ``ShipperID``. Field
                 names like ``api_key`` are accepted as well.

        Returns:
            Optional[str]: The configured value as a string, or None if unset
        """
        field_name = CONFIG_KEYS.get(key, key)
        if field_name not in type(self).model_fields:
            return None
        value = getattr(self, field_name)
        if value is None or value == "":
            return None
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """
    Get the current settings instance.

    Returns:
        Settings: The global settings instance
    """
    return settings
