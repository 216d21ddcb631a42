"""Shipping API custom exceptions."""

from typing import Any, Optional


class ShippingApiError(Exception):
    """Base exception for shippingapi."""
    pass


class ConfigurationError(ShippingApiError):
    """Raised when configuration is missing or invalid."""
    pass


class DeserializationError(ShippingApiError):
    """Raised when a response body cannot be parsed into its expected type."""
    pass


class DocumentError(ShippingApiError):
    """Raised when a label or manifest document cannot be written."""
    pass


class ShippingApiException(ShippingApiError):
    """
    Raised instead of returning a failed response when the session opts in.

    The full response envelope, including its structured error details, is
    available as ``error_response``.
    """

    def __init__(self, response: Any, message: Optional[str] = None):
        self.error_response = response
        if message is None:
            errors = getattr(response, "errors", None) or []
            message = "; ".join(f"{e.error_code}: {e.message}" for e in errors) or "Shipping API call failed"
        super().__init__(message)
