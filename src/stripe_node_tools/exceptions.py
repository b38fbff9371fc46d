"""
Stripe node tools exceptions.

Every failure raised by the Stripe adapter inherits from StripeNodeError,
except unclassified transport or parse errors, which propagate unchanged
so their diagnostic detail is kept.
"""

from __future__ import annotations

from .credentials.base import CredentialError


class StripeNodeError(Exception):
    """Base exception for all Stripe node tool errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class MissingCredentialError(StripeNodeError, CredentialError):
    """Raised when the caller context has no usable Stripe credential."""

    def __init__(self, credential_name: str = "stripeApi"):
        super().__init__(
            "No credentials got returned!",
            details={"credential": credential_name},
        )
        self.credential_name = credential_name


class InvalidCredentialError(StripeNodeError):
    """Raised when Stripe rejects the credentials (HTTP 401)."""

    def __init__(self, message: str = "The Stripe credentials are not valid!"):
        super().__init__(message, details={"status_code": 401})
        self.status_code = 401


class ApiError(StripeNodeError):
    """Raised for a non-401 Stripe error response that carries a readable message."""

    def __init__(self, status_code: int, message: str):
        super().__init__(
            f"Stripe error response [{status_code}]: {message}",
            details={"status_code": status_code, "api_message": message},
        )
        self.status_code = status_code
        self.api_message = message


class NodeParameterError(StripeNodeError):
    """Raised when a node parameter cannot be resolved for an item."""

    def __init__(self, name: str, item_index: int):
        super().__init__(
            f"Could not get parameter '{name}' for item {item_index}",
            details={"parameter": name, "item_index": item_index},
        )
        self.name = name
        self.item_index = item_index
