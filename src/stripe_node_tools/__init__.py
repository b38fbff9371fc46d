"""
Stripe node tools - Stripe API helpers and credential schemas for workflow nodes.
"""

__version__ = "0.1.0"

from .context import ExecutionContext, HttpxTransport, NodeContext, RequestOptions
from .credentials import CredentialManager
from .exceptions import (
    ApiError,
    InvalidCredentialError,
    MissingCredentialError,
    NodeParameterError,
    StripeNodeError,
)

__all__ = [
    "ApiError",
    "CredentialManager",
    "ExecutionContext",
    "HttpxTransport",
    "InvalidCredentialError",
    "MissingCredentialError",
    "NodeContext",
    "NodeParameterError",
    "RequestOptions",
    "StripeNodeError",
]
