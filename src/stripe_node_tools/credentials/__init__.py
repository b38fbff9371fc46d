"""
Centralized credential management for Stripe node tools.

Credential types are declared per provider and merged into CREDENTIAL_TYPES.

Usage:
    from stripe_node_tools.credentials import CredentialManager

    credentials = CredentialManager()
    stripe = credentials.get("stripeApi")  # {"secretKey": "sk_..."} or None

    # In tests
    credentials = CredentialManager.for_testing(
        {"stripeApi": {"secretKey": "sk_test_123"}}
    )
"""

from .base import (
    REDACTED,
    CredentialError,
    CredentialField,
    CredentialManager,
    CredentialType,
    FieldType,
)
from .oauth2 import OAUTH2_CLIENT_CREDENTIALS, OAUTH2_CREDENTIALS
from .stripe import STRIPE_API, STRIPE_CREDENTIALS

CREDENTIAL_TYPES = {
    **OAUTH2_CREDENTIALS,
    **STRIPE_CREDENTIALS,
}

__all__ = [
    "CREDENTIAL_TYPES",
    "CredentialError",
    "CredentialField",
    "CredentialManager",
    "CredentialType",
    "FieldType",
    "OAUTH2_CLIENT_CREDENTIALS",
    "REDACTED",
    "STRIPE_API",
]
