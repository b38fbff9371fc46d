"""
Stripe Tool for workflow nodes.

Request wrapper, field adapters and listing helpers for the Stripe API.
"""

from .field_adapters import (
    adjust_address_fields,
    adjust_charge_fields,
    adjust_customer_fields,
    adjust_metadata_fields,
    adjust_shipping_fields,
)
from .stripe_tool import (
    STRIPE_API_BASE,
    StripeErrorBody,
    StripeToolConfig,
    api_request,
    handle_listing,
    load_resource,
    register_tools,
)

__all__ = [
    "STRIPE_API_BASE",
    "StripeErrorBody",
    "StripeToolConfig",
    "adjust_address_fields",
    "adjust_charge_fields",
    "adjust_customer_fields",
    "adjust_metadata_fields",
    "adjust_shipping_fields",
    "api_request",
    "handle_listing",
    "load_resource",
    "register_tools",
]
