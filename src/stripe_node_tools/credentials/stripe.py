"""
Stripe API credentials for payment processing.

Setup Instructions:
1. Log in to your Stripe Dashboard.
2. Go to Developers > API keys.
3. Copy the Secret key (sk_test_... or sk_live_...) into STRIPE_SECRET_KEY.
"""
from .base import CredentialField, CredentialType

STRIPE_API = CredentialType(
    name="stripeApi",
    display_name="Stripe API",
    documentation_url="https://dashboard.stripe.com/apikeys",
    properties=(
        CredentialField(
            display_name="Secret Key",
            name="secretKey",
            required=True,
            password=True,
            env_var="STRIPE_SECRET_KEY",
        ),
    ),
    tools=(
        "stripe_create_charge",
        "stripe_get_charge",
        "stripe_update_charge",
        "stripe_create_customer",
        "stripe_get_customer",
        "stripe_update_customer",
        "stripe_delete_customer",
        "stripe_list_resources",
        "stripe_load_options",
    ),
)

STRIPE_CREDENTIALS = {
    STRIPE_API.name: STRIPE_API,
}

__all__ = ["STRIPE_API", "STRIPE_CREDENTIALS"]
