"""
OAuth2 client-credentials grant.

Only the field schema lives here; the token exchange itself is done by the
HTTP layer that consumes these values.
"""
from .base import CredentialField, CredentialType

OAUTH2_CLIENT_CREDENTIALS = CredentialType(
    name="oAuth2ClientCredentials",
    display_name="OAuth2 Client Credentials",
    documentation_url="httpRequest",
    properties=(
        CredentialField(
            display_name="Access Token URL",
            name="accessTokenUrl",
            required=True,
            env_var="OAUTH2_ACCESS_TOKEN_URL",
        ),
        CredentialField(
            display_name="Client ID",
            name="clientId",
            required=True,
            env_var="OAUTH2_CLIENT_ID",
        ),
        CredentialField(
            display_name="Client Secret",
            name="clientSecret",
            required=True,
            password=True,
            env_var="OAUTH2_CLIENT_SECRET",
        ),
        CredentialField(
            display_name="Audience",
            name="audience",
            env_var="OAUTH2_AUDIENCE",
        ),
        CredentialField(
            display_name="Scope",
            name="scope",
            env_var="OAUTH2_SCOPE",
        ),
    ),
)

OAUTH2_CREDENTIALS = {
    OAUTH2_CLIENT_CREDENTIALS.name: OAUTH2_CLIENT_CREDENTIALS,
}

__all__ = ["OAUTH2_CLIENT_CREDENTIALS", "OAUTH2_CREDENTIALS"]
