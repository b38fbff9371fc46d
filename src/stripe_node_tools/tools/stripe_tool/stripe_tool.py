"""
Stripe Tool - Charges, customers and resource listings for workflow nodes.

The helpers (api_request, load_resource, handle_listing) receive an explicit
NodeContext; register_tools exposes the node operations built on them.

API Reference: https://docs.stripe.com/api
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, Literal

import httpx
from fastmcp import FastMCP

from stripe_node_tools.context import ExecutionContext, HttpxTransport, NodeContext, RequestOptions
from stripe_node_tools.credentials import CredentialManager
from stripe_node_tools.exceptions import (
    ApiError,
    InvalidCredentialError,
    MissingCredentialError,
    StripeNodeError,
)
from stripe_node_tools.utils.error_sanitizer import error_response

from .field_adapters import adjust_charge_fields, adjust_customer_fields

logger = logging.getLogger(__name__)

STRIPE_API_BASE = "https://api.stripe.com/v1"
STRIPE_CREDENTIAL = "stripeApi"

LOADABLE_RESOURCES = ("charge", "customer", "source")

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class StripeToolConfig:
    """Runtime settings for Stripe requests."""

    api_base: str = STRIPE_API_BASE
    timeout: float = 30.0
    debug_requests: bool = False

    @classmethod
    def from_env(cls) -> "StripeToolConfig":
        return cls(
            api_base=os.getenv("STRIPE_API_BASE", STRIPE_API_BASE).rstrip("/"),
            timeout=float(os.getenv("STRIPE_NODE_TOOLS_TIMEOUT", "30")),
            debug_requests=os.getenv("STRIPE_NODE_TOOLS_DEBUG_REQUESTS", "").lower() in _TRUTHY,
        )


@dataclass(frozen=True)
class StripeErrorBody:
    """What a Stripe error response body says, decoded once."""

    kind: Literal["error_object", "message", "unrecognized"]
    message: str | None = None

    @classmethod
    def from_response(cls, response: httpx.Response) -> "StripeErrorBody":
        try:
            payload = response.json()
        except ValueError:
            return cls("unrecognized")
        if not isinstance(payload, dict):
            return cls("unrecognized")

        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return cls("error_object", str(error["message"]))

        if payload.get("message"):
            return cls("message", str(payload["message"]))

        return cls("unrecognized")


def api_request(
    context: NodeContext,
    method: str,
    endpoint: str,
    body: dict[str, Any] | None = None,
    query: dict[str, Any] | None = None,
    *,
    config: StripeToolConfig | None = None,
) -> Any:
    """
    Make an API request to Stripe.

    Args:
        context: Caller capabilities (credentials, parameters, HTTP)
        method: HTTP verb
        endpoint: Path appended to the API base, e.g. "/charges"
        body: Fields sent form-encoded
        query: Query string fields; omitted from the request when empty

    Returns:
        The decoded JSON response

    Raises:
        MissingCredentialError: No Stripe secret key could be resolved
        InvalidCredentialError: Stripe answered 401
        ApiError: Stripe answered with a readable error message
    """
    config = config or StripeToolConfig.from_env()

    credentials = context.get_credentials(STRIPE_CREDENTIAL)
    if not credentials or not credentials.get("secretKey"):
        raise MissingCredentialError(STRIPE_CREDENTIAL)

    options = RequestOptions(
        method=method,
        uri=f"{config.api_base}{endpoint}",
        auth_secret=credentials["secretKey"],
        body=body or {},
        query=query or None,
    )

    if config.debug_requests:
        logger.debug("Stripe request: %s", json.dumps(options.redacted(), indent=2, default=str))

    try:
        return context.http_request(options)
    except httpx.HTTPStatusError as e:
        status_code = e.response.status_code
        if status_code == 401:
            raise InvalidCredentialError() from e

        error_body = StripeErrorBody.from_response(e.response)
        if error_body.kind != "unrecognized":
            raise ApiError(status_code, error_body.message) from e

        raise


def load_resource(
    context: NodeContext,
    resource: str,
    *,
    config: StripeToolConfig | None = None,
) -> list[dict[str, str]]:
    """Load a resource so it can be selected by name from a dropdown."""
    if resource not in LOADABLE_RESOURCES:
        raise ValueError(
            f"Cannot load '{resource}'. Expected one of: {', '.join(LOADABLE_RESOURCES)}"
        )

    response = api_request(context, "GET", f"/{resource}s", {}, {}, config=config)

    return [{"name": record.get("name"), "value": record["id"]} for record in response["data"]]


def handle_listing(
    context: NodeContext,
    resource: str,
    query: dict[str, Any] | None = None,
    *,
    config: StripeToolConfig | None = None,
) -> list[dict[str, Any]]:
    """
    Handle a Stripe listing by returning all items or up to a limit.

    Only the first page is fetched; ``has_more`` cursors are not followed.
    """
    response = api_request(context, "GET", f"/{resource}s", {}, query or {}, config=config)
    records = response["data"]

    if not context.get_node_parameter("returnAll", 0):
        limit = context.get_node_parameter("limit", 0)
        records = records[:limit]

    return records


def _require_update_fields(fields: dict[str, Any] | None) -> dict[str, Any]:
    if not fields:
        raise ValueError("Please enter at least one field to update")
    return fields


def register_tools(
    mcp: FastMCP,
    credentials: CredentialManager | None = None,
    transport: Callable[[RequestOptions], Any] | None = None,
    config: StripeToolConfig | None = None,
) -> list[str]:
    """
    Register Stripe node tools with the MCP server.

    Tools are registered regardless of credential availability - they
    return helpful error messages when called without a secret key.

    Returns:
        List of registered tool names
    """
    config = config or StripeToolConfig.from_env()
    registered_tools: list[str] = []

    def _run(
        call: Callable[[ExecutionContext], Any],
        items: list[dict[str, Any]] | None = None,
        resource: str | None = None,
    ) -> dict[str, Any]:
        context = ExecutionContext(
            credentials=credentials or CredentialManager(),
            items=items or [{}],
            transport=transport or HttpxTransport(timeout=config.timeout),
        )
        try:
            return {"success": True, "data": call(context)}
        except MissingCredentialError:
            return {
                "error": "Stripe credentials not configured",
                "help": (
                    "Set STRIPE_SECRET_KEY environment variable "
                    "or configure via credential store. "
                    "Get a key at https://dashboard.stripe.com/apikeys"
                ),
            }
        except StripeNodeError as e:
            return {"error": e.message}
        except httpx.TimeoutException:
            return {"error": "Request timed out"}
        except httpx.HTTPError as e:
            return error_response(e, "Stripe request failed", resource=resource)
        except (KeyError, TypeError) as e:
            # Response payload did not have the expected shape
            return error_response(e, "Unexpected Stripe response", resource=resource)
        except ValueError as e:
            return {"error": str(e)}

    def _api(context: ExecutionContext, method: str, endpoint: str, body=None, query=None):
        return api_request(context, method, endpoint, body, query, config=config)

    # ==================== CHARGES ====================

    @mcp.tool()
    def stripe_create_charge(
        customer_id: str,
        amount: float,
        currency: str,
        source: str,
        additional_fields: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Create a charge against a customer's payment source.

        Args:
            customer_id: Stripe customer ID (starts with cus_)
            amount: Amount in major currency units, e.g. 12.50
            currency: Three-letter ISO currency code
            source: ID of the card or source to charge
            additional_fields: Optional description, receipt_email, metadata
                (metadataProperties list) and shipping (shippingProperties list)
        """
        body = {
            "customer": customer_id,
            "currency": currency.lower(),
            "amount": round(amount * 100),
            "source": source,
        }
        if additional_fields:
            body.update(adjust_charge_fields(additional_fields))
        return _run(lambda ctx: _api(ctx, "POST", "/charges", body), resource="charge")

    registered_tools.append("stripe_create_charge")

    @mcp.tool()
    def stripe_get_charge(charge_id: str) -> dict[str, Any]:
        """
        Retrieve a charge by ID.

        Args:
            charge_id: Stripe charge ID (starts with ch_)
        """
        return _run(lambda ctx: _api(ctx, "GET", f"/charges/{charge_id}"), resource="charge")

    registered_tools.append("stripe_get_charge")

    @mcp.tool()
    def stripe_update_charge(charge_id: str, update_fields: dict[str, Any]) -> dict[str, Any]:
        """
        Update a charge's description, metadata, receipt email or shipping.

        Args:
            charge_id: Stripe charge ID
            update_fields: Fields to change, in the node's field layout
        """
        return _run(
            lambda ctx: _api(
                ctx,
                "POST",
                f"/charges/{charge_id}",
                adjust_charge_fields(_require_update_fields(update_fields)),
            ),
            resource="charge",
        )

    registered_tools.append("stripe_update_charge")

    # ==================== CUSTOMERS ====================

    @mcp.tool()
    def stripe_create_customer(
        name: str,
        additional_fields: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Create a customer.

        Args:
            name: Customer full name
            additional_fields: Optional email, phone, description, address
                (address.details), metadata and shipping in the node's layout
        """
        body = {"name": name}
        if additional_fields:
            body.update(adjust_customer_fields(additional_fields))
        return _run(lambda ctx: _api(ctx, "POST", "/customers", body), resource="customer")

    registered_tools.append("stripe_create_customer")

    @mcp.tool()
    def stripe_get_customer(customer_id: str) -> dict[str, Any]:
        """
        Retrieve a customer by ID.

        Args:
            customer_id: Stripe customer ID (starts with cus_)
        """
        return _run(lambda ctx: _api(ctx, "GET", f"/customers/{customer_id}"), resource="customer")

    registered_tools.append("stripe_get_customer")

    @mcp.tool()
    def stripe_update_customer(customer_id: str, update_fields: dict[str, Any]) -> dict[str, Any]:
        """
        Update a customer.

        Args:
            customer_id: Stripe customer ID
            update_fields: Fields to change, in the node's field layout
        """
        return _run(
            lambda ctx: _api(
                ctx,
                "POST",
                f"/customers/{customer_id}",
                adjust_customer_fields(_require_update_fields(update_fields)),
            ),
            resource="customer",
        )

    registered_tools.append("stripe_update_customer")

    @mcp.tool()
    def stripe_delete_customer(customer_id: str) -> dict[str, Any]:
        """
        Permanently delete a customer.

        Args:
            customer_id: Stripe customer ID
        """
        return _run(
            lambda ctx: _api(ctx, "DELETE", f"/customers/{customer_id}"),
            resource="customer",
        )

    registered_tools.append("stripe_delete_customer")

    # ==================== LISTINGS ====================

    @mcp.tool()
    def stripe_list_resources(
        resource: str,
        return_all: bool = False,
        limit: int = 50,
        filters: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        List records of a resource kind (charge, customer, source, ...).

        Args:
            resource: Singular resource kind, e.g. "charge"
            return_all: Return the whole page instead of the first `limit` records
            limit: Maximum number of records when return_all is false
            filters: Query fields passed to the listing endpoint
        """
        return _run(
            lambda ctx: handle_listing(ctx, resource, filters, config=config),
            items=[{"returnAll": return_all, "limit": limit}],
            resource=resource,
        )

    registered_tools.append("stripe_list_resources")

    @mcp.tool()
    def stripe_load_options(resource: str) -> dict[str, Any]:
        """
        Load name/value options for a resource dropdown.

        Args:
            resource: One of "charge", "customer" or "source"
        """
        return _run(lambda ctx: load_resource(ctx, resource, config=config), resource=resource)

    registered_tools.append("stripe_load_options")

    return registered_tools
