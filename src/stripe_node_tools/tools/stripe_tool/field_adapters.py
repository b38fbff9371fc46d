"""
Reshape the node's nested UI fields into Stripe API request bodies.

The node collects addresses, metadata and shipping details as nested
collections (``address.details``, ``metadata.metadataProperties`` and
``shipping.shippingProperties``). Stripe expects them one level flatter.
"""

from __future__ import annotations

from typing import Any

Fields = dict[str, Any]


def _without(fields: Fields, key: str) -> Fields:
    return {name: value for name, value in fields.items() if name != key}


def adjust_address_fields(fields: Fields) -> Fields:
    """Convert the node's address collection into a Stripe address object."""
    if fields.get("address") is None:
        return fields

    return {
        **_without(fields, "address"),
        "address": fields["address"].get("details"),
    }


def adjust_metadata_fields(fields: Fields) -> Fields:
    """
    Collapse the node's metadata key/value list into a Stripe metadata object.

    Later pairs overwrite earlier ones with the same key.
    """
    if not fields.get("metadata"):
        return fields

    adjusted: dict[str, Any] = {}
    for pair in fields["metadata"].get("metadataProperties") or []:
        adjusted[pair["key"]] = pair["value"]

    return {
        **_without(fields, "metadata"),
        "metadata": adjusted,
    }


def adjust_shipping_fields(fields: Fields) -> Fields:
    """
    Convert the node's shipping collection into a Stripe shipping object.

    Only the first shipping entry is used. When it carries an address the
    result holds the ``shipping`` key alone.
    """
    entries = (fields.get("shipping") or {}).get("shippingProperties") or []
    shipping = entries[0] if entries else None

    if not shipping or not shipping.get("address"):
        return fields

    return {
        "shipping": {
            **_without(shipping, "address"),
            "address": shipping["address"].get("details"),
        },
    }


def adjust_charge_fields(fields: Fields) -> Fields:
    """Make the node's charge fields compliant with the Stripe charge object."""
    return adjust_shipping_fields(adjust_metadata_fields(fields))


def adjust_customer_fields(fields: Fields) -> Fields:
    """Make the node's customer fields compliant with the Stripe customer object."""
    return adjust_shipping_fields(adjust_metadata_fields(adjust_address_fields(fields)))
