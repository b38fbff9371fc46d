"""
Caller capabilities for Stripe node helpers.

Helpers never reach for global state: every call receives a NodeContext
that resolves credentials, reads node parameters, and sends HTTP requests.

Usage:
    context = ExecutionContext(
        credentials=CredentialManager(),
        items=[{"returnAll": False, "limit": 10}],
    )
    charges = handle_listing(context, "charge")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Protocol

import httpx

from .credentials import REDACTED, CredentialManager
from .exceptions import NodeParameterError

_MISSING: Any = object()


@dataclass
class RequestOptions:
    """One outgoing Stripe request, built per call."""

    method: str
    uri: str
    auth_secret: str
    body: dict[str, Any] = field(default_factory=dict)
    query: dict[str, Any] | None = None
    expect_json: bool = True

    def redacted(self) -> dict[str, Any]:
        """Return the options as a dict safe to write to logs."""
        return {
            "method": self.method,
            "uri": self.uri,
            "auth": {"user": REDACTED},
            "form": self.body,
            "qs": self.query,
            "json": self.expect_json,
        }


class NodeContext(Protocol):
    """Capabilities the execution engine hands to each helper call."""

    def get_credentials(self, name: str) -> dict[str, Any] | None: ...

    def get_node_parameter(self, name: str, item_index: int = 0, default: Any = _MISSING) -> Any: ...

    def http_request(self, options: RequestOptions) -> Any: ...


def _flatten(prefix: str, value: Any, pairs: list[tuple[str, str]]) -> None:
    if value is None:
        return
    if isinstance(value, dict):
        for key, item in value.items():
            _flatten(f"{prefix}[{key}]" if prefix else str(key), item, pairs)
        return
    if isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            _flatten(f"{prefix}[{index}]", item, pairs)
        return
    if isinstance(value, bool):
        pairs.append((prefix, "true" if value else "false"))
        return
    pairs.append((prefix, str(value)))


def encode_form(values: dict[str, Any] | None) -> list[tuple[str, str]]:
    """
    Flatten a nested mapping into Stripe's bracketed form encoding.

    {"metadata": {"k": "v"}, "items": [{"price": "p"}]} becomes
    [("metadata[k]", "v"), ("items[0][price]", "p")]. None values are skipped.
    """
    pairs: list[tuple[str, str]] = []
    _flatten("", values or {}, pairs)
    return pairs


class HttpxTransport:
    """Send RequestOptions with httpx; non-2xx responses raise httpx.HTTPStatusError."""

    def __init__(self, client: httpx.Client | None = None, timeout: float = 30.0):
        self._client = client
        self._timeout = timeout

    def __call__(self, options: RequestOptions) -> Any:
        if self._client is not None:
            return self._send(self._client, options)
        with httpx.Client(timeout=self._timeout) as client:
            return self._send(client, options)

    def _send(self, client: httpx.Client, options: RequestOptions) -> Any:
        # Bracketed keys are unique, so the pairs fit in a dict.
        form = dict(encode_form(options.body))
        response = client.request(
            method=options.method,
            url=options.uri,
            auth=(options.auth_secret, ""),
            params=dict(encode_form(options.query)) if options.query else None,
            data=form or None,
        )
        response.raise_for_status()
        if options.expect_json:
            return response.json()
        return response.text


@dataclass
class ExecutionContext:
    """
    Default NodeContext backed by a CredentialManager and per-item parameters.

    ``items`` holds one parameter dict per input item; item 0 carries the
    node-level parameters such as ``returnAll`` and ``limit``.
    """

    credentials: CredentialManager
    items: list[dict[str, Any]] = field(default_factory=lambda: [{}])
    transport: Callable[[RequestOptions], Any] = field(default_factory=HttpxTransport)

    def get_credentials(self, name: str) -> dict[str, Any] | None:
        return self.credentials.get(name)

    def get_node_parameter(self, name: str, item_index: int = 0, default: Any = _MISSING) -> Any:
        if 0 <= item_index < len(self.items) and name in self.items[item_index]:
            return self.items[item_index][name]
        if default is not _MISSING:
            return default
        raise NodeParameterError(name, item_index)

    def http_request(self, options: RequestOptions) -> Any:
        return self.transport(options)
