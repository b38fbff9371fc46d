"""Shared fixtures for stripe_node_tools tests."""

from __future__ import annotations

from typing import Any

import httpx
import pytest

from stripe_node_tools.context import ExecutionContext, RequestOptions
from stripe_node_tools.credentials import CredentialManager
from stripe_node_tools.tools.stripe_tool import StripeToolConfig

TEST_SECRET_KEY = "sk_test_123456789"


class RecordingTransport:
    """Transport double that records every RequestOptions and replays canned results."""

    def __init__(self, *results: Any):
        self.calls: list[RequestOptions] = []
        self._results = list(results)

    def __call__(self, options: RequestOptions) -> Any:
        self.calls.append(options)
        result = self._results.pop(0) if self._results else {}
        if isinstance(result, BaseException):
            raise result
        return result

    def queue(self, result: Any) -> None:
        self._results.append(result)

    @property
    def last(self) -> RequestOptions:
        return self.calls[-1]


def status_error(
    status_code: int,
    json: Any = None,
    text: str | None = None,
) -> httpx.HTTPStatusError:
    """Build the HTTPStatusError httpx raises from raise_for_status()."""
    request = httpx.Request("GET", "https://api.stripe.com/v1/charges")
    if json is not None:
        response = httpx.Response(status_code, json=json, request=request)
    else:
        response = httpx.Response(status_code, text=text or "", request=request)
    return httpx.HTTPStatusError(
        f"Client error '{status_code}'", request=request, response=response
    )


@pytest.fixture
def credentials() -> CredentialManager:
    """CredentialManager with a Stripe test key."""
    return CredentialManager.for_testing({"stripeApi": {"secretKey": TEST_SECRET_KEY}})


@pytest.fixture
def config() -> StripeToolConfig:
    """Default config, independent of the environment."""
    return StripeToolConfig()


@pytest.fixture
def make_context(credentials):
    """Factory for ExecutionContext objects wired to a RecordingTransport."""

    def _make(*results: Any, items: list[dict[str, Any]] | None = None, creds=None):
        transport = RecordingTransport(*results)
        context = ExecutionContext(
            credentials=creds or credentials,
            items=items or [{}],
            transport=transport,
        )
        return context, transport

    return _make
