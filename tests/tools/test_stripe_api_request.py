"""Tests for api_request: credentials, request options, and error mapping."""

import base64
import json
import logging
from urllib.parse import parse_qsl

import httpx
import pytest

from conftest import TEST_SECRET_KEY, status_error
from stripe_node_tools.context import ExecutionContext, HttpxTransport
from stripe_node_tools.credentials import CredentialManager
from stripe_node_tools.exceptions import (
    ApiError,
    InvalidCredentialError,
    MissingCredentialError,
)
from stripe_node_tools.tools.stripe_tool import STRIPE_API_BASE, StripeToolConfig, api_request


class TestCredentials:
    """Tests for credential resolution before the request is sent."""

    def test_missing_credentials_raises(self, make_context, config):
        context, transport = make_context(creds=CredentialManager.for_testing({"stripeApi": {}}))

        with pytest.raises(MissingCredentialError):
            api_request(context, "GET", "/charges", config=config)

        assert transport.calls == []

    def test_empty_secret_key_raises(self, config):
        class _Context:
            def get_credentials(self, name):
                return {"secretKey": ""}

        with pytest.raises(MissingCredentialError):
            api_request(_Context(), "GET", "/charges", config=config)


class TestRequestOptions:
    """Tests for the RequestOptions handed to the transport."""

    def test_builds_options(self, make_context, config):
        context, transport = make_context({"id": "ch_1"})

        result = api_request(
            context, "POST", "/charges", {"amount": 100}, {"expand": "customer"}, config=config
        )

        assert result == {"id": "ch_1"}
        options = transport.last
        assert options.method == "POST"
        assert options.uri == f"{STRIPE_API_BASE}/charges"
        assert options.auth_secret == TEST_SECRET_KEY
        assert options.body == {"amount": 100}
        assert options.query == {"expand": "customer"}
        assert options.expect_json is True

    def test_empty_query_is_omitted(self, make_context, config):
        context, transport = make_context({})

        api_request(context, "GET", "/customers", {}, {}, config=config)

        assert transport.last.query is None

    def test_custom_api_base(self, make_context):
        context, transport = make_context({})

        api_request(context, "GET", "/charges", config=StripeToolConfig(api_base="http://stripe.test/v1"))

        assert transport.last.uri == "http://stripe.test/v1/charges"


class TestErrorMapping:
    """Tests for the ordered error mapping."""

    @pytest.mark.parametrize(
        "body",
        [
            {"error": {"message": "No such charge"}},
            {"message": "nope"},
            None,
        ],
    )
    def test_401_always_invalid_credentials(self, make_context, config, body):
        context, _ = make_context(status_error(401, json=body, text="denied"))

        with pytest.raises(InvalidCredentialError) as exc_info:
            api_request(context, "GET", "/charges", config=config)

        assert exc_info.value.message == "The Stripe credentials are not valid!"

    def test_error_object_message(self, make_context, config):
        context, _ = make_context(
            status_error(404, json={"error": {"message": "No such charge: 'ch_x'"}})
        )

        with pytest.raises(ApiError) as exc_info:
            api_request(context, "GET", "/charges/ch_x", config=config)

        assert exc_info.value.status_code == 404
        assert exc_info.value.api_message == "No such charge: 'ch_x'"
        assert str(exc_info.value) == "Stripe error response [404]: No such charge: 'ch_x'"

    def test_top_level_message(self, make_context, config):
        context, _ = make_context(status_error(500, json={"message": "Upstream failure"}))

        with pytest.raises(ApiError) as exc_info:
            api_request(context, "GET", "/charges", config=config)

        assert exc_info.value.status_code == 500
        assert exc_info.value.api_message == "Upstream failure"

    def test_error_object_takes_precedence(self, make_context, config):
        context, _ = make_context(
            status_error(400, json={"error": {"message": "first"}, "message": "second"})
        )

        with pytest.raises(ApiError, match="first"):
            api_request(context, "POST", "/charges", config=config)

    @pytest.mark.parametrize(
        "error",
        [
            status_error(502, text="<html>Bad gateway</html>"),
            status_error(400, json={"error": {"type": "invalid_request_error"}}),
            status_error(400, json=["unexpected"]),
        ],
    )
    def test_unclassified_status_error_is_reraised(self, make_context, config, error):
        context, _ = make_context(error)

        with pytest.raises(httpx.HTTPStatusError) as exc_info:
            api_request(context, "GET", "/charges", config=config)

        assert exc_info.value is error

    def test_transport_error_is_reraised(self, make_context, config):
        error = httpx.ConnectError("connection refused")
        context, _ = make_context(error)

        with pytest.raises(httpx.ConnectError) as exc_info:
            api_request(context, "GET", "/charges", config=config)

        assert exc_info.value is error


class TestDebugTrace:
    """Tests for the toggleable request trace."""

    def test_trace_redacts_secret(self, make_context, caplog):
        context, _ = make_context({})
        caplog.set_level(logging.DEBUG, logger="stripe_node_tools.tools.stripe_tool.stripe_tool")

        api_request(
            context,
            "POST",
            "/customers",
            {"name": "Alice"},
            config=StripeToolConfig(debug_requests=True),
        )

        assert "Stripe request" in caplog.text
        assert "/customers" in caplog.text
        assert TEST_SECRET_KEY not in caplog.text

    def test_trace_disabled_by_default(self, make_context, config, caplog):
        context, _ = make_context({})
        caplog.set_level(logging.DEBUG, logger="stripe_node_tools.tools.stripe_tool.stripe_tool")

        api_request(context, "GET", "/customers", config=config)

        assert "Stripe request" not in caplog.text

    def test_config_from_env(self, monkeypatch):
        monkeypatch.setenv("STRIPE_NODE_TOOLS_DEBUG_REQUESTS", "true")
        monkeypatch.setenv("STRIPE_NODE_TOOLS_TIMEOUT", "5")
        monkeypatch.delenv("STRIPE_API_BASE", raising=False)

        config = StripeToolConfig.from_env()

        assert config.debug_requests is True
        assert config.timeout == 5.0
        assert config.api_base == STRIPE_API_BASE


class TestHttpxTransport:
    """End-to-end tests through HttpxTransport with httpx.MockTransport."""

    def _context(self, credentials, handler):
        client = httpx.Client(transport=httpx.MockTransport(handler))
        return ExecutionContext(credentials=credentials, transport=HttpxTransport(client=client))

    def test_basic_auth_and_form_body(self, credentials, config):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["request"] = request
            return httpx.Response(200, json={"id": "cus_1"})

        context = self._context(credentials, handler)

        result = api_request(
            context,
            "POST",
            "/customers",
            {"name": "Alice", "metadata": {"k": "v"}, "description": None},
            config=config,
        )

        assert result == {"id": "cus_1"}
        request = seen["request"]
        expected = base64.b64encode(f"{TEST_SECRET_KEY}:".encode()).decode()
        assert request.headers["Authorization"] == f"Basic {expected}"
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert dict(parse_qsl(request.content.decode())) == {"name": "Alice", "metadata[k]": "v"}
        assert str(request.url) == f"{STRIPE_API_BASE}/customers"

    def test_empty_query_sends_no_query_string(self, credentials, config):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["request"] = request
            return httpx.Response(200, json={"data": []})

        api_request(self._context(credentials, handler), "GET", "/charges", {}, {}, config=config)

        assert len(seen["request"].url.params) == 0
        assert "?" not in str(seen["request"].url)

    def test_query_params_are_encoded(self, credentials, config):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["request"] = request
            return httpx.Response(200, json={"data": []})

        api_request(
            self._context(credentials, handler),
            "GET",
            "/charges",
            {},
            {"customer": "cus_1", "created": {"gte": 100}},
            config=config,
        )

        params = seen["request"].url.params
        assert params["customer"] == "cus_1"
        assert params["created[gte]"] == "100"

    def test_401_through_transport(self, credentials, config):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"error": {"message": "Invalid API Key"}})

        with pytest.raises(InvalidCredentialError):
            api_request(self._context(credentials, handler), "GET", "/charges", config=config)

    def test_api_error_through_transport(self, credentials, config):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(402, json={"error": {"message": "Your card was declined."}})

        with pytest.raises(ApiError) as exc_info:
            api_request(self._context(credentials, handler), "POST", "/charges", config=config)

        assert exc_info.value.status_code == 402

    def test_invalid_json_success_is_reraised(self, credentials, config):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="not json")

        with pytest.raises(json.JSONDecodeError):
            api_request(self._context(credentials, handler), "GET", "/charges", config=config)
