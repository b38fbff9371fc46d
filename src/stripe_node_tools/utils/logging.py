"""
Logging setup for stripe_node_tools.

Everything logs under the ``stripe_node_tools`` logger to stderr, so STDIO
JSON-RPC on stdout stays clean. The outgoing-request trace has its own
switch: STRIPE_NODE_TOOLS_DEBUG_REQUESTS lowers only the Stripe tool logger
to DEBUG, leaving the rest of the package at its configured level.
"""

from __future__ import annotations

import logging
import os

BASE_LOGGER = "stripe_node_tools"
REQUEST_TRACE_LOGGER = "stripe_node_tools.tools.stripe_tool"

DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_HANDLER_ATTR = "_stripe_node_tools_logging_handler"
_TRUTHY = {"1", "true", "yes", "on"}


def _resolve_level(level: str | None) -> int:
    name = (level or os.getenv("STRIPE_NODE_TOOLS_LOG_LEVEL", "INFO")).upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def request_trace_enabled() -> bool:
    return os.getenv("STRIPE_NODE_TOOLS_DEBUG_REQUESTS", "").lower() in _TRUTHY


def configure_logging(
    level: str | None = None,
    fmt: str | None = None,
    debug_requests: bool | None = None,
) -> None:
    """
    Attach the stderr handler to the package logger once.

    Args:
        level: Package log level (defaults to STRIPE_NODE_TOOLS_LOG_LEVEL, then INFO)
        fmt: Record format (defaults to STRIPE_NODE_TOOLS_LOG_FORMAT)
        debug_requests: Emit the redacted request trace
            (defaults to STRIPE_NODE_TOOLS_DEBUG_REQUESTS)
    """
    base_logger = logging.getLogger(BASE_LOGGER)

    if not any(getattr(h, _HANDLER_ATTR, False) for h in base_logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(fmt or os.getenv("STRIPE_NODE_TOOLS_LOG_FORMAT", DEFAULT_FORMAT))
        )
        setattr(handler, _HANDLER_ATTR, True)
        base_logger.addHandler(handler)
        base_logger.setLevel(_resolve_level(level))
        base_logger.propagate = False

    if debug_requests is None:
        debug_requests = request_trace_enabled()
    if debug_requests:
        logging.getLogger(REQUEST_TRACE_LOGGER).setLevel(logging.DEBUG)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a package logger, configuring logging on first use."""
    configure_logging()
    return logging.getLogger(name or BASE_LOGGER)
