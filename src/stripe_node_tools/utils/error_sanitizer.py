"""
Turn unclassified Stripe failures into safe tool responses.

httpx errors carry the request they failed on, and a Stripe request carries
the secret key as the Basic-auth username. Neither the exception text nor
its request may reach the tool caller: the full exception is logged
server-side and the caller gets a fixed message naming the resource kind
that was being handled.
"""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)


def sanitize_error(
    exc: BaseException,
    generic_message: str,
    *,
    resource: str | None = None,
    log_level: str = "warning",
) -> str:
    """Log ``exc`` with its traceback and return ``generic_message`` unchanged."""
    log = getattr(logger, log_level, logger.warning)
    if resource:
        log("%s (resource=%r): %s", generic_message, resource, type(exc).__name__, exc_info=exc)
    else:
        log("%s: %s", generic_message, type(exc).__name__, exc_info=exc)
    return generic_message


def error_response(
    exc: BaseException,
    generic_message: str,
    *,
    resource: str | None = None,
    log_level: str = "warning",
) -> dict[str, Any]:
    """Tool-shaped variant of sanitize_error: ``{"error": generic_message}``."""
    return {"error": sanitize_error(exc, generic_message, resource=resource, log_level=log_level)}
