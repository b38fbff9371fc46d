#!/usr/bin/env python3
"""
Stripe Node Tools MCP Server

Exposes the Stripe node tools via Model Context Protocol using FastMCP.

Usage:
    # Run with HTTP transport (default)
    python -m stripe_node_tools.mcp_server

    # Run with custom port
    python -m stripe_node_tools.mcp_server --port 8001

    # Run with STDIO transport (for local testing)
    python -m stripe_node_tools.mcp_server --stdio

Environment Variables:
    MCP_PORT                          - Server port (default: 4001)
    STRIPE_SECRET_KEY                 - Stripe secret key used by every tool
    STRIPE_NODE_TOOLS_LOG_LEVEL       - Log level (default: INFO)
    STRIPE_NODE_TOOLS_DEBUG_REQUESTS  - Trace outgoing requests (secret redacted)
"""

import argparse
import os

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import PlainTextResponse

from stripe_node_tools.credentials import CredentialError, CredentialManager
from stripe_node_tools.tools import register_all_tools
from stripe_node_tools.utils.logging import get_logger

logger = get_logger(__name__)


def create_server(credentials: CredentialManager | None = None) -> FastMCP:
    """Build the MCP server with every tool registered."""
    credentials = credentials or CredentialManager()
    mcp = FastMCP("stripe-node-tools")

    tools = register_all_tools(mcp, credentials=credentials)

    try:
        credentials.validate_for_tools(tools)
        logger.info("Tool credentials validated")
    except CredentialError as e:
        logger.warning(str(e))

    logger.info("Registered %d tools: %s", len(tools), tools)

    @mcp.custom_route("/health", methods=["GET"])
    async def health_check(request: Request) -> PlainTextResponse:
        """Health check endpoint for container orchestration."""
        return PlainTextResponse("OK")

    return mcp


def main() -> None:
    """Entry point for the MCP server."""
    parser = argparse.ArgumentParser(description="Stripe Node Tools MCP Server")
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("MCP_PORT", "4001")),
        help="HTTP server port (default: 4001)",
    )
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="HTTP server host (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--stdio",
        action="store_true",
        help="Use STDIO transport instead of HTTP",
    )
    args = parser.parse_args()

    mcp = create_server()

    if args.stdio:
        mcp.run(transport="stdio")
    else:
        logger.info("Starting HTTP server on %s:%s", args.host, args.port)
        mcp.run(transport="http", host=args.host, port=args.port)


if __name__ == "__main__":
    main()
