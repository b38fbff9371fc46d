"""
Stripe node tools - Tool implementations for FastMCP.

Usage:
    from fastmcp import FastMCP
    from stripe_node_tools.tools import register_all_tools
    from stripe_node_tools.credentials import CredentialManager

    mcp = FastMCP("my-server")
    credentials = CredentialManager()
    register_all_tools(mcp, credentials=credentials)
"""
from typing import List, Optional, TYPE_CHECKING

from fastmcp import FastMCP

if TYPE_CHECKING:
    from stripe_node_tools.credentials import CredentialManager

from .stripe_tool import register_tools as register_stripe


def register_all_tools(
    mcp: FastMCP,
    credentials: Optional["CredentialManager"] = None,
) -> List[str]:
    """
    Register all tools with a FastMCP server.

    Args:
        mcp: FastMCP server instance
        credentials: Optional CredentialManager for centralized credential access.
                     If not provided, tools resolve credentials from the environment.

    Returns:
        List of registered tool names
    """
    return register_stripe(mcp, credentials=credentials)


__all__ = ["register_all_tools"]
