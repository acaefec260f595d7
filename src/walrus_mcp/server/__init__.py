"""MCP tool/resource surface for the Walrus gateway."""

from walrus_mcp.server.catalog import RESOURCE_SCHEME, ToolDescriptor, ToolRegistry
from walrus_mcp.server.dispatcher import ToolDispatcher
from walrus_mcp.server.errors import (
    DispatchError,
    ToolArgumentsError,
    UnknownResourceError,
    UnknownToolError,
)

__all__ = [
    "RESOURCE_SCHEME",
    "ToolDescriptor",
    "ToolDispatcher",
    "ToolRegistry",
    "DispatchError",
    "ToolArgumentsError",
    "UnknownResourceError",
    "UnknownToolError",
]
