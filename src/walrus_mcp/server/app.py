"""MCP server wiring.

Binds a ToolDispatcher to the MCP SDK low-level Server and serves it over
stdio. Stdout carries protocol frames only; logs go to stderr.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from pydantic import AnyUrl

from walrus_mcp import __version__
from walrus_mcp.config import GatewayConfig
from walrus_mcp.server.dispatcher import ToolDispatcher
from walrus_mcp.storage.gateway import WalrusGatewayClient

logger = logging.getLogger(__name__)

SERVER_NAME = "walrus-mcp-server"


def create_server(dispatcher: ToolDispatcher) -> Server[Any, Any]:
    """Create an MCP server whose handlers delegate to the dispatcher."""
    server: Server[Any, Any] = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return dispatcher.list_tools()

    # the dispatcher validates arguments itself and reports violations as
    # error envelopes
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any]) -> types.CallToolResult:
        return await dispatcher.call_tool(name, arguments)

    @server.list_resources()
    async def list_resources() -> list[types.Resource]:
        return dispatcher.list_resources()

    @server.read_resource()
    async def read_resource(uri: AnyUrl) -> Iterable[ReadResourceContents]:
        return await dispatcher.read_resource(str(uri))

    return server


async def run_stdio(config: GatewayConfig) -> None:
    """Serve the Walrus tools over stdio until the host closes the stream."""
    gateway = WalrusGatewayClient(config)
    server = create_server(ToolDispatcher(gateway))
    async with stdio_server() as (read_stream, write_stream):
        logger.info(
            "Walrus MCP server running on stdio (aggregator=%s, publisher=%s)",
            config.aggregator_url,
            config.publisher_url,
        )
        await server.run(read_stream, write_stream, server.create_initialization_options())
