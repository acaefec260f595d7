"""Tool/resource dispatcher.

Protocol-facing request/response translation between MCP invocations and
the Walrus gateway. Stateless: each invocation is independent.

Error propagation is deliberately asymmetric:
- call_tool never raises. Unknown tools, invalid arguments and gateway
  failures come back as CallToolResult(isError=True) so the host session
  stays alive and the model can react to the message.
- read_resource raises UnknownResourceError for an unknown URI. The
  protocol layer turns it into a JSON-RPC error for that request only.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp import types
from mcp.server.lowlevel.helper_types import ReadResourceContents
from pydantic import BaseModel, ValidationError

from walrus_mcp.config import GatewayConfig
from walrus_mcp.server.catalog import (
    RESOURCES,
    ToolDescriptor,
    ToolRegistry,
    build_tool_registry,
    find_resource,
)
from walrus_mcp.server.errors import DispatchError, ToolArgumentsError
from walrus_mcp.storage.errors import GatewayError
from walrus_mcp.storage.gateway import WalrusGatewayClient
from walrus_mcp.storage.models import NetworkStatus, WireModel

logger = logging.getLogger(__name__)


def to_json_text(result: Any) -> str:
    """Render a tool or resource result as indented JSON."""
    if isinstance(result, WireModel | GatewayConfig):
        result = result.to_wire()
    elif isinstance(result, BaseModel):
        result = result.model_dump(mode="json", by_alias=True)
    return json.dumps(result, indent=2)


def text_result(text: str, *, is_error: bool = False) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text)],
        isError=is_error,
    )


def error_result(message: str) -> types.CallToolResult:
    return text_result(f"Error: {message}", is_error=True)


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "<root>"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


class ToolDispatcher:
    """Routes MCP tool calls and resource reads to the gateway.

    Args:
        gateway: Gateway client used for every invocation.
        registry: Tool catalog; defaults to the fixed five-tool catalog.
    """

    def __init__(
        self,
        gateway: WalrusGatewayClient,
        registry: ToolRegistry | None = None,
    ) -> None:
        self._gateway = gateway
        self._registry = registry or build_tool_registry()

    def list_tools(self) -> list[types.Tool]:
        """Return the static tool catalog."""
        return [
            types.Tool(
                name=d.name,
                description=d.description,
                inputSchema=d.input_schema(),
            )
            for d in self._registry.list_tools()
        ]

    async def call_tool(
        self, name: str, arguments: dict[str, Any] | None
    ) -> types.CallToolResult:
        """Validate arguments, invoke the tool and wrap the outcome.

        Never raises for unknown tools, bad arguments or gateway failures;
        those come back as error envelopes.
        """
        try:
            descriptor = self._registry.get(name)
            args = self._validate(descriptor, arguments)
            result = await descriptor.handler(self._gateway, args)
        except (DispatchError, GatewayError) as e:
            logger.warning("Tool %s failed: %s", name, e)
            return error_result(str(e))

        if descriptor.raw_text:
            return text_result(str(result))
        return text_result(to_json_text(result))

    def list_resources(self) -> list[types.Resource]:
        """Return the static resource catalog."""
        return [
            types.Resource(
                uri=r.uri,
                name=r.name,
                description=r.description,
                mimeType=r.mime_type,
            )
            for r in RESOURCES
        ]

    async def resolve_resource(self, uri: str) -> NetworkStatus | GatewayConfig:
        """Return the snapshot behind a resource URI.

        Raises:
            UnknownResourceError: If uri is not in the catalog.
        """
        descriptor = find_resource(_normalize_uri(uri))
        return await descriptor.reader(self._gateway)

    async def read_resource(self, uri: str) -> list[ReadResourceContents]:
        """Read a resource as JSON content.

        Raises:
            UnknownResourceError: If uri is not in the catalog. Not recovered.
        """
        snapshot = await self.resolve_resource(uri)
        mime_type = find_resource(_normalize_uri(uri)).mime_type
        return [ReadResourceContents(content=to_json_text(snapshot), mime_type=mime_type)]

    @staticmethod
    def _validate(descriptor: ToolDescriptor, arguments: dict[str, Any] | None) -> Any:
        try:
            return descriptor.arguments.model_validate(arguments or {})
        except ValidationError as e:
            raise ToolArgumentsError(descriptor.name, _format_validation_error(e)) from e


def _normalize_uri(uri: Any) -> str:
    # AnyUrl may render custom-scheme URIs with a trailing slash
    return str(uri).rstrip("/")
