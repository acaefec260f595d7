"""Tool and resource catalog.

Maintains the fixed set of MCP tools and resources the server exposes.
Each tool pairs a pydantic argument model (its input schema) with a
handler that calls the gateway. Lookups fail closed on unknown names.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from walrus_mcp.config import GatewayConfig
from walrus_mcp.server.errors import UnknownResourceError, UnknownToolError
from walrus_mcp.storage.gateway import DEFAULT_EPOCHS, DEFAULT_LIST_LIMIT, WalrusGatewayClient
from walrus_mcp.storage.models import (
    BlobListing,
    BlobRecord,
    DeleteOutcome,
    NetworkStatus,
)

logger = logging.getLogger(__name__)

RESOURCE_SCHEME = "walrus"
JSON_MIME_TYPE = "application/json"

ToolHandler = Callable[[WalrusGatewayClient, Any], Awaitable[Any]]
ResourceReader = Callable[[WalrusGatewayClient], Awaitable[NetworkStatus | GatewayConfig]]


class DuplicateToolError(Exception):
    """Raised when attempting to register a tool name twice."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool already registered: {name}")


class ToolArguments(BaseModel):
    model_config = ConfigDict(populate_by_name=True, strict=True)


class StoreBlobArguments(ToolArguments):
    data: str = Field(description="Base64 encoded data or file path to store")
    epochs: int = Field(
        default=DEFAULT_EPOCHS,
        ge=1,
        description=f"Number of epochs to store the blob (default: {DEFAULT_EPOCHS})",
    )


class BlobIdArguments(ToolArguments):
    blob_id: str = Field(alias="blobId", description="The blob ID")


class GetBlobArguments(BlobIdArguments):
    blob_id: str = Field(alias="blobId", description="The blob ID to retrieve")


class GetBlobInfoArguments(BlobIdArguments):
    blob_id: str = Field(alias="blobId", description="The blob ID to get information about")


class DeleteBlobArguments(BlobIdArguments):
    blob_id: str = Field(alias="blobId", description="The blob ID to delete")


class ListBlobsArguments(ToolArguments):
    limit: int = Field(
        default=DEFAULT_LIST_LIMIT,
        ge=0,
        description=f"Maximum number of blobs to list (default: {DEFAULT_LIST_LIMIT})",
    )


@dataclass(frozen=True, slots=True)
class ToolDescriptor:
    """Describes one MCP tool.

    Attributes:
        name: Tool name as seen by the host.
        description: Human-readable description.
        arguments: Pydantic model validating the tool arguments.
        handler: Coroutine function (gateway, validated arguments) -> result.
        raw_text: If True the handler returns a string sent as-is instead of JSON.
    """

    name: str
    description: str
    arguments: type[ToolArguments]
    handler: ToolHandler
    raw_text: bool = False

    def input_schema(self) -> dict[str, Any]:
        """JSON schema of the tool arguments, using wire (alias) names."""
        return self.arguments.model_json_schema(by_alias=True)


@dataclass(frozen=True, slots=True)
class ResourceDescriptor:
    """Describes one read-only MCP resource."""

    uri: str
    name: str
    description: str
    reader: ResourceReader
    mime_type: str = JSON_MIME_TYPE


@dataclass
class ToolRegistry:
    """Registry of tool descriptors keyed by name."""

    _tools: dict[str, ToolDescriptor] = field(default_factory=dict)

    def register(self, descriptor: ToolDescriptor) -> None:
        """Register a tool.

        Raises:
            DuplicateToolError: If a tool with the same name is already registered.
        """
        if descriptor.name in self._tools:
            raise DuplicateToolError(descriptor.name)
        self._tools[descriptor.name] = descriptor
        logger.debug("Registered tool: %s", descriptor.name)

    def get(self, name: str) -> ToolDescriptor:
        """Look up a tool by name.

        Raises:
            UnknownToolError: If name is not registered.
        """
        descriptor = self._tools.get(name)
        if descriptor is None:
            raise UnknownToolError(name)
        return descriptor

    def list_tools(self) -> list[ToolDescriptor]:
        """Return all descriptors in registration order."""
        return list(self._tools.values())

    @property
    def tool_names(self) -> frozenset[str]:
        return frozenset(self._tools.keys())


async def _store_blob(gateway: WalrusGatewayClient, args: StoreBlobArguments) -> BlobRecord:
    return await gateway.store(args.data, args.epochs)


async def _get_blob(gateway: WalrusGatewayClient, args: GetBlobArguments) -> str:
    return await gateway.fetch(args.blob_id)


async def _list_blobs(gateway: WalrusGatewayClient, args: ListBlobsArguments) -> BlobListing:
    return await gateway.list_blobs(args.limit)


async def _delete_blob(gateway: WalrusGatewayClient, args: DeleteBlobArguments) -> DeleteOutcome:
    return await gateway.delete(args.blob_id)


async def _get_blob_info(
    gateway: WalrusGatewayClient, args: GetBlobInfoArguments
) -> BlobRecord:
    return await gateway.inspect(args.blob_id)


async def _read_status(gateway: WalrusGatewayClient) -> NetworkStatus:
    return await gateway.get_network_status()


async def _read_config(gateway: WalrusGatewayClient) -> GatewayConfig:
    return gateway.get_config()


def build_tool_registry() -> ToolRegistry:
    """Build the fixed five-tool catalog."""
    registry = ToolRegistry()
    registry.register(
        ToolDescriptor(
            name="store_blob",
            description="Store a blob in Walrus decentralized storage",
            arguments=StoreBlobArguments,
            handler=_store_blob,
        )
    )
    registry.register(
        ToolDescriptor(
            name="get_blob",
            description="Retrieve a blob from Walrus storage",
            arguments=GetBlobArguments,
            handler=_get_blob,
            raw_text=True,
        )
    )
    registry.register(
        ToolDescriptor(
            name="list_blobs",
            description="List stored blobs",
            arguments=ListBlobsArguments,
            handler=_list_blobs,
        )
    )
    registry.register(
        ToolDescriptor(
            name="delete_blob",
            description="Delete a blob from Walrus storage",
            arguments=DeleteBlobArguments,
            handler=_delete_blob,
        )
    )
    registry.register(
        ToolDescriptor(
            name="get_blob_info",
            description="Get information about a blob (size, availability, etc.)",
            arguments=GetBlobInfoArguments,
            handler=_get_blob_info,
        )
    )
    return registry


RESOURCES: tuple[ResourceDescriptor, ...] = (
    ResourceDescriptor(
        uri=f"{RESOURCE_SCHEME}://status",
        name="Walrus Network Status",
        description="Current status and health of the Walrus network",
        reader=_read_status,
    ),
    ResourceDescriptor(
        uri=f"{RESOURCE_SCHEME}://config",
        name="Walrus Configuration",
        description="Current Walrus client configuration",
        reader=_read_config,
    ),
)


def find_resource(uri: str) -> ResourceDescriptor:
    """Look up a resource by URI. Fail-closed on unknown URIs.

    Raises:
        UnknownResourceError: If uri is not in the catalog.
    """
    for descriptor in RESOURCES:
        if descriptor.uri == uri:
            return descriptor
    raise UnknownResourceError(uri)
