"""Walrus storage gateway.

Client for the Walrus publisher (writes) and aggregator (reads), with
typed results and errors.

Environment Variables:
    See walrus_mcp.config.
"""

from walrus_mcp.storage.errors import (
    BlobNotFoundError,
    FetchFailedError,
    GatewayError,
    GatewayRequestError,
    InspectFailedError,
    StoreFailedError,
    UnexpectedResponseShapeError,
)
from walrus_mcp.storage.gateway import WalrusGatewayClient
from walrus_mcp.storage.models import BlobListing, BlobRecord, DeleteOutcome, NetworkStatus

__all__ = [
    "WalrusGatewayClient",
    "BlobRecord",
    "BlobListing",
    "DeleteOutcome",
    "NetworkStatus",
    "GatewayError",
    "GatewayRequestError",
    "BlobNotFoundError",
    "StoreFailedError",
    "FetchFailedError",
    "InspectFailedError",
    "UnexpectedResponseShapeError",
]
