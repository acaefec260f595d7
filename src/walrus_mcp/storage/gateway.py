"""Walrus storage gateway client.

Sole owner of outbound HTTP calls. Translates logical blob operations into
requests against the publisher (writes) and aggregator (reads):

    PUT  {publisher}/v1/store?epochs={n}   raw bytes, application/octet-stream
    GET  {aggregator}/v1/{blob_id}         blob bytes
    HEAD {aggregator}/v1/{blob_id}         metadata probe

Each operation makes exactly one attempt; there is no retry policy.
list_blobs, delete_blob and get_network_status do not reach the network:
Walrus has no enumeration or deletion primitive and no status endpoint.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import logging
import urllib.parse
from pathlib import Path
from typing import Any

import httpx

from walrus_mcp.config import GatewayConfig
from walrus_mcp.storage.errors import (
    BlobNotFoundError,
    FetchFailedError,
    GatewayRequestError,
    InspectFailedError,
    StoreFailedError,
)
from walrus_mcp.storage.models import (
    DELETE_UNSUPPORTED_MESSAGE,
    PLACEHOLDER_NETWORK_STATUS,
    BlobListing,
    BlobRecord,
    DeleteOutcome,
    NetworkStatus,
)
from walrus_mcp.storage.replies import parse_publisher_reply

logger = logging.getLogger(__name__)

DEFAULT_EPOCHS = 5
DEFAULT_LIST_LIMIT = 10
FILE_PATH_PREFIXES = ("/", "./", "../")
OCTET_STREAM = "application/octet-stream"


def is_file_path(payload: str) -> bool:
    """Return True if payload is shaped like a local filesystem path."""
    return payload.startswith(FILE_PATH_PREFIXES)


def decode_payload(payload: str | bytes) -> bytes:
    """Decode a base64 payload; bytes pass through unchanged.

    Raises:
        binascii.Error: If payload is not valid base64.
    """
    if isinstance(payload, bytes):
        return payload
    # unpadded input is accepted
    return base64.b64decode(payload + "=" * (-len(payload) % 4))


def content_hash(payload: str | bytes) -> str:
    """SHA-256 hex digest over the exact payload bytes.

    String payloads are base64-decoded first.
    """
    return hashlib.sha256(decode_payload(payload)).hexdigest()


def remote_error_text(response: httpx.Response) -> str:
    """Extract the remote error message from a failed response.

    Walrus replies with {"error": "..."} or {"error": {"message": "..."}};
    anything else falls back to the HTTP status.
    """
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
    return f"HTTP {response.status_code}"


class WalrusGatewayClient:
    """Async client for the Walrus publisher and aggregator.

    Args:
        config: Resolved gateway configuration.
        http_client: Optional httpx.AsyncClient for dependency injection
            (testing). When omitted, a client is created per call with the
            configured timeout and closed afterwards.
    """

    def __init__(
        self,
        config: GatewayConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._http_client = http_client

    async def store(self, payload: str, epochs: int = DEFAULT_EPOCHS) -> BlobRecord:
        """Store a blob on the publisher.

        Args:
            payload: Local file path (leading '/', './' or '../') or
                base64-encoded bytes.
            epochs: Number of epochs the blob is retained for.

        Returns:
            BlobRecord normalized from either publisher reply shape.

        Raises:
            StoreFailedError: On unreadable input or a failed request.
            UnexpectedResponseShapeError: If the reply matches no known shape.
        """
        data = self._read_payload(payload)
        url = f"{self._config.publisher_url}/v1/store"
        body = await self._request_json(
            "PUT",
            url,
            error_cls=StoreFailedError,
            params={"epochs": str(epochs)},
            content=data,
            headers={"Content-Type": OCTET_STREAM},
        )
        record = parse_publisher_reply(body).to_record()
        logger.info(
            "Stored blob %s (%d bytes, epochs=%d, certified=%s)",
            record.blob_id,
            len(data),
            epochs,
            record.certified,
        )
        return record

    async def fetch(self, blob_id: str) -> str:
        """Read a blob from the aggregator.

        Returns:
            Blob bytes, base64-encoded.

        Raises:
            BlobNotFoundError: If the aggregator answers 404.
            FetchFailedError: On any other failure.
        """
        response = await self._send(
            "GET", self._blob_url(blob_id), blob_id=blob_id, error_cls=FetchFailedError
        )
        return base64.b64encode(response.content).decode("ascii")

    async def inspect(self, blob_id: str) -> BlobRecord:
        """Probe blob metadata with a HEAD request.

        Size comes from Content-Length. A successful probe is taken as
        proof of certification; this is an approximation, not a verified
        on-chain check.

        Raises:
            BlobNotFoundError: If the aggregator answers 404.
            InspectFailedError: On any other failure.
        """
        response = await self._send(
            "HEAD", self._blob_url(blob_id), blob_id=blob_id, error_cls=InspectFailedError
        )
        size = _content_length(response)
        return BlobRecord(
            blob_id=blob_id,
            size=size,
            encoded_size=size,
            storage_id=blob_id,
            certified=True,
        )

    async def exists(self, blob_id: str) -> bool:
        """Return whether the aggregator serves the blob.

        Only a 404 answers False. Transport errors and other failures raise
        InspectFailedError so they are not mistaken for a missing blob.
        """
        try:
            await self._send(
                "HEAD", self._blob_url(blob_id), blob_id=blob_id, error_cls=InspectFailedError
            )
        except BlobNotFoundError:
            return False
        return True

    async def list_blobs(self, limit: int = DEFAULT_LIST_LIMIT) -> BlobListing:
        """Return an empty, unsupported listing for any limit."""
        logger.warning("list_blobs(limit=%d): Walrus does not provide native blob listing", limit)
        return BlobListing()

    async def delete(self, blob_id: str) -> DeleteOutcome:
        """Walrus blobs expire by epoch; deletion always fails gracefully."""
        return DeleteOutcome(success=False, message=DELETE_UNSUPPORTED_MESSAGE)

    async def get_network_status(self) -> NetworkStatus:
        """Return the placeholder network status (not a live read)."""
        return PLACEHOLDER_NETWORK_STATUS

    def get_config(self) -> GatewayConfig:
        """Return a copy of the process configuration."""
        return self._config.model_copy()

    def hash(self, payload: str | bytes) -> str:
        """SHA-256 hex digest of a base64 string or raw bytes."""
        return content_hash(payload)

    def _blob_url(self, blob_id: str) -> str:
        encoded = urllib.parse.quote(blob_id, safe="")
        return f"{self._config.aggregator_url}/v1/{encoded}"

    @staticmethod
    def _read_payload(payload: str) -> bytes:
        if is_file_path(payload):
            try:
                return Path(payload).read_bytes()
            except (OSError, ValueError) as e:
                raise StoreFailedError(f"cannot read {payload}: {e}", cause=e) from e
        try:
            return decode_payload(payload)
        except (binascii.Error, ValueError) as e:
            raise StoreFailedError(f"payload is not valid base64: {e}", cause=e) from e

    async def _request_json(
        self,
        method: str,
        url: str,
        *,
        error_cls: type[GatewayRequestError],
        **kwargs: Any,
    ) -> Any:
        response = await self._send(method, url, error_cls=error_cls, **kwargs)
        try:
            return response.json()
        except ValueError as e:
            raise error_cls(
                f"invalid JSON from {url}", status_code=response.status_code, cause=e
            ) from e

    async def _send(
        self,
        method: str,
        url: str,
        *,
        error_cls: type[GatewayRequestError],
        blob_id: str | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Execute one HTTP request and map failures onto gateway errors.

        Raises:
            BlobNotFoundError: On 404 when blob_id is given.
            GatewayRequestError: error_cls on any other failure.
        """
        client = self._http_client
        should_close = False
        if client is None:
            client = httpx.AsyncClient(
                timeout=self._config.timeout_seconds, follow_redirects=True
            )
            should_close = True
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise error_cls(str(e) or type(e).__name__, blob_id=blob_id, cause=e) from e
        finally:
            if should_close:
                await client.aclose()

        if response.status_code == 404 and blob_id is not None:
            raise BlobNotFoundError(blob_id)
        if response.is_error:
            detail = remote_error_text(response)
            logger.warning(
                "%s %s returned %d: %s", method, url, response.status_code, detail
            )
            raise error_cls(detail, blob_id=blob_id, status_code=response.status_code)
        return response


def _content_length(response: httpx.Response) -> int:
    raw = response.headers.get("content-length", "0")
    try:
        return max(int(raw), 0)
    except ValueError:
        return 0
