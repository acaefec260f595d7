"""Walrus gateway error types.

Every error carries a human-readable message that starts with a fixed
prefix naming the failed operation, followed by the remote-supplied text
when there is any, else the transport error text.
"""

from __future__ import annotations

STORE_FAILED_PREFIX = "Failed to store blob"
FETCH_FAILED_PREFIX = "Failed to retrieve blob"
INSPECT_FAILED_PREFIX = "Failed to get blob info"


class GatewayError(Exception):
    """Base exception for gateway operations.

    Attributes:
        message: Human-readable error message.
        blob_id: Blob identifier associated with the operation (if applicable).
    """

    def __init__(self, message: str, *, blob_id: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.blob_id = blob_id

    def __str__(self) -> str:
        return self.message


class BlobNotFoundError(GatewayError):
    """Raised when the aggregator answers 404 for a blob id."""

    def __init__(self, blob_id: str) -> None:
        super().__init__(f"Blob not found: {blob_id}", blob_id=blob_id)


class UnexpectedResponseShapeError(GatewayError):
    """Raised when a successful publisher reply matches no known shape."""

    def __init__(
        self,
        message: str = f"{STORE_FAILED_PREFIX}: unexpected response format from Walrus publisher",
    ) -> None:
        super().__init__(message)


class GatewayRequestError(GatewayError):
    """Base for failed remote operations.

    Attributes:
        status_code: HTTP status of the failing response, or None when the
            request never got a response (network error, timeout).
        cause: Underlying exception, if any.
    """

    prefix = "Gateway request failed"

    def __init__(
        self,
        detail: str,
        *,
        blob_id: str | None = None,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(f"{self.prefix}: {detail}", blob_id=blob_id)
        self.detail = detail
        self.status_code = status_code
        self.cause = cause

    @property
    def is_transport_failure(self) -> bool:
        """True when no HTTP response was received."""
        return self.status_code is None


class StoreFailedError(GatewayRequestError):
    """Raised when a blob cannot be written to the publisher."""

    prefix = STORE_FAILED_PREFIX


class FetchFailedError(GatewayRequestError):
    """Raised when a blob cannot be read from the aggregator."""

    prefix = FETCH_FAILED_PREFIX


class InspectFailedError(GatewayRequestError):
    """Raised when blob metadata cannot be read from the aggregator."""

    prefix = INSPECT_FAILED_PREFIX
