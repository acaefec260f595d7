"""Walrus gateway value types.

All models are frozen. Python attributes are snake_case; the JSON wire
form (tool output, resource bodies, publisher replies) is camelCase.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DELETE_UNSUPPORTED_MESSAGE = (
    "Walrus blobs cannot be manually deleted. "
    "They will expire automatically based on their storage epochs."
)
LIST_UNSUPPORTED_MESSAGE = (
    "Walrus does not provide native blob listing. "
    "Consider maintaining a local index."
)


class WireModel(BaseModel):
    """Base for frozen camelCase wire models."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_wire(self) -> dict[str, Any]:
        """Serialize with camelCase keys, dropping unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class BlobRecord(WireModel):
    """Normalized description of a stored blob.

    Attributes:
        blob_id: Identifier assigned by the remote service.
        size: Logical size in bytes (0 when the remote did not report it).
        encoded_size: Erasure-encoded size in bytes (0 when unknown).
        storage_id: Storage object reference.
        certified: Whether the blob is considered certified.
        certified_epoch: Epoch of certification, if known.
        end_epoch: Epoch after which the blob expires, if known.
    """

    blob_id: str
    size: int = Field(ge=0)
    encoded_size: int = Field(ge=0)
    storage_id: str
    certified: bool
    certified_epoch: int | None = None
    end_epoch: int | None = None


class NetworkStatus(WireModel):
    """Walrus network summary.

    Not a live read: the gateway returns a fixed value flagged with
    placeholder=True until a Sui metadata query exists.
    """

    epoch: int
    network_size: int
    total_stored: int
    available_storage: int
    placeholder: bool = False


PLACEHOLDER_NETWORK_STATUS = NetworkStatus(
    epoch=1,
    network_size=100,
    total_stored=1_000_000,
    available_storage=10_000_000,
    placeholder=True,
)


class DeleteOutcome(WireModel):
    """Result of a delete request."""

    success: bool
    message: str


class BlobListing(WireModel):
    """Result of a list request.

    The aggregator has no enumeration primitive, so listings are always
    empty and flagged supported=False.
    """

    blob_ids: tuple[str, ...] = ()
    supported: bool = False
    message: str = LIST_UNSUPPORTED_MESSAGE
