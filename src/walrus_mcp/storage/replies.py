"""Publisher reply shapes for PUT /v1/store.

The publisher answers a successful store with exactly one of two objects:

    {"newlyCreated": {"blobObject": {...}, "resourceObject": {...}}}
    {"alreadyCertified": {"blobId": ..., "certifiedEpoch": ..., "endEpoch": ...}}

parse_publisher_reply() maps the body onto one arm of that union. Any
other body is the unrecognized arm and raises UnexpectedResponseShapeError.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, ValidationError

from walrus_mcp.storage.errors import STORE_FAILED_PREFIX, UnexpectedResponseShapeError
from walrus_mcp.storage.models import BlobRecord, WireModel


class BlobObject(WireModel):
    id: str
    blob_id: str
    size: int = Field(default=0, ge=0)
    encoded_size: int = Field(default=0, ge=0)


class StorageWindow(WireModel):
    start_epoch: int | None = None
    end_epoch: int | None = None


class ResourceObject(WireModel):
    storage: StorageWindow | None = None


class NewlyCreated(WireModel):
    blob_object: BlobObject
    resource_object: ResourceObject | None = None


class AlreadyCertified(WireModel):
    blob_id: str
    certified_epoch: int | None = None
    end_epoch: int | None = None


class NewlyCreatedReply(WireModel):
    """The blob was registered and stored by this request."""

    newly_created: NewlyCreated

    def to_record(self) -> BlobRecord:
        blob = self.newly_created.blob_object
        resource = self.newly_created.resource_object
        storage = resource.storage if resource is not None else None
        return BlobRecord(
            blob_id=blob.blob_id,
            size=blob.size,
            encoded_size=blob.encoded_size,
            storage_id=blob.id,
            certified=resource is not None,
            certified_epoch=storage.start_epoch if storage is not None else None,
            end_epoch=storage.end_epoch if storage is not None else None,
        )


class AlreadyCertifiedReply(WireModel):
    """The blob already existed and is certified; sizes are not reported."""

    already_certified: AlreadyCertified

    def to_record(self) -> BlobRecord:
        info = self.already_certified
        return BlobRecord(
            blob_id=info.blob_id,
            size=0,
            encoded_size=0,
            storage_id=info.blob_id,
            certified=True,
            certified_epoch=info.certified_epoch,
            end_epoch=info.end_epoch,
        )


PublisherReply = NewlyCreatedReply | AlreadyCertifiedReply


def parse_publisher_reply(body: Any) -> PublisherReply:
    """Match a decoded publisher body against the known reply shapes.

    Args:
        body: Decoded JSON body of a successful store response.

    Returns:
        The matching reply arm.

    Raises:
        UnexpectedResponseShapeError: If the body matches no known shape,
            or a known shape is missing required fields.
    """
    if not isinstance(body, dict):
        raise UnexpectedResponseShapeError()

    model: type[PublisherReply]
    if body.get("newlyCreated"):
        model = NewlyCreatedReply
    elif body.get("alreadyCertified"):
        model = AlreadyCertifiedReply
    else:
        raise UnexpectedResponseShapeError()

    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise UnexpectedResponseShapeError(
            f"{STORE_FAILED_PREFIX}: malformed {model.__name__} from Walrus publisher "
            f"({e.error_count()} validation error(s))"
        ) from e
