"""Tests for WalrusGatewayClient.store.

Uses httpx.MockTransport for deterministic testing with no live network calls.
Verifies payload decoding, request shape, and normalization of both
publisher reply shapes.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import httpx
import pytest

from walrus_mcp.config import GatewayConfig
from walrus_mcp.storage.errors import StoreFailedError, UnexpectedResponseShapeError
from walrus_mcp.storage.gateway import WalrusGatewayClient, is_file_path

NEWLY_CREATED: dict[str, Any] = {
    "newlyCreated": {
        "blobObject": {
            "id": "0xstorage1",
            "blobId": "blob-new",
            "size": 42,
            "encodedSize": 65023,
        },
        "resourceObject": {"storage": {"startEpoch": 3, "endEpoch": 8}},
        "cost": 132300,
    }
}

ALREADY_CERTIFIED: dict[str, Any] = {
    "alreadyCertified": {
        "blobId": "blob-old",
        "certifiedEpoch": 2,
        "endEpoch": 12,
    }
}


def _make_client(
    status_code: int = 200,
    response_json: Any = None,
    raise_error: bool = False,
    seen: list[httpx.Request] | None = None,
) -> httpx.AsyncClient:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        if raise_error:
            raise httpx.ConnectError("Connection refused")
        body = response_json if response_json is not None else NEWLY_CREATED
        return httpx.Response(status_code=status_code, json=body)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _gateway(config: GatewayConfig, **kwargs: Any) -> WalrusGatewayClient:
    return WalrusGatewayClient(config, http_client=_make_client(**kwargs))


class TestPayloadShape:
    @pytest.mark.parametrize("payload", ["/abs/file.bin", "./rel.bin", "../up.bin"])
    def test_path_prefixes_are_files(self, payload: str) -> None:
        assert is_file_path(payload)

    @pytest.mark.parametrize("payload", ["SGVsbG8=", "file.bin", "~/file.bin", ""])
    def test_other_strings_are_base64(self, payload: str) -> None:
        assert not is_file_path(payload)


class TestStoreRequest:
    def test_base64_payload_is_decoded(self, gateway_config: GatewayConfig) -> None:
        seen: list[httpx.Request] = []
        gateway = _gateway(gateway_config, seen=seen)
        asyncio.run(gateway.store("SGVsbG8="))
        assert seen[0].content == b"Hello"

    @pytest.mark.parametrize("payload", ["SGVsbG8", "SGVsbG8="])
    def test_unpadded_base64_is_accepted(
        self, gateway_config: GatewayConfig, payload: str
    ) -> None:
        seen: list[httpx.Request] = []
        gateway = _gateway(gateway_config, seen=seen)
        asyncio.run(gateway.store(payload))
        assert seen[0].content == b"Hello"

    def test_file_payload_is_read(
        self,
        gateway_config: GatewayConfig,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        (tmp_path / "a.bin").write_bytes(b"\x00\x01local bytes")
        monkeypatch.chdir(tmp_path)
        seen: list[httpx.Request] = []
        gateway = _gateway(gateway_config, seen=seen)
        asyncio.run(gateway.store("./a.bin"))
        assert seen[0].content == b"\x00\x01local bytes"

    def test_put_to_publisher_with_epochs(self, gateway_config: GatewayConfig) -> None:
        seen: list[httpx.Request] = []
        gateway = _gateway(gateway_config, seen=seen)
        asyncio.run(gateway.store("SGVsbG8=", epochs=7))
        request = seen[0]
        assert request.method == "PUT"
        assert str(request.url).startswith("https://publisher.test/v1/store")
        assert request.url.params["epochs"] == "7"
        assert request.headers["content-type"] == "application/octet-stream"

    def test_default_epochs_is_five(self, gateway_config: GatewayConfig) -> None:
        seen: list[httpx.Request] = []
        gateway = _gateway(gateway_config, seen=seen)
        asyncio.run(gateway.store("SGVsbG8="))
        assert seen[0].url.params["epochs"] == "5"

    def test_exactly_one_attempt(self, gateway_config: GatewayConfig) -> None:
        seen: list[httpx.Request] = []
        gateway = _gateway(gateway_config, status_code=503, response_json={}, seen=seen)
        with pytest.raises(StoreFailedError):
            asyncio.run(gateway.store("SGVsbG8="))
        assert len(seen) == 1


class TestStoreNormalization:
    def test_newly_created(self, gateway_config: GatewayConfig) -> None:
        record = asyncio.run(_gateway(gateway_config).store("SGVsbG8="))
        assert record.blob_id == "blob-new"
        assert record.size == 42
        assert record.encoded_size == 65023
        assert record.storage_id == "0xstorage1"
        assert record.certified is True
        assert record.certified_epoch == 3
        assert record.end_epoch == 8

    def test_newly_created_without_resource_object_is_uncertified(
        self, gateway_config: GatewayConfig
    ) -> None:
        body = {"newlyCreated": {"blobObject": {"id": "0xs", "blobId": "b", "size": 1}}}
        record = asyncio.run(_gateway(gateway_config, response_json=body).store("SGVsbG8="))
        assert record.certified is False
        assert record.certified_epoch is None
        assert record.end_epoch is None

    def test_already_certified_reports_zero_size(self, gateway_config: GatewayConfig) -> None:
        gateway = _gateway(gateway_config, response_json=ALREADY_CERTIFIED)
        record = asyncio.run(gateway.store("SGVsbG8="))
        assert record.blob_id == "blob-old"
        assert record.size == 0
        assert record.encoded_size == 0
        assert record.storage_id == "blob-old"
        assert record.certified is True
        assert record.certified_epoch == 2
        assert record.end_epoch == 12

    def test_unrecognized_shape_is_fatal(self, gateway_config: GatewayConfig) -> None:
        gateway = _gateway(gateway_config, response_json={"markedInvalid": {}})
        with pytest.raises(UnexpectedResponseShapeError):
            asyncio.run(gateway.store("SGVsbG8="))


class TestStoreFailures:
    def test_remote_error_message_is_carried(self, gateway_config: GatewayConfig) -> None:
        gateway = _gateway(
            gateway_config, status_code=400, response_json={"error": "blob too large"}
        )
        with pytest.raises(StoreFailedError) as exc_info:
            asyncio.run(gateway.store("SGVsbG8="))
        assert str(exc_info.value) == "Failed to store blob: blob too large"
        assert exc_info.value.status_code == 400
        assert not exc_info.value.is_transport_failure

    def test_structured_remote_error(self, gateway_config: GatewayConfig) -> None:
        gateway = _gateway(
            gateway_config,
            status_code=500,
            response_json={"error": {"code": 500, "message": "storage nodes unavailable"}},
        )
        with pytest.raises(StoreFailedError, match="storage nodes unavailable"):
            asyncio.run(gateway.store("SGVsbG8="))

    def test_transport_error_text(self, gateway_config: GatewayConfig) -> None:
        gateway = _gateway(gateway_config, raise_error=True)
        with pytest.raises(StoreFailedError) as exc_info:
            asyncio.run(gateway.store("SGVsbG8="))
        assert "Connection refused" in str(exc_info.value)
        assert exc_info.value.is_transport_failure

    def test_missing_file(self, gateway_config: GatewayConfig, tmp_path: Path) -> None:
        seen: list[httpx.Request] = []
        gateway = _gateway(gateway_config, seen=seen)
        with pytest.raises(StoreFailedError, match="Failed to store blob"):
            asyncio.run(gateway.store(str(tmp_path / "missing.bin")))
        assert seen == []

    def test_invalid_base64(self, gateway_config: GatewayConfig) -> None:
        with pytest.raises(StoreFailedError, match="base64"):
            asyncio.run(_gateway(gateway_config).store("abcde"))

    def test_path_with_null_byte(self, gateway_config: GatewayConfig) -> None:
        seen: list[httpx.Request] = []
        gateway = _gateway(gateway_config, seen=seen)
        with pytest.raises(StoreFailedError, match="cannot read"):
            asyncio.run(gateway.store("/tmp/a\x00b"))
        assert seen == []
