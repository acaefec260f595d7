"""Gateway configuration for the Walrus MCP server.

Configuration is resolved once at process start and passed by value
thereafter. Each option falls back through:

    explicit override -> environment variable -> hardcoded default

Environment Variables:
    WALRUS_AGGREGATOR_URL: Read endpoint (aggregator) base URL.
    WALRUS_PUBLISHER_URL: Write endpoint (publisher) base URL.
    WALRUS_SYSTEM_OBJECT: Walrus system object id on Sui.
    WALRUS_WALLET_PATH: Optional wallet file path (reported, never used for signing).
    WALRUS_TIMEOUT_SECONDS: Per-request HTTP timeout (default: 30).

Empty or whitespace-only values are treated as unset. Invalid values fail
closed with GatewayConfigError instead of silently falling back.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field

WALRUS_AGGREGATOR_URL_ENV = "WALRUS_AGGREGATOR_URL"
WALRUS_PUBLISHER_URL_ENV = "WALRUS_PUBLISHER_URL"
WALRUS_SYSTEM_OBJECT_ENV = "WALRUS_SYSTEM_OBJECT"
WALRUS_WALLET_PATH_ENV = "WALRUS_WALLET_PATH"
WALRUS_TIMEOUT_SECONDS_ENV = "WALRUS_TIMEOUT_SECONDS"

DEFAULT_AGGREGATOR_URL = "https://aggregator-devnet.walrus.space"
DEFAULT_PUBLISHER_URL = "https://publisher-devnet.walrus.space"
DEFAULT_SYSTEM_OBJECT = "0x37c0e4d7b36a2f64d51bba262a1791f844cfd88f19c35b5ca709e1a6991e90dc"
DEFAULT_TIMEOUT_SECONDS = 30.0

# field name -> environment variable
ENV_VARS: dict[str, str] = {
    "aggregator_url": WALRUS_AGGREGATOR_URL_ENV,
    "publisher_url": WALRUS_PUBLISHER_URL_ENV,
    "system_object": WALRUS_SYSTEM_OBJECT_ENV,
    "wallet_path": WALRUS_WALLET_PATH_ENV,
    "timeout_seconds": WALRUS_TIMEOUT_SECONDS_ENV,
}

DEFAULTS: dict[str, Any] = {
    "aggregator_url": DEFAULT_AGGREGATOR_URL,
    "publisher_url": DEFAULT_PUBLISHER_URL,
    "system_object": DEFAULT_SYSTEM_OBJECT,
    "wallet_path": None,
    "timeout_seconds": DEFAULT_TIMEOUT_SECONDS,
}


class GatewayConfigError(Exception):
    """Raised when a configuration value is present but invalid."""


class GatewayConfig(BaseModel):
    """Immutable gateway configuration.

    Attributes:
        aggregator_url: Read endpoint base URL, no trailing slash.
        publisher_url: Write endpoint base URL, no trailing slash.
        system_object: Walrus system object id.
        wallet_path: Optional wallet file path.
        timeout_seconds: Per-request HTTP timeout; the only bound on a hung call.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    aggregator_url: str = Field(alias="aggregatorUrl")
    publisher_url: str = Field(alias="publisherUrl")
    system_object: str = Field(alias="systemObject")
    wallet_path: str | None = Field(default=None, alias="wallet")
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0, alias="timeoutSeconds")

    def to_wire(self) -> dict[str, Any]:
        """Serialize with camelCase keys, omitting an unset wallet."""
        return self.model_dump(by_alias=True, exclude_none=True)


def _clean(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _parse_timeout(raw: Any, source: str) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError) as e:
        raise GatewayConfigError(f"{source} must be a positive number, got '{raw}'") from e
    if value <= 0:
        raise GatewayConfigError(f"{source} must be a positive number, got {value}")
    return value


def _normalize_url(raw: str, source: str) -> str:
    parts = urlsplit(raw)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise GatewayConfigError(f"{source} must be an http(s) URL, got '{raw}'")
    return raw.rstrip("/")


def resolve_gateway_config(
    overrides: Mapping[str, Any] | None,
    environ: Mapping[str, str],
    defaults: Mapping[str, Any] = DEFAULTS,
) -> GatewayConfig:
    """Resolve a fully-populated GatewayConfig.

    Pure function: the environment is passed in as a snapshot so the
    fallback chain can be tested without touching os.environ.

    Args:
        overrides: Explicit values (e.g. CLI flags). None values are skipped.
        environ: Environment snapshot.
        defaults: Hardcoded fallbacks.

    Returns:
        Resolved, immutable GatewayConfig.

    Raises:
        GatewayConfigError: If a resolved value is invalid.
    """
    overrides = overrides or {}
    unknown = set(overrides) - set(ENV_VARS)
    if unknown:
        raise GatewayConfigError(f"Unknown configuration option(s): {sorted(unknown)}")

    resolved: dict[str, Any] = {}
    sources: dict[str, str] = {}
    for name, env_var in ENV_VARS.items():
        override = _clean(overrides.get(name))
        env_value = _clean(environ.get(env_var))
        if override is not None:
            resolved[name], sources[name] = override, f"override '{name}'"
        elif env_value is not None:
            resolved[name], sources[name] = env_value, env_var
        else:
            resolved[name], sources[name] = defaults.get(name), f"default '{name}'"

    for name in ("aggregator_url", "publisher_url"):
        resolved[name] = _normalize_url(str(resolved[name]), sources[name])
    resolved["timeout_seconds"] = _parse_timeout(
        resolved["timeout_seconds"], sources["timeout_seconds"]
    )

    return GatewayConfig(**resolved)


def load_gateway_config(**overrides: Any) -> GatewayConfig:
    """Resolve configuration against the live process environment."""
    return resolve_gateway_config(overrides, os.environ)
