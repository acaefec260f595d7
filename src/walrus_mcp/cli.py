"""Walrus MCP command-line interface.

Usage:
    walrus-mcp [serve] [--aggregator-url URL] [--publisher-url URL]
               [--system-object ID] [--wallet-path PATH] [--timeout SECONDS]
               [--log-level LEVEL]
    walrus-mcp config [same configuration flags]
    walrus-mcp hash [--input PATH|-]

Configuration flags override the WALRUS_* environment variables, which
override the built-in defaults.

Exit codes:
    0: Success
    1: Internal error
    2: Configuration or input error
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any

from walrus_mcp.config import GatewayConfig, GatewayConfigError, load_gateway_config
from walrus_mcp.logging_setup import configure_logging
from walrus_mcp.storage.gateway import content_hash


def _output_json(data: dict[str, Any]) -> None:
    """Output JSON to stdout with deterministic ordering."""
    print(json.dumps(data, sort_keys=True, indent=2))


def _error(message: str) -> None:
    print(f"error: {message}", file=sys.stderr)


def _config_from_args(args: argparse.Namespace) -> GatewayConfig:
    return load_gateway_config(
        aggregator_url=args.aggregator_url,
        publisher_url=args.publisher_url,
        system_object=args.system_object,
        wallet_path=args.wallet_path,
        timeout_seconds=args.timeout,
    )


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the MCP server on stdio."""
    from walrus_mcp.server.app import run_stdio

    configure_logging(args.log_level)
    try:
        config = _config_from_args(args)
    except GatewayConfigError as e:
        _error(str(e))
        return 2
    asyncio.run(run_stdio(config))
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    """Print the resolved configuration."""
    try:
        config = _config_from_args(args)
    except GatewayConfigError as e:
        _error(str(e))
        return 2
    _output_json(config.to_wire())
    return 0


def cmd_hash(args: argparse.Namespace) -> int:
    """Print the SHA-256 digest of a file or stdin."""
    try:
        if args.input in (None, "-"):
            data = sys.stdin.buffer.read()
        else:
            with open(args.input, "rb") as f:
                data = f.read()
    except OSError as e:
        _error(f"cannot read input: {e}")
        return 2
    print(content_hash(data))
    return 0


def _add_config_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--aggregator-url", metavar="URL", help="Read endpoint base URL")
    parser.add_argument("--publisher-url", metavar="URL", help="Write endpoint base URL")
    parser.add_argument("--system-object", metavar="ID", help="Walrus system object id")
    parser.add_argument("--wallet-path", metavar="PATH", help="Wallet file path")
    parser.add_argument(
        "--timeout", metavar="SECONDS", help="Per-request HTTP timeout in seconds"
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="walrus-mcp",
        description="MCP server for Walrus decentralized blob storage",
    )
    subparsers = parser.add_subparsers(dest="command")

    serve_parser = subparsers.add_parser("serve", help="Serve MCP over stdio (default)")
    _add_config_flags(serve_parser)
    serve_parser.add_argument("--log-level", metavar="LEVEL", help="Log level (default: INFO)")

    config_parser = subparsers.add_parser("config", help="Print resolved configuration")
    _add_config_flags(config_parser)

    hash_parser = subparsers.add_parser("hash", help="SHA-256 digest of a file")
    hash_parser.add_argument(
        "--input", metavar="PATH", help="File to hash, or '-' for stdin (default)"
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point. Without a command, flags are passed to serve."""
    try:
        argv = list(sys.argv[1:] if argv is None else argv)
        if not argv or (argv[0].startswith("-") and argv[0] not in ("-h", "--help")):
            argv.insert(0, "serve")
        parser = create_parser()
        args = parser.parse_args(argv)

        if args.command == "config":
            return cmd_config(args)
        if args.command == "hash":
            return cmd_hash(args)
        return cmd_serve(args)

    except KeyboardInterrupt:
        return 0
    except Exception as e:
        _error(f"internal error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
