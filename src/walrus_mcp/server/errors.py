"""Dispatcher error types.

Tool errors are recovered by the dispatcher and surfaced as soft error
envelopes. UnknownResourceError is the exception: it propagates to the
protocol layer as a hard fault for that single request.
"""

from __future__ import annotations


class DispatchError(Exception):
    """Base exception for dispatcher routing and validation failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UnknownToolError(DispatchError):
    """Raised when a tool name is not in the catalog."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class UnknownResourceError(DispatchError):
    """Raised when a resource URI is not in the catalog."""

    def __init__(self, uri: str) -> None:
        self.uri = uri
        super().__init__(f"Unknown resource: {uri}")


class ToolArgumentsError(DispatchError):
    """Raised when tool arguments violate the tool's input schema."""

    def __init__(self, tool: str, detail: str) -> None:
        self.tool = tool
        self.detail = detail
        super().__init__(f"Invalid arguments for {tool}: {detail}")
