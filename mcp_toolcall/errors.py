"""
Error taxonomy for the MCP tool-call layer.

Protocol-level failures derive from :class:`McpError` and map onto JSON-RPC
error objects. Failures raised inside a tool never cross the invocation
boundary; they are rendered into an ``isError`` envelope instead.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .protocol import ValidationIssue

# Standard JSON-RPC error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class McpError(Exception):
    """Base class for errors that surface as JSON-RPC errors."""

    code: int = INTERNAL_ERROR

    def __init__(self, message: str, *, data: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.data = data

    def to_jsonrpc(self) -> Dict[str, Any]:
        error: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            error["data"] = self.data
        return error


class ParseError(McpError, ValueError):
    """Request body is not valid JSON."""

    code = PARSE_ERROR


class InvalidRequestError(McpError, ValueError):
    """Message is not a well-formed JSON-RPC request."""

    code = INVALID_REQUEST


class MethodNotFoundError(McpError, LookupError):
    """Requested tool or method is not registered."""

    code = METHOD_NOT_FOUND


class InvalidParamsError(McpError, ValueError):
    """Request parameters were rejected."""

    code = INVALID_PARAMS


class InvalidEnvelopeError(McpError, ValueError):
    """A tool returned a value shaped like a CallToolResult that fails validation."""

    def __init__(self, message: str, errors: Optional[List[ValidationIssue]] = None) -> None:
        self.errors = list(errors or [])
        super().__init__(
            message,
            data={"errors": [issue.model_dump() for issue in self.errors]} if self.errors else None,
        )


class ToolExecutionError(RuntimeError):
    """Typed failure a tool may raise from its own logic."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "tool_error",
        retryable: bool = False,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.retryable = retryable
        self.details = details or {}
