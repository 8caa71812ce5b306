"""Model Context Protocol (MCP) tool invocation and result normalization."""

from .errors import (
    InvalidEnvelopeError,
    InvalidParamsError,
    McpError,
    MethodNotFoundError,
    ToolExecutionError,
)
from .handlers import handle_tool_call, invoke_tool, resolve_tool
from .normalize import (
    normalize_tool_error,
    normalize_tool_result,
    normalize_tool_result_safe,
)
from .protocol import CallRequest, ToolSpec, ValidationIssue, ValidationResult
from .registry import ToolRegistry
from .tool import BaseTool, FunctionTool, tool

__all__ = [
    "BaseTool",
    "CallRequest",
    "FunctionTool",
    "InvalidEnvelopeError",
    "InvalidParamsError",
    "McpError",
    "MethodNotFoundError",
    "ToolExecutionError",
    "ToolRegistry",
    "ToolSpec",
    "ValidationIssue",
    "ValidationResult",
    "handle_tool_call",
    "invoke_tool",
    "normalize_tool_error",
    "normalize_tool_result",
    "normalize_tool_result_safe",
    "resolve_tool",
    "tool",
]
