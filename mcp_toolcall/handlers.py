"""
Handler for the MCP ``tools/call`` method.

Resolves the tool by exact name, invokes it once and normalizes whatever it
produced. Only an unknown tool name escapes as an exception
(:class:`MethodNotFoundError`); failures inside the tool, and malformed
results, come back as ``isError`` envelopes.
"""

from __future__ import annotations

import inspect
import time
from collections.abc import Mapping
from typing import Any, Dict, Iterable, Optional, Union

from .errors import MethodNotFoundError
from .normalize import normalize_tool_error, normalize_tool_result_safe
from .protocol import CallRequest, ResultEnvelope
from .tool import BaseTool
from ._logging import get_logger

logger = get_logger(__name__)


def resolve_tool(name: str, tools: Iterable[BaseTool]) -> BaseTool:
    """Return the first tool named ``name``; order of ``tools`` decides duplicates."""
    for candidate in tools:
        if candidate.name == name:
            return candidate
    logger.warning("Requested MCP tool not found", tool=name)
    raise MethodNotFoundError(f"Tool not found: {name}")


async def invoke_tool(tool: BaseTool, arguments: Optional[Dict[str, Any]] = None) -> ResultEnvelope:
    """Execute ``tool`` exactly once and normalize the outcome. Never raises for tool failures."""
    if arguments is None:
        arguments = {}

    started = time.perf_counter()
    logger.debug("Tool invocation started", tool=tool.name)

    try:
        result = tool.execute(arguments)
        if inspect.isawaitable(result):
            result = await result
    except Exception as exc:
        logger.warning(
            "Tool invocation failed",
            tool=tool.name,
            error_type=type(exc).__name__,
            duration_ms=int((time.perf_counter() - started) * 1000),
            exc_info=True,
        )
        return normalize_tool_error(exc)

    envelope = normalize_tool_result_safe(result)
    logger.info(
        "Tool invocation completed",
        tool=tool.name,
        is_error=envelope.get("isError", False),
        duration_ms=int((time.perf_counter() - started) * 1000),
    )
    return envelope


async def handle_tool_call(
    request: Union[CallRequest, Mapping],
    tools: Iterable[BaseTool],
) -> ResultEnvelope:
    """
    Handle a tools/call request.

    Args:
        request: CallRequest or a decoded ``{"name": ..., "arguments": ...}`` mapping
        tools: Registered tools, scanned in order

    Returns:
        CallToolResult envelope

    Raises:
        MethodNotFoundError: no tool is registered under ``request.name``
    """
    if isinstance(request, CallRequest):
        name, arguments = request.name, request.arguments
    else:
        name, arguments = request.get("name"), request.get("arguments")

    tool = resolve_tool(name, tools)
    return await invoke_tool(tool, arguments)
