"""Ordered in-memory registry of MCP tools."""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional

from .protocol import ToolSpec
from .tool import BaseTool, ExecuteFn, FunctionTool
from ._logging import get_logger

logger = get_logger(__name__)


class ToolRegistry:
    """
    Append-mostly, ordered collection of tools.

    Names are not required to be unique. Lookups scan in registration order
    and the first match wins, so a later tool with a duplicate name is
    shadowed until the earlier one is unregistered. Concurrent mutation while
    a lookup is in progress is left to the owner to synchronize.
    """

    def __init__(self) -> None:
        self._tools: List[BaseTool] = []

    def register(self, tool: BaseTool) -> BaseTool:
        """Append a tool implementation."""
        if self.find(tool.name) is not None:
            logger.warning(
                "Duplicate MCP tool name; earlier registration keeps priority",
                tool=tool.name,
            )
        self._tools.append(tool)
        logger.info("Registered MCP tool", tool=tool.name)
        return tool

    def register_function(
        self,
        fn: ExecuteFn,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        parameter_schema: Optional[Dict[str, Any]] = None,
    ) -> FunctionTool:
        """Wrap ``fn`` in a FunctionTool and register it."""
        wrapped = FunctionTool(fn, name=name, description=description, parameter_schema=parameter_schema)
        self.register(wrapped)
        return wrapped

    def unregister(self, tool_name: str) -> int:
        """Remove every tool registered under ``tool_name``; returns how many were removed."""
        before = len(self._tools)
        self._tools = [tool for tool in self._tools if tool.name != tool_name]
        removed = before - len(self._tools)
        if removed:
            logger.info("Unregistered MCP tool", tool=tool_name, removed=removed)
        return removed

    def find(self, tool_name: str) -> Optional[BaseTool]:
        for tool in self._tools:
            if tool.name == tool_name:
                return tool
        return None

    def list_tools(self) -> List[ToolSpec]:
        """Return ToolSpec list for discovery, in registration order."""
        return [tool.spec() for tool in self._tools]

    def __iter__(self) -> Iterator[BaseTool]:
        # Snapshot of the current registration order
        return iter(list(self._tools))

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, tool_name: object) -> bool:
        return any(tool.name == tool_name for tool in self._tools)
