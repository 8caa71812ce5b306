"""Base abstractions for MCP tools."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from .protocol import ToolSpec
from .result_types import ToolExecuteResult

ExecuteFn = Callable[[Dict[str, Any]], Union[ToolExecuteResult, Awaitable[ToolExecuteResult]]]


class BaseTool(ABC):
    """
    Abstract base class for MCP tools.

    Subclasses set ``name`` (and usually ``description``) and implement
    ``execute``, which may be a plain method or a coroutine. The invoker only
    relies on ``name`` and ``execute``.
    """

    name: str
    description: str = ""
    parameter_schema: Optional[Dict[str, Any]] = None

    def spec(self) -> ToolSpec:
        """Return ToolSpec for discovery."""
        if self.parameter_schema is not None:
            return ToolSpec(name=self.name, description=self.description, input_schema=self.parameter_schema)
        return ToolSpec(name=self.name, description=self.description)

    @abstractmethod
    def execute(
        self, arguments: Dict[str, Any]
    ) -> Union[ToolExecuteResult, Awaitable[ToolExecuteResult]]:
        """Run the tool with already-resolved arguments."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class FunctionTool(BaseTool):
    """Tool backed by a plain or async function."""

    def __init__(
        self,
        fn: ExecuteFn,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        parameter_schema: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.fn = fn
        self.name = name or fn.__name__
        self.description = description if description is not None else (fn.__doc__ or "").strip()
        self.parameter_schema = parameter_schema

    def execute(self, arguments: Dict[str, Any]):
        return self.fn(arguments)


def tool(
    name: Optional[str] = None,
    description: Optional[str] = None,
    parameter_schema: Optional[Dict[str, Any]] = None,
) -> Callable[[ExecuteFn], FunctionTool]:
    """
    Decorator turning a function into a :class:`FunctionTool`.

    Usage::

        @tool(description="Echo the input")
        async def echo(arguments):
            return arguments.get("text", "")
    """

    def decorator(fn: ExecuteFn) -> FunctionTool:
        return FunctionTool(fn, name=name, description=description, parameter_schema=parameter_schema)

    return decorator
