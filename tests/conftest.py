"""
Pytest configuration and shared fixtures for the MCP tool-call tests.
"""

from unittest.mock import AsyncMock, Mock

import pytest

from mcp_toolcall.config import Settings
from mcp_toolcall.registry import ToolRegistry
from mcp_toolcall.tool import FunctionTool


@pytest.fixture
def settings():
    """Settings isolated from the environment."""
    return Settings(
        server_name="test-server",
        server_version="9.9.9",
        validate_tool_arguments=True,
        log_json=False,
    )


@pytest.fixture
def registry():
    """Create a fresh registry for each test."""
    return ToolRegistry()


@pytest.fixture
def make_tool():
    """Factory building a FunctionTool around a mock execute function."""

    def _make(name="test-tool", execute=None, parameter_schema=None, description="Tool"):
        fn = execute if execute is not None else Mock(return_value="ok")
        return FunctionTool(fn, name=name, description=description, parameter_schema=parameter_schema)

    return _make


@pytest.fixture
def async_execute():
    """AsyncMock standing in for a coroutine execute function."""
    return AsyncMock(return_value="success")


# ============================================================================
# Shared Test Utilities
# ============================================================================

def assert_valid_envelope(envelope: dict, allow_empty: bool = False):
    """
    Assert that ``envelope`` satisfies the CallToolResult invariants.

    Args:
        envelope: Result returned by the normalizer or handler
        allow_empty: Accept an empty content list (absent tool result)
    """
    assert isinstance(envelope["content"], list)
    if not allow_empty:
        assert len(envelope["content"]) >= 1
    for block in envelope["content"]:
        assert "type" in block
    if "isError" in envelope:
        assert isinstance(envelope["isError"], bool)
    if "structuredContent" in envelope:
        assert isinstance(envelope["structuredContent"], dict)


def assert_error_envelope(envelope: dict, text: str = None):
    """Assert an isError envelope with a single text block."""
    assert envelope["isError"] is True
    assert len(envelope["content"]) == 1
    assert envelope["content"][0]["type"] == "text"
    if text is not None:
        assert envelope["content"][0]["text"] == text
