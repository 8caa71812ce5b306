"""
Tests for the tools/call handler.

Covers lookup, argument supply, sync and async execution, and conversion of
tool failures into isError envelopes.
"""

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from mcp_toolcall.errors import MethodNotFoundError, ToolExecutionError
from mcp_toolcall.handlers import handle_tool_call, invoke_tool, resolve_tool
from mcp_toolcall.protocol import CallRequest
from mcp_toolcall.tool import BaseTool, FunctionTool

from conftest import assert_error_envelope, assert_valid_envelope


class TestResolveTool:
    def test_first_match_wins(self, make_tool):
        first = make_tool(name="dup")
        second = make_tool(name="dup")

        assert resolve_tool("dup", [first, second]) is first

    def test_match_is_exact(self, make_tool):
        tools = [make_tool(name="Echo")]

        with pytest.raises(MethodNotFoundError):
            resolve_tool("echo", tools)
        with pytest.raises(MethodNotFoundError):
            resolve_tool(" Echo", tools)

    def test_not_found_message(self):
        with pytest.raises(MethodNotFoundError, match="Tool not found: missing") as exc_info:
            resolve_tool("missing", [])

        assert exc_info.value.code == -32601


class TestHandleToolCall:
    """Test suite for handle_tool_call."""

    @pytest.mark.asyncio
    async def test_finds_and_executes_tool_by_name(self, make_tool, async_execute):
        tools = [make_tool(execute=async_execute)]

        result = await handle_tool_call({"name": "test-tool"}, tools)

        async_execute.assert_awaited_once()
        assert result == {"content": [{"type": "text", "text": "success"}]}

    @pytest.mark.asyncio
    async def test_missing_tool_raises_without_executing(self, make_tool):
        execute = Mock(return_value="never")
        tools = [make_tool(execute=execute)]

        with pytest.raises(MethodNotFoundError):
            await handle_tool_call({"name": "nonexistent-tool"}, tools)

        execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_passes_arguments_verbatim(self, make_tool):
        execute = Mock(return_value="ok")
        args = {"param1": "value1", "param2": 42}

        await handle_tool_call({"name": "test-tool", "arguments": args}, [make_tool(execute=execute)])

        execute.assert_called_once_with(args)
        assert execute.call_args.args[0] is args

    @pytest.mark.asyncio
    async def test_missing_arguments_become_empty_mapping(self, make_tool):
        execute = Mock(return_value="ok")

        await handle_tool_call({"name": "test-tool"}, [make_tool(execute=execute)])

        execute.assert_called_once_with({})

    @pytest.mark.asyncio
    async def test_none_arguments_become_empty_mapping(self, make_tool):
        execute = Mock(return_value="ok")

        await handle_tool_call(CallRequest(name="test-tool", arguments=None), [make_tool(execute=execute)])

        execute.assert_called_once_with({})

    @pytest.mark.asyncio
    async def test_accepts_call_request_model(self, make_tool):
        execute = Mock(return_value="ok")
        request = CallRequest(name="test-tool", arguments={"q": "x"})

        await handle_tool_call(request, [make_tool(execute=execute)])

        execute.assert_called_once_with({"q": "x"})

    @pytest.mark.asyncio
    async def test_sync_execute_is_supported(self, make_tool):
        tools = [make_tool(execute=lambda arguments: {"sum": arguments["a"] + arguments["b"]})]

        result = await handle_tool_call({"name": "test-tool", "arguments": {"a": 1, "b": 2}}, tools)

        assert result["structuredContent"] == {"sum": 3}

    @pytest.mark.asyncio
    async def test_waits_for_suspended_execute(self, make_tool):
        async def slow(arguments):
            await asyncio.sleep(0.01)
            return "done"

        result = await handle_tool_call({"name": "test-tool"}, [make_tool(execute=slow)])

        assert result["content"][0]["text"] == "done"

    @pytest.mark.asyncio
    async def test_passes_through_envelope(self, make_tool):
        envelope = {
            "content": [{"type": "text", "text": "Tool output"}],
            "structuredContent": {"score": 95},
        }
        tools = [make_tool(execute=AsyncMock(return_value=envelope))]

        result = await handle_tool_call({"name": "test-tool"}, tools)

        assert result is envelope

    @pytest.mark.asyncio
    async def test_absent_result(self, make_tool):
        result = await handle_tool_call({"name": "test-tool"}, [make_tool(execute=Mock(return_value=None))])

        assert result == {"content": []}

    @pytest.mark.asyncio
    async def test_exception_becomes_error_envelope(self, make_tool):
        async def failing(arguments):
            raise RuntimeError("Tool execution failed")

        result = await handle_tool_call({"name": "test-tool"}, [make_tool(execute=failing)])

        assert_error_envelope(result, "Tool execution failed")

    @pytest.mark.asyncio
    async def test_typed_tool_error_becomes_error_envelope(self, make_tool):
        execute = Mock(side_effect=ToolExecutionError("boom", code="upstream"))

        result = await handle_tool_call({"name": "test-tool"}, [make_tool(execute=execute)])

        assert result == {"content": [{"type": "text", "text": "boom"}], "isError": True}

    @pytest.mark.asyncio
    async def test_malformed_envelope_becomes_error_envelope(self, make_tool):
        execute = Mock(return_value={"content": [{"type": "image", "data": "AA=="}]})

        result = await handle_tool_call({"name": "test-tool"}, [make_tool(execute=execute)])

        assert_error_envelope(result)
        assert "content[0].mimeType" in result["content"][0]["text"]

    @pytest.mark.asyncio
    async def test_exception_with_failing_str_becomes_error_envelope(self, make_tool):
        class Unprintable(Exception):
            def __str__(self):
                raise RuntimeError("cannot render")

        execute = Mock(side_effect=Unprintable())

        result = await handle_tool_call({"name": "test-tool"}, [make_tool(execute=execute)])

        assert_error_envelope(result, "Unprintable")

    @pytest.mark.asyncio
    async def test_missing_key_error_is_unquoted(self, make_tool):
        def lookup(arguments):
            return {"value": arguments["query"]}

        result = await handle_tool_call({"name": "test-tool"}, [make_tool(execute=lookup)])

        assert_error_envelope(result, "query")

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self, make_tool):
        async def cancelled(arguments):
            raise asyncio.CancelledError()

        with pytest.raises(asyncio.CancelledError):
            await handle_tool_call({"name": "test-tool"}, [make_tool(execute=cancelled)])

    @pytest.mark.asyncio
    async def test_executes_exactly_once(self, make_tool):
        execute = Mock(side_effect=RuntimeError("flaky"))

        await handle_tool_call({"name": "test-tool"}, [make_tool(execute=execute)])

        assert execute.call_count == 1

    @pytest.mark.asyncio
    async def test_works_with_multiple_tools(self, make_tool):
        tool1 = make_tool(name="tool1", execute=AsyncMock(return_value="tool1-result"))
        tool2 = make_tool(name="tool2", execute=AsyncMock(return_value="tool2-result"))

        result = await handle_tool_call({"name": "tool2"}, [tool1, tool2])

        assert result["content"][0]["text"] == "tool2-result"
        tool1.fn.assert_not_called()

    @pytest.mark.asyncio
    async def test_always_returns_valid_envelope(self, make_tool):
        result = await handle_tool_call({"name": "test-tool"}, [make_tool()])

        assert_valid_envelope(result)

    @pytest.mark.asyncio
    async def test_accepts_registry(self, registry, async_execute):
        registry.register_function(async_execute, name="registered")

        result = await handle_tool_call({"name": "registered"}, registry)

        assert result["content"][0]["text"] == "success"


class TestInvokeTool:
    @pytest.mark.asyncio
    async def test_subclassed_tool(self):
        class Greeter(BaseTool):
            name = "greet"
            description = "Say hello"

            async def execute(self, arguments):
                return f"Hello, {arguments.get('who', 'world')}!"

        result = await invoke_tool(Greeter(), {"who": "MCP"})

        assert result["content"][0]["text"] == "Hello, MCP!"

    @pytest.mark.asyncio
    async def test_defaults_arguments(self):
        execute = Mock(return_value="ok")

        await invoke_tool(FunctionTool(execute, name="t"))

        execute.assert_called_once_with({})
