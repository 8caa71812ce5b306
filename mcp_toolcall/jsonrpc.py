"""
JSON-RPC dispatcher for MCP methods.

Decodes already-parsed JSON-RPC messages, routes them to the tool-call core
and builds response objects. Protocol errors (:class:`McpError`) become
JSON-RPC error responses; anything unexpected is logged and reported as
``INTERNAL_ERROR``. Tool failures never reach this layer as exceptions.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from pydantic import ValidationError

from .arguments import validate_arguments
from .config import Settings, get_settings
from .errors import (
    INTERNAL_ERROR,
    InvalidParamsError,
    InvalidRequestError,
    McpError,
    MethodNotFoundError,
)
from .handlers import invoke_tool, resolve_tool
from .protocol import JSONRPC_VERSION, CallRequest, JSONRPCId, JSONRPCRequest
from .registry import ToolRegistry
from ._logging import get_logger

logger = get_logger(__name__)

MethodHandler = Callable[[Dict[str, Any]], Awaitable[Any]]


def create_success_response(result: Any, request_id: JSONRPCId) -> Dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "result": result, "id": request_id}


def create_error_response(error: Dict[str, Any], request_id: JSONRPCId) -> Dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "error": error, "id": request_id}


def internal_error(exc: BaseException) -> Dict[str, Any]:
    try:
        message = str(exc)
    except Exception:
        message = ""
    return {"code": INTERNAL_ERROR, "message": message or "Internal error"}


class McpDispatcher:
    """Routes MCP JSON-RPC methods against an explicitly provided tool registry."""

    def __init__(self, registry: ToolRegistry, settings: Optional[Settings] = None) -> None:
        self.registry = registry
        self.settings = settings if settings is not None else get_settings()
        self._methods: Dict[str, MethodHandler] = {
            "initialize": self._initialize,
            "ping": self._empty,
            "tools/list": self._tools_list,
            "tools/call": self._tools_call,
            "notifications/initialized": self._empty,
            "notifications/cancelled": self._cancelled,
        }

    async def dispatch(
        self, message: Any
    ) -> Union[Dict[str, Any], List[Dict[str, Any]], None]:
        """
        Handle a decoded JSON-RPC message or batch.

        Returns the response (a list for batches), or None when nothing
        needs to be sent back (notifications only).
        """
        if isinstance(message, list):
            if not message:
                return create_error_response(
                    InvalidRequestError("Invalid request: batch array cannot be empty").to_jsonrpc(),
                    None,
                )
            responses = []
            for item in message:
                response = await self._dispatch_single(item)
                if response is not None:
                    responses.append(response)
            return responses or None
        return await self._dispatch_single(message)

    async def _dispatch_single(self, message: Any) -> Optional[Dict[str, Any]]:
        try:
            request = self._parse(message)
        except InvalidRequestError as exc:
            request_id = message.get("id") if isinstance(message, Mapping) else None
            return create_error_response(exc.to_jsonrpc(), request_id)

        try:
            handler = self._methods.get(request.method)
            if handler is None:
                raise MethodNotFoundError(f"Method not found: {request.method}")
            result = await handler(request.params or {})
        except McpError as exc:
            if request.is_notification:
                logger.warning("Notification failed", method=request.method, error=exc.message)
                return None
            return create_error_response(exc.to_jsonrpc(), request.id)
        except Exception as exc:
            logger.error(
                "Unhandled error while dispatching",
                method=request.method,
                error_type=type(exc).__name__,
                exc_info=True,
            )
            if request.is_notification:
                return None
            return create_error_response(internal_error(exc), request.id)

        if request.is_notification:
            return None
        return create_success_response(result, request.id)

    @staticmethod
    def _parse(message: Any) -> JSONRPCRequest:
        if not isinstance(message, Mapping):
            raise InvalidRequestError("Invalid request: message must be an object")
        if message.get("jsonrpc") != JSONRPC_VERSION:
            raise InvalidRequestError(
                f"Invalid request: expect {JSONRPC_VERSION}, received {message.get('jsonrpc')}"
            )
        if not isinstance(message.get("method"), str):
            raise InvalidRequestError("Invalid request: method must be a string")
        try:
            return JSONRPCRequest(
                jsonrpc=message["jsonrpc"],
                method=message["method"],
                params=message.get("params"),
                id=message.get("id"),
                has_id="id" in message,
            )
        except ValidationError as exc:
            raise InvalidRequestError(f"Invalid request: {exc.errors()[0]['msg']}") from exc

    # ------------------------------------------------------------------
    # Methods
    # ------------------------------------------------------------------

    async def _initialize(self, params: Dict[str, Any]) -> Dict[str, Any]:
        for required in ("capabilities", "clientInfo", "protocolVersion"):
            if params.get(required) is None:
                raise InvalidParamsError(f"Missing required parameter: {required}")

        logger.info(
            "MCP client initialized",
            client=params["clientInfo"].get("name") if isinstance(params["clientInfo"], Mapping) else None,
            requested_version=params["protocolVersion"],
        )
        return {
            "protocolVersion": self.settings.protocol_version,
            "capabilities": {"tools": {"listChanged": False}},
            "serverInfo": {
                "name": self.settings.server_name,
                "version": self.settings.server_version,
            },
        }

    async def _empty(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {}

    async def _cancelled(self, params: Dict[str, Any]) -> Dict[str, Any]:
        # In-flight calls are not cancellable here; acknowledge only
        logger.info("Request cancelled by client", request_id=params.get("requestId"), reason=params.get("reason"))
        return {}

    async def _tools_list(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "tools": [spec.model_dump(by_alias=True) for spec in self.registry.list_tools()],
        }

    async def _tools_call(self, params: Dict[str, Any]) -> Dict[str, Any]:
        try:
            call = CallRequest.model_validate(params)
        except ValidationError as exc:
            raise InvalidParamsError(f"Invalid tools/call params: {exc.errors()[0]['msg']}") from exc

        tool = resolve_tool(call.name, self.registry)
        arguments = call.arguments if call.arguments is not None else {}
        if self.settings.validate_tool_arguments:
            validate_arguments(getattr(tool, "parameter_schema", None), arguments)
        return await invoke_tool(tool, arguments)
