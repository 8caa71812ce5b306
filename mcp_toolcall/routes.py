"""FastAPI router exposing the MCP JSON-RPC endpoint."""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from fastapi import APIRouter, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from .errors import ParseError
from .jsonrpc import McpDispatcher, create_error_response, internal_error
from .sessions import McpSessionManager
from ._logging import get_logger

logger = get_logger(__name__)

SESSION_HEADER = "mcp-session-id"


def _json_response(payload: Any, headers: Dict[str, str]) -> Response:
    """Encode a JSON-RPC payload; tool output may hold values plain JSON cannot carry."""
    try:
        return JSONResponse(jsonable_encoder(payload), headers=headers)
    except (TypeError, ValueError) as exc:
        logger.error("Unencodable MCP response", error_type=type(exc).__name__, exc_info=True)
        request_id = payload.get("id") if isinstance(payload, dict) else None
        return JSONResponse(create_error_response(internal_error(exc), request_id), headers=headers)


def create_mcp_router(
    dispatcher: McpDispatcher,
    sessions: McpSessionManager,
    path: Optional[str] = None,
) -> APIRouter:
    """Create the MCP router serving POST (JSON-RPC) and DELETE (disconnect) on ``path``."""

    if dispatcher is None:
        raise ValueError("dispatcher is required")

    mcp_path = path or dispatcher.settings.path
    router = APIRouter(tags=["mcp"])

    def _ensure_session(session_id: Optional[str]) -> str:
        if session_id and sessions.has(session_id):
            sessions.touch(session_id)
            return session_id
        return sessions.create().id

    @router.post(mcp_path)
    async def handle_rpc(request: Request) -> Response:
        session_id = _ensure_session(request.headers.get(SESSION_HEADER))
        headers = {SESSION_HEADER: session_id}

        body = await request.body()
        try:
            message = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning("Unparseable MCP request body", session_id=session_id, error=str(exc))
            error = ParseError(f"Parse error: {exc}")
            return JSONResponse(create_error_response(error.to_jsonrpc(), None), headers=headers)

        response = await dispatcher.dispatch(message)
        if response is None:
            return Response(status_code=status.HTTP_202_ACCEPTED, headers=headers)
        return _json_response(response, headers)

    @router.delete(mcp_path)
    async def disconnect(request: Request) -> Response:
        session_id = request.headers.get(SESSION_HEADER)
        if not session_id:
            return JSONResponse(
                {"error": f"Missing {SESSION_HEADER} header"},
                status_code=status.HTTP_400_BAD_REQUEST,
            )
        if sessions.disconnect(session_id):
            return Response(status_code=status.HTTP_204_NO_CONTENT)
        return JSONResponse({"error": "Session not found"}, status_code=status.HTTP_404_NOT_FOUND)

    return router
