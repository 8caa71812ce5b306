"""Shared Pydantic contracts for MCP tool calls."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

JSONRPC_VERSION = "2.0"
MCP_PROTOCOL_VERSION = "2025-11-25"

# ContentBlock type tags, in the order reported by validation errors
CONTENT_TYPES = ("text", "image", "audio", "resource_link", "resource")

# Wire-level shapes stay plain dicts so valid results pass through untouched
ResultEnvelope = Dict[str, Any]
ContentBlock = Dict[str, Any]

JSONRPCId = Union[str, int, None]


class CallRequest(BaseModel):
    """Decoded params of a tools/call request."""

    name: str = Field(..., description="Registered tool name, matched exactly")
    arguments: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Tool arguments; omitted arguments are passed as an empty mapping",
    )


class ValidationIssue(BaseModel):
    """One structural violation found while validating a result."""

    field: str
    message: str


class ValidationResult(BaseModel):
    """Outcome of structural validation."""

    valid: bool
    errors: List[ValidationIssue] = Field(default_factory=list)


class ToolSpec(BaseModel):
    """Public metadata describing a tool, as listed by tools/list."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str = ""
    input_schema: Dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}},
        alias="inputSchema",
        description="JSON schema for tool arguments",
    )


class JSONRPCRequest(BaseModel):
    """A single JSON-RPC 2.0 request or notification."""

    jsonrpc: str = JSONRPC_VERSION
    method: str
    params: Optional[Dict[str, Any]] = None
    id: JSONRPCId = None
    has_id: bool = Field(default=False, exclude=True)

    @property
    def is_notification(self) -> bool:
        return not self.has_id
