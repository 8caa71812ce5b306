"""
Tool result normalizer.

Converts whatever a tool's ``execute`` produced into a valid MCP
CallToolResult. Decision order is fixed:

1. ``str``           -> single text block
2. ``None``          -> empty content
3. has ``content``   -> strict validation, then returned as-is
4. plain mapping     -> JSON summary text block plus ``structuredContent``
5. anything else     -> text block naming the unexpected type

Rule 3 runs before rule 4, so a mapping with a ``content`` field is always
treated as an attempted envelope and rejected when malformed.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from .errors import InvalidEnvelopeError
from .protocol import ResultEnvelope
from .result_types import (
    ToolExecuteResult,
    create_simple_result,
    create_text_content,
    is_absent,
    is_string,
    looks_like_envelope,
    validate_envelope,
)
from ._logging import get_logger

logger = get_logger(__name__)

SUMMARY_MAX_CHARS = 2000
FALLBACK_MAX_CHARS = 500
TRUNCATION_MARKER = "\n... (truncated)"
UNSERIALIZABLE_PLACEHOLDER = "[Unable to serialize object]"


def generate_json_summary(obj: Any) -> str:
    """Pretty-printed JSON of ``obj``, bounded for display."""
    try:
        rendered = json.dumps(obj, indent=2, ensure_ascii=False)
    except (TypeError, ValueError, OverflowError, RecursionError):
        try:
            text = str(obj)
        except Exception:
            return UNSERIALIZABLE_PLACEHOLDER
        if len(text) > FALLBACK_MAX_CHARS:
            return text[:FALLBACK_MAX_CHARS] + "..."
        return text

    if len(rendered) > SUMMARY_MAX_CHARS:
        return rendered[:SUMMARY_MAX_CHARS] + TRUNCATION_MARKER
    return rendered


def normalize_tool_result(result: ToolExecuteResult) -> ResultEnvelope:
    """
    Normalize a tool execution result into a CallToolResult.

    Raises:
        InvalidEnvelopeError: ``result`` has a ``content`` field but fails
            structural validation.
    """
    if is_string(result):
        return create_simple_result(result)

    if is_absent(result):
        return {"content": []}

    if looks_like_envelope(result):
        validation = validate_envelope(result)
        if not validation.valid:
            details = "; ".join(f"{issue.field}: {issue.message}" for issue in validation.errors)
            raise InvalidEnvelopeError(f"Invalid CallToolResult: {details}", validation.errors)
        return result

    if isinstance(result, Mapping):
        summary = generate_json_summary(result)
        return {
            "content": [create_text_content(f"Result:\n```json\n{summary}\n```")],
            "structuredContent": result,
        }

    return create_simple_result(f"[Unexpected result type: {type(result).__name__}]")


def normalize_tool_result_safe(result: ToolExecuteResult) -> ResultEnvelope:
    """Like :func:`normalize_tool_result`, but any failure becomes an isError result."""
    try:
        return normalize_tool_result(result)
    except InvalidEnvelopeError as exc:
        logger.warning("Rejected malformed tool result", error=exc.message)
        return create_simple_result(exc.message, is_error=True)
    except Exception as exc:
        logger.warning("Tool result normalization failed", error_type=type(exc).__name__, exc_info=True)
        return normalize_tool_error(exc)


def _render_error(error: Any) -> str:
    message = getattr(error, "message", None)
    if isinstance(message, str) and message:
        return message

    if isinstance(error, KeyError) and len(error.args) == 1 and isinstance(error.args[0], str):
        # str(KeyError) quotes its key
        return error.args[0] or type(error).__name__

    if isinstance(error, BaseException):
        return str(error) or type(error).__name__

    if isinstance(error, str):
        return error

    if isinstance(error, (Mapping, list, tuple)):
        try:
            return json.dumps(error, ensure_ascii=False)
        except (TypeError, ValueError, OverflowError, RecursionError):
            return str(error)

    return str(error)


def _error_message(error: Any) -> str:
    try:
        return _render_error(error)
    except Exception:
        return type(error).__name__


def normalize_tool_error(error: Any) -> ResultEnvelope:
    """Render a failure as a single-text-block CallToolResult with ``isError: true``."""
    return create_simple_result(_error_message(error), is_error=True)


normalize = normalize_tool_result
normalize_safe = normalize_tool_result_safe
normalize_error = normalize_tool_error
