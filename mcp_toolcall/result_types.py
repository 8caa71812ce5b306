"""
Type guards, validators and builders for MCP CallToolResult envelopes.

A tool may return any of:

- ``str``: simple text result
- a CallToolResult mapping: ``content`` list plus optional ``isError`` and
  ``structuredContent``
- a plain mapping: converted to ``structuredContent`` with a text summary
- ``None``: empty result

Validation collects every violation in encounter order instead of stopping
at the first one, so a rejection message can list them all.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Union

from .protocol import CONTENT_TYPES, ContentBlock, ResultEnvelope, ValidationIssue, ValidationResult

ToolExecuteResult = Union[str, ResultEnvelope, Mapping, None]

_MISSING = object()


# ---------------------------------------------------------------------------
# Result guards
# ---------------------------------------------------------------------------


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_absent(value: Any) -> bool:
    return value is None


def looks_like_envelope(value: Any) -> bool:
    """
    True when ``value`` is a mapping with a ``content`` field.

    The field need not be a list or hold valid blocks; claiming the shape is
    enough to get strict validation.
    """
    return isinstance(value, Mapping) and "content" in value


def is_envelope(value: Any) -> bool:
    """Loose positive check: non-empty content list and well-typed optional fields."""
    if not isinstance(value, Mapping):
        return False
    content = value.get("content")
    is_error = value.get("isError", _MISSING)
    structured = value.get("structuredContent", _MISSING)
    return (
        isinstance(content, list)
        and len(content) > 0
        and (is_error is _MISSING or isinstance(is_error, bool))
        and (structured is _MISSING or isinstance(structured, Mapping))
    )


def is_plain_object(value: Any) -> bool:
    return isinstance(value, Mapping) and not is_envelope(value)


def is_error_envelope(value: Any) -> bool:
    return is_envelope(value) and value.get("isError") is True


# ---------------------------------------------------------------------------
# ContentBlock guards
# ---------------------------------------------------------------------------


def _tag(block: Any) -> Optional[str]:
    if not isinstance(block, Mapping):
        return None
    return block.get("type")


def is_text_content(block: Any) -> bool:
    return _tag(block) == "text" and isinstance(block.get("text"), str)


def is_image_content(block: Any) -> bool:
    return (
        _tag(block) == "image"
        and isinstance(block.get("data"), str)
        and isinstance(block.get("mimeType"), str)
    )


def is_audio_content(block: Any) -> bool:
    return (
        _tag(block) == "audio"
        and isinstance(block.get("data"), str)
        and isinstance(block.get("mimeType"), str)
    )


def is_resource_link(block: Any) -> bool:
    return _tag(block) == "resource_link"


def is_embedded_resource(block: Any) -> bool:
    return _tag(block) == "resource" and isinstance(block.get("resource"), Mapping)


def is_content_block(block: Any) -> bool:
    return (
        is_text_content(block)
        or is_image_content(block)
        or is_audio_content(block)
        or is_resource_link(block)
        or is_embedded_resource(block)
    )


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _result(errors: List[ValidationIssue]) -> ValidationResult:
    return ValidationResult(valid=not errors, errors=errors)


def validate_content_block(block: Any) -> ValidationResult:
    """Validate one ContentBlock by its ``type`` tag."""
    if not isinstance(block, Mapping):
        return _result([ValidationIssue(field="block", message="Content block must be an object")])

    block_type = block.get("type")
    if not isinstance(block_type, str):
        return _result(
            [ValidationIssue(field="type", message="type field is required and must be a string")]
        )

    errors: List[ValidationIssue] = []
    if block_type == "text":
        if not isinstance(block.get("text"), str):
            errors.append(
                ValidationIssue(field="text", message="text field is required and must be a string")
            )
    elif block_type in ("image", "audio"):
        if not isinstance(block.get("data"), str):
            errors.append(
                ValidationIssue(field="data", message="data field is required and must be a base64 string")
            )
        if not isinstance(block.get("mimeType"), str):
            errors.append(
                ValidationIssue(
                    field="mimeType",
                    message=f"mimeType field is required for {block_type} content",
                )
            )
    elif block_type in ("resource_link", "resource"):
        # Resource variants are only checked for their tag
        pass
    else:
        errors.append(
            ValidationIssue(
                field="type",
                message=f"Invalid content type: {block_type}. Must be one of: {', '.join(CONTENT_TYPES)}",
            )
        )
    return _result(errors)


def validate_envelope(value: Any) -> ValidationResult:
    """
    Validate a complete CallToolResult.

    An empty ``content`` list is accepted: it is what an absent tool result
    normalizes to, and re-normalizing that output must be the identity.
    """
    if not isinstance(value, Mapping):
        return _result([ValidationIssue(field="result", message="CallToolResult must be an object")])

    errors: List[ValidationIssue] = []

    content = value.get("content")
    if not isinstance(content, list):
        errors.append(
            ValidationIssue(field="content", message="content field is required and must be an array")
        )
    else:
        for index, block in enumerate(content):
            for issue in validate_content_block(block).errors:
                errors.append(
                    ValidationIssue(field=f"content[{index}].{issue.field}", message=issue.message)
                )

    if "isError" in value and not isinstance(value["isError"], bool):
        errors.append(
            ValidationIssue(field="isError", message="isError field must be a boolean if provided")
        )

    if "structuredContent" in value and not isinstance(value["structuredContent"], Mapping):
        errors.append(
            ValidationIssue(
                field="structuredContent",
                message="structuredContent field must be an object if provided",
            )
        )

    return _result(errors)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def create_text_content(
    text: str,
    annotations: Optional[Dict[str, Any]] = None,
    meta: Optional[Dict[str, Any]] = None,
) -> ContentBlock:
    content: ContentBlock = {"type": "text", "text": text}
    if annotations:
        content["annotations"] = annotations
    if meta:
        content["_meta"] = meta
    return content


def create_simple_result(text: str, is_error: bool = False) -> ResultEnvelope:
    """Minimal valid CallToolResult holding one text block."""
    result: ResultEnvelope = {"content": [create_text_content(text)]}
    if is_error:
        result["isError"] = True
    return result
