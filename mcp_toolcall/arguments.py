"""Argument pre-check against a tool's declared parameter schema."""

from __future__ import annotations

from typing import Any, Dict, Optional

from jsonschema import validators
from jsonschema.exceptions import SchemaError

from .errors import InvalidParamsError


def validate_arguments(schema: Optional[Dict[str, Any]], arguments: Dict[str, Any]) -> None:
    """
    Validate ``arguments`` against ``schema``.

    Tools without a schema are skipped.

    Raises:
        InvalidParamsError: one or more violations, all listed in the message
    """
    if schema is None:
        return

    validator_cls = validators.validator_for(schema, default=validators.Draft202012Validator)
    try:
        validator_cls.check_schema(schema)
    except SchemaError as exc:
        raise InvalidParamsError(f"Tool parameter schema is invalid: {exc.message}") from exc

    violations = sorted(
        validator_cls(schema).iter_errors(arguments),
        key=lambda error: [str(part) for part in error.absolute_path],
    )
    if not violations:
        return

    problems = []
    for error in violations:
        location = ".".join(str(part) for part in error.absolute_path) or "<root>"
        problems.append({"path": location, "message": error.message})

    summary = "; ".join(f"{problem['path']}: {problem['message']}" for problem in problems)
    raise InvalidParamsError(f"Invalid arguments: {summary}", data={"errors": problems})
