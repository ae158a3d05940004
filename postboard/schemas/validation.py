"""
Postboard — Payload Validation
================================

What:  Shared base for request payload schemas and the pure function that
       turns pydantic error lists into one human-readable message.
How:   Payload models inherit StrictPayload (unknown fields rejected,
       surrounding whitespace stripped). When FastAPI rejects a request,
       the handler in main.py calls first_error_message() on the error list
       and answers 400 with the message for the first failing field.

Message format (one message, first failing field only):
    "title" is required
    "title" length must be at least 3 characters long
    "description" length must be less than or equal to 50000 characters long
    "user" is not allowed
    "pageNumber" must be greater than or equal to 1
"""

from typing import Any, Dict, Mapping, Optional, Sequence

from pydantic import BaseModel
from pydantic_core import PydanticCustomError

# Location prefixes FastAPI adds in front of the field name
_SOURCES = {"body", "query", "path", "header", "cookie"}


class StrictPayload(BaseModel):
    """Base for request bodies: unknown keys are errors, strings are trimmed."""

    model_config = {
        "extra": "forbid",
        "str_strip_whitespace": True,
    }


def reject_null(value: Any) -> Any:
    """
    Field validator body for optional-but-not-nullable update fields.

    A field left out of an update is fine; sending it as null is not.
    """
    if value is None:
        raise PydanticCustomError("string_type", "Input should be a valid string")
    return value


def field_label(loc: Sequence[Any]) -> str:
    """("body", "title") → "title"; ("body",) → "body"."""
    parts = [str(part) for part in loc]
    if len(parts) > 1 and parts[0] in _SOURCES:
        parts = parts[1:]
    return ".".join(parts) or "value"


def describe_error(error: Mapping[str, Any]) -> str:
    """Render a single pydantic/FastAPI error dict as one sentence."""
    label = f'"{field_label(error.get("loc", ()))}"'
    kind = error.get("type", "")
    ctx: Dict[str, Any] = error.get("ctx") or {}

    if kind == "missing":
        return f"{label} is required"
    if kind == "string_too_short":
        return f"{label} length must be at least {ctx.get('min_length')} characters long"
    if kind == "string_too_long":
        return (
            f"{label} length must be less than or equal to "
            f"{ctx.get('max_length')} characters long"
        )
    if kind == "string_pattern_mismatch":
        return f"{label} has an invalid format"
    if kind == "string_type":
        return f"{label} must be a string"
    if kind == "extra_forbidden":
        return f"{label} is not allowed"
    if kind in ("int_parsing", "int_type", "int_from_float"):
        return f"{label} must be an integer"
    if kind == "greater_than_equal":
        return f"{label} must be greater than or equal to {ctx.get('ge')}"
    if kind == "uuid_parsing" or kind == "uuid_type":
        return f"{label} must be a valid id"
    if kind == "json_invalid":
        return "Request body is not valid JSON"
    if kind in ("model_attributes_type", "dict_type", "model_type"):
        return f"{label} must be an object"
    if kind == "value_error" and "error" in ctx:
        return f"{label} {ctx['error']}"
    return f"{label} {error.get('msg', 'is invalid')}"


def first_error_message(errors: Sequence[Mapping[str, Any]]) -> Optional[str]:
    """
    Message for the first failing field, or None when there are no errors.

    Pure function: used by the RequestValidationError handler and directly
    by tests.
    """
    if not errors:
        return None
    return describe_error(errors[0])


def first_error_field(errors: Sequence[Mapping[str, Any]]) -> Optional[str]:
    if not errors:
        return None
    return field_label(errors[0].get("loc", ()))
