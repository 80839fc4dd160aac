"""Schema validation for inbound trigger bodies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError
from pydantic_core import ErrorDetails

from pr_relay.models.trigger import TriggerRequest


@dataclass(slots=True)
class ValidationResult:
    """Either a normalized request or every violated constraint."""

    request: TriggerRequest | None = None
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.request is not None


def validate(body: Any) -> ValidationResult:
    """Validate a decoded JSON body without side effects."""
    if not isinstance(body, dict):
        return ValidationResult(errors=['"value" must be of type object'])
    try:
        request = TriggerRequest.model_validate(body)
    except ValidationError as exc:
        return ValidationResult(errors=[_format_error(error) for error in exc.errors()])
    return ValidationResult(request=request)


def _format_error(error: ErrorDetails) -> str:
    label = ".".join(str(part) for part in error["loc"]) or "value"
    kind = error["type"]
    ctx = error.get("ctx") or {}

    if kind == "missing":
        return f'"{label}" is required'
    if kind == "extra_forbidden":
        return f'"{label}" is not allowed'
    if kind == "string_pattern_mismatch" and label == "target_repo":
        return 'target_repo must be in format "owner/repo"'
    if kind == "string_type":
        return f'"{label}" must be a string'
    if kind == "dict_type":
        return f'"{label}" must be of type object'
    if kind == "string_too_short":
        return f'"{label}" is not allowed to be empty'
    if kind == "string_too_long":
        limit = ctx.get("max_length")
        return f'"{label}" length must be less than or equal to {limit} characters long'
    if kind == "too_short" and label == "file_changes":
        return f'"{label}" must have at least {ctx.get("min_length", 1)} key'
    return f'"{label}" {error["msg"]}'
