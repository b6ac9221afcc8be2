# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any, NoReturn

from pydantic import ValidationError as PydanticValidationError

from .base import ValidationError


def _error_context(errors: list[dict[str, str]]) -> dict[str, Any]:
    return {
        "fields": sorted({error["field"] for error in errors if error["field"] != "body"}),
        "errors": errors,
    }


def format_pydantic_errors(exc: PydanticValidationError) -> dict[str, Any]:
    """Reduce pydantic's report to field paths and error types, never input values."""

    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())) or "body",
            "type": error.get("type", "value_error"),
        }
        for error in exc.errors()
    ]
    return _error_context(errors)


def raise_validation_error(exc: PydanticValidationError) -> NoReturn:
    raise ValidationError(context=format_pydantic_errors(exc)) from exc


def invariant_violation(field: str, message: str) -> ValidationError:
    """Build the error raised when a record fails its own invariants."""

    return ValidationError(context=_error_context([{"field": field, "type": message}]))


__all__ = [
    "format_pydantic_errors",
    "invariant_violation",
    "raise_validation_error",
]
