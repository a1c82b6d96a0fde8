# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any, NoReturn

from pydantic import ValidationError as PydanticValidationError

from .base import ValidationError


def format_pydantic_errors(exc: PydanticValidationError) -> dict[str, Any]:
    """Reduce pydantic errors to field paths and error types.

    Input values are left out so that passwords never reach a response body.
    """
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())) or "body",
            "type": err.get("type", "value_error"),
        }
        for err in exc.errors()
    ]
    return {"fields": sorted({e["field"] for e in errors}), "errors": errors}


def raise_validation_error(exc: PydanticValidationError) -> NoReturn:
    raise ValidationError(context=format_pydantic_errors(exc)) from exc


__all__ = ["format_pydantic_errors", "raise_validation_error"]
