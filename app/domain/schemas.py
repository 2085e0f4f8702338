"""
Pydantic schemas for input validation across the application.

Answer sets are validated strictly at the boundary (the scorer itself trusts
its input). Feedback is validated leniently: missing or garbled fields are
coerced to empty values rather than rejected.
"""

from __future__ import annotations

import math
import re
from html import unescape
from typing import Any

from pydantic import BaseModel, Field, StrictInt, field_validator

from .catalog import QUESTION_IDS
from .services import SCALE_MAX, SCALE_MIN


class BaseValidationSchema(BaseModel):
    """Base schema with common validation utilities."""

    model_config = {
        "str_strip_whitespace": True,
        "validate_assignment": True,
        "populate_by_name": True,
    }

    @field_validator("*", mode="before")
    def sanitize_strings(cls, v):
        """Strip markup and control characters from free text."""
        if isinstance(v, str):
            cleaned = unescape(v.strip())
            cleaned = re.sub(
                r"<\s*script[^>]*>.*?<\s*/\s*script\s*>",
                "",
                cleaned,
                flags=re.IGNORECASE | re.DOTALL,
            )
            cleaned = re.sub(r"<[^>]+>", "", cleaned)
            cleaned = re.sub(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]", "", cleaned)
            return cleaned
        return v


class AnswerSetInput(BaseValidationSchema):
    """A (possibly partial) set of answers keyed by question id."""

    # Keys arrive as JSON strings; values must be real ints.
    answers: dict[int, StrictInt] = Field(default_factory=dict)

    @field_validator("answers")
    def validate_answers(cls, v: dict[int, int]) -> dict[int, int]:
        unknown = sorted(set(v) - QUESTION_IDS)
        if unknown:
            raise ValueError(f"Unknown question ids: {unknown}")
        out_of_range = sorted(qid for qid, value in v.items() if not SCALE_MIN <= value <= SCALE_MAX)
        if out_of_range:
            raise ValueError(
                f"Answers must be between {SCALE_MIN} and {SCALE_MAX}; check questions {out_of_range}"
            )
        return v


class FeedbackInput(BaseValidationSchema):
    """
    Feedback as posted by the results page.

    Accepts both snake_case and the camelCase keys older clients send.
    """

    overall_score: int = Field(0, alias="overallScore")
    enjoyment: int = 0
    accurate: str = ""
    useful: str = ""
    suggestion: str = ""

    @field_validator("overall_score", "enjoyment", mode="before")
    def coerce_number(cls, v: Any) -> int:
        if isinstance(v, bool):
            return int(v)
        if isinstance(v, (int, float)):
            number = float(v)
        elif isinstance(v, str):
            try:
                number = float(v.strip()) if v.strip() else 0.0
            except ValueError:
                return 0
        else:
            return 0
        if not math.isfinite(number):
            return 0
        return int(number)

    @field_validator("accurate", "useful", "suggestion", mode="before")
    def coerce_text(cls, v: Any) -> str:
        if v is None or v is False:
            return ""
        return v if isinstance(v, str) else str(v)


class ValidationErrorDetail(BaseModel):
    """Schema for validation error details."""

    field: str
    message: str
    value: Any = None


class ValidationResponse(BaseModel):
    """Schema for validation responses."""

    success: bool
    errors: list[ValidationErrorDetail] = []
    data: dict[str, Any] | None = None


def validate_input(schema_class: type[BaseModel], data: dict[str, Any]) -> ValidationResponse:
    """
    Centralized validation function that returns structured validation results.

    Args:
        schema_class: Pydantic model class to use for validation
        data: Input data to validate

    Returns:
        ValidationResponse with success status and any errors

    Example:
        >>> result = validate_input(AnswerSetInput, {"answers": {1: 5}})
        >>> result.success
        True
    """
    try:
        validated = schema_class.model_validate(data)
        return ValidationResponse(success=True, data=validated.model_dump())
    except Exception as e:
        errors = []
        if hasattr(e, "errors"):
            for error in e.errors():
                errors.append(
                    ValidationErrorDetail(
                        field=".".join(str(x) for x in error["loc"]) or "general",
                        message=error["msg"],
                        value=error.get("input"),
                    )
                )
        else:
            errors.append(ValidationErrorDetail(field="general", message=str(e)))

        return ValidationResponse(success=False, errors=errors)
