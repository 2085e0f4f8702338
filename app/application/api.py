"""
Application API layer with error handling and validation.

This module provides the high-level check-in operations used by both the
FastAPI routes and the Streamlit UI: scoring an answer set, building and
reading partner links, comparing results, and collecting feedback.
"""

from __future__ import annotations

import json
import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

import pandas as pd

from ..domain.catalog import (
    CATEGORIES,
    CATEGORY_ORDER,
    CATEGORY_ORDER_VERSION,
    QUESTIONS,
    RATING_SCALE,
    TIER_STYLES,
    overall_emoji,
)
from ..domain.codec import build_share_url, decode_scores, encode_result, extract_token
from ..domain.models import CheckInResult, FeedbackEntry, FeedbackSummary, SuggestionNote
from ..domain.schemas import (
    AnswerSetInput,
    FeedbackInput,
    ValidationResponse,
    validate_input,
)
from ..domain.services import calculate_result, round_half_up
from ..infrastructure.exceptions import (
    CheckInAppError,
    MultipleValidationError,
    TokenDecodeError,
    ValidationError,
    log_error_details,
)
from ..infrastructure.logging import LogContext, get_logger, log_operation
from ..infrastructure.repositories_feedback import FeedbackRepo
from ..utils.comparison_radar import make_checkin_radar

logger = get_logger(__name__)

ACCURATE_OPTIONS = ("yes", "somewhat", "no")
USEFUL_OPTIONS = ("yes", "maybe", "no")

FEEDBACK_COLUMNS = [
    "ID",
    "SubmittedAt",
    "OverallScore",
    "Enjoyment",
    "Accurate",
    "Useful",
    "Suggestion",
]


def _raise_for_validation(response: ValidationResponse) -> None:
    if response.success:
        return
    errors = [ValidationError(e.field, e.message, e.value) for e in response.errors]
    if len(errors) == 1:
        raise errors[0]
    raise MultipleValidationError(errors)


def get_questionnaire() -> dict[str, Any]:
    """Static questionnaire definition in presentation order."""
    return {
        "category_order_version": CATEGORY_ORDER_VERSION,
        "categories": [
            {
                "key": c.key,
                "label": c.label,
                "emoji": c.emoji,
                "source": c.source,
                "description": c.description,
                "conversation_starters": list(c.conversation_starters),
            }
            for c in (CATEGORIES[key] for key in CATEGORY_ORDER)
        ],
        "questions": [
            {"id": q.id, "category": q.category, "text": q.text, "reversed": q.reversed}
            for q in QUESTIONS
        ],
        "rating_scale": [
            {"value": o.value, "emoji": o.emoji, "label": o.label} for o in RATING_SCALE
        ],
        "tiers": [
            {"key": t.key, "label": t.label, "emoji": t.emoji, "color": t.color}
            for t in TIER_STYLES.values()
        ],
    }


def describe_result(result: CheckInResult) -> dict[str, Any]:
    """Result enriched with display labels and the focus area's conversation starters."""
    focus = CATEGORIES[result.focus_area]
    return {
        "overall": result.overall,
        "overall_emoji": overall_emoji(result.overall),
        "focus_area": result.focus_area,
        "focus_label": focus.label,
        "conversation_starters": list(focus.conversation_starters),
        "categories": [
            {
                "category": cs.category,
                "label": CATEGORIES[cs.category].label,
                "emoji": CATEGORIES[cs.category].emoji,
                "score": cs.score,
                "tier": cs.tier,
                "tier_label": TIER_STYLES[cs.tier].label,
                "tier_color": TIER_STYLES[cs.tier].color,
            }
            for cs in result.categories
        ],
    }


@log_operation("score_checkin")
def score_answers(answers: Mapping[Any, Any]) -> CheckInResult:
    """Validate an answer set at the boundary and score it."""
    response = validate_input(AnswerSetInput, {"answers": dict(answers)})
    _raise_for_validation(response)
    assert response.data is not None
    return calculate_result(response.data["answers"])


def run_checkin(answers: Mapping[Any, Any], base_url: str | None = None) -> dict[str, Any]:
    """
    Score answers and produce the partner link.

    Returns the described result plus ``token`` and, when ``base_url`` is
    given, ``share_url``.
    """
    result = score_answers(answers)
    token = encode_result(result)
    payload = describe_result(result)
    payload["token"] = token
    payload["share_url"] = build_share_url(base_url, token) if base_url else None
    return payload


def decode_shared_token(token_or_link: str) -> CheckInResult:
    result = decode_scores(extract_token(token_or_link))
    if result is None:
        logger.info("Rejected malformed partner token")
        raise TokenDecodeError(token_or_link)
    return result


@log_operation("compare_with_partner")
def compare_with_partner(answers: Mapping[Any, Any], partner_token: str) -> dict[str, Any]:
    """Score our answers, read the partner's token, and line both up per category."""
    try:
        own = score_answers(answers)
        partner = decode_shared_token(partner_token)

        rows = []
        for own_cs, partner_cs in zip(own.categories, partner.categories):
            rows.append(
                {
                    "category": own_cs.category,
                    "label": CATEGORIES[own_cs.category].label,
                    "own_score": own_cs.score,
                    "partner_score": partner_cs.score,
                    "difference": own_cs.score - partner_cs.score,
                }
            )

        figure = make_checkin_radar(own, partner)
        return {
            "own": describe_result(own),
            "partner": describe_result(partner),
            "categories": rows,
            "overall_difference": own.overall - partner.overall,
            "radar": json.loads(figure.to_json()),
        }
    except CheckInAppError:
        raise
    except Exception as e:  # pragma: no cover - bubbled as API error
        error_details = log_error_details(e, {"operation": "compare_with_partner"})
        logger.error("Failed to compare results", extra=error_details)
        raise CheckInAppError(
            f"Failed to compare results: {str(e)}",
            details=error_details,
            user_message="Unable to build the comparison. Please try again.",
        ) from e


@log_operation("submit_feedback")
def submit_feedback(
    repo: FeedbackRepo,
    payload: Mapping[str, Any],
    max_suggestion_length: int = 2000,
) -> FeedbackEntry:
    """
    Store one feedback response.

    Never rejects on missing fields: numbers fall back to 0 and text to "".
    """
    response = validate_input(FeedbackInput, dict(payload or {}))
    _raise_for_validation(response)
    assert response.data is not None
    data = response.data

    entry = FeedbackEntry(
        id=str(uuid.uuid4()),
        overall_score=data["overall_score"],
        enjoyment=data["enjoyment"],
        accurate=data["accurate"],
        useful=data["useful"],
        suggestion=data["suggestion"][:max_suggestion_length],
        submitted_at=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    )
    with LogContext(feedback_id=entry.id):
        return repo.append(entry)


def list_feedback(repo: FeedbackRepo) -> list[FeedbackEntry]:
    return repo.list_all()


def _display_date(timestamp: str) -> str:
    try:
        return datetime.fromisoformat(timestamp.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        return timestamp


def summarize_feedback(entries: list[FeedbackEntry]) -> FeedbackSummary:
    """
    Aggregate feedback for the insights page.

    Averages are None when nothing has been collected; unrecognised
    ``accurate``/``useful`` values are left out of the counts.
    """
    total = len(entries)

    accurate_counts = {option: 0 for option in ACCURATE_OPTIONS}
    useful_counts = {option: 0 for option in USEFUL_OPTIONS}
    for entry in entries:
        if entry.accurate in accurate_counts:
            accurate_counts[entry.accurate] += 1
        if entry.useful in useful_counts:
            useful_counts[entry.useful] += 1

    suggestions = [
        SuggestionNote(
            text=entry.suggestion.strip(),
            date=_display_date(entry.submitted_at),
            score=entry.overall_score,
        )
        for entry in entries
        if entry.suggestion and entry.suggestion.strip()
    ]

    average_enjoyment = None
    average_score = None
    if total:
        average_enjoyment = round_half_up(sum(e.enjoyment for e in entries) / total * 10) / 10
        average_score = round_half_up(sum(e.overall_score for e in entries) / total)

    return FeedbackSummary(
        total=total,
        average_enjoyment=average_enjoyment,
        average_score=average_score,
        accurate_counts=accurate_counts,
        useful_counts=useful_counts,
        suggestions=suggestions,
    )


@log_operation("export_feedback")
def export_feedback_frame(entries: list[FeedbackEntry]) -> pd.DataFrame:
    """Feedback as a DataFrame with stable, spreadsheet-friendly column names."""
    rows = [
        {
            "ID": e.id,
            "SubmittedAt": e.submitted_at,
            "OverallScore": e.overall_score,
            "Enjoyment": e.enjoyment,
            "Accurate": e.accurate,
            "Useful": e.useful,
            "Suggestion": e.suggestion,
        }
        for e in entries
    ]
    df = pd.DataFrame(rows, columns=FEEDBACK_COLUMNS)
    logger.info(f"Prepared {len(df)} feedback rows for export")
    return df
