from __future__ import annotations

import math
from collections.abc import Mapping, Sequence

from .catalog import CATEGORY_ORDER, QUESTIONS
from .models import CategoryKey, CategoryScore, CheckInResult, Question, Tier

SCALE_MIN = 1
SCALE_MAX = 5

# Lower bounds are inclusive, checked top-down.
TIER_THRESHOLDS: tuple[tuple[Tier, int], ...] = (("thriving", 80), ("growing", 55))
FALLBACK_TIER: Tier = "attention"


def clamp_answer(value: int | None) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or not (SCALE_MIN <= value <= SCALE_MAX):
        raise ValueError("Answer must be a whole number between 1 and 5 inclusive.")
    return int(value)


def round_half_up(value: float) -> int:
    """Round .5 towards +inf, as the shared links have always been scored."""
    return int(math.floor(value + 0.5))


def tier_for_score(score: int) -> Tier:
    for tier, lower_bound in TIER_THRESHOLDS:
        if score >= lower_bound:
            return tier
    return FALLBACK_TIER


def effective_value(question: Question, raw: int) -> int:
    if question.reversed:
        return (SCALE_MIN + SCALE_MAX) - raw
    return raw


def rescale_category(total: int, count: int) -> int:
    """
    Map a category total from its achievable range [count, count*5] onto 0..100.

    A category with no answered questions scores 0.
    """
    if count == 0:
        return 0
    low = count * SCALE_MIN
    high = count * SCALE_MAX
    return round_half_up((total - low) / (high - low) * 100)


def pick_focus_area(scores: Sequence[CategoryScore]) -> CategoryKey:
    focus = scores[0]
    for candidate in scores[1:]:
        if candidate.score < focus.score:
            focus = candidate
    return focus.category


def calculate_result(
    answers: Mapping[int, int],
    questions: Sequence[Question] = QUESTIONS,
) -> CheckInResult:
    """
    Score a (possibly partial) answer set.

    - Unanswered questions are left out of both the total and the count.
    - Reversed questions contribute 6 - raw.
    - Overall is the unweighted mean of the four category scores.
    - Focus area is the lowest category; the earliest in CATEGORY_ORDER wins ties.

    Values are not range-checked here; callers constrain input to the 1..5 scale.
    """
    totals: dict[CategoryKey, int] = {key: 0 for key in CATEGORY_ORDER}
    counts: dict[CategoryKey, int] = {key: 0 for key in CATEGORY_ORDER}

    for question in questions:
        raw = answers.get(question.id)
        if raw is None:
            continue
        totals[question.category] += effective_value(question, raw)
        counts[question.category] += 1

    category_scores = []
    for key in CATEGORY_ORDER:
        score = rescale_category(totals[key], counts[key])
        category_scores.append(
            CategoryScore(category=key, score=score, tier=tier_for_score(score), answered=counts[key])
        )

    overall = round_half_up(sum(cs.score for cs in category_scores) / len(category_scores))

    return CheckInResult(
        overall=overall,
        categories=tuple(category_scores),
        focus_area=pick_focus_area(category_scores),
    )
