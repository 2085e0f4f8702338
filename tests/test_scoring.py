import pytest

from app.domain.catalog import CATEGORY_ORDER, QUESTIONS
from app.domain.services import (
    calculate_result,
    effective_value,
    pick_focus_area,
    rescale_category,
    round_half_up,
    tier_for_score,
)
from app.domain.models import CategoryScore
from tests.answer_sets import best_answers, uniform_answers, worst_answers


def scores_of(result):
    return [cs.score for cs in result.categories]


def test_best_answers_score_100_everywhere():
    result = calculate_result(best_answers())
    assert scores_of(result) == [100, 100, 100, 100]
    assert result.overall == 100
    assert all(cs.tier == "thriving" for cs in result.categories)


def test_worst_answers_score_0_everywhere():
    result = calculate_result(worst_answers())
    assert scores_of(result) == [0, 0, 0, 0]
    assert result.overall == 0
    assert all(cs.tier == "attention" for cs in result.categories)
    assert result.focus_area == "connection"


def test_all_fives_penalises_reversed_questions():
    result = calculate_result(uniform_answers(5))
    # patterns: 1 + 5 + 5 + 1 = 12 over a 4..20 range
    assert result.score_for("patterns").score == 50
    assert result.score_for("connection").score == 100
    assert result.focus_area == "patterns"


def test_middle_answers_give_50():
    result = calculate_result(uniform_answers(3))
    assert scores_of(result) == [50, 50, 50, 50]
    assert result.overall == 50
    assert result.focus_area == "connection"


def test_reversed_question_value():
    q9 = next(q for q in QUESTIONS if q.id == 9)
    q1 = next(q for q in QUESTIONS if q.id == 1)
    assert q9.reversed
    assert effective_value(q9, 5) == 1
    assert effective_value(q9, 2) == 4
    assert effective_value(q1, 2) == 2


def test_category_score_rounds_half_up():
    answers = uniform_answers(3)
    answers.update({1: 1, 2: 1, 3: 2, 4: 2})
    # (6 - 4) / 16 * 100 = 12.5
    assert calculate_result(answers).score_for("connection").score == 13


def test_round_half_up():
    assert round_half_up(12.5) == 13
    assert round_half_up(0.5) == 1
    assert round_half_up(2.4999) == 2
    assert round_half_up(78.25) == 78


def test_rescale_category_bounds():
    assert rescale_category(4, 4) == 0
    assert rescale_category(20, 4) == 100
    assert rescale_category(15, 4) == 69
    assert rescale_category(0, 0) == 0


def test_partial_answers_only_count_answered_questions():
    result = calculate_result({1: 5})
    connection = result.score_for("connection")
    assert connection.score == 100
    assert connection.answered == 1
    for key in CATEGORY_ORDER[1:]:
        assert result.score_for(key).score == 0
        assert result.score_for(key).answered == 0
    assert result.overall == 25
    assert result.focus_area == "communication"


def test_empty_answers():
    result = calculate_result({})
    assert result.overall == 0
    assert result.focus_area == "connection"


def test_overall_is_rounded_mean():
    answers = best_answers()
    answers.update({13: 1, 14: 1, 15: 2, 16: 2})
    result = calculate_result(answers)
    assert scores_of(result) == [100, 100, 100, 13]
    assert result.overall == 78
    assert result.focus_area == "vision"


def test_focus_tie_goes_to_earliest_category():
    scores = [
        CategoryScore("connection", 100, "thriving"),
        CategoryScore("communication", 40, "attention"),
        CategoryScore("patterns", 90, "thriving"),
        CategoryScore("vision", 40, "attention"),
    ]
    assert pick_focus_area(scores) == "communication"


@pytest.mark.parametrize(
    "score, tier",
    [
        (100, "thriving"),
        (80, "thriving"),
        (79, "growing"),
        (55, "growing"),
        (54, "attention"),
        (0, "attention"),
    ],
)
def test_tier_boundaries(score, tier):
    assert tier_for_score(score) == tier


def test_scores_always_in_range():
    for value in range(1, 6):
        result = calculate_result(uniform_answers(value))
        assert 0 <= result.overall <= 100
        assert all(0 <= s <= 100 for s in scores_of(result))
