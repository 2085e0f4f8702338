import pytest

from app.application.api import (
    FEEDBACK_COLUMNS,
    compare_with_partner,
    decode_shared_token,
    describe_result,
    export_feedback_frame,
    get_questionnaire,
    list_feedback,
    run_checkin,
    submit_feedback,
    summarize_feedback,
)
from app.domain.codec import encode_scores
from app.domain.models import FeedbackEntry
from app.domain.services import calculate_result
from app.infrastructure.exceptions import TokenDecodeError
from tests.answer_sets import best_answers, uniform_answers


def entry(entry_id, score, enjoyment, accurate="yes", useful="yes", suggestion="", when="2024-03-01T09:30:00Z"):
    return FeedbackEntry(
        id=entry_id,
        overall_score=score,
        enjoyment=enjoyment,
        accurate=accurate,
        useful=useful,
        suggestion=suggestion,
        submitted_at=when,
    )


def test_questionnaire_lists_everything_in_order():
    questionnaire = get_questionnaire()
    assert questionnaire["category_order_version"] == 1
    assert [c["key"] for c in questionnaire["categories"]] == [
        "connection",
        "communication",
        "patterns",
        "vision",
    ]
    assert [q["id"] for q in questionnaire["questions"]] == list(range(1, 17))
    assert [o["value"] for o in questionnaire["rating_scale"]] == [1, 2, 3, 4, 5]


def test_describe_result_adds_labels():
    described = describe_result(calculate_result(uniform_answers(5)))
    assert described["focus_area"] == "patterns"
    assert described["focus_label"] == "Patterns"
    assert len(described["conversation_starters"]) == 3
    assert described["categories"][0]["tier_label"] == "Thriving"


def test_run_checkin_builds_share_url():
    payload = run_checkin(uniform_answers(3), base_url="https://example.test/checkin")
    assert payload["overall"] == 50
    assert payload["share_url"] == f"https://example.test/checkin#{payload['token']}"


def test_run_checkin_without_base_url():
    assert run_checkin(uniform_answers(3))["share_url"] is None


def test_decode_shared_token_raises_on_garbage():
    with pytest.raises(TokenDecodeError):
        decode_shared_token("definitely not a token")


def test_compare_with_partner_lines_up_categories():
    partner_token = encode_scores(uniform_answers(3))
    comparison = compare_with_partner(best_answers(), f"https://example.test/#{partner_token}")

    assert comparison["overall_difference"] == 50
    assert [row["difference"] for row in comparison["categories"]] == [50, 50, 50, 50]
    assert comparison["partner"]["overall"] == 50
    assert len(comparison["radar"]["data"]) == 2


def test_submit_feedback_stores_coerced_entry(feedback_repo):
    saved = submit_feedback(
        feedback_repo,
        {"overallScore": "64", "enjoyment": 4.8, "accurate": "somewhat", "suggestion": "x" * 50},
        max_suggestion_length=10,
    )
    assert saved.overall_score == 64
    assert saved.enjoyment == 4
    assert saved.useful == ""
    assert saved.suggestion == "x" * 10
    assert saved.submitted_at.endswith("Z")
    assert list_feedback(feedback_repo) == [saved]


def test_submit_empty_feedback_is_accepted(feedback_repo):
    saved = submit_feedback(feedback_repo, {})
    assert saved.overall_score == 0
    assert saved.enjoyment == 0
    assert feedback_repo.count() == 1


def test_summary_of_nothing():
    summary = summarize_feedback([])
    assert summary.total == 0
    assert summary.average_enjoyment is None
    assert summary.average_score is None
    assert summary.accurate_counts == {"yes": 0, "somewhat": 0, "no": 0}
    assert summary.suggestions == []


def test_summary_averages_counts_and_suggestions():
    entries = [
        entry("1", 70, 4, accurate="yes", useful="maybe"),
        entry("2", 81, 5, accurate="yes", useful="no", suggestion="  More vision questions "),
        entry("3", 90, 5, accurate="sort of", useful="yes", suggestion="   "),
    ]
    summary = summarize_feedback(entries)

    assert summary.total == 3
    assert summary.average_enjoyment == 4.7
    assert summary.average_score == 80
    assert summary.accurate_counts == {"yes": 2, "somewhat": 0, "no": 0}
    assert summary.useful_counts == {"yes": 1, "maybe": 1, "no": 1}
    assert len(summary.suggestions) == 1
    note = summary.suggestions[0]
    assert note.text == "More vision questions"
    assert note.date == "2024-03-01"
    assert note.score == 81


def test_export_frame_columns():
    df = export_feedback_frame([entry("1", 70, 4)])
    assert list(df.columns) == FEEDBACK_COLUMNS
    assert df.iloc[0]["OverallScore"] == 70


def test_export_frame_empty():
    df = export_feedback_frame([])
    assert df.empty
    assert list(df.columns) == FEEDBACK_COLUMNS
