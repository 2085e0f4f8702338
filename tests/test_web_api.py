from __future__ import annotations

import json

from app.domain.codec import encode_scores
from app.infrastructure.config import reset_settings
from tests.answer_sets import best_answers, uniform_answers


def as_json_answers(answers: dict[int, int]) -> dict[str, int]:
    return {str(k): v for k, v in answers.items()}


def test_healthcheck(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_questionnaire_endpoint(client):
    data = client.get("/api/questionnaire").json()
    assert len(data["questions"]) == 16
    assert len(data["categories"]) == 4
    assert len(data["tiers"]) == 3


def test_checkin_returns_result_and_share_link(client):
    response = client.post("/api/checkin", json={"answers": as_json_answers(uniform_answers(3))})
    assert response.status_code == 200
    data = response.json()
    assert data["overall"] == 50
    assert data["focus_area"] == "connection"
    assert data["share_url"].endswith(f"#{data['token']}")
    assert data["share_url"].startswith("http://testserver/")


def test_checkin_rejects_unknown_question(client):
    response = client.post("/api/checkin", json={"answers": {"99": 3}})
    assert response.status_code == 422


def test_checkin_rejects_out_of_range_answer(client):
    response = client.post("/api/checkin", json={"answers": {"1": 9}})
    assert response.status_code == 422


def test_decode_share_token(client):
    token = encode_scores(uniform_answers(4))
    response = client.post("/api/share/decode", json={"token": f"http://x.test/#{token}"})
    assert response.status_code == 200
    data = response.json()
    assert [c["score"] for c in data["categories"]] == [75, 75, 50, 75]
    assert data["focus_area"] == "patterns"


def test_decode_bad_token(client):
    response = client.post("/api/share/decode", json={"token": "not-a-token"})
    assert response.status_code == 400
    assert "partner link" in response.json()["detail"]


def test_decode_overlong_token(client):
    response = client.post("/api/share/decode", json={"token": "a" * 600})
    assert response.status_code == 400


def test_compare_endpoint(client):
    partner_token = encode_scores(uniform_answers(3))
    response = client.post(
        "/api/compare",
        json={"answers": as_json_answers(best_answers()), "partner_token": partner_token},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["overall_difference"] == 50
    assert len(data["categories"]) == 4
    assert len(data["radar"]["data"]) == 2


def test_compare_with_bad_partner_token(client):
    response = client.post(
        "/api/compare",
        json={"answers": as_json_answers(best_answers()), "partner_token": "???"},
    )
    assert response.status_code == 400


def test_feedback_round_trip(client, feedback_path):
    response = client.post(
        "/api/feedback",
        json={
            "overallScore": 80,
            "enjoyment": 5,
            "accurate": "yes",
            "useful": "yes",
            "suggestion": "More questions about money",
        },
    )
    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert feedback_path.exists()

    listed = client.get("/api/feedback").json()
    assert [e["id"] for e in listed] == [body["id"]]

    summary = client.get("/api/feedback/summary").json()
    assert summary["total"] == 1
    assert summary["average_enjoyment"] == 5.0
    assert summary["accurate_counts"]["yes"] == 1
    assert summary["suggestions"][0]["text"] == "More questions about money"


def test_feedback_without_body_is_stored(client):
    response = client.post("/api/feedback")
    assert response.status_code == 200
    assert len(client.get("/api/feedback").json()) == 1


def test_feedback_summary_empty(client):
    summary = client.get("/api/feedback/summary").json()
    assert summary["total"] == 0
    assert summary["average_score"] is None


def test_feedback_exports(client):
    client.post("/api/feedback", json={"overallScore": 60, "enjoyment": 3})

    exported = client.get("/api/feedback/exports/json").json()
    assert exported["count"] == 1
    assert exported["feedback"][0]["OverallScore"] == 60

    xlsx = client.get("/api/feedback/exports/xlsx")
    assert xlsx.status_code == 200
    assert xlsx.content[:2] == b"PK"
    assert "checkin_feedback.xlsx" in xlsx.headers["content-disposition"]


def test_pages_render(client):
    page = client.get("/")
    assert page.status_code == 200
    assert "Weekly Check-In" in page.text

    insights = client.get("/insights")
    assert insights.status_code == 200


def test_feedback_rejects_oversized_text(client):
    response = client.post("/api/feedback", json={"suggestion": "x" * 10001})
    assert response.status_code == 422


def test_checkin_rejects_boolean_answers(client):
    response = client.post("/api/checkin", json={"answers": {"1": True, "2": True}})
    assert response.status_code == 422


def test_hand_edited_feedback_file_still_summarises(client, feedback_path):
    feedback_path.write_text(
        json.dumps(
            [
                {
                    "id": "edited",
                    "overall_score": "70",
                    "enjoyment": None,
                    "accurate": "yes",
                    "useful": None,
                    "suggestion": None,
                    "submitted_at": "2024-03-01T09:30:00Z",
                }
            ]
        ),
        encoding="utf-8",
    )
    summary = client.get("/api/feedback/summary")
    assert summary.status_code == 200
    assert summary.json()["average_score"] == 70

    listed = client.get("/api/feedback")
    assert listed.status_code == 200
    assert listed.json()[0]["suggestion"] == ""


def test_insights_hidden_when_feedback_disabled(client, monkeypatch):
    monkeypatch.setenv("APP_ENABLE_FEEDBACK", "false")
    reset_settings()
    try:
        assert client.get("/insights").status_code == 404
        assert client.get("/api/feedback").status_code == 404
    finally:
        monkeypatch.delenv("APP_ENABLE_FEEDBACK")
        reset_settings()
