from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


class Category(BaseModel):
    key: str
    label: str
    emoji: str
    source: str
    description: str
    conversation_starters: list[str]


class Question(BaseModel):
    id: int
    category: str
    text: str
    reversed: bool = False


class RatingOption(BaseModel):
    value: int
    emoji: str
    label: str


class TierInfo(BaseModel):
    key: Literal["thriving", "growing", "attention"]
    label: str
    emoji: str
    color: str


class Questionnaire(BaseModel):
    category_order_version: int
    categories: list[Category]
    questions: list[Question]
    rating_scale: list[RatingOption]
    tiers: list[TierInfo]


class CategoryScore(BaseModel):
    category: str
    label: str
    emoji: str
    score: int
    tier: Literal["thriving", "growing", "attention"]
    tier_label: str
    tier_color: str


class CheckInResult(BaseModel):
    overall: int
    overall_emoji: str
    focus_area: str
    focus_label: str
    conversation_starters: list[str]
    categories: list[CategoryScore]


class CheckInRequest(BaseModel):
    # Keys arrive as strings in JSON; validated against question ids downstream.
    answers: dict[str, Any] = Field(default_factory=dict)


class CheckInResponse(CheckInResult):
    token: str
    share_url: Optional[str] = None


class DecodeRequest(BaseModel):
    token: str = Field(..., description="Bare token or a full partner link")


class CompareRequest(CheckInRequest):
    partner_token: str


class CategoryComparison(BaseModel):
    category: str
    label: str
    own_score: int
    partner_score: int
    difference: int


class PlotlyFigure(BaseModel):
    data: list[Any]
    layout: dict[str, Any]
    frames: Optional[list[Any]] = None

    model_config = {"extra": "allow"}


class CompareResponse(BaseModel):
    own: CheckInResult
    partner: CheckInResult
    categories: list[CategoryComparison]
    overall_difference: int
    radar: Optional[PlotlyFigure] = None


class FeedbackEntry(BaseModel):
    id: str
    overall_score: int
    enjoyment: int
    accurate: str
    useful: str
    suggestion: str
    submitted_at: str


class FeedbackCreatedResponse(BaseModel):
    ok: bool = True
    id: str


class SuggestionNote(BaseModel):
    text: str
    date: str
    score: int


class FeedbackSummary(BaseModel):
    total: int
    average_enjoyment: Optional[float] = None
    average_score: Optional[int] = None
    accurate_counts: dict[str, int]
    useful_counts: dict[str, int]
    suggestions: list[SuggestionNote]
