from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

CategoryKey = Literal["connection", "communication", "patterns", "vision"]
Tier = Literal["thriving", "growing", "attention"]


@dataclass(frozen=True, slots=True)
class Question:
    id: int  # 1..16
    category: CategoryKey
    text: str
    reversed: bool = False  # high raw answer means a worse week


@dataclass(frozen=True, slots=True)
class Category:
    key: CategoryKey
    label: str
    emoji: str
    source: str
    description: str
    conversation_starters: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class RatingOption:
    value: int  # 1..5
    emoji: str
    label: str


@dataclass(frozen=True, slots=True)
class TierStyle:
    key: Tier
    label: str
    emoji: str
    color: str


@dataclass(frozen=True, slots=True)
class CategoryScore:
    category: CategoryKey
    score: int  # 0..100
    tier: Tier
    # None when rebuilt from a shared token
    answered: int | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class CheckInResult:
    overall: int  # 0..100
    categories: tuple[CategoryScore, ...]
    focus_area: CategoryKey

    def score_for(self, key: CategoryKey) -> CategoryScore:
        for category_score in self.categories:
            if category_score.category == key:
                return category_score
        raise KeyError(key)

    def as_dict(self) -> dict[str, Any]:
        return {
            "overall": self.overall,
            "focus_area": self.focus_area,
            "categories": [
                {"category": cs.category, "score": cs.score, "tier": cs.tier}
                for cs in self.categories
            ],
        }


AccurateAnswer = Literal["yes", "somewhat", "no"]
UsefulAnswer = Literal["yes", "maybe", "no"]


@dataclass(slots=True)
class FeedbackEntry:
    id: str
    overall_score: int
    enjoyment: int  # 1..5, 0 when not given
    accurate: str  # AccurateAnswer or ""
    useful: str  # UsefulAnswer or ""
    suggestion: str
    submitted_at: str  # ISO 8601, UTC


@dataclass(slots=True)
class SuggestionNote:
    text: str
    date: str
    score: int


@dataclass(slots=True)
class FeedbackSummary:
    total: int
    average_enjoyment: float | None
    average_score: int | None
    accurate_counts: dict[str, int]
    useful_counts: dict[str, int]
    suggestions: list[SuggestionNote]
