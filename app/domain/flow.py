"""
Wizard state for a single check-in.

Stages:
    welcome      -> nothing answered yet
    in_progress  -> (index, partial answers)
    completed    -> own result
    comparing    -> own result + partner result

The object owns all mutable UI state so the scorer and codec stay pure.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Literal

from ..infrastructure.exceptions import CheckInStateError, ValidationError
from .catalog import CATEGORIES, QUESTIONS
from .codec import decode_scores, encode_result, extract_token
from .models import Category, CheckInResult, Question
from .services import calculate_result, clamp_answer, round_half_up

Stage = Literal["welcome", "in_progress", "completed", "comparing"]


class CheckInFlow:
    def __init__(self, questions: Sequence[Question] = QUESTIONS):
        if not questions:
            raise ValueError("A check-in needs at least one question")
        self._questions = tuple(questions)
        self._stage: Stage = "welcome"
        self._index = 0
        self._answers: dict[int, int] = {}
        self._result: CheckInResult | None = None
        self._partner_result: CheckInResult | None = None

    # ---------- state ----------
    @property
    def stage(self) -> Stage:
        return self._stage

    @property
    def index(self) -> int:
        return self._index

    @property
    def answers(self) -> dict[int, int]:
        return dict(self._answers)

    @property
    def result(self) -> CheckInResult | None:
        return self._result

    @property
    def partner_result(self) -> CheckInResult | None:
        return self._partner_result

    @property
    def total_questions(self) -> int:
        return len(self._questions)

    @property
    def current_question(self) -> Question:
        self._require("read the current question", "in_progress")
        return self._questions[self._index]

    @property
    def progress_percent(self) -> int:
        if self._stage in ("completed", "comparing"):
            return 100
        if self._stage == "welcome":
            return 0
        return round_half_up(self._index / len(self._questions) * 100)

    @property
    def share_token(self) -> str:
        self._require("share results", "completed", "comparing")
        assert self._result is not None
        return encode_result(self._result)

    @property
    def focus_category(self) -> Category:
        self._require("pick a focus area", "completed", "comparing")
        assert self._result is not None
        return CATEGORIES[self._result.focus_area]

    @property
    def conversation_starters(self) -> tuple[str, ...]:
        return self.focus_category.conversation_starters

    # ---------- transitions ----------
    def start(self) -> None:
        self._require("start", "welcome", "completed", "comparing")
        self._stage = "in_progress"
        self._index = 0
        self._answers = {}
        self._result = None

    def answer(self, value: int) -> Stage:
        self._require("answer", "in_progress")
        try:
            checked = clamp_answer(value)
        except ValueError as exc:
            raise ValidationError("answer", str(exc), value) from exc
        if checked is None:
            raise ValidationError("answer", "an answer is required", value)

        question = self._questions[self._index]
        self._answers[question.id] = checked

        if self._index < len(self._questions) - 1:
            self._index += 1
            return self._stage

        self._result = calculate_result(self._answers, self._questions)
        self._stage = "comparing" if self._partner_result is not None else "completed"
        return self._stage

    def back(self) -> None:
        self._require("go back", "in_progress")
        if self._index == 0:
            raise CheckInStateError("go back", "first question")
        self._index -= 1

    def receive_partner_token(self, token_or_link: str) -> bool:
        """
        Take a partner's token (or a whole shared link).

        Returns False and leaves everything untouched if it cannot be decoded.
        A later valid token replaces an earlier one.
        """
        decoded = decode_scores(extract_token(token_or_link))
        if decoded is None:
            return False
        self._partner_result = decoded
        if self._stage == "completed":
            self._stage = "comparing"
        return True

    def restart(self) -> None:
        self._stage = "welcome"
        self._index = 0
        self._answers = {}
        self._result = None

    def _require(self, action: str, *stages: Stage) -> None:
        if self._stage not in stages:
            raise CheckInStateError(action, self._stage)
