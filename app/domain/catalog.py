"""
Static questionnaire definition: categories, questions, rating scale and tiers.

CATEGORY_ORDER is the single source of truth for category ordering. Scores
travel inside shared tokens as a positional list, so the scorer and the token
codec must both read this constant; bump CATEGORY_ORDER_VERSION if it changes.
"""

from __future__ import annotations

from collections import Counter

from .models import Category, CategoryKey, Question, RatingOption, Tier, TierStyle

CATEGORY_ORDER_VERSION = 1
CATEGORY_ORDER: tuple[CategoryKey, ...] = ("connection", "communication", "patterns", "vision")

QUESTIONS_PER_CATEGORY = 4

CATEGORIES: dict[CategoryKey, Category] = {
    "connection": Category(
        key="connection",
        label="Connection",
        emoji="💛",
        source='Gottman: Love Maps and "bids"',
        description="How seen, heard and close you felt this week.",
        conversation_starters=(
            '"What has been on your mind most this week that I might not know about?"',
            '"Is there something you have wanted to tell me but have not found the moment?"',
            '"What is one thing I could do more of so you feel close to me?"',
        ),
    ),
    "communication": Category(
        key="communication",
        label="Communication",
        emoji="💬",
        source="Gottman: The Four Horsemen and their antidotes",
        description="How you handled disagreement, tension and repair this week.",
        conversation_starters=(
            '"Was there a moment this week when you felt ignored or dismissed, even a small one?"',
            '"When I brought up something difficult, how did it land for you?"',
            '"What would have made a recent hard conversation go better?"',
        ),
    ),
    "patterns": Category(
        key="patterns",
        label="Patterns",
        emoji="🌀",
        source="Terry Real: Wise Adult / Adaptive Child",
        description="Whether you showed up as your best self or slipped into old reactive habits.",
        conversation_starters=(
            '"Did you notice me falling into an old pattern this week? It is okay to say so."',
            '"When did I seem most like my best self this week?"',
            '"Is there something I do when I am stressed that makes it harder to reach me?"',
        ),
    ),
    "vision": Category(
        key="vision",
        label="Vision",
        emoji="🌟",
        source="Gottman: Shared meaning and goals",
        description="Whether you feel aligned and excited about where you are heading together.",
        conversation_starters=(
            '"What is something you are looking forward to doing together in the next few months?"',
            '"Do you feel I know what matters most to you right now, your goals and your fears?"',
            '"Is there anything about our future together that feels uncertain or unspoken?"',
        ),
    ),
}

QUESTIONS: tuple[Question, ...] = (
    # Connection
    Question(1, "connection", "This week I felt truly seen by my partner"),
    Question(2, "connection", "When I reached out for connection, they responded warmly"),
    Question(3, "connection", "I know what has been on their mind lately: worries, hopes, the day to day"),
    Question(4, "connection", "We had at least one real conversation this week (not just logistics)"),
    # Communication
    Question(5, "communication", "When we disagreed, I spoke up without attacking their character"),
    Question(6, "communication", "I felt respected even when we did not see things the same way"),
    Question(7, "communication", "When something bothered me, I raised it without blaming"),
    Question(8, "communication", "We were able to repair quickly after any tension"),
    # Patterns
    Question(9, "patterns", "I caught myself shutting down or going cold instead of talking", reversed=True),
    Question(10, "patterns", "I stayed curious about their perspective instead of defending myself"),
    Question(11, "patterns", "I showed up as my best self: not triggered, not checked out"),
    Question(
        12,
        "patterns",
        "Old reactive patterns showed up this week (blowing up, withdrawing...)",
        reversed=True,
    ),
    # Vision
    Question(13, "vision", "We are aligned on what matters most to us right now"),
    Question(14, "vision", "I feel we are building something together, not just coexisting"),
    Question(15, "vision", "I am excited about where we are going as a couple"),
    Question(16, "vision", "I feel my partner knows and supports my personal dreams"),
)

RATING_SCALE: tuple[RatingOption, ...] = (
    RatingOption(1, "😕", "Not at all"),
    RatingOption(2, "😐", "A little"),
    RatingOption(3, "🙂", "Somewhat"),
    RatingOption(4, "😊", "Mostly"),
    RatingOption(5, "🥰", "Completely"),
)

TIER_STYLES: dict[Tier, TierStyle] = {
    "thriving": TierStyle("thriving", "Thriving", "🌱", "#86EFAC"),
    "growing": TierStyle("growing", "Growing", "🌤️", "#FCD34D"),
    "attention": TierStyle("attention", "Needs attention", "🌧️", "#FCA5A5"),
}

QUESTION_IDS: frozenset[int] = frozenset(q.id for q in QUESTIONS)


def get_category(key: str) -> Category:
    return CATEGORIES[key]  # type: ignore[index]


def questions_for(key: CategoryKey) -> list[Question]:
    return [q for q in QUESTIONS if q.category == key]


def overall_emoji(score: int) -> str:
    if score >= 80:
        return "💖"
    if score >= 60:
        return "💛"
    if score >= 40:
        return "🌸"
    return "🤍"


def validate_catalog(
    categories: dict[CategoryKey, Category] = CATEGORIES,
    questions: tuple[Question, ...] = QUESTIONS,
    order: tuple[CategoryKey, ...] = CATEGORY_ORDER,
) -> None:
    """Raise ValueError if the static definitions break the questionnaire's shape."""
    if tuple(categories) != order:
        raise ValueError("CATEGORY_ORDER must list every category exactly once, in order")
    for key, category in categories.items():
        if category.key != key:
            raise ValueError(f"Category keyed '{key}' declares key '{category.key}'")

    ids = [q.id for q in questions]
    if len(set(ids)) != len(ids):
        raise ValueError("Question ids must be unique")
    if sorted(ids) != list(range(1, len(ids) + 1)):
        raise ValueError("Question ids must run from 1 without gaps")

    unknown = {q.category for q in questions} - set(categories)
    if unknown:
        raise ValueError(f"Questions reference undefined categories: {sorted(unknown)}")

    counts = Counter(q.category for q in questions)
    for key in order:
        if counts.get(key, 0) != QUESTIONS_PER_CATEGORY:
            raise ValueError(
                f"Category '{key}' owns {counts.get(key, 0)} questions, "
                f"expected {QUESTIONS_PER_CATEGORY}"
            )


validate_catalog()
