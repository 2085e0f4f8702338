"""
Shareable score tokens.

A token is the compact JSON record ``{"o": overall, "c": [scores...], "f": focus}``
run through unpadded URL-safe base64, so it can sit in a URL fragment as-is.
Raw answers and tiers are never written into a token; tiers are recomputed on
the way back in.
"""

from __future__ import annotations

import base64
import binascii
import json
from collections.abc import Mapping

from pydantic import BaseModel, Field, StrictInt
from pydantic import ValidationError as PydanticValidationError

from .catalog import CATEGORY_ORDER
from .models import CategoryKey, CategoryScore, CheckInResult
from .services import calculate_result, tier_for_score

_STANDARD_TO_URLSAFE = str.maketrans("+/", "-_")


class SharedScores(BaseModel):
    """The reduced record carried inside a token."""

    o: StrictInt
    c: list[StrictInt] = Field(..., min_length=len(CATEGORY_ORDER), max_length=len(CATEGORY_ORDER))
    f: CategoryKey

    model_config = {"extra": "ignore"}


def encode_result(result: CheckInResult) -> str:
    payload = {
        "o": result.overall,
        "c": [result.score_for(key).score for key in CATEGORY_ORDER],
        "f": result.focus_area,
    }
    raw = json.dumps(payload, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def encode_scores(answers: Mapping[int, int]) -> str:
    return encode_result(calculate_result(answers))


def _b64decode(token: str) -> bytes:
    # Browser btoa() tokens use the standard alphabet and keep their padding.
    normalised = token.translate(_STANDARD_TO_URLSAFE).rstrip("=")
    padded = normalised + "=" * (-len(normalised) % 4)
    return base64.b64decode(padded.encode("ascii"), altchars=b"-_", validate=True)


def decode_scores(token: str) -> CheckInResult | None:
    """
    Rebuild a result from a token, or return None if the token is malformed.

    Never raises and never returns a partially populated result.
    """
    if not isinstance(token, str) or not token.strip():
        return None

    try:
        data = json.loads(_b64decode(token.strip()).decode("utf-8"))
        record = SharedScores.model_validate(data)
    except (binascii.Error, ValueError, RecursionError, PydanticValidationError):
        return None

    categories = tuple(
        CategoryScore(category=key, score=score, tier=tier_for_score(score))
        for key, score in zip(CATEGORY_ORDER, record.c)
    )
    return CheckInResult(overall=record.o, categories=categories, focus_area=record.f)


def build_share_url(base_url: str, token: str) -> str:
    """``<origin><path>#<token>``; any fragment already on base_url is replaced."""
    return f"{base_url.split('#', 1)[0]}#{token}"


def extract_token(link_or_token: str) -> str:
    text = (link_or_token or "").strip()
    if "#" in text:
        return text.split("#", 1)[1].strip()
    return text
