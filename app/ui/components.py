from __future__ import annotations

from html import escape

import streamlit as st

from app.domain.catalog import CATEGORIES, TIER_STYLES
from app.domain.models import CategoryScore
from app.utils.comparison_radar import hex_to_rgb  # reuse for luminance calc


def _luminance(hex_color: str) -> float:
    r, g, b = hex_to_rgb(hex_color)

    def srgb(u):
        x = u / 255.0
        return x / 12.92 if x <= 0.03928 else ((x + 0.055) / 1.055) ** 2.4

    R, G, B = srgb(r), srgb(g), srgb(b)
    return 0.2126 * R + 0.7152 * G + 0.0722 * B


def _auto_fg_for(bg_hex: str) -> str:
    return "#111111" if _luminance(bg_hex) > 0.5 else "#FFFFFF"


def scorecard(value_str: str, subtitle: str, *, bg_hex: str | None = None) -> None:
    style = ""
    if bg_hex:
        fg = _auto_fg_for(bg_hex)
        style = f' style="background:{bg_hex};color:{fg}"'
    st.markdown(
        f"""
        <div class="score-card"{style}>
            <div class="score-val">{escape(value_str)}</div>
            <div class="score-sub">{escape(subtitle)}</div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def category_bar(category_score: CategoryScore, *, prefix: str = "") -> None:
    """One labelled progress bar coloured by tier."""
    category = CATEGORIES[category_score.category]
    tier = TIER_STYLES[category_score.tier]
    label = f"{prefix}{category.emoji} {category.label}"
    st.markdown(
        f"""
        <div class="bar-row">
            <span class="bar-label">{escape(label)} · {category_score.score}</span>
            <span class="bar"><span class="bar-fill"
                style="width:{category_score.score}%;background:{tier.color}"></span></span>
            <span class="tier-pill">{tier.emoji} {escape(tier.label)}</span>
        </div>
        """,
        unsafe_allow_html=True,
    )
