from __future__ import annotations

import plotly.graph_objects as go

from app.domain.catalog import CATEGORIES, CATEGORY_ORDER
from app.domain.models import CheckInResult


# --- Color interpolation helpers (kept module-level for reuse) ---
def hex_to_rgb(h: str) -> tuple[int, int, int]:
    h = h.lstrip("#")
    return (
        int(h[0:2], 16),
        int(h[2:4], 16),
        int(h[4:6], 16),
    )


def rgb_to_hex(rgb: tuple[int, int, int]) -> str:
    r, g, b = rgb
    return f"#{r:02X}{g:02X}{b:02X}"


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


# Stops sit on the tier boundaries: red below 55, amber through 79, green from 80.
DEFAULT_STOPS: list[tuple[float, str]] = [
    (0.0, "#D73027"),
    (55.0, "#FEE08B"),
    (80.0, "#91CF60"),
    (100.0, "#1A9850"),
]

OWN_COLOR = "#EC4899"
PARTNER_COLOR = "#6366F1"


def gradient_color(value: float, stops: list[tuple[float, str]] = DEFAULT_STOPS) -> str:
    """Piecewise-linear interpolation across hex color stops."""
    v = float(value)
    if v <= stops[0][0]:
        return stops[0][1]
    if v >= stops[-1][0]:
        return stops[-1][1]
    for i in range(len(stops) - 1):
        v0, c0 = stops[i]
        v1, c1 = stops[i + 1]
        if v0 <= v <= v1:
            t = 0.0 if v1 == v0 else (v - v0) / (v1 - v0)
            r0, g0, b0 = hex_to_rgb(c0)
            r1, g1, b1 = hex_to_rgb(c1)
            r = int(round(lerp(r0, r1, t)))
            g = int(round(lerp(g0, g1, t)))
            b = int(round(lerp(b0, b1, t)))
            return rgb_to_hex((r, g, b))
    return stops[-1][1]


def _fill(hex_color: str, alpha: float) -> str:
    r, g, b = hex_to_rgb(hex_color)
    return f"rgba({r},{g},{b},{alpha})"


def _add_result_trace(fig: go.Figure, result: CheckInResult, *, name: str, color: str) -> None:
    labels = [CATEGORIES[key].label for key in CATEGORY_ORDER]
    scores = [result.score_for(key).score for key in CATEGORY_ORDER]
    fig.add_trace(
        go.Scatterpolar(
            r=scores + scores[:1],
            theta=labels + labels[:1],
            mode="lines+markers",
            line=dict(color=color, width=2),
            marker=dict(size=10, color=[gradient_color(s) for s in scores + scores[:1]]),
            fill="toself",
            fillcolor=_fill(color, 0.12),
            name=name,
            hovertemplate="<b>%{theta}</b><br>" + name + ": %{r}<extra></extra>",
        )
    )


def make_checkin_radar(
    own: CheckInResult,
    partner: CheckInResult | None = None,
    title: str | None = None,
) -> go.Figure:
    """
    Radar chart with one spoke per category on a 0..100 scale.

    The partner's polygon is overlaid when given. The default title names the
    focus area (or says both agree on it).
    """
    fig = go.Figure()
    _add_result_trace(fig, own, name="You", color=OWN_COLOR)
    if partner is not None:
        _add_result_trace(fig, partner, name="Partner", color=PARTNER_COLOR)

    if title is None:
        focus_label = CATEGORIES[own.focus_area].label
        if partner is None:
            title = f"{focus_label} is your focus area this week"
        elif partner.focus_area == own.focus_area:
            title = f"You both picked out {focus_label}. Talk about it together"
        else:
            title = f"You: {focus_label} · Partner: {CATEGORIES[partner.focus_area].label}"

    fig.update_layout(
        title=dict(
            text=title,
            x=0.5,
            xanchor="center",
            font=dict(family="Helvetica, Arial, sans-serif", size=18),
        ),
        showlegend=partner is not None,
        legend=dict(orientation="h", x=1, y=-0.1, xanchor="right", yanchor="top"),
        margin=dict(l=40, r=40, t=80, b=80),
        polar=dict(
            radialaxis=dict(
                range=[0, 100],
                showticklabels=True,
                ticks="outside",
                tickfont=dict(size=10),
                gridcolor="#BFBFBF",
                gridwidth=0.5,
                tickvals=[0, 25, 55, 80, 100],
            ),
            angularaxis=dict(
                rotation=90,  # 12 o'clock
                direction="clockwise",
                tickfont=dict(size=16),
            ),
        ),
        template="plotly_white",
    )
    fig.update_layout(height=520)
    return fig
