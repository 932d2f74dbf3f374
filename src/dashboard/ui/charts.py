"""Білдери Plotly графіків."""

from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go

from src.dashboard.ui.cards import STATUS_COLORS
from src.monitor.classifier import DEFAULT_THRESHOLDS, Thresholds

# ── chart config (hide toolbar by default) ──────────────────────────────────

CHART_CONFIG: dict = {"displayModeBar": False}

# ── shared layout ───────────────────────────────────────────────────────────

_FONT = dict(family="-apple-system, Segoe UI, Roboto, sans-serif", size=13, color="#c9d1d9")

_LAYOUT: dict = dict(
    template="plotly_dark",
    paper_bgcolor="rgba(0,0,0,0)",
    plot_bgcolor="rgba(0,0,0,0)",
    margin=dict(l=48, r=16, t=44, b=36),
    font=_FONT,
    title=dict(font=dict(size=14, color="#e6edf3"), x=0, xanchor="left", y=0.98, yanchor="top"),
    legend=dict(
        orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1, font=dict(size=11)
    ),
    height=320,
)

_GRID_COLOR = "rgba(128,128,128,0.10)"


def _base(**overrides: object) -> dict:
    merged = {**_LAYOUT}
    for k, v in overrides.items():
        if isinstance(v, dict) and isinstance(merged.get(k), dict):
            merged[k] = {**merged[k], **v}
        else:
            merged[k] = v
    return merged


# ── risk gauge ──────────────────────────────────────────────────────────────


def risk_gauge(value: float, thresholds: Thresholds = DEFAULT_THRESHOLDS) -> go.Figure:
    """Risk meter with safe / suspicious / scam alert bands."""
    fig = go.Figure(
        go.Indicator(
            mode="gauge+number",
            value=value,
            number=dict(suffix="%", valueformat=".0f"),
            gauge=dict(
                axis=dict(range=[0, 100]),
                bar=dict(color="#e6edf3", thickness=0.25),
                steps=[
                    dict(range=[0, thresholds.suspicious], color=STATUS_COLORS["safe"]),
                    dict(
                        range=[thresholds.suspicious, thresholds.scam_alert],
                        color=STATUS_COLORS["warning"],
                    ),
                    dict(range=[thresholds.scam_alert, 100], color=STATUS_COLORS["danger"]),
                ],
            ),
        )
    )
    fig.update_layout(**_base(title=dict(text="Risk Level"), height=260))
    return fig


# ── risk / confidence timeline ──────────────────────────────────────────────


def risk_timeline(
    df: pd.DataFrame,
    thresholds: Thresholds = DEFAULT_THRESHOLDS,
) -> go.Figure | None:
    """Line chart of risk and voice confidence per call second.

    Returns *None* for fewer than two samples so the caller can show a
    placeholder instead.
    """
    if df is None or len(df) < 2:
        return None

    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=df["second"],
            y=df["risk_score"],
            name="Risk",
            mode="lines",
            line=dict(color=STATUS_COLORS["danger"], width=2),
            hovertemplate="%{x:.0f}s: %{y:.1f}%<extra>risk</extra>",
        )
    )
    fig.add_trace(
        go.Scatter(
            x=df["second"],
            y=df["confidence"],
            name="Voice confidence",
            mode="lines",
            line=dict(color="#8b5cf6", width=2, dash="dot"),
            hovertemplate="%{x:.0f}s: %{y:.1f}%<extra>confidence</extra>",
        )
    )
    for level, color in (
        (thresholds.suspicious, STATUS_COLORS["warning"]),
        (thresholds.scam_alert, STATUS_COLORS["danger"]),
    ):
        fig.add_hline(y=level, line=dict(color=color, width=1, dash="dash"), opacity=0.6)

    fig.update_layout(
        **_base(
            title=dict(text="Risk and Voice Confidence"),
            xaxis=dict(title="call second", gridcolor=_GRID_COLOR),
            yaxis=dict(range=[0, 100], title="", gridcolor=_GRID_COLOR, zeroline=False),
        )
    )
    return fig
