"""Plotly chart builders for the stargazer dashboard."""

from __future__ import annotations

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from ghstats.config import COLOR_STARS, COLOR_WEEKLY


def _layout(fig: go.Figure, height: int, y_title: str) -> go.Figure:
    fig.update_layout(
        xaxis_title="Week",
        yaxis_title=y_title,
        legend=dict(orientation="h", y=-0.2),
        margin=dict(t=20, b=60, l=40, r=20),
        height=height,
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        xaxis=dict(gridcolor="#2a2a3a"),
        yaxis_gridcolor="#2a2a3a",
    )
    return fig


# ── Cumulative growth ─────────────────────────────────────────────────────────

def make_star_growth(table: pd.DataFrame, log_scale: bool = False) -> go.Figure:
    """One line per repository, columns in report order."""
    fig = go.Figure()
    palette = px.colors.qualitative.Plotly
    for i, repo in enumerate(table.columns):
        fig.add_trace(go.Scatter(
            x=list(table.index), y=table[repo].tolist(),
            mode="lines",
            name=repo,
            line=dict(color=palette[i % len(palette)], width=2),
            hovertemplate=f"<b>{repo}</b><br>Week: %{{x|%b %d, %Y}}<br>Stars: %{{y:,}}<extra></extra>",
        ))
    fig = _layout(fig, 420, "Stars (cumulative)")
    if log_scale:
        fig.update_yaxes(type="log")
    return fig


# ── Weekly increments ─────────────────────────────────────────────────────────

def make_weekly_new_stars(weekly: pd.DataFrame, repo: str) -> go.Figure:
    fig = go.Figure()
    if repo not in weekly.columns:
        return fig
    fig.add_trace(go.Bar(
        x=list(weekly.index), y=weekly[repo].tolist(),
        name="New stars", marker_color=COLOR_WEEKLY, opacity=0.8,
        hovertemplate="New stars: %{y}<extra></extra>",
    ))
    series = weekly[repo]
    if len(series) >= 4:
        rolling = series.rolling(4, min_periods=1).mean()
        fig.add_trace(go.Scatter(
            x=list(weekly.index), y=rolling.round(1).tolist(),
            name="4-week average", mode="lines",
            line=dict(color=COLOR_STARS, width=2),
            hovertemplate="4-wk avg: %{y}<extra></extra>",
        ))
    return _layout(fig, 300, "Stars per week")
