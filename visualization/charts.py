"""Plotly chart builders for the TourLedger dashboard."""

from __future__ import annotations

from typing import Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from core.models import ChartPoint, StatusPoint

from .theme import theme_tokens

TOKENS = theme_tokens()

__all__ = [
    "build_revenue_profit_chart",
    "build_status_chart",
    "chart_frame",
]


def _empty_plotly_figure(message: str) -> go.Figure:
    fig = go.Figure()
    fig.update_layout(
        annotations=[
            dict(
                text=message,
                x=0.5,
                y=0.5,
                xref="paper",
                yref="paper",
                showarrow=False,
                font=dict(color=TOKENS.neutral_grey, size=14, family=TOKENS.label_font),
            )
        ],
        xaxis=dict(visible=False),
        yaxis=dict(visible=False),
        margin=dict(l=0, r=0, t=20, b=0),
        plot_bgcolor="rgba(0,0,0,0)",
        paper_bgcolor="rgba(0,0,0,0)",
    )
    return fig


def chart_frame(points: Sequence[ChartPoint]) -> pd.DataFrame:
    """Return the chart series as a float frame for plotting."""

    return pd.DataFrame(
        {
            "Name": [point["name"] for point in points],
            "Revenue": [float(point["revenue"]) for point in points],
            "Profit": [float(point["profit"]) for point in points],
        }
    )


def build_revenue_profit_chart(points: Sequence[ChartPoint], currency_symbol: str = "¥") -> go.Figure:
    """Render grouped revenue and profit bars per destination or project."""

    if not points:
        return _empty_plotly_figure("No records in this view yet.")

    df = chart_frame(points)
    hover_template = f"%{{x}}<br>%{{fullData.name}}: {currency_symbol}%{{y:,.0f}}<extra></extra>"

    fig = go.Figure()
    fig.add_trace(
        go.Bar(
            x=df["Name"],
            y=df["Revenue"],
            name="Revenue",
            marker=dict(color=TOKENS.revenue_color),
            hovertemplate=hover_template,
        )
    )
    fig.add_trace(
        go.Bar(
            x=df["Name"],
            y=df["Profit"],
            name="Profit",
            marker=dict(color=TOKENS.profit_color),
            hovertemplate=hover_template,
        )
    )

    fig.update_layout(
        barmode="group",
        bargap=0.3,
        margin=dict(l=0, r=0, t=20, b=0),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1.0),
        xaxis=dict(showgrid=False, tickfont=dict(color=TOKENS.label_color, size=TOKENS.label_size)),
        yaxis=dict(
            showgrid=True,
            gridcolor=TOKENS.grid_color,
            zeroline=False,
            tickprefix=currency_symbol,
            tickformat="~s",
        ),
        plot_bgcolor="rgba(0,0,0,0)",
        paper_bgcolor="rgba(0,0,0,0)",
    )
    return fig


def build_status_chart(points: Sequence[StatusPoint]) -> go.Figure:
    """Render a donut chart of travel group statuses."""

    data = pd.DataFrame({"Status": [p["name"] for p in points], "Count": [p["value"] for p in points]})
    if data.empty or int(data["Count"].sum()) == 0:
        return _empty_plotly_figure("No travel groups in this view.")

    fig = px.pie(
        data,
        names="Status",
        values="Count",
        hole=0.55,
        color="Status",
        color_discrete_map={name: TOKENS.status_color(name) for name in data["Status"]},
    )
    fig.update_traces(
        textposition="inside",
        texttemplate="%{label}<br>%{value}",
        hovertemplate="%{label}: %{value} groups<extra></extra>",
        marker=dict(line=dict(color=TOKENS.neutral_white, width=2)),
    )
    fig.update_layout(
        margin=dict(l=0, r=0, t=0, b=0),
        legend=dict(
            title="",
            orientation="h",
            yanchor="top",
            y=-0.05,
            font=dict(color=TOKENS.label_color, family=TOKENS.label_font, size=TOKENS.label_size),
        ),
    )
    return fig
