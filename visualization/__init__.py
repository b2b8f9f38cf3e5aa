"""Visualization utilities for TourLedger dashboards."""

from .charts import build_revenue_profit_chart, build_status_chart, chart_frame
from .theme import theme_tokens

__all__ = [
    "build_revenue_profit_chart",
    "build_status_chart",
    "chart_frame",
    "theme_tokens",
]
