"""Shared Plotly theme tokens for TourLedger visualizations."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ThemeTokens:
    label_color: str = "#64748B"
    label_font: str = "Inter"
    label_size: int = 12
    grid_color: str = "#E2E8F0"
    revenue_color: str = "#475569"
    profit_color: str = "#10B981"
    neutral_grey: str = "#94A3B8"
    neutral_white: str = "#FFFFFF"
    status_palette: dict[str, str] | None = None
    other_status_color: str = "#94A3B8"

    def status_color(self, name: str) -> str:
        palette = self.status_palette or _STATUS_COLORS
        return palette.get(name, self.other_status_color)


_STATUS_COLORS: dict[str, str] = {
    "Confirmed": "#10B981",
    "Waiting": "#F59E0B",
    "Cancelled": "#EF4444",
}

_TOKENS = ThemeTokens()


def theme_tokens() -> ThemeTokens:
    """Return the shared visualization tokens.

    The tokens are frozen to keep styling consistent between charts and other
    Plotly artefacts.
    """

    return _TOKENS
