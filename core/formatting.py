"""Formatting helpers for TourLedger summaries."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from core.models import ZERO, DashboardStats

__all__ = ["format_currency", "format_margin", "build_headline"]

_CENTS = Decimal("0.01")


def format_currency(value: Decimal | float | int, symbol: str = "¥") -> str:
    amount = Decimal(str(value)).quantize(_CENTS, rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_margin(value: Decimal) -> str:
    if value == ZERO:
        return "0%"
    return f"{value:.1f}%"


def build_headline(stats: DashboardStats, symbol: str = "¥") -> str:
    records = stats["record_count"]
    if records == 0:
        return "No records in this view yet."
    noun = "record" if records == 1 else "records"
    return (
        f"{records} {noun} · revenue {format_currency(stats['total_revenue'], symbol)}"
        f" · profit {format_currency(stats['total_profit'], symbol)}"
    )
