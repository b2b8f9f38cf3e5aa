"""Composition of the mirrored collections into the reported record sequence."""

from __future__ import annotations

from typing import Iterable, Sequence

from core.mirror import date_sort_key
from core.models import ALL_MONTHS, DataItem, ViewMode

__all__ = [
    "MONTH_KEY_LENGTH",
    "month_key",
    "compose_view",
    "available_months",
]

MONTH_KEY_LENGTH = 7


def month_key(date_value: str) -> str | None:
    """Return the ``YYYY-MM`` prefix of ``date_value`` or ``None`` if too short."""

    if not date_value or len(date_value) < MONTH_KEY_LENGTH:
        return None
    return date_value[:MONTH_KEY_LENGTH]


def compose_view(
    travel: Sequence[DataItem],
    business: Sequence[DataItem],
    view_mode: ViewMode,
    month_filter: str = ALL_MONTHS,
) -> list[DataItem]:
    """Return the records visible for ``view_mode`` and ``month_filter``.

    ``TOTAL`` lists travel records before business records, and the final
    date-descending sort is stable, so equal dates keep that order.
    """

    mode = ViewMode(view_mode)
    if mode is ViewMode.TRAVEL_ONLY:
        selected: list[DataItem] = list(travel)
    elif mode is ViewMode.BUSINESS_ONLY:
        selected = list(business)
    else:
        selected = [*travel, *business]

    if month_filter and month_filter != ALL_MONTHS:
        selected = [item for item in selected if item.date[:MONTH_KEY_LENGTH] == month_filter]

    return sorted(selected, key=lambda item: date_sort_key(item.date), reverse=True)


def available_months(travel: Iterable[DataItem], business: Iterable[DataItem]) -> list[str]:
    """Return every month present in either collection, newest first."""

    months = {month_key(item.date) for item in [*travel, *business]}
    months.discard(None)
    return sorted(months, reverse=True)
