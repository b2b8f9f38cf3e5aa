"""Stats, chart series and status distribution over a composed record view."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Sequence

from core.models import (
    EXACT,
    ZERO,
    ChartPoint,
    DashboardStats,
    DataItem,
    EntityKind,
    GroupStatus,
    StatusPoint,
    ViewMode,
)

__all__ = [
    "CHART_LIMIT",
    "UNKNOWN_LABEL",
    "OTHER_STATUS",
    "compute_stats",
    "profit_margin",
    "build_chart_series",
    "build_status_histogram",
]

CHART_LIMIT = 20
UNKNOWN_LABEL = "unknown"
OTHER_STATUS = "other"
_HUNDRED = Decimal("100")


def compute_stats(items: Iterable[DataItem]) -> DashboardStats:
    total_revenue = ZERO
    total_expense = ZERO
    total_pax = 0
    active_groups = 0
    project_count = 0
    record_count = 0

    for item in items:
        record_count += 1
        total_revenue = EXACT.add(total_revenue, item.revenue)
        total_expense = EXACT.add(total_expense, item.expense)
        if item.kind is EntityKind.TRAVEL:
            total_pax += item.recruit_count
            if item.status == GroupStatus.CONFIRMED:
                active_groups += 1
        else:
            project_count += 1

    return {
        "total_revenue": total_revenue,
        "total_expense": total_expense,
        "total_profit": EXACT.subtract(total_revenue, total_expense),
        "total_pax": total_pax,
        "active_groups": active_groups,
        "project_count": project_count,
        "record_count": record_count,
    }


def profit_margin(stats: DashboardStats) -> Decimal:
    """Return profit as a percentage of revenue, or zero without revenue."""

    revenue = stats["total_revenue"]
    if revenue <= 0:
        return ZERO
    return stats["total_profit"] / revenue * _HUNDRED


def _display_name(item: DataItem) -> str:
    if item.kind is EntityKind.TRAVEL:
        name = item.destination
    else:
        name = item.project_name
    name = name.strip()
    return name or UNKNOWN_LABEL


def build_chart_series(items: Iterable[DataItem], limit: int = CHART_LIMIT) -> list[ChartPoint]:
    """Return revenue and profit per display name, highest revenue first.

    Groups with equal revenue keep the order of their first appearance.
    """

    groups: dict[str, ChartPoint] = {}
    for item in items:
        name = _display_name(item)
        point = groups.get(name)
        if point is None:
            point = {"name": name, "revenue": ZERO, "profit": ZERO}
            groups[name] = point
        point["revenue"] = EXACT.add(point["revenue"], item.revenue)
        point["profit"] = EXACT.add(point["profit"], item.profit)

    ranked = sorted(groups.values(), key=lambda point: point["revenue"], reverse=True)
    return ranked[: max(limit, 0)]


def build_status_histogram(items: Sequence[DataItem], view_mode: ViewMode) -> list[StatusPoint]:
    counts: dict[str, int] = {status.value: 0 for status in GroupStatus}
    other = 0

    if ViewMode(view_mode) is not ViewMode.BUSINESS_ONLY:
        for item in items:
            if item.kind is not EntityKind.TRAVEL:
                continue
            status = item.status
            label = status.value if isinstance(status, GroupStatus) else str(status)
            if label in counts:
                counts[label] += 1
            else:
                other += 1

    histogram: list[StatusPoint] = [{"name": name, "value": value} for name, value in counts.items()]
    if other:
        histogram.append({"name": OTHER_STATUS, "value": other})
    return histogram
