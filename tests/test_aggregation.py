"""Tests for dashboard stats, chart series and the status distribution."""

from __future__ import annotations

from decimal import Decimal

from analytics.aggregation import (
    OTHER_STATUS,
    UNKNOWN_LABEL,
    build_chart_series,
    build_status_histogram,
    compute_stats,
    profit_margin,
)
from analytics.view import compose_view
from core.formatting import build_headline, format_currency, format_margin
from core.models import ALL_MONTHS, BusinessProjectRecord, GroupStatus, TravelGroupRecord, ViewMode


def _group(identity, destination, revenue, expense=0, status=GroupStatus.WAITING, pax=0):
    return TravelGroupRecord(
        identity,
        date="2024-05-01",
        destination=destination,
        status=status,
        recruit_count=pax,
        revenue=Decimal(str(revenue)),
        expense=Decimal(str(expense)),
    )


def _project(identity, name, revenue, expense=0):
    return BusinessProjectRecord(
        identity,
        project_name=name,
        date="2024-05-01",
        revenue=Decimal(str(revenue)),
        expense=Decimal(str(expense)),
    )


def test_compute_stats_sums_the_view():
    items = [
        _group("t1", "Osaka", "1000.10", "600", GroupStatus.CONFIRMED, 12),
        _group("t2", "Bali", "500", "550", GroupStatus.WAITING, 8),
        _project("b1", "Retreat", "2000", "1200"),
    ]

    stats = compute_stats(items)

    assert stats["total_revenue"] == Decimal("3500.10")
    assert stats["total_expense"] == Decimal("2350")
    assert stats["total_profit"] == stats["total_revenue"] - stats["total_expense"]
    assert stats["total_pax"] == 20
    assert stats["active_groups"] == 1
    assert stats["project_count"] == 1
    assert stats["record_count"] == 3


def test_profit_margin_is_zero_without_positive_revenue():
    assert profit_margin(compute_stats([])) == Decimal("0")
    assert profit_margin(compute_stats([_project("b1", "Refund", "-100")])) == Decimal("0")
    assert profit_margin(compute_stats([_project("b1", "Visa", "200", "150")])) == Decimal("25")


def test_chart_series_groups_by_display_name():
    items = [
        _group("t1", "Osaka", 100, 40),
        _project("b1", "Osaka", 50, 10),
        _group("t2", " ", 30),
        _project("b2", "", 20),
        _group("t3", "Bali", 300, 100),
    ]

    series = build_chart_series(items)

    assert [point["name"] for point in series] == ["Bali", "Osaka", UNKNOWN_LABEL]
    osaka = series[1]
    assert osaka["revenue"] == Decimal("150")
    assert osaka["profit"] == Decimal("100")
    assert series[2]["revenue"] == Decimal("50")


def test_chart_series_respects_limit_and_stable_ties():
    items = [_group(f"t{i}", f"Dest {i}", 10) for i in range(25)]

    series = build_chart_series(items, limit=20)

    assert len(series) == 20
    assert series[0]["name"] == "Dest 0"
    assert series[-1]["name"] == "Dest 19"


def test_status_histogram_lists_every_status_and_other():
    items = [
        _group("t1", "Osaka", 0, status=GroupStatus.CONFIRMED),
        _group("t2", "Osaka", 0, status=GroupStatus.CONFIRMED),
        _group("t3", "Osaka", 0, status="On hold"),
        _project("b1", "Retreat", 0),
    ]

    histogram = build_status_histogram(items, ViewMode.TOTAL)

    assert histogram == [
        {"name": "Waiting", "value": 0},
        {"name": "Confirmed", "value": 2},
        {"name": "Cancelled", "value": 0},
        {"name": OTHER_STATUS, "value": 1},
    ]
    travel_total = sum(point["value"] for point in histogram)
    assert travel_total == 3


def test_status_histogram_is_empty_for_business_view():
    items = [_group("t1", "Osaka", 0, status=GroupStatus.CONFIRMED)]

    histogram = build_status_histogram(items, ViewMode.BUSINESS_ONLY)

    assert [point["value"] for point in histogram] == [0, 0, 0]


def test_formatting_helpers():
    assert format_currency(Decimal("-1234.5")) == "-¥1,234.50"
    assert format_currency(0, "$") == "$0.00"
    assert format_margin(Decimal("0")) == "0%"
    assert format_margin(Decimal("12.345")) == "12.3%"

    stats = compute_stats([_project("b1", "Visa", 10, 4)])
    assert build_headline(stats) == "1 record · revenue ¥10.00 · profit ¥6.00"
    assert build_headline(compute_stats([])) == "No records in this view yet."


def _scenario_records():
    travel = [
        TravelGroupRecord(
            "A",
            date="2024-03-01",
            status=GroupStatus.CONFIRMED,
            recruit_count=5,
            revenue=Decimal("1000"),
            expense=Decimal("400"),
        )
    ]
    business = [BusinessProjectRecord("B", date="2024-03-15", revenue=Decimal("2000"), expense=Decimal("500"))]
    return travel, business


def test_mixed_view_scenario():
    travel, business = _scenario_records()

    items = compose_view(travel, business, ViewMode.TOTAL, ALL_MONTHS)
    stats = compute_stats(items)

    assert [item.identity for item in items] == ["B", "A"]
    assert stats["total_revenue"] == Decimal("3000")
    assert stats["total_expense"] == Decimal("900")
    assert stats["total_profit"] == Decimal("2100")
    assert stats["total_pax"] == 5
    assert stats["active_groups"] == 1
    assert stats["project_count"] == 1


def test_month_filter_scenario():
    travel, business = _scenario_records()

    march = compose_view(travel, business, ViewMode.TOTAL, "2024-03")
    april = compose_view(travel, business, ViewMode.TOTAL, "2024-04")
    empty_stats = compute_stats(april)

    assert {item.identity for item in march} == {"A", "B"}
    assert april == []
    assert empty_stats["total_revenue"] == Decimal("0")
    assert empty_stats["total_profit"] == Decimal("0")
    assert empty_stats["record_count"] == 0
    assert [point["value"] for point in build_status_histogram(april, ViewMode.TOTAL)] == [0, 0, 0]


def test_totals_do_not_round_large_precise_amounts():
    items = [
        _project("b1", "Large", "1000000000000"),
        _project("b2", "Float", 0.1 + 0.2),
    ]

    stats = compute_stats(items)
    series = build_chart_series([_project("b1", "Same", "1000000000000"), _project("b2", "Same", 0.1 + 0.2)])

    assert stats["total_revenue"] == Decimal("1000000000000.30000000000000004")
    assert stats["total_profit"] == Decimal("1000000000000.30000000000000004")
    assert series[0]["revenue"] == Decimal("1000000000000.30000000000000004")
    assert _project("b3", "Tiny", "1000000000000", "0.000000000000000000001").profit == Decimal(
        "999999999999.999999999999999999999"
    )
