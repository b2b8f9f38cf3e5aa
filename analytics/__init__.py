"""Analytics helpers shared across TourLedger services."""

from analytics.aggregation import (
    build_chart_series,
    build_status_histogram,
    compute_stats,
    profit_margin,
)
from analytics.export import build_export_frame, export_file_name, write_export_workbook
from analytics.view import available_months, compose_view, month_key

__all__ = [
    "available_months",
    "build_chart_series",
    "build_export_frame",
    "build_status_histogram",
    "compose_view",
    "compute_stats",
    "export_file_name",
    "month_key",
    "profit_margin",
    "write_export_workbook",
]
