"""Spreadsheet export of a composed record view."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import BinaryIO, Iterable, Sequence, Union

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from core.models import DataItem, EntityKind, GroupStatus

__all__ = [
    "EXPORT_COLUMNS",
    "build_export_frame",
    "export_file_name",
    "format_margin_cell",
    "write_export_workbook",
]

EXPORT_COLUMNS: tuple[tuple[str, int], ...] = (
    ("Type", 10),
    ("Group No", 15),
    ("Project Name", 20),
    ("Date", 12),
    ("Destination", 15),
    ("Person In Charge", 14),
    ("Status", 10),
    ("Recruit Count", 12),
    ("Revenue", 12),
    ("Expense", 12),
    ("Profit", 12),
    ("Margin", 10),
    ("Created At", 20),
)

_TYPE_LABELS = {
    EntityKind.TRAVEL: "Travel",
    EntityKind.BUSINESS: "Business",
}

Destination = Union[str, Path, BinaryIO]


def format_margin_cell(revenue: Decimal, profit: Decimal) -> str:
    if revenue <= 0:
        return "0%"
    return f"{profit / revenue * 100:.2f}%"


def _format_created_at(value: str | None) -> str:
    if not value:
        return ""
    try:
        timestamp = pd.Timestamp(value)
    except (TypeError, ValueError):
        return value
    if pd.isna(timestamp):
        return value
    if timestamp.tzinfo is not None:
        timestamp = timestamp.tz_convert(None)
    return timestamp.strftime("%Y-%m-%d %H:%M:%S")


def _export_row(item: DataItem) -> dict[str, object]:
    row: dict[str, object] = {
        "Type": _TYPE_LABELS[item.kind],
        "Group No": "",
        "Project Name": "",
        "Date": item.date,
        "Destination": "",
        "Person In Charge": item.person_in_charge,
        "Status": "",
        "Recruit Count": "",
        "Revenue": float(item.revenue),
        "Expense": float(item.expense),
        "Profit": float(item.profit),
        "Margin": format_margin_cell(item.revenue, item.profit),
        "Created At": _format_created_at(item.created_at),
    }
    if item.kind is EntityKind.TRAVEL:
        status = item.status
        row["Group No"] = item.group_no
        row["Destination"] = item.destination
        row["Status"] = status.value if isinstance(status, GroupStatus) else str(status)
        row["Recruit Count"] = item.recruit_count
    else:
        row["Project Name"] = item.project_name
    return row


def build_export_frame(items: Iterable[DataItem]) -> pd.DataFrame:
    """Return one export row per record, blanking the other kind's columns."""

    columns = [name for name, _ in EXPORT_COLUMNS]
    return pd.DataFrame([_export_row(item) for item in items], columns=columns)


def export_file_name(prefix: str, today: date | None = None) -> str:
    return f"{prefix}_{(today or date.today()).isoformat()}.xlsx"


def write_export_workbook(
    items: Sequence[DataItem],
    destination: Destination,
    sheet_name: str = "Records",
) -> pd.DataFrame:
    """Write ``items`` to an xlsx workbook at ``destination``.

    Returns the exported frame. Raises ``ValueError`` when there is nothing to
    export.
    """

    if not items:
        raise ValueError("No records to export")

    frame = build_export_frame(items)

    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name[:31]
    ws.append(list(frame.columns))
    for record in frame.itertuples(index=False):
        ws.append(list(record))

    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill("solid", fgColor="334155")
    for cell in ws[1]:
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal="center", vertical="center")
    ws.freeze_panes = "A2"

    for index, (_, width) in enumerate(EXPORT_COLUMNS, start=1):
        ws.column_dimensions[get_column_letter(index)].width = width

    if isinstance(destination, (str, Path)):
        wb.save(str(destination))
    else:
        wb.save(destination)
    return frame
