"""Tests for the spreadsheet export."""

from __future__ import annotations

import io
from datetime import date
from decimal import Decimal

import pytest
from openpyxl import load_workbook

from analytics.export import (
    EXPORT_COLUMNS,
    build_export_frame,
    export_file_name,
    format_margin_cell,
    write_export_workbook,
)
from core.models import BusinessProjectRecord, GroupStatus, TravelGroupRecord


@pytest.fixture()
def items():
    return [
        TravelGroupRecord(
            "t1",
            group_no="TG-1",
            date="2024-05-02",
            destination="Osaka",
            person_in_charge="Lin",
            status=GroupStatus.CONFIRMED,
            recruit_count=15,
            revenue=Decimal("1000"),
            expense=Decimal("750"),
            created_at="2024-04-01T09:30:00.000Z",
        ),
        BusinessProjectRecord(
            "b1",
            project_name="Visa Services",
            date="2024-05-01",
            revenue=Decimal("0"),
            expense=Decimal("20"),
        ),
    ]


def test_export_frame_blanks_the_other_kind(items):
    frame = build_export_frame(items)

    assert list(frame.columns) == [name for name, _ in EXPORT_COLUMNS]
    travel, business = frame.to_dict("records")
    assert travel["Type"] == "Travel"
    assert travel["Project Name"] == ""
    assert travel["Status"] == "Confirmed"
    assert travel["Margin"] == "25.00%"
    assert travel["Created At"] == "2024-04-01 09:30:00"
    assert business["Type"] == "Business"
    assert business["Group No"] == ""
    assert business["Recruit Count"] == ""
    assert business["Profit"] == -20.0
    assert business["Margin"] == "0%"


def test_workbook_has_styled_header_and_rows(items):
    buffer = io.BytesIO()

    write_export_workbook(items, buffer, sheet_name="Records")

    buffer.seek(0)
    sheet = load_workbook(buffer).active
    assert sheet.title == "Records"
    assert [cell.value for cell in sheet[1]] == [name for name, _ in EXPORT_COLUMNS]
    assert sheet["A1"].font.bold
    assert sheet.freeze_panes == "A2"
    assert sheet.max_row == 3
    assert sheet["B2"].value == "TG-1"
    assert sheet["C3"].value == "Visa Services"


def test_export_refuses_empty_views():
    with pytest.raises(ValueError):
        write_export_workbook([], io.BytesIO())


def test_export_file_name_and_margin_cell():
    assert export_file_name("TourLedger_Records", date(2024, 5, 9)) == "TourLedger_Records_2024-05-09.xlsx"
    assert format_margin_cell(Decimal("3"), Decimal("1")) == "33.33%"
    assert format_margin_cell(Decimal("-5"), Decimal("-5")) == "0%"
