"""Tests for record normalisation and the editable form draft."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from core.models import (
    BusinessProjectRecord,
    EntityKind,
    FormState,
    GroupStatus,
    TravelGroupRecord,
    coerce_amount,
    coerce_count,
)
from core.normalizer import normalize_record, normalize_status


def test_normalize_travel_document_reads_remote_fields():
    record = normalize_record(
        {
            "groupNo": " TG-001 ",
            "date": "2024-05-03",
            "destination": "Osaka",
            "personInCharge": "Lin",
            "status": "Confirmed",
            "recruitCount": 18,
            "revenue": 12000,
            "expense": "8000.50",
            "createdAt": "2024-04-01T09:30:00Z",
            "creatorId": "anon-1",
        },
        EntityKind.TRAVEL,
        "t1",
    )

    assert isinstance(record, TravelGroupRecord)
    assert record.kind is EntityKind.TRAVEL
    assert record.group_no == "TG-001"
    assert record.status is GroupStatus.CONFIRMED
    assert record.recruit_count == 18
    assert record.revenue == Decimal("12000")
    assert record.profit == Decimal("3999.50")
    assert record.updated_at is None
    assert record.key == (EntityKind.TRAVEL, "t1")


def test_normalize_tolerates_missing_and_malformed_values():
    record = normalize_record(
        {"revenue": "lots", "expense": None, "recruitCount": -4, "status": ""},
        EntityKind.TRAVEL,
        "t2",
    )

    assert record.group_no == ""
    assert record.revenue == Decimal("0")
    assert record.expense == Decimal("0")
    assert record.recruit_count == 0
    assert record.status is GroupStatus.WAITING

    empty = normalize_record(None, EntityKind.BUSINESS, "b1")
    assert isinstance(empty, BusinessProjectRecord)
    assert empty.project_name == ""
    assert empty.profit == Decimal("0")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("confirmed", GroupStatus.CONFIRMED),
        ("Canceled", GroupStatus.CANCELLED),
        ("成团", GroupStatus.CONFIRMED),
        ("等待", GroupStatus.WAITING),
        (None, GroupStatus.WAITING),
        ("On hold", "On hold"),
    ],
)
def test_normalize_status_aliases(raw, expected):
    assert normalize_status(raw) == expected


def test_coercion_helpers():
    assert coerce_amount("1,000") == Decimal("0")
    assert coerce_amount(True) == Decimal("0")
    assert coerce_amount(float("nan")) == Decimal("0")
    assert coerce_amount(12.5) == Decimal("12.5")
    assert coerce_count("7.9") == 7
    assert coerce_count("-3") == 0


def test_form_switch_kind_keeps_only_the_date():
    draft = FormState.empty(EntityKind.TRAVEL, today=date(2024, 5, 1))
    draft.update("group_no", "TG-9")
    draft.update("revenue", "1500")

    switched = draft.switch_kind(EntityKind.BUSINESS)

    assert switched.kind is EntityKind.BUSINESS
    assert switched.date == "2024-05-01"
    assert switched.group_no == ""
    assert switched.revenue == Decimal("0")
    assert switched.identity is None


def test_form_update_coerces_and_rejects_unknown_fields():
    draft = FormState.empty(EntityKind.TRAVEL)
    draft.update("revenue", 1200.25)
    draft.update("expense", "abc")
    draft.update("recruit_count", 12.7)

    assert draft.revenue == Decimal("1200.25")
    assert draft.expense == Decimal("0")
    assert draft.recruit_count == 12
    assert draft.projected_profit == Decimal("1200.25")

    with pytest.raises(AttributeError):
        draft.update("kind", EntityKind.BUSINESS)
    with pytest.raises(AttributeError):
        draft.update("nickname", "x")


def test_form_from_item_round_trips_editable_fields():
    item = BusinessProjectRecord(
        identity="b7",
        project_name="Incentive Trip",
        date="2024-02-11",
        person_in_charge="Chen",
        revenue=Decimal("5000"),
        expense=Decimal("3200"),
    )

    draft = FormState.from_item(item)

    assert draft.kind is EntityKind.BUSINESS
    assert draft.identity == "b7"
    assert draft.project_name == "Incentive Trip"
    assert draft.projected_profit == Decimal("1800")

    copy = draft.copy()
    copy.update("project_name", "Other")
    assert draft.project_name == "Incentive Trip"
