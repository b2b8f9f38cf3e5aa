"""Conversion of raw remote documents into typed TourLedger records."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from core.models import (
    BusinessProjectRecord,
    DataItem,
    EntityKind,
    GroupStatus,
    TravelGroupRecord,
    coerce_amount,
    coerce_count,
)

__all__ = [
    "STATUS_ALIASES",
    "normalize_status",
    "normalize_travel_group",
    "normalize_business_project",
    "normalize_record",
]

STATUS_ALIASES: dict[str, GroupStatus] = {
    "waiting": GroupStatus.WAITING,
    "confirmed": GroupStatus.CONFIRMED,
    "cancelled": GroupStatus.CANCELLED,
    "canceled": GroupStatus.CANCELLED,
    "等待": GroupStatus.WAITING,
    "成团": GroupStatus.CONFIRMED,
    "取消": GroupStatus.CANCELLED,
}


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _as_optional_text(value: Any) -> Optional[str]:
    text = _as_text(value)
    return text or None


def normalize_status(value: Any) -> Union[GroupStatus, str]:
    """Map a raw status label onto :class:`GroupStatus`.

    Blank labels become ``Waiting``; unknown labels are returned verbatim.
    """

    if isinstance(value, GroupStatus):
        return value
    label = _as_text(value)
    if not label:
        return GroupStatus.WAITING
    return STATUS_ALIASES.get(label.lower(), STATUS_ALIASES.get(label, label))


def normalize_travel_group(raw: Mapping[str, Any], identity: str) -> TravelGroupRecord:
    return TravelGroupRecord(
        identity=str(identity),
        group_no=_as_text(raw.get("groupNo")),
        date=_as_text(raw.get("date")),
        destination=_as_text(raw.get("destination")),
        person_in_charge=_as_text(raw.get("personInCharge")),
        status=normalize_status(raw.get("status")),
        recruit_count=coerce_count(raw.get("recruitCount")),
        revenue=coerce_amount(raw.get("revenue")),
        expense=coerce_amount(raw.get("expense")),
        created_at=_as_optional_text(raw.get("createdAt")),
        updated_at=_as_optional_text(raw.get("updatedAt")),
        creator_id=_as_optional_text(raw.get("creatorId")),
    )


def normalize_business_project(raw: Mapping[str, Any], identity: str) -> BusinessProjectRecord:
    return BusinessProjectRecord(
        identity=str(identity),
        project_name=_as_text(raw.get("projectName")),
        date=_as_text(raw.get("date")),
        person_in_charge=_as_text(raw.get("personInCharge")),
        revenue=coerce_amount(raw.get("revenue")),
        expense=coerce_amount(raw.get("expense")),
        created_at=_as_optional_text(raw.get("createdAt")),
        updated_at=_as_optional_text(raw.get("updatedAt")),
        creator_id=_as_optional_text(raw.get("creatorId")),
    )


def normalize_record(raw: Mapping[str, Any] | None, kind: EntityKind, identity: str) -> DataItem:
    """Return a typed record for ``kind`` built from the raw document ``raw``.

    Missing or malformed values fall back to their defaults; required naming
    fields are not enforced here.
    """

    document: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}
    if EntityKind(kind) is EntityKind.TRAVEL:
        return normalize_travel_group(document, identity)
    return normalize_business_project(document, identity)
