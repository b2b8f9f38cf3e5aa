"""Shared data model definitions for the TourLedger dashboard."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from decimal import MAX_EMAX, MAX_PREC, MIN_EMIN, Context, Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional, TypedDict, Union

ZERO = Decimal("0")
# Additions and subtractions of amounts never round.
EXACT = Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN)
ALL_MONTHS = "all"


class EntityKind(str, Enum):
    TRAVEL = "travel"
    BUSINESS = "business"


class GroupStatus(str, Enum):
    WAITING = "Waiting"
    CONFIRMED = "Confirmed"
    CANCELLED = "Cancelled"


class ViewMode(str, Enum):
    TRAVEL_ONLY = "travel_only"
    BUSINESS_ONLY = "business_only"
    TOTAL = "total"


class SyncStatus(str, Enum):
    IDLE = "idle"
    SYNCING = "syncing"
    ERROR = "error"


@dataclass(frozen=True)
class TravelGroupRecord:
    """A mirrored travel group document."""

    identity: str
    group_no: str = ""
    date: str = ""
    destination: str = ""
    person_in_charge: str = ""
    status: Union[GroupStatus, str] = GroupStatus.WAITING
    recruit_count: int = 0
    revenue: Decimal = ZERO
    expense: Decimal = ZERO
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    creator_id: Optional[str] = None
    kind: EntityKind = field(default=EntityKind.TRAVEL, init=False)

    @property
    def profit(self) -> Decimal:
        return EXACT.subtract(self.revenue, self.expense)

    @property
    def key(self) -> tuple[EntityKind, str]:
        return (self.kind, self.identity)

    @property
    def display_name(self) -> str:
        return self.destination


@dataclass(frozen=True)
class BusinessProjectRecord:
    """A mirrored business project document."""

    identity: str
    project_name: str = ""
    date: str = ""
    person_in_charge: str = ""
    revenue: Decimal = ZERO
    expense: Decimal = ZERO
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    creator_id: Optional[str] = None
    kind: EntityKind = field(default=EntityKind.BUSINESS, init=False)

    @property
    def profit(self) -> Decimal:
        return EXACT.subtract(self.revenue, self.expense)

    @property
    def key(self) -> tuple[EntityKind, str]:
        return (self.kind, self.identity)

    @property
    def display_name(self) -> str:
        return self.project_name


DataItem = Union[TravelGroupRecord, BusinessProjectRecord]


def _today_iso(today: date | None = None) -> str:
    return (today or date.today()).isoformat()


def coerce_amount(value: Any) -> Decimal:
    """Return ``value`` as a finite Decimal, or zero when it is not numeric."""

    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    if value is None or isinstance(value, bool):
        return ZERO
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, TypeError, ValueError):
        return ZERO
    return amount if amount.is_finite() else ZERO


def coerce_count(value: Any) -> int:
    amount = coerce_amount(value)
    return max(int(amount), 0)


_AMOUNT_FIELDS = frozenset({"revenue", "expense"})
_COUNT_FIELDS = frozenset({"recruit_count"})


@dataclass
class FormState:
    """Editable draft shared by both entity kinds.

    Only the fields of the active ``kind`` are written on save; the others are
    carried along untouched.
    """

    kind: EntityKind = EntityKind.TRAVEL
    identity: Optional[str] = None
    date: str = field(default_factory=_today_iso)
    person_in_charge: str = ""
    revenue: Decimal = ZERO
    expense: Decimal = ZERO
    group_no: str = ""
    destination: str = ""
    status: Union[GroupStatus, str] = GroupStatus.WAITING
    recruit_count: int = 0
    project_name: str = ""

    @classmethod
    def empty(cls, kind: EntityKind = EntityKind.TRAVEL, today: date | None = None) -> "FormState":
        return cls(kind=kind, date=_today_iso(today))

    @classmethod
    def from_item(cls, item: DataItem) -> "FormState":
        if item.kind is EntityKind.TRAVEL:
            return cls(
                kind=EntityKind.TRAVEL,
                identity=item.identity,
                date=item.date,
                person_in_charge=item.person_in_charge,
                revenue=item.revenue,
                expense=item.expense,
                group_no=item.group_no,
                destination=item.destination,
                status=item.status,
                recruit_count=item.recruit_count,
            )
        return cls(
            kind=EntityKind.BUSINESS,
            identity=item.identity,
            date=item.date,
            person_in_charge=item.person_in_charge,
            revenue=item.revenue,
            expense=item.expense,
            project_name=item.project_name,
        )

    @property
    def projected_profit(self) -> Decimal:
        return EXACT.subtract(self.revenue, self.expense)

    def switch_kind(self, kind: EntityKind) -> "FormState":
        """Return a blank draft for ``kind`` that keeps only the current date."""

        return FormState(kind=EntityKind(kind), date=self.date)

    def update(self, name: str, value: Any) -> None:
        if name in {"kind", "identity"} or not hasattr(self, name):
            raise AttributeError(f"Unknown form field: {name}")
        if name in _AMOUNT_FIELDS:
            value = coerce_amount(value)
        elif name in _COUNT_FIELDS:
            value = coerce_count(value)
        elif value is None:
            value = ""
        setattr(self, name, value)

    def copy(self) -> "FormState":
        return replace(self)


class DashboardStats(TypedDict):
    total_revenue: Decimal
    total_expense: Decimal
    total_profit: Decimal
    total_pax: int
    active_groups: int
    project_count: int
    record_count: int


class ChartPoint(TypedDict):
    name: str
    revenue: Decimal
    profit: Decimal


class StatusPoint(TypedDict):
    name: str
    value: int


class DashboardData(TypedDict):
    items: list[DataItem]
    stats: DashboardStats
    margin: Decimal
    chart_series: list[ChartPoint]
    status_histogram: list[StatusPoint]
    months: list[str]
    view_mode: ViewMode
    month_filter: str
    sync_status: SyncStatus
    loading: bool
    errors: list[str]


__all__ = [
    "ALL_MONTHS",
    "ZERO",
    "EXACT",
    "coerce_amount",
    "coerce_count",
    "EntityKind",
    "GroupStatus",
    "ViewMode",
    "SyncStatus",
    "TravelGroupRecord",
    "BusinessProjectRecord",
    "DataItem",
    "FormState",
    "DashboardStats",
    "ChartPoint",
    "StatusPoint",
    "DashboardData",
]
