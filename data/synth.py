"""Synthetic travel group and business project documents for TourLedger.

Produces remote-shaped (camelCase) documents for development, the demo
dashboard and tests. Values follow the cadence of a small tour operator: a
handful of departures per month to popular destinations plus a few corporate
projects with larger budgets.
"""

from __future__ import annotations

import calendar
import itertools
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, List, Optional, Sequence, Tuple, TypeVar

import numpy as np

from core.models import EntityKind, GroupStatus
from core.store import InMemoryStore

T = TypeVar("T")


@dataclass(frozen=True)
class DestinationProfile:
    """Pricing metadata for a travel destination."""

    name: str
    code: str
    price_per_pax: float
    cost_ratio: float


@dataclass(frozen=True)
class ProjectProfile:
    """Budget metadata for a recurring business project type."""

    name: str
    budget: float
    cost_ratio: float


DESTINATIONS: Sequence[DestinationProfile] = (
    DestinationProfile("Osaka", "KIX", 6800.0, 0.72),
    DestinationProfile("Tokyo", "TYO", 7600.0, 0.74),
    DestinationProfile("Chiang Mai", "CNX", 4200.0, 0.68),
    DestinationProfile("Bali", "DPS", 5900.0, 0.70),
    DestinationProfile("Seoul", "SEL", 5200.0, 0.71),
    DestinationProfile("Hokkaido", "CTS", 8800.0, 0.76),
)

PROJECTS: Sequence[ProjectProfile] = (
    ProjectProfile("Corporate Retreat", 48000.0, 0.63),
    ProjectProfile("Incentive Trip", 72000.0, 0.66),
    ProjectProfile("Conference Logistics", 36000.0, 0.58),
    ProjectProfile("Visa Services", 9000.0, 0.35),
)

PEOPLE: Tuple[str, ...] = ("Lin", "Zhou", "Chen", "Wang", "")

STATUS_WEIGHTS: Tuple[Tuple[GroupStatus, float], ...] = (
    (GroupStatus.CONFIRMED, 0.55),
    (GroupStatus.WAITING, 0.35),
    (GroupStatus.CANCELLED, 0.10),
)


def generate_demo_documents(
    *,
    months: int = 4,
    today: Optional[date] = None,
    seed: Optional[int] = None,
    groups_per_month: Tuple[int, int] = (3, 7),
    projects_per_month: Tuple[int, int] = (0, 3),
) -> dict[EntityKind, List[dict[str, Any]]]:
    """Generate raw documents for both collections.

    Documents span the last ``months`` calendar months up to ``today``.
    """

    if months <= 0:
        raise ValueError("months must be a positive integer")

    rng = np.random.default_rng(seed)
    end = today or date.today()
    first_month = _add_months(end.replace(day=1), -(months - 1))
    month_starts = [_add_months(first_month, offset) for offset in range(months)]

    travel: List[dict[str, Any]] = []
    business: List[dict[str, Any]] = []
    group_counter = itertools.count(1)

    for month_anchor in month_starts:
        year, month = month_anchor.year, month_anchor.month
        month_end = calendar.monthrange(year, month)[1]
        last_day = end.day if (year, month) == (end.year, end.month) else month_end

        for _ in range(int(rng.integers(groups_per_month[0], groups_per_month[1] + 1))):
            profile = _rng_choice(DESTINATIONS, rng)
            departure = date(year, month, int(rng.integers(1, last_day + 1)))
            status = _weighted_status(rng)
            pax = int(rng.integers(8, 36)) if status is not GroupStatus.CANCELLED else 0
            revenue = round(pax * profile.price_per_pax * float(rng.normal(1.0, 0.04)), 2)
            expense = round(revenue * profile.cost_ratio * float(rng.normal(1.0, 0.05)), 2)
            travel.append(
                {
                    "groupNo": f"TG-{year}{month:02d}-{profile.code}{next(group_counter):03d}",
                    "date": departure.isoformat(),
                    "destination": profile.name,
                    "personInCharge": _rng_choice(PEOPLE, rng),
                    "status": status.value,
                    "recruitCount": pax,
                    "revenue": max(revenue, 0.0),
                    "expense": max(expense, 0.0),
                    "createdAt": _stamp(departure - timedelta(days=30)),
                    "updatedAt": _stamp(departure - timedelta(days=7)),
                    "creatorId": "demo",
                }
            )

        for _ in range(int(rng.integers(projects_per_month[0], projects_per_month[1] + 1))):
            profile = _rng_choice(PROJECTS, rng)
            start = date(year, month, int(rng.integers(1, last_day + 1)))
            revenue = round(abs(float(rng.normal(profile.budget, profile.budget * 0.15))), 2)
            expense = round(revenue * profile.cost_ratio * float(rng.normal(1.0, 0.08)), 2)
            business.append(
                {
                    "projectName": profile.name,
                    "date": start.isoformat(),
                    "personInCharge": _rng_choice(PEOPLE, rng),
                    "revenue": revenue,
                    "expense": max(expense, 0.0),
                    "createdAt": _stamp(start - timedelta(days=14)),
                    "updatedAt": _stamp(start - timedelta(days=2)),
                    "creatorId": "demo",
                }
            )

    return {EntityKind.TRAVEL: travel, EntityKind.BUSINESS: business}


def seed_store(
    store: InMemoryStore,
    collections: dict[EntityKind, str],
    **kwargs: Any,
) -> dict[EntityKind, List[str]]:
    """Generate demo documents and load them into ``store``.

    Keyword arguments are forwarded to :func:`generate_demo_documents`.
    """

    documents = generate_demo_documents(**kwargs)
    return {kind: store.seed(collections[kind], docs) for kind, docs in documents.items()}


def _stamp(moment: date) -> str:
    return datetime(moment.year, moment.month, moment.day, 9, 30).isoformat() + "Z"


def _add_months(anchor: date, months: int) -> date:
    month = anchor.month - 1 + months
    year = anchor.year + month // 12
    month = month % 12 + 1
    day = min(anchor.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def _weighted_status(rng: np.random.Generator) -> GroupStatus:
    statuses = [status for status, _ in STATUS_WEIGHTS]
    weights = np.array([weight for _, weight in STATUS_WEIGHTS])
    idx = int(rng.choice(len(statuses), p=weights / weights.sum()))
    return statuses[idx]


def _rng_choice(options: Sequence[T], rng: np.random.Generator) -> T:
    if not options:
        raise ValueError("Cannot choose from an empty sequence")
    idx = int(rng.integers(0, len(options)))
    return options[idx]
