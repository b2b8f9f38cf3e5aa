"""Session wiring: authentication gate, both mirrors, the gateway and the
dashboard payload assembled from them."""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence

from analytics.aggregation import (
    CHART_LIMIT,
    build_chart_series,
    build_status_histogram,
    compute_stats,
    profit_margin,
)
from analytics.view import available_months, compose_view
from core.errors import AuthFailure, MirrorError
from core.gateway import EntryGateway, SubmitResult
from core.mirror import DEFAULT_COLLECTIONS, LiveCollectionMirror
from core.models import (
    ALL_MONTHS,
    DashboardData,
    DataItem,
    EntityKind,
    FormState,
    ViewMode,
)
from core.store import AuthProvider, RemoteStore
from core.sync_status import SyncStatusTracker

__all__ = ["DashboardSession"]

logger = logging.getLogger(__name__)


class DashboardSession:
    """Own the two collection mirrors and expose the composed dashboard."""

    def __init__(
        self,
        store: RemoteStore,
        auth: AuthProvider,
        collections: Optional[Mapping[EntityKind, str]] = None,
        chart_limit: int = CHART_LIMIT,
    ) -> None:
        self.store = store
        self.auth = auth
        self.collections = dict(DEFAULT_COLLECTIONS)
        if collections:
            self.collections.update({EntityKind(kind): name for kind, name in collections.items()})
        self.chart_limit = chart_limit
        self.tracker = SyncStatusTracker()
        self.mirrors: dict[EntityKind, LiveCollectionMirror] = {
            kind: LiveCollectionMirror(store, kind, self.collections[kind]) for kind in EntityKind
        }
        self.gateway: Optional[EntryGateway] = None
        self.user_id: Optional[str] = None

    @property
    def travel(self) -> LiveCollectionMirror:
        return self.mirrors[EntityKind.TRAVEL]

    @property
    def business(self) -> LiveCollectionMirror:
        return self.mirrors[EntityKind.BUSINESS]

    @property
    def started(self) -> bool:
        return self.gateway is not None

    @property
    def loading(self) -> bool:
        return not all(mirror.loaded for mirror in self.mirrors.values())

    @property
    def errors(self) -> list[MirrorError]:
        return [mirror.last_error for mirror in self.mirrors.values() if mirror.last_error is not None]

    async def start(self) -> str:
        """Sign in, then start both mirrors. No mirror starts if sign-in fails."""

        if self.started:
            raise RuntimeError("Session already started")
        try:
            user_id = await self.auth.sign_in()
        except AuthFailure:
            logger.error("Authentication failed; mirrors not started")
            raise
        except Exception as exc:
            logger.error("Authentication failed; mirrors not started")
            raise AuthFailure(str(exc) or type(exc).__name__) from exc
        if not user_id:
            raise AuthFailure("Sign-in returned no user identity")

        self.user_id = user_id
        self.gateway = EntryGateway(self.store, user_id, self.tracker, self.collections)
        for mirror in self.mirrors.values():
            mirror.start(self._handle_change)
        return user_id

    def stop(self) -> None:
        for mirror in self.mirrors.values():
            mirror.stop()

    def _handle_change(self, records: Sequence[DataItem]) -> None:
        logger.debug("Mirror delivered %d records", len(records))

    def records(self, kind: EntityKind) -> tuple[DataItem, ...]:
        return self.mirrors[EntityKind(kind)].records

    def find(self, kind: EntityKind, identity: str) -> Optional[DataItem]:
        for item in self.records(kind):
            if item.identity == identity:
                return item
        return None

    def dashboard(self, view_mode: ViewMode = ViewMode.TOTAL, month_filter: str = ALL_MONTHS) -> DashboardData:
        """Recompute every derived figure from the mirrors' current records."""

        travel = self.travel.records
        business = self.business.records
        months = available_months(travel, business)
        items = compose_view(travel, business, view_mode, month_filter)
        stats = compute_stats(items)
        return {
            "items": items,
            "stats": stats,
            "margin": profit_margin(stats),
            "chart_series": build_chart_series(items, self.chart_limit),
            "status_histogram": build_status_histogram(items, view_mode),
            "months": months,
            "view_mode": ViewMode(view_mode),
            "month_filter": month_filter,
            "sync_status": self.tracker.status,
            "loading": self.loading,
            "errors": [str(error) for error in self.errors],
        }

    def _require_gateway(self) -> EntryGateway:
        if self.gateway is None:
            raise AuthFailure("Not connected: sign-in has not completed")
        return self.gateway

    async def submit(self, form: FormState, is_editing: bool) -> SubmitResult:
        return await self._require_gateway().submit(form, is_editing)

    async def remove(self, item: DataItem) -> None:
        await self._require_gateway().remove(item)
