"""Single entry point for creating, updating and deleting records."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Mapping, Optional

from core.errors import StoreError, ValidationError, WriteError
from core.mirror import DEFAULT_COLLECTIONS
from core.models import DataItem, EntityKind, FormState, GroupStatus
from core.store import RemoteStore
from core.sync_status import SyncStatusTracker

__all__ = ["EntryGateway", "SubmitResult", "build_payload", "validate_form"]

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

_REQUIRED_FIELDS: dict[EntityKind, tuple[str, ...]] = {
    EntityKind.TRAVEL: ("group_no", "date"),
    EntityKind.BUSINESS: ("project_name", "date"),
}


@dataclass(frozen=True)
class SubmitResult:
    identity: str
    created: bool
    next_form: FormState


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _iso(moment: datetime) -> str:
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _wire_amount(value: Decimal) -> float | int:
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def _wire_status(value: GroupStatus | str) -> str:
    return value.value if isinstance(value, GroupStatus) else str(value)


def validate_form(form: FormState) -> None:
    missing = [name for name in _REQUIRED_FIELDS[form.kind] if not str(getattr(form, name) or "").strip()]
    if missing:
        raise ValidationError(missing)


def build_payload(form: FormState) -> dict[str, Any]:
    """Return the remote document fields written for ``form``'s active kind."""

    payload: dict[str, Any] = {
        "date": form.date.strip(),
        "personInCharge": form.person_in_charge.strip(),
        "revenue": _wire_amount(form.revenue),
        "expense": _wire_amount(form.expense),
    }
    if form.kind is EntityKind.TRAVEL:
        payload.update(
            {
                "groupNo": form.group_no.strip(),
                "destination": form.destination.strip(),
                "status": _wire_status(form.status),
                "recruitCount": max(int(form.recruit_count), 0),
            }
        )
    else:
        payload["projectName"] = form.project_name.strip()
    return payload


class EntryGateway:
    """Route drafts to the collection of their entity kind and apply mutations."""

    def __init__(
        self,
        store: RemoteStore,
        actor_id: str,
        tracker: SyncStatusTracker,
        collections: Optional[Mapping[EntityKind, str]] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.store = store
        self.actor_id = actor_id
        self.tracker = tracker
        self.collections = dict(DEFAULT_COLLECTIONS)
        if collections:
            self.collections.update({EntityKind(kind): name for kind, name in collections.items()})
        self._clock = clock or _utc_now

    def collection_for(self, kind: EntityKind) -> str:
        return self.collections[EntityKind(kind)]

    async def submit(self, form: FormState, is_editing: bool) -> SubmitResult:
        validate_form(form)

        collection = self.collection_for(form.kind)
        payload = build_payload(form)
        stamp = _iso(self._clock())
        payload["updatedAt"] = stamp
        editing = bool(is_editing and form.identity)

        self.tracker.begin()
        try:
            if editing:
                identity = str(form.identity)
                await self.store.update(collection, identity, payload)
            else:
                payload["createdAt"] = stamp
                payload["creatorId"] = self.actor_id
                identity = await self.store.create(collection, payload)
        except StoreError as exc:
            operation = "update" if editing else "create"
            logger.warning("Save to %s failed", collection, exc_info=exc)
            error = WriteError(operation, collection, exc)
            self.tracker.fail(error)
            raise error from exc
        except BaseException as exc:
            self.tracker.fail(exc)
            raise
        self.tracker.succeed()

        logger.info("%s %s in %s", "Updated" if editing else "Created", identity, collection)
        return SubmitResult(
            identity=identity,
            created=not editing,
            next_form=FormState.empty(form.kind),
        )

    async def remove(self, item: DataItem) -> None:
        collection = self.collection_for(item.kind)

        self.tracker.begin()
        try:
            await self.store.delete(collection, item.identity)
        except StoreError as exc:
            logger.warning("Delete of %s from %s failed", item.identity, collection, exc_info=exc)
            error = WriteError("delete", collection, exc)
            self.tracker.fail(error)
            raise error from exc
        except BaseException as exc:
            self.tracker.fail(exc)
            raise
        self.tracker.succeed()
        logger.info("Deleted %s from %s", item.identity, collection)
