"""Live, snapshot-driven mirror of one remote collection."""

from __future__ import annotations

import itertools
import logging
import re
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

from core.errors import MirrorError, StoreError
from core.models import DataItem, EntityKind
from core.normalizer import normalize_record
from core.store import RemoteStore, Snapshot, Subscription

__all__ = [
    "DEFAULT_COLLECTIONS",
    "LiveCollectionMirror",
    "date_sort_key",
]

logger = logging.getLogger(__name__)

DEFAULT_COLLECTIONS: dict[EntityKind, str] = {
    EntityKind.TRAVEL: "travel_groups",
    EntityKind.BUSINESS: "business_projects",
}

ChangeCallback = Callable[[Sequence[DataItem]], None]
ErrorCallback = Callable[[MirrorError], None]

_OLDEST = float("-inf")
_EPOCH = datetime(1970, 1, 1)
_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


def date_sort_key(value: str) -> float:
    """Return a sortable point in time for ``value``.

    Only ISO-8601 calendar dates and date-times are understood. Anything else,
    including empty strings and keywords such as ``now``, maps to ``-inf`` so
    it sorts as the oldest.
    """

    text = (value or "").strip()
    if not _ISO_DATE.match(text):
        return _OLDEST
    if text[-1] in "Zz":
        text = text[:-1] + "+00:00"
    try:
        moment = datetime.fromisoformat(text)
        if moment.tzinfo is not None:
            moment = moment.astimezone(timezone.utc).replace(tzinfo=None)
        return (moment - _EPOCH).total_seconds()
    except (ValueError, OverflowError):
        return _OLDEST


class LiveCollectionMirror:
    """Keep an ordered, typed copy of a remote collection.

    Every snapshot replaces the mirrored set. Records are ordered by date,
    newest first; equal dates keep the order in which the mirror first saw
    each identity.
    """

    def __init__(
        self,
        store: RemoteStore,
        kind: EntityKind,
        collection: Optional[str] = None,
    ) -> None:
        self.store = store
        self.kind = EntityKind(kind)
        self.collection = collection or DEFAULT_COLLECTIONS[self.kind]
        self._records: tuple[DataItem, ...] = ()
        self._first_seen: dict[str, int] = {}
        self._sequence = itertools.count()
        self._subscription: Optional[Subscription] = None
        self._generation = 0
        self._loaded = False
        self._last_error: Optional[MirrorError] = None

    @property
    def records(self) -> tuple[DataItem, ...]:
        return self._records

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def running(self) -> bool:
        return self._subscription is not None

    @property
    def last_error(self) -> Optional[MirrorError]:
        return self._last_error

    def start(self, on_change: ChangeCallback, on_error: Optional[ErrorCallback] = None) -> None:
        if self._subscription is not None:
            raise RuntimeError(f"Mirror for {self.collection} is already running")

        self._generation += 1
        generation = self._generation

        def _handle_snapshot(snapshot: Snapshot) -> None:
            if generation != self._generation:
                return
            try:
                records = self.apply_snapshot(snapshot)
            except Exception as exc:
                _handle_error(exc)
                return
            on_change(records)

        def _handle_error(error: BaseException) -> None:
            if generation != self._generation:
                return
            mirror_error = self.record_error(error)
            if on_error is not None:
                on_error(mirror_error)

        logger.info("Starting mirror for %s", self.collection)
        self._subscription = self.store.subscribe(self.collection, _handle_snapshot, _handle_error)

    def stop(self) -> None:
        self._generation += 1
        subscription, self._subscription = self._subscription, None
        if subscription is None:
            return
        subscription.cancel()
        logger.info("Stopped mirror for %s", self.collection)

    def apply_snapshot(self, snapshot: Snapshot) -> tuple[DataItem, ...]:
        """Replace the mirrored records with the contents of ``snapshot``."""

        present = {str(document.identity) for document in snapshot}
        for identity in list(self._first_seen):
            if identity not in present:
                del self._first_seen[identity]

        records: list[DataItem] = []
        for document in snapshot:
            identity = str(document.identity)
            if identity not in self._first_seen:
                self._first_seen[identity] = next(self._sequence)
            records.append(normalize_record(document.data, self.kind, identity))

        records.sort(key=lambda item: (-date_sort_key(item.date), self._first_seen[item.identity]))
        self._records = tuple(records)
        self._loaded = True
        self._last_error = None
        logger.debug("Snapshot for %s: %d records", self.collection, len(records))
        return self._records

    def record_error(self, error: BaseException) -> MirrorError:
        """Remember a subscription failure while keeping the last good records."""

        if isinstance(error, MirrorError):
            mirror_error = error
        else:
            mirror_error = MirrorError.from_store_error(self.collection, error)
        if not isinstance(error, (StoreError, MirrorError)):
            logger.warning("Unexpected subscription failure on %s", self.collection, exc_info=error)
        else:
            logger.warning("Subscription failure on %s: %s", self.collection, mirror_error.message)
        self._last_error = mirror_error
        self._loaded = True
        return mirror_error
