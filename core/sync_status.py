"""Mutation sync status state machine consumed by the dashboard."""

from __future__ import annotations

import logging
from typing import Optional

from core.models import SyncStatus

__all__ = ["SyncStatusTracker"]

logger = logging.getLogger(__name__)


class SyncStatusTracker:
    """Track whether a mutation is in flight, finished, or failed.

    ``ERROR`` is sticky: only a new attempt (``begin``) moves away from it.
    """

    def __init__(self) -> None:
        self._status = SyncStatus.IDLE
        self._in_flight = 0
        self._last_error: Optional[BaseException] = None

    @property
    def status(self) -> SyncStatus:
        return self._status

    @property
    def in_flight(self) -> int:
        return self._in_flight

    @property
    def last_error(self) -> Optional[BaseException]:
        return self._last_error

    def begin(self) -> None:
        self._in_flight += 1
        self._last_error = None
        self._set(SyncStatus.SYNCING)

    def succeed(self) -> None:
        self._finish()
        if self._status is SyncStatus.SYNCING and self._in_flight == 0:
            self._set(SyncStatus.IDLE)

    def fail(self, error: BaseException) -> None:
        self._finish()
        self._last_error = error
        self._set(SyncStatus.ERROR)

    def _finish(self) -> None:
        if self._in_flight <= 0:
            raise RuntimeError("No mutation in flight")
        self._in_flight -= 1

    def _set(self, status: SyncStatus) -> None:
        if status is self._status:
            return
        logger.debug("Sync status %s -> %s", self._status.value, status.value)
        self._status = status
