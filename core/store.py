"""Remote store capability consumed by the sync core, plus an in-process store.

The core only relies on the :class:`RemoteStore` protocol: a callback-based
``subscribe`` delivering full collection snapshots and three awaitable
mutations. :class:`InMemoryStore` implements that contract on the running
asyncio loop and backs the demo dashboard and the test-suite.
"""

from __future__ import annotations

import asyncio
import copy
import itertools
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Protocol, Sequence

from core.errors import AuthFailure, DocumentNotFound, StoreError

__all__ = [
    "RemoteDocument",
    "Snapshot",
    "SnapshotCallback",
    "ErrorCallback",
    "Subscription",
    "RemoteStore",
    "InMemoryStore",
    "AuthProvider",
    "AnonymousAuth",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RemoteDocument:
    identity: str
    data: Mapping[str, Any] = field(default_factory=dict)


Snapshot = Sequence[RemoteDocument]
SnapshotCallback = Callable[[Snapshot], None]
ErrorCallback = Callable[[BaseException], None]


class Subscription(Protocol):
    def cancel(self) -> None: ...


class RemoteStore(Protocol):
    def subscribe(
        self,
        collection: str,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> Subscription: ...

    async def create(self, collection: str, payload: Mapping[str, Any]) -> str: ...

    async def update(self, collection: str, identity: str, payload: Mapping[str, Any]) -> None: ...

    async def delete(self, collection: str, identity: str) -> None: ...


class AuthProvider(Protocol):
    async def sign_in(self) -> str: ...


class AnonymousAuth:
    """Issue an opaque anonymous user identity, optionally failing on demand."""

    def __init__(self, *, failure: Optional[BaseException] = None) -> None:
        self._failure = failure
        self._identity: Optional[str] = None

    @property
    def current_identity(self) -> Optional[str]:
        return self._identity

    async def sign_in(self) -> str:
        if self._failure is not None:
            raise AuthFailure(str(self._failure)) from self._failure
        if self._identity is None:
            self._identity = f"anon-{uuid.uuid4().hex[:12]}"
            logger.info("Signed in anonymously as %s", self._identity)
        return self._identity


class _Listener:
    def __init__(self, store: "InMemoryStore", collection: str, on_snapshot: SnapshotCallback, on_error: ErrorCallback) -> None:
        self.store = store
        self.collection = collection
        self.on_snapshot = on_snapshot
        self.on_error = on_error
        self.active = True

    def cancel(self) -> None:
        if not self.active:
            return
        self.active = False
        self.store._listeners.get(self.collection, []).remove(self)


class InMemoryStore:
    """Collection store held in memory with asynchronous snapshot delivery.

    Documents keep insertion order, which is also the order of every snapshot.
    Notifications are scheduled with ``loop.call_soon`` so that listeners run
    on a later event-loop turn, as with a networked store.
    """

    def __init__(self, *, id_prefix: str = "doc") -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self._listeners: dict[str, list[_Listener]] = {}
        self._counter = itertools.count(1)
        self._id_prefix = id_prefix
        self._write_failures: list[StoreError] = []
        self._broken: dict[str, StoreError] = {}

    def documents(self, collection: str) -> list[RemoteDocument]:
        docs = self._collections.get(collection, {})
        return [RemoteDocument(identity, copy.deepcopy(data)) for identity, data in docs.items()]

    def seed(self, collection: str, documents: Sequence[Mapping[str, Any]] | Mapping[str, Mapping[str, Any]]) -> list[str]:
        """Load documents without notifying listeners; returns their identities."""

        target = self._collections.setdefault(collection, {})
        identities: list[str] = []
        if isinstance(documents, Mapping):
            items = list(documents.items())
        else:
            items = [(self._next_identity(), doc) for doc in documents]
        for identity, doc in items:
            target[str(identity)] = dict(doc)
            identities.append(str(identity))
        return identities

    def subscribe(
        self,
        collection: str,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> Subscription:
        loop = asyncio.get_running_loop()
        listener = _Listener(self, collection, on_snapshot, on_error)
        self._listeners.setdefault(collection, []).append(listener)
        logger.debug("Listener attached to %s", collection)
        broken = self._broken.get(collection)
        if broken is not None:
            loop.call_soon(self._deliver_error, listener, broken)
        else:
            loop.call_soon(self._deliver, listener, self.documents(collection))
        return listener

    def fail_next_write(self, error: StoreError) -> None:
        """Make the next mutation raise ``error``."""

        self._write_failures.append(error)

    def break_subscriptions(self, collection: str, error: StoreError) -> None:
        """Report ``error`` to every listener of ``collection`` until restored."""

        self._broken[collection] = error
        loop = asyncio.get_running_loop()
        for listener in list(self._listeners.get(collection, [])):
            loop.call_soon(self._deliver_error, listener, error)

    def restore_subscriptions(self, collection: str) -> None:
        self._broken.pop(collection, None)
        self._notify(collection)

    async def create(self, collection: str, payload: Mapping[str, Any]) -> str:
        await self._round_trip()
        identity = self._next_identity()
        self._collections.setdefault(collection, {})[identity] = copy.deepcopy(dict(payload))
        self._notify(collection)
        return identity

    async def update(self, collection: str, identity: str, payload: Mapping[str, Any]) -> None:
        await self._round_trip()
        docs = self._collections.get(collection, {})
        if identity not in docs:
            raise DocumentNotFound(f"No document {identity!r} in {collection}")
        docs[identity].update(copy.deepcopy(dict(payload)))
        self._notify(collection)

    async def delete(self, collection: str, identity: str) -> None:
        await self._round_trip()
        docs = self._collections.get(collection, {})
        if identity not in docs:
            raise DocumentNotFound(f"No document {identity!r} in {collection}")
        del docs[identity]
        self._notify(collection)

    async def _round_trip(self) -> None:
        await asyncio.sleep(0)
        if self._write_failures:
            raise self._write_failures.pop(0)

    def _next_identity(self) -> str:
        return f"{self._id_prefix}-{next(self._counter):05d}"

    def _notify(self, collection: str) -> None:
        if collection in self._broken:
            return
        listeners = list(self._listeners.get(collection, []))
        if not listeners:
            return
        loop = asyncio.get_running_loop()
        for listener in listeners:
            loop.call_soon(self._deliver, listener, self.documents(collection))

    @staticmethod
    def _deliver(listener: _Listener, snapshot: Snapshot) -> None:
        if listener.active:
            listener.on_snapshot(snapshot)

    @staticmethod
    def _deliver_error(listener: _Listener, error: StoreError) -> None:
        if listener.active:
            listener.on_error(error)
