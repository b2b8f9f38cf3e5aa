"""Background asyncio loop that hosts the sync core for the Streamlit app.

Streamlit reruns the script on its own thread; the mirrors need a long-lived
event loop to receive snapshots, so the session lives on a daemon thread and
the UI hands coroutines over with :meth:`BackgroundLoop.run`.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Awaitable, Optional, TypeVar

T = TypeVar("T")

__all__ = ["BackgroundLoop"]

logger = logging.getLogger(__name__)


class BackgroundLoop:
    def __init__(self, name: str = "tourledger-sync") -> None:
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self._thread.start()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    def _run(self) -> None:
        asyncio.set_event_loop(self._loop)
        logger.debug("Background loop started")
        self._loop.run_forever()

    def run(self, awaitable: Awaitable[T], timeout: Optional[float] = 10.0) -> T:
        """Run ``awaitable`` on the loop and block until it completes."""

        future = asyncio.run_coroutine_threadsafe(_as_coroutine(awaitable), self._loop)
        return future.result(timeout)

    def close(self) -> None:
        if self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(timeout=5)
        self._loop.close()


async def _as_coroutine(awaitable: Awaitable[T]) -> T:
    return await awaitable
