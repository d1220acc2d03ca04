"""
Cooperative scheduling helpers for the search coordinator.

``DebounceTimer`` defers a coroutine until input has been quiet for a fixed
delay. ``RequestTracker`` hands out per-kind request tokens so that a
response can tell whether a newer request of the same kind was issued
while it was in flight.
"""

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, Dict, Optional, Set

logger = logging.getLogger(__name__)


class RequestKind(str, Enum):
    """Kinds of remote call whose results supersede each other."""
    AUTOCOMPLETE = "autocomplete"
    NEARBY = "nearby"
    RESOLVE = "resolve"


class RequestTracker:
    def __init__(self):
        self._latest: Dict[RequestKind, int] = {kind: 0 for kind in RequestKind}

    def issue(self, kind: RequestKind) -> int:
        """Issue a new token for ``kind``; every older token becomes stale."""
        self._latest[kind] += 1
        return self._latest[kind]

    def invalidate(self, kind: RequestKind) -> None:
        """Make every outstanding request of ``kind`` stale without issuing one."""
        self._latest[kind] += 1

    def is_current(self, kind: RequestKind, token: int) -> bool:
        return self._latest[kind] == token

    def latest(self, kind: RequestKind) -> int:
        return self._latest[kind]


class DebounceTimer:
    """
    Single-slot cancellable timer.

    Scheduling replaces whatever is pending. Cancelling before the delay
    elapses guarantees the callback never starts; once it has started it
    runs to completion and is no longer affected by ``cancel``.
    """

    def __init__(self, delay_seconds: float):
        self.delay_seconds = delay_seconds
        self._pending: Optional[asyncio.Task] = None
        self._running: Set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def schedule(self, callback: Callable[[], Awaitable[None]]) -> None:
        self.cancel()
        self._pending = asyncio.create_task(self._fire(callback))

    def cancel(self) -> bool:
        """Cancel the pending callback. Returns True if one was waiting."""
        if self._pending is None:
            return False
        self._pending.cancel()
        self._pending = None
        return True

    async def wait(self) -> None:
        """Wait until nothing is pending or running."""
        while self._pending is not None or self._running:
            tasks = [t for t in (self._pending, *self._running) if t is not None]
            await asyncio.wait(tasks)

    async def _fire(self, callback: Callable[[], Awaitable[None]]) -> None:
        await asyncio.sleep(self.delay_seconds)
        task = asyncio.current_task()
        if self._pending is task:
            self._pending = None
        self._running.add(task)
        try:
            await callback()
        except Exception:
            logger.exception("Debounced callback failed")
        finally:
            self._running.discard(task)
