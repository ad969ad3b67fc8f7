"""Cancellable scheduled callbacks for the dwell timer."""

import heapq
import itertools
from typing import Callable, List, Optional, Protocol, Tuple


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything with an asyncio-style call_later, including an asyncio event loop."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class _ManualHandle:
    def __init__(self, callback: Callable[[], None]):
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualClock:
    """
    Deterministic scheduler driven by virtual time.

    Callbacks run only inside advance(), in due-time order, so replays and
    tests never depend on wall-clock timing.
    """

    def __init__(self):
        self.now: float = 0.0
        self._queue: List[Tuple[float, int, _ManualHandle]] = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> _ManualHandle:
        handle = _ManualHandle(callback)
        heapq.heappush(self._queue, (self.now + delay, next(self._counter), handle))
        return handle

    @property
    def pending(self) -> int:
        """Number of scheduled callbacks that have not fired or been cancelled."""
        return sum(1 for _, _, handle in self._queue if not handle.cancelled)

    def advance(self, seconds: float) -> int:
        """
        Move virtual time forward, running every callback that falls due.

        Returns:
            Number of callbacks run
        """
        target = self.now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            self.now = due
            if not handle.cancelled:
                handle.callback()
                fired += 1
        self.now = target
        return fired


class DwellTimer:
    """A single re-armable timer: at most one callback is pending at any time."""

    def __init__(self, scheduler: Scheduler, delay: float, callback: Callable[[], None]):
        self.scheduler = scheduler
        self.delay = delay
        self.callback = callback
        self._handle: Optional[TimerHandle] = None

    @property
    def armed(self) -> bool:
        return self._handle is not None

    def arm(self) -> None:
        if self._handle is None:
            self._handle = self.scheduler.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self.callback()
