"""
Tick sources for playback.

The playback driver never reads a clock itself; it asks a scheduler for
the next frame and receives the frame timestamp (seconds, monotonically
increasing) as the callback argument.

- ``ManualTickScheduler``: the host pushes timestamps with ``advance``.
  Used for tests and headless runs.
- ``AsyncioTickScheduler``: frames at a fixed interval on an asyncio loop.
"""

import asyncio
import heapq
import itertools
import logging
from typing import Callable, Dict, List, Optional, Protocol, Set, Tuple

logger = logging.getLogger(__name__)

TickCallback = Callable[[float], None]
TimerCallback = Callable[[], None]


class TickScheduler(Protocol):
    """Host frame clock."""

    def request_tick(self, callback: TickCallback) -> int:
        """Schedule ``callback(timestamp)`` for the next frame; returns a token."""
        ...

    def call_later(self, delay_s: float, callback: TimerCallback) -> int:
        """Schedule ``callback()`` after ``delay_s`` seconds; returns a token."""
        ...

    def cancel_tick(self, token: int) -> None:
        """Cancel a pending frame or timer. Unknown tokens are ignored."""
        ...


class ManualTickScheduler:
    """
    Scheduler driven by explicit timestamps.

    Each ``advance(timestamp)`` first fires timers that are due, then
    delivers one frame to every callback requested before the call.
    Callbacks requested during a frame wait for the next ``advance``.
    """

    def __init__(self, start_time: float = 0.0):
        self.now = start_time
        self._ids = itertools.count(1)
        self._frames: Dict[int, TickCallback] = {}
        self._timers: List[Tuple[float, int, TimerCallback]] = []
        self._live_timers: Set[int] = set()

    @property
    def pending_ticks(self) -> int:
        return len(self._frames)

    @property
    def pending_timers(self) -> int:
        return len(self._live_timers)

    def request_tick(self, callback: TickCallback) -> int:
        token = next(self._ids)
        self._frames[token] = callback
        return token

    def call_later(self, delay_s: float, callback: TimerCallback) -> int:
        token = next(self._ids)
        heapq.heappush(self._timers, (self.now + delay_s, token, callback))
        self._live_timers.add(token)
        return token

    def cancel_tick(self, token: int) -> None:
        self._frames.pop(token, None)
        self._live_timers.discard(token)

    def advance(self, timestamp: float) -> None:
        """Move the clock to ``timestamp`` and deliver one frame."""
        if timestamp < self.now:
            raise ValueError(f"Timestamps must not go backwards ({timestamp} < {self.now})")
        self.now = timestamp

        while self._timers and self._timers[0][0] <= timestamp:
            _, token, callback = heapq.heappop(self._timers)
            if token not in self._live_timers:
                continue
            self._live_timers.discard(token)
            callback()

        frames, self._frames = self._frames, {}
        for token, callback in frames.items():
            callback(timestamp)

    def run(self, frame_interval_s: float, max_frames: int = 1_000_000) -> int:
        """
        Step the clock at a fixed interval until nothing is pending.

        Stops early, with a warning, after ``max_frames`` frames.

        Returns:
            Number of frames advanced
        """
        frames = 0
        while (self._frames or self._live_timers) and frames < max_frames:
            self.advance(self.now + frame_interval_s)
            frames += 1
        if self._frames or self._live_timers:
            logger.warning(f"Stopped after {frames} frames with callbacks still pending")
        return frames


class AsyncioTickScheduler:
    """Frame clock on an asyncio event loop at a fixed frame interval."""

    def __init__(self, frame_interval_s: float = 1 / 60, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.frame_interval_s = frame_interval_s
        self._loop = loop
        self._ids = itertools.count(1)
        self._handles: Dict[int, asyncio.TimerHandle] = {}

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    @property
    def idle(self) -> bool:
        return not self._handles

    def request_tick(self, callback: TickCallback) -> int:
        token = next(self._ids)

        def fire():
            self._handles.pop(token, None)
            callback(self.loop.time())

        self._handles[token] = self.loop.call_later(self.frame_interval_s, fire)
        return token

    def call_later(self, delay_s: float, callback: TimerCallback) -> int:
        token = next(self._ids)

        def fire():
            self._handles.pop(token, None)
            callback()

        self._handles[token] = self.loop.call_later(delay_s, fire)
        return token

    def cancel_tick(self, token: int) -> None:
        handle = self._handles.pop(token, None)
        if handle is not None:
            handle.cancel()

    async def wait_idle(self, poll_s: float = 0.05) -> None:
        """Wait until no frames or timers are pending."""
        while self._handles:
            await asyncio.sleep(poll_s)
