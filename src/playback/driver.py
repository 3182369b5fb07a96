"""
Playback driver.

Advances a simulated transit in scaled wall-clock time. Each frame from
the tick scheduler adds ``delta * speed_multiplier`` to the session's
elapsed time, interpolates the vessel state and publishes it. When the
transit completes the final state is held briefly and then cleared
(``None`` is published).

Single-threaded: the only mutable state is the ``PlaybackHandle`` of the
running session. Cancelling a handle removes its pending frame and timer
so nothing further is published for that session.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from src.playback.interpolator import AnimationState, interpolate, total_duration
from src.playback.scheduler import TickScheduler
from src.routes.models import Waypoint
from src.trajectory.legs import TrajectoryLeg

logger = logging.getLogger(__name__)

PLAYBACK_SPEEDS = (1, 2, 4, 8, 16, 32, 64, 128, 256)
DEFAULT_HOLD_SECONDS = 1.0

StateListener = Callable[[Optional[AnimationState]], None]


def validate_speed_multiplier(multiplier: float) -> float:
    """Check a multiplier against the selectable playback speeds."""
    if multiplier not in PLAYBACK_SPEEDS:
        raise ValueError(
            f"Playback speed {multiplier}x not supported; choose one of {list(PLAYBACK_SPEEDS)}"
        )
    return float(multiplier)


@dataclass
class PlaybackHandle:
    """A running playback session and its elapsed-time accumulator."""
    legs: Sequence[TrajectoryLeg]
    waypoints: Sequence[Waypoint]
    duration: float
    speed_multiplier: float

    last_timestamp: Optional[float] = None
    scaled_elapsed: float = 0.0
    progress: float = 0.0
    state: Optional[AnimationState] = None
    active: bool = True
    finished: bool = False
    _pending: List[int] = field(default_factory=list, repr=False)

    def set_speed(self, multiplier: float) -> None:
        """Change the multiplier; applies from the next frame."""
        self.speed_multiplier = validate_speed_multiplier(multiplier)


class PlaybackDriver:
    """
    Schedules interpolation frames for playback sessions.

    Args:
        scheduler: Frame clock supplying timestamps in seconds
        on_state: Receives each published AnimationState, then None when cleared
        hold_seconds: How long the final state stays before being cleared
    """

    def __init__(
        self,
        scheduler: TickScheduler,
        on_state: StateListener,
        hold_seconds: float = DEFAULT_HOLD_SECONDS,
    ):
        self.scheduler = scheduler
        self.on_state = on_state
        self.hold_seconds = hold_seconds

    def start(
        self,
        legs: Sequence[TrajectoryLeg],
        waypoints: Sequence[Waypoint],
        speed_multiplier: float = 1,
    ) -> Optional[PlaybackHandle]:
        """
        Begin a playback session.

        Returns:
            The session handle, or None when the route takes no time
        """
        multiplier = validate_speed_multiplier(speed_multiplier)
        duration = total_duration(legs)
        if duration <= 0:
            logger.info("Nothing to play back: route has zero duration")
            return None

        handle = PlaybackHandle(
            legs=list(legs),
            waypoints=list(waypoints),
            duration=duration,
            speed_multiplier=multiplier,
        )
        self._schedule_frame(handle)
        logger.info(f"Playback started: {duration:.1f} s transit at {multiplier:g}x")
        return handle

    def cancel(self, handle: Optional[PlaybackHandle]) -> None:
        """Stop a session; no state is published for it afterwards."""
        if handle is None or not handle.active:
            return
        handle.active = False
        for token in handle._pending:
            self.scheduler.cancel_tick(token)
        handle._pending.clear()
        handle.state = None
        logger.info(f"Playback cancelled at {handle.progress:.0%}")

    def _schedule_frame(self, handle: PlaybackHandle) -> None:
        token = self.scheduler.request_tick(lambda ts: self._on_tick(handle, token, ts))
        handle._pending.append(token)

    def _on_tick(self, handle: PlaybackHandle, token: int, timestamp: float) -> None:
        if token in handle._pending:
            handle._pending.remove(token)
        if not handle.active:
            return

        if handle.last_timestamp is None:
            handle.last_timestamp = timestamp
        delta = max(timestamp - handle.last_timestamp, 0.0)
        handle.last_timestamp = timestamp

        handle.scaled_elapsed += delta * handle.speed_multiplier
        handle.progress = min(handle.scaled_elapsed / handle.duration, 1.0)

        state = interpolate(handle.legs, handle.waypoints, handle.progress, handle.duration)
        if state is not None:
            handle.state = state
            self.on_state(state)

        # The listener may have cancelled the session
        if not handle.active:
            return

        if handle.progress < 1.0:
            self._schedule_frame(handle)
            return

        handle.finished = True
        logger.info("Playback complete")
        clear_token = self.scheduler.call_later(
            self.hold_seconds, lambda: self._on_clear(handle, clear_token)
        )
        handle._pending.append(clear_token)

    def _on_clear(self, handle: PlaybackHandle, token: int) -> None:
        if token in handle._pending:
            handle._pending.remove(token)
        if not handle.active:
            return
        handle.active = False
        handle.state = None
        self.on_state(None)
