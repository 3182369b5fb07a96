"""Time-accurate playback of a planned transit."""

from .interpolator import AnimationState, interpolate, predicted_positions, total_duration
from .scheduler import AsyncioTickScheduler, ManualTickScheduler, TickScheduler
from .driver import PLAYBACK_SPEEDS, PlaybackDriver, PlaybackHandle

__all__ = [
    "AnimationState",
    "interpolate",
    "predicted_positions",
    "total_duration",
    "AsyncioTickScheduler",
    "ManualTickScheduler",
    "TickScheduler",
    "PLAYBACK_SPEEDS",
    "PlaybackDriver",
    "PlaybackHandle",
]
