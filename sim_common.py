"""Shared value types and frame timing used by all four simulations.

Contains the Point/Anchor coordinate types and the FrameClock that turns
wall-clock time into clamped per-frame deltas.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import NamedTuple

# Longest frame delta handed to an integrator (~60 fps). Longer pauses,
# e.g. a backgrounded window, are cut down to this.
MAX_FRAME_DT = 0.016


class Point(NamedTuple):
    """2D coordinate in caller-defined units (usually pixels)."""

    x: float
    y: float


class Anchor(NamedTuple):
    """A chain support point with a stable identity."""

    x: float
    y: float
    id: int

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)


def clamp_frame_dt(raw_dt: float, max_dt: float = MAX_FRAME_DT) -> float:
    """Clamp a wall-clock delta into [0, max_dt]."""
    if raw_dt < 0.0:
        return 0.0
    return min(raw_dt, max_dt)


class FrameClock:
    """Produces clamped frame deltas from a monotonic time source.

    The time source is injectable so tests can drive the clock by hand.
    """

    def __init__(
        self,
        max_dt: float = MAX_FRAME_DT,
        time_source: Callable[[], float] = time.perf_counter,
    ):
        self.max_dt = max_dt
        self._time_source = time_source
        self._last = time_source()
        self.elapsed = 0.0

    def tick(self) -> float:
        """Return the clamped seconds since the previous tick."""
        now = self._time_source()
        dt = clamp_frame_dt(now - self._last, self.max_dt)
        self._last = now
        self.elapsed += dt
        return dt

    def reset(self):
        self._last = self._time_source()
        self.elapsed = 0.0
