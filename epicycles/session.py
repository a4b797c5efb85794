"""Epicycle session: accumulates time and records the pen trail."""

from __future__ import annotations

from collections import deque

from epicycles.orbit import Circle, advance_phase, positions_at


class EpicycleSession:
    """Drives a circle chain frame by frame with a bounded pen trail.

    Phase can be accumulated incrementally (``incremental=True``) or the
    chain evaluated at absolute time; both produce the same joints.
    """

    TRAIL_LENGTH = 500

    def __init__(self, circles, trail_length=TRAIL_LENGTH, incremental=False):
        self.base_circles = list(circles)
        self.circles = list(circles)
        self.incremental = incremental
        self.time = 0.0
        self.trail = deque(maxlen=trail_length)

    def advance(self, dt):
        """Advance by ``dt`` seconds and return the joint positions."""
        self.time += dt
        if self.incremental:
            self.circles = advance_phase(self.circles, dt)
            joints = positions_at(self.circles, 0.0)
        else:
            joints = positions_at(self.base_circles, self.time)
        if joints:
            self.trail.append(joints[-1])
        return joints

    def set_circles(self, circles: list[Circle]):
        """Swap in a new chain and restart time and trail."""
        self.base_circles = list(circles)
        self.circles = list(circles)
        self.time = 0.0
        self.trail.clear()
