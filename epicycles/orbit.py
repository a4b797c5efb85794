"""Epicycle composition: nested rotating vectors.

Joint i of a chain sits at the root offset plus the sum of
radius_k * (cos, sin)(angle_k + speed_k * t) over circles 0..i. Circles
are immutable; phase is advanced by building new circles.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace

from sim_common import Point


@dataclass(frozen=True)
class Circle:
    """One rotating arm. x, y is the translation origin of a root circle."""

    x: float = 0.0
    y: float = 0.0
    radius: float = 0.0
    speed: float = 0.0   # rad/s
    angle: float = 0.0   # rad


def positions_at(circles, time):
    """Root origin followed by every joint of the chain at ``time``.

    Returns len(circles) + 1 points, or an empty list for an empty chain.
    """
    if not circles:
        return []

    x, y = circles[0].x, circles[0].y
    points = [Point(x, y)]

    for circle in circles:
        angle = circle.angle + circle.speed * time
        x += circle.radius * math.cos(angle)
        y += circle.radius * math.sin(angle)
        points.append(Point(x, y))

    return points


def pen_position(circles, time):
    """The traced point: the last joint of the chain."""
    return positions_at(circles, time)[-1]


def advance_phase(circles, delta_time):
    """New circles with each angle moved on by speed * delta_time."""
    return [
        replace(circle, angle=circle.angle + circle.speed * delta_time)
        for circle in circles
    ]
