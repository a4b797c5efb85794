"""Catenary solver: the shape of a chain hanging between two anchors.

The catenary equation is y = a * cosh(x / a) + c. Curves use the y-up
convention: the lowest point of the chain has the smallest y. Callers
drawing in y-down screen space flip the curve about the anchor line.

Three regimes:
  - taut: the chain is no longer than the anchor distance -> straight line
  - symmetric: anchors at equal height -> Newton-Raphson on a
  - asymmetric: damped fixed-point iteration on a and the x offsets

The solvers accept their best estimate when the iteration budget runs
out; they never raise on non-convergence.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import NamedTuple

from sim_common import Point

logger = logging.getLogger(__name__)

# Points per curve is NUM_SEGMENTS + 1
NUM_SEGMENTS = 100

# Chains within this fraction of the anchor distance are drawn taut
TAUT_TOLERANCE = 0.001

# Anchors closer than this in y use the symmetric solver
SYMMETRIC_DY = 1.0

# Below this horizontal separation no catenary exists (vertical anchors)
MIN_HORIZONTAL = 1e-9

# Newton-Raphson settings (symmetric case)
NEWTON_MAX_ITERATIONS = 100
NEWTON_TOLERANCE = 1e-4
NEWTON_MIN_DERIVATIVE = 1e-10
NEWTON_MAX_A_FACTOR = 100.0

# math.cosh/sinh overflow just above 710
MAX_HYPERBOLIC_ARG = 700.0

# Fixed-point settings (asymmetric case). The gains are empirical.
ASYM_MAX_ITERATIONS = 50
ASYM_TOLERANCE = 0.01
ASYM_LENGTH_GAIN = 0.1
ASYM_VERTICAL_GAIN = 0.01
ASYM_MIN_A = 10.0
ASYM_MAX_A_FACTOR = 10.0

# Decorative tension scale
TENSION_SCALE = 5.0
MIN_TENSION_COS = 0.1


@dataclass(frozen=True)
class CatenaryParams:
    """Chain parameters. Gravity and mass only scale the tension output."""

    chain_length: float = 300.0
    gravity: float = 1.0
    chain_mass: float = 2.0


class Tension(NamedTuple):
    magnitude: float
    angle: float


def _interpolate(anchor1, anchor2, n_segments=NUM_SEGMENTS):
    dx = anchor2.x - anchor1.x
    dy = anchor2.y - anchor1.y
    return [
        Point(anchor1.x + (i / n_segments) * dx, anchor1.y + (i / n_segments) * dy)
        for i in range(n_segments + 1)
    ]


def solve_catenary(anchor1, anchor2, chain_length):
    """Compute the hanging-chain polyline from anchor1 to anchor2.

    Returns NUM_SEGMENTS + 1 points; the first is anchor1 and the last has
    anchor2's x coordinate.
    """
    dx = anchor2.x - anchor1.x
    dy = anchor2.y - anchor1.y
    horizontal_dist = abs(dx)
    straight_dist = math.hypot(dx, dy)

    if chain_length <= straight_dist * (1.0 + TAUT_TOLERANCE):
        return _interpolate(anchor1, anchor2)

    if horizontal_dist < MIN_HORIZONTAL:
        logger.debug("Vertical anchors, falling back to straight line")
        return _interpolate(anchor1, anchor2)

    if abs(dy) < SYMMETRIC_DY:
        return _symmetric_curve(anchor1, anchor2, chain_length)

    return _asymmetric_curve(anchor1, anchor2, chain_length)


def _symmetric_curve(anchor1, anchor2, chain_length):
    dx = anchor2.x - anchor1.x
    horizontal_dist = abs(dx)
    a = solve_symmetric_parameter(horizontal_dist, chain_length)

    mid_x = (anchor1.x + anchor2.x) / 2
    b = horizontal_dist / 2
    c = anchor1.y - a * math.cosh(b / a)

    points = []
    for i in range(NUM_SEGMENTS + 1):
        t = i / NUM_SEGMENTS
        x = anchor1.x + t * dx
        y = a * math.cosh((x - mid_x) / a) + c
        points.append(Point(x, y))
    return points


def _asymmetric_curve(anchor1, anchor2, chain_length):
    dx = anchor2.x - anchor1.x
    dy = anchor2.y - anchor1.y
    a, x1, x2 = solve_asymmetric_parameters(abs(dx), dy, chain_length)

    c = anchor1.y - a * math.cosh(x1 / a)

    points = []
    for i in range(NUM_SEGMENTS + 1):
        t = i / NUM_SEGMENTS
        x = anchor1.x + t * dx
        x_local = x1 + t * (x2 - x1)
        points.append(Point(x, a * math.cosh(x_local / a) + c))
    return points


def solve_symmetric_parameter(horizontal_dist, chain_length):
    """Solve L = 2a * sinh(b/a) for a, with b = horizontal_dist / 2.

    Newton-Raphson from a0 = b, with a kept inside (0, 100 * horizontal_dist).
    Chains longer than about 1.5x the span overshoot below zero from a0;
    such steps are replaced by halving a. Stops early when the derivative
    vanishes or cosh(b/a) would overflow, returning the last valid iterate.
    """
    b = horizontal_dist / 2
    a = b

    for iteration in range(NEWTON_MAX_ITERATIONS):
        ratio = b / a
        sinh_val = math.sinh(ratio)
        cosh_val = math.cosh(ratio)

        f = 2 * a * sinh_val - chain_length
        df = 2 * sinh_val - (2 * b / a) * cosh_val

        if abs(df) < NEWTON_MIN_DERIVATIVE:
            logger.debug("Newton derivative vanished at iteration %d", iteration)
            break

        a_new = a - f / df
        if a_new <= 0:
            a_new = a / 2
        a_new = min(a_new, horizontal_dist * NEWTON_MAX_A_FACTOR)

        if b / a_new > MAX_HYPERBOLIC_ARG:
            logger.debug("Newton iterate %.6g would overflow, keeping %.6g", a_new, a)
            break
        if abs(a_new - a) < NEWTON_TOLERANCE:
            return a_new

        a = a_new

    return a


def solve_asymmetric_parameters(horizontal_dist, vertical_dist, chain_length):
    """Find (a, x1, x2) for anchors at different heights.

    Drives both constraints toward zero error:
        a * (cosh(x2/a) - cosh(x1/a)) = vertical_dist
        a * (sinh(x2/a) - sinh(x1/a)) = chain_length
    with x2 - x1 = horizontal_dist held fixed.

    Since L**2 - dy**2 = (2a * sinh(h / 2a))**2, the iteration starts from
    the symmetric solve for length sqrt(L**2 - dy**2), with the midpoint of
    x1 and x2 at a * atanh(dy / L). That start normally meets the tolerance
    on the first check. Otherwise the damped update runs, and the iterate
    with the smallest |vertical error| + |length error| is returned when
    the budget runs out or the update heads toward overflow.
    """
    a_max = horizontal_dist * ASYM_MAX_A_FACTOR
    a, x1 = _asymmetric_start(horizontal_dist, vertical_dist, chain_length)

    best = None
    best_error = math.inf
    vert_error = length_error = math.inf
    for _ in range(ASYM_MAX_ITERATIONS):
        x2 = x1 + horizontal_dist
        current_vertical = a * (math.cosh(x2 / a) - math.cosh(x1 / a))
        current_length = a * (math.sinh(x2 / a) - math.sinh(x1 / a))

        vert_error = current_vertical - vertical_dist
        length_error = current_length - chain_length

        error = abs(vert_error) + abs(length_error)
        if error < best_error:
            best_error = error
            best = (a, x1, x2)

        if abs(vert_error) < ASYM_TOLERANCE and abs(length_error) < ASYM_TOLERANCE:
            return a, x1, x2

        a_next = a - length_error * ASYM_LENGTH_GAIN
        x1_next = x1 - vert_error * ASYM_VERTICAL_GAIN
        a_next = max(ASYM_MIN_A, min(a_next, a_max))

        if max(abs(x1_next), abs(x1_next + horizontal_dist)) / a_next > MAX_HYPERBOLIC_ARG:
            logger.debug("Asymmetric solve diverging at a=%.6g x1=%.6g", a, x1)
            break

        a = a_next
        x1 = x1_next
    else:
        logger.debug(
            "Asymmetric solve stopped after %d iterations "
            "(vertical error %.3g, length error %.3g)",
            ASYM_MAX_ITERATIONS, vert_error, length_error,
        )

    logger.debug("Keeping best asymmetric estimate, combined error %.3g", best_error)
    return best


def _asymmetric_start(horizontal_dist, vertical_dist, chain_length):
    """Initial (a, x1) for the asymmetric iteration."""
    half = horizontal_dist / 2
    if chain_length > abs(vertical_dist):
        level_length = math.sqrt(chain_length ** 2 - vertical_dist ** 2)
        a = solve_symmetric_parameter(horizontal_dist, level_length)
        mid = a * math.atanh(vertical_dist / chain_length)
        if (abs(mid) + half) / a <= MAX_HYPERBOLIC_ARG:
            return a, mid - half

    # Chain no longer than the height difference, or a start that would overflow
    return solve_symmetric_parameter(horizontal_dist, chain_length), -half


def parabola_approx(anchor1, anchor2, sag):
    """Quadratic comparison curve: straight line plus 4*sag*t*(1-t) on y."""
    dx = anchor2.x - anchor1.x
    dy = anchor2.y - anchor1.y

    points = []
    for i in range(NUM_SEGMENTS + 1):
        t = i / NUM_SEGMENTS
        x = anchor1.x + t * dx
        y = anchor1.y + t * dy + 4 * sag * t * (1 - t)
        points.append(Point(x, y))
    return points


def tension_at(point, next_point, mass, gravity):
    """Decorative tension along the segment point -> next_point.

    Grows as the segment approaches vertical; capped where |cos| < 0.1.
    """
    angle = math.atan2(next_point.y - point.y, next_point.x - point.x)
    baseline = mass * gravity * TENSION_SCALE
    magnitude = baseline / max(abs(math.cos(angle)), MIN_TENSION_COS)
    return Tension(magnitude, angle)


def tension_profile(points, mass, gravity, stride=10):
    """Tension at every ``stride``-th segment start, paired with that point."""
    return [
        (points[j], tension_at(points[j], points[j + 1], mass, gravity))
        for j in range(0, len(points) - 1, stride)
    ]


def polyline_length(points):
    """Sum of segment lengths; used to check a solve against chain_length."""
    return sum(
        math.hypot(q.x - p.x, q.y - p.y) for p, q in zip(points, points[1:])
    )
