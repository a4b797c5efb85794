"""Double pendulum physics engine.

Implements the Lagrangian equations of motion for a double pendulum with
linear angular-velocity damping, a classic RK4 step over an explicit
state value, and a SciPy DOP853 reference integrator.

Angles are measured from the downward vertical. Bob positions follow the
screen convention (y grows downward from the pivot); potential energy
uses y measured upward from the pivot.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import NamedTuple

import numpy as np
from scipy.integrate import solve_ivp

from sim_common import Point


@dataclass(frozen=True)
class PendulumParams:
    """Physical parameters of the double pendulum system."""

    l1: float = 1.0
    l2: float = 1.0
    m1: float = 1.0
    m2: float = 1.0
    g: float = 9.81
    damping: float = 0.0

    def __post_init__(self):
        # den1 = l1 * (m1 + m2 * sin^2(delta)) only vanishes for l1 == 0 or m1 == 0
        for name in ("l1", "l2", "m1", "m2"):
            value = getattr(self, name)
            if not value > 0:
                raise ValueError(f"{name} must be positive, got {value}")


class PendulumState(NamedTuple):
    """Angles (rad) and angular velocities (rad/s) of the two arms."""

    theta1: float
    theta2: float
    omega1: float
    omega2: float


class BobPositions(NamedTuple):
    bob1: Point
    bob2: Point


class Energy(NamedTuple):
    kinetic: float
    potential: float
    total: float


def derivatives(t, state, params):
    """Compute the four first-order ODEs for the double pendulum.

    State vector: [theta1, theta2, omega1, omega2]
    Returns: [d_theta1/dt, d_theta2/dt, d_omega1/dt, d_omega2/dt]

    ``t`` is unused; it keeps the solve_ivp calling convention.
    """
    theta1, theta2, omega1, omega2 = state
    l1, l2, m1, m2, g = params.l1, params.l2, params.m1, params.m2, params.g
    damping = params.damping

    delta = theta2 - theta1
    sin_delta = np.sin(delta)
    cos_delta = np.cos(delta)
    den1 = (m1 + m2) * l1 - m2 * l1 * cos_delta**2
    den2 = (l2 / l1) * den1

    alpha1 = (
        m2 * l1 * omega1**2 * sin_delta * cos_delta
        + m2 * g * np.sin(theta2) * cos_delta
        + m2 * l2 * omega2**2 * sin_delta
        - (m1 + m2) * g * np.sin(theta1)
        - damping * omega1
    ) / den1

    alpha2 = (
        -m2 * l2 * omega2**2 * sin_delta * cos_delta
        + (m1 + m2) * g * np.sin(theta1) * cos_delta
        - (m1 + m2) * l1 * omega1**2 * sin_delta
        - (m1 + m2) * g * np.sin(theta2)
        - damping * omega2
    ) / den2

    return [omega1, omega2, alpha1, alpha2]


def step(state, params, dt):
    """Advance one RK4 step and return a new PendulumState.

    Angles are not wrapped; they may grow past +/-2*pi.
    """
    y = np.asarray(state, dtype=np.float64)

    k1 = np.asarray(derivatives(0.0, y, params))
    k2 = np.asarray(derivatives(0.0, y + 0.5 * dt * k1, params))
    k3 = np.asarray(derivatives(0.0, y + 0.5 * dt * k2, params))
    k4 = np.asarray(derivatives(0.0, y + dt * k3, params))

    y_next = y + (dt / 6.0) * (k1 + 2 * k2 + 2 * k3 + k4)
    return PendulumState(*(float(v) for v in y_next))


def simulate(params, state0, t_end=10.0, dt=0.005):
    """Integrate a reference trajectory with DOP853 on a uniform grid.

    Returns:
        t_array: 1D array of time values at uniform dt spacing
        state_array: 2D array of shape (len(t_array), 4)
    """
    t_eval = np.arange(0, t_end, dt)

    sol = solve_ivp(
        fun=lambda t, y: derivatives(t, y, params),
        t_span=(0, t_end),
        y0=list(state0),
        method="DOP853",
        t_eval=t_eval,
        rtol=1e-12,
        atol=1e-12,
    )

    return sol.t, sol.y.T  # shape: (n_steps, 4)


def positions(state, params, origin=Point(0.0, 0.0)):
    """Convert a state to Cartesian bob positions relative to ``origin``.

    y grows downward from the pivot, matching screen coordinates.
    """
    theta1, theta2 = state[0], state[1]

    x1 = origin.x + params.l1 * math.sin(theta1)
    y1 = origin.y + params.l1 * math.cos(theta1)

    x2 = x1 + params.l2 * math.sin(theta2)
    y2 = y1 + params.l2 * math.cos(theta2)

    return BobPositions(Point(x1, y1), Point(x2, y2))


def energy(state, params):
    """Kinetic, potential and total mechanical energy of a state.

    Potential energy is measured from the pivot with y pointing up.
    """
    theta1, theta2, omega1, omega2 = state
    l1, l2, m1, m2, g = params.l1, params.l2, params.m1, params.m2, params.g

    v1_sq = l1**2 * omega1**2
    v2_sq = (
        l1**2 * omega1**2
        + l2**2 * omega2**2
        + 2 * l1 * l2 * omega1 * omega2 * math.cos(theta1 - theta2)
    )
    kinetic = 0.5 * m1 * v1_sq + 0.5 * m2 * v2_sq

    y1 = -l1 * math.cos(theta1)
    y2 = y1 - l2 * math.cos(theta2)
    potential = m1 * g * y1 + m2 * g * y2

    return Energy(kinetic, potential, kinetic + potential)


def create_overlays(base_state, count, randomness):
    """Seed ``count`` near-identical states for chaotic-divergence overlays.

    The first state is ``base_state``; state i is offset in both angles by
    ((i - count/2) / count) * randomness degrees.
    """
    if count < 1:
        return []

    base_state = PendulumState(*base_state)
    overlays = [base_state]

    for i in range(1, count):
        variation = math.radians(((i - count / 2) / count) * randomness)
        overlays.append(base_state._replace(
            theta1=base_state.theta1 + variation,
            theta2=base_state.theta2 + variation,
        ))

    return overlays
