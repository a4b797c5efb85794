"""NumPy vectorized RK4 for many pendulum overlays at once.

All N overlay states advance through each timestep simultaneously as a
single (N, 4) NumPy array, so a session with dozens of overlays costs one
set of array operations per frame instead of a Python loop.

No in-place mutation (uses states + delta, never +=), so callers can keep
references to previous frames.

Physics equations here duplicate physics.derivatives() but operate on
(N, 4) arrays. See test_batch.py for cross-validation tests.
"""

from __future__ import annotations

import numpy as np

from double_pendulum.physics import PendulumParams, PendulumState


def derivatives_batch(states: np.ndarray, params: PendulumParams) -> np.ndarray:
    """Compute derivatives for N states simultaneously.

    Args:
        states: (N, 4) array with columns [theta1, theta2, omega1, omega2].
        params: Physics parameters.

    Returns:
        (N, 4) array of derivatives [d_theta1, d_theta2, d_omega1, d_omega2].
    """
    theta1 = states[:, 0]
    theta2 = states[:, 1]
    omega1 = states[:, 2]
    omega2 = states[:, 3]

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

    result = np.empty_like(states)
    result[:, 0] = omega1
    result[:, 1] = omega2
    result[:, 2] = alpha1
    result[:, 3] = alpha2

    return result


def step_batch(
    states: np.ndarray, params: PendulumParams, dt: float,
) -> np.ndarray:
    """Advance N states by one RK4 step. Returns a new (N, 4) array."""
    states = np.asarray(states, dtype=np.float64)

    k1 = derivatives_batch(states, params)
    k2 = derivatives_batch(states + 0.5 * dt * k1, params)
    k3 = derivatives_batch(states + 0.5 * dt * k2, params)
    k4 = derivatives_batch(states + dt * k3, params)

    return states + (dt / 6.0) * (k1 + 2 * k2 + 2 * k3 + k4)


def energy_batch(states: np.ndarray, params: PendulumParams) -> np.ndarray:
    """Total mechanical energy (T + V) for N states, shape (N,)."""
    theta1 = states[:, 0]
    theta2 = states[:, 1]
    omega1 = states[:, 2]
    omega2 = states[:, 3]
    l1, l2, m1, m2, g = params.l1, params.l2, params.m1, params.m2, params.g

    kinetic = (
        0.5 * (m1 + m2) * l1**2 * omega1**2
        + 0.5 * m2 * l2**2 * omega2**2
        + m2 * l1 * l2 * omega1 * omega2 * np.cos(theta1 - theta2)
    )
    potential = -(m1 + m2) * g * l1 * np.cos(theta1) - m2 * g * l2 * np.cos(theta2)
    return kinetic + potential


def states_to_array(states) -> np.ndarray:
    """Stack a sequence of PendulumState values into an (N, 4) float64 array."""
    return np.array([tuple(s) for s in states], dtype=np.float64).reshape(-1, 4)


def array_to_states(array: np.ndarray) -> list[PendulumState]:
    return [PendulumState(*(float(v) for v in row)) for row in array]
