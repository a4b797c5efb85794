"""Vibrating string: explicit finite-difference wave equation.

The string is N sample points with fixed ends. Each update applies

    a_i = (T/mu) * stiffness_scale * (y[i+1] - 2 y[i] + y[i-1]) / dx^2
          - damping * v_i * damping_scale
    v_i += a_i * dt
    y_i += v_i * dt

to the interior points. The scheme is only conditionally stable, so any
sample that goes non-finite or out of bounds is reset to rest instead of
letting NaN spread along the string.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WaveConfig:
    """Scale constants of the integrator (not physical parameters)."""

    stiffness_scale: float = 1e-6
    damping_scale: float = 1.0
    drive_scale: float = 0.5
    max_pluck: float = 50.0
    max_displacement: float = 500.0
    max_velocity: float = 1000.0


# Fractions of the string where the drive force is applied
DRIVE_POINTS = (0.25, 0.5, 0.75)


class WaveString:
    """A discretized string with owned position and velocity buffers."""

    def __init__(
        self,
        num_points: int,
        tension: float,
        mass: float,
        damping: float,
        length: float,
        config: WaveConfig | None = None,
    ):
        if num_points < 3:
            raise ValueError(f"num_points must be >= 3, got {num_points}")
        self.num_points = num_points
        self.tension = tension
        self.mass = mass
        self.damping = damping
        self.length = length
        self.config = config if config is not None else WaveConfig()

        self._positions = np.zeros(num_points, dtype=np.float64)
        self._velocities = np.zeros(num_points, dtype=np.float64)

    @property
    def dx(self) -> float:
        return self.length / (self.num_points - 1)

    @property
    def velocities(self) -> np.ndarray:
        return self._velocities.copy()

    def _index_at(self, fraction: float) -> int:
        """Sample index nearest ``fraction`` of the length, kept interior."""
        idx = math.floor(fraction * (self.num_points - 1))
        return min(max(idx, 1), self.num_points - 2)

    def pluck(self, position: float, amplitude: float):
        """Pull the string into a triangle peaking at ``position`` and release.

        Amplitude is clamped to +/-max_pluck. All velocities are zeroed.
        """
        limit = self.config.max_pluck
        amplitude = max(-limit, min(amplitude, limit))
        peak = self._index_at(position)
        last = self.num_points - 1

        idx = np.arange(self.num_points, dtype=np.float64)
        rising = amplitude * idx / peak
        falling = amplitude * (last - idx) / (last - peak)
        self._positions[:] = np.where(idx <= peak, rising, falling)
        self._positions[0] = 0.0
        self._positions[last] = 0.0
        self._velocities[:] = 0.0

    def drive(self, frequency: float, time: float, amplitude: float):
        """Add a sinusoidal kick to the velocity at the drive points."""
        kick = amplitude * math.sin(2 * math.pi * frequency * time)
        kick *= self.config.drive_scale
        for fraction in DRIVE_POINTS:
            self._velocities[self._index_at(fraction)] += kick

    def update(self, dt: float) -> int:
        """Advance the interior points by one step.

        Returns:
            Number of samples reset by the stability check.
        """
        cfg = self.config
        y = self._positions
        v = self._velocities
        wave_speed_sq = (self.tension / self.mass) * cfg.stiffness_scale

        curvature = (y[2:] - 2 * y[1:-1] + y[:-2]) / self.dx**2
        with np.errstate(over="ignore", invalid="ignore"):
            acceleration = (
                wave_speed_sq * curvature
                - self.damping * v[1:-1] * cfg.damping_scale
            )
            v[1:-1] = v[1:-1] + acceleration * dt
            y[1:-1] = y[1:-1] + v[1:-1] * dt

        # Fixed endpoints
        y[0] = y[-1] = 0.0
        v[0] = v[-1] = 0.0

        unstable = (
            ~np.isfinite(y) | ~np.isfinite(v)
            | (np.abs(y) > cfg.max_displacement)
            | (np.abs(v) > cfg.max_velocity)
        )
        n_reset = int(np.count_nonzero(unstable))
        if n_reset:
            y[unstable] = 0.0
            v[unstable] = 0.0
            logger.debug("Reset %d unstable samples", n_reset)
        return n_reset

    def get_positions(self) -> np.ndarray:
        """Snapshot of the displacements; mutating it does not affect the string."""
        return self._positions.copy()

    def reset(self):
        self._positions[:] = 0.0
        self._velocities[:] = 0.0

    def fundamental_frequency(self) -> float:
        """f1 = sqrt(T / mu) / (2 L)."""
        return math.sqrt(self.tension / self.mass) / (2 * self.length)

    def harmonic_frequencies(self, n: int) -> list[float]:
        f0 = self.fundamental_frequency()
        return [k * f0 for k in range(1, n + 1)]

    def courant_number(self, dt: float) -> float:
        """c * dt / dx for the scaled wave speed; above 1 the scheme diverges."""
        wave_speed = math.sqrt(
            self.tension / self.mass * self.config.stiffness_scale
        )
        return wave_speed * dt / self.dx


def analyze_harmonics(positions, num_harmonics: int) -> list[float]:
    """Project the shape onto sin(n*pi*x) for n = 1..num_harmonics.

    A discrete sine-transform approximation, normalized by the sample
    count. Non-finite samples are skipped.
    """
    y = np.asarray(positions, dtype=np.float64)
    n_samples = len(y)
    if n_samples < 2:
        return [0.0] * num_harmonics

    x = np.arange(n_samples) / (n_samples - 1)
    finite = np.isfinite(y)
    y = y[finite]
    x = x[finite]

    amplitudes = []
    for n in range(1, num_harmonics + 1):
        amplitude = abs(float(np.sum(y * np.sin(n * np.pi * x)))) / n_samples
        amplitudes.append(amplitude if math.isfinite(amplitude) else 0.0)
    return amplitudes


def get_nodes(harmonic: int, num_points: int) -> list[int]:
    """Sample indices of the zero-displacement points of a harmonic."""
    if harmonic < 1:
        raise ValueError(f"harmonic must be >= 1, got {harmonic}")
    return [
        math.floor(i / harmonic * (num_points - 1)) for i in range(harmonic + 1)
    ]


def get_antinodes(harmonic: int, num_points: int) -> list[int]:
    """Sample indices of the peak-displacement points of a harmonic."""
    if harmonic < 1:
        raise ValueError(f"harmonic must be >= 1, got {harmonic}")
    return [
        math.floor((i + 0.5) / harmonic * (num_points - 1)) for i in range(harmonic)
    ]
