"""Pendulum session: advances overlay states once per frame.

Headless counterpart of the pendulum view. Owns the overlay states, their
bounded bob-2 trails and the primary overlay's energy history.
"""

from __future__ import annotations

import logging
from collections import deque

import numpy as np

from double_pendulum.batch import (
    array_to_states, energy_batch, states_to_array, step_batch,
)
from double_pendulum.physics import (
    PendulumParams, PendulumState, create_overlays, energy, positions,
)
from sim_common import Point

logger = logging.getLogger(__name__)


class PendulumSession:
    """Multiple near-identical double pendulums advanced in lockstep."""

    DT = 0.016  # ~60fps
    TRAIL_LENGTH = 2000
    ENERGY_HISTORY_LENGTH = 200

    def __init__(
        self,
        params: PendulumParams,
        initial_state: PendulumState,
        num_overlays: int = 1,
        randomness: float = 0.1,
        origin: Point = Point(400.0, 200.0),
        trail_length: int = TRAIL_LENGTH,
    ):
        self.params = params
        self.origin = origin
        self.trail_length = trail_length
        self.speed = 1.0
        self.reset(initial_state, num_overlays, randomness)

    def reset(self, initial_state, num_overlays=1, randomness=0.1):
        """Re-seed the overlays and clear trails and energy history."""
        if num_overlays < 1:
            raise ValueError(f"num_overlays must be >= 1, got {num_overlays}")
        self.initial_state = PendulumState(*initial_state)
        self.states = states_to_array(
            create_overlays(self.initial_state, num_overlays, randomness)
        )
        self.frozen = np.zeros(len(self.states), dtype=bool)
        self.trails = [deque(maxlen=self.trail_length) for _ in self.states]
        self.energy_history = deque(maxlen=self.ENERGY_HISTORY_LENGTH)
        self.time = 0.0

    @property
    def num_overlays(self) -> int:
        return len(self.states)

    @property
    def primary_state(self) -> PendulumState:
        return PendulumState(*(float(v) for v in self.states[0]))

    def advance(self, dt=None):
        """Advance every overlay by one frame and record trails and energy."""
        if dt is None:
            dt = self.DT * self.speed

        with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
            states_next = step_batch(self.states, self.params, dt)

        # Overlays that hit a singular configuration stay where they were
        finite = np.all(np.isfinite(states_next), axis=1)
        newly_frozen = ~finite & ~self.frozen
        if np.any(newly_frozen):
            logger.warning(
                "Freezing %d overlay(s) with non-finite state at t=%.3f",
                int(np.count_nonzero(newly_frozen)), self.time,
            )
        self.frozen = self.frozen | ~finite
        self.states = np.where(self.frozen[:, np.newaxis], self.states, states_next)
        self.time += dt

        for trail, state in zip(self.trails, array_to_states(self.states)):
            trail.append(positions(state, self.params, self.origin).bob2)

        self.energy_history.append(energy(self.primary_state, self.params))

    def overlay_energies(self) -> np.ndarray:
        """Total energy of every overlay, shape (num_overlays,)."""
        return energy_batch(self.states, self.params)

    def bob_positions(self):
        """Cartesian bob positions for every overlay, in overlay order."""
        return [
            positions(state, self.params, self.origin)
            for state in array_to_states(self.states)
        ]
