"""Wave session: owns the string and advances it once per frame.

The string is rebuilt from scratch whenever a physical parameter changes.
Each frame is split into SUBSTEPS integrator steps for stability.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from standing_wave.wave_string import (
    WaveConfig, WaveString, analyze_harmonics, get_antinodes, get_nodes,
)

logger = logging.getLogger(__name__)

PLUCK = "pluck"
DRIVE = "drive"


@dataclass(frozen=True)
class StringParams:
    """Physical string parameters (SI-like units)."""

    tension: float = 500.0   # N
    length: float = 1.0      # m
    mass: float = 0.01       # kg/m
    damping: float = 0.1


class WaveSession:
    """Pluck/drive interaction and per-frame stepping of a WaveString."""

    NUM_POINTS = 200
    SUBSTEPS = 4
    SPEED = 3.0
    DRIVE_AMPLITUDE = 15.0
    NUM_HARMONICS = 10

    def __init__(
        self,
        params: StringParams | None = None,
        mode: str = PLUCK,
        driving_frequency: float = 100.0,
        config: WaveConfig | None = None,
    ):
        if mode not in (PLUCK, DRIVE):
            raise ValueError(f"mode must be {PLUCK!r} or {DRIVE!r}, got {mode!r}")
        self.params = params if params is not None else StringParams()
        self.mode = mode
        self.driving_frequency = driving_frequency
        self.config = config
        self.time = 0.0
        self._warned_unstable = False
        self.string = self._build_string()

    def _build_string(self) -> WaveString:
        p = self.params
        return WaveString(
            self.NUM_POINTS, p.tension, p.mass, p.damping, p.length, self.config,
        )

    def set_params(self, **changes):
        """Replace physical parameters; the string restarts at rest."""
        self.params = replace(self.params, **changes)
        self.string = self._build_string()
        self.time = 0.0
        self._warned_unstable = False

    def pluck(self, position: float, amplitude: float):
        self.string.pluck(position, amplitude)

    def advance(self, frame_dt: float) -> int:
        """Advance one frame. Returns the number of samples reset."""
        self.time += frame_dt
        dt = frame_dt * self.SPEED / self.SUBSTEPS

        if not self._warned_unstable and self.string.courant_number(dt) > 1.0:
            logger.warning(
                "Courant number %.2f > 1: wave integration will be unstable",
                self.string.courant_number(dt),
            )
            self._warned_unstable = True

        n_reset = 0
        for _ in range(self.SUBSTEPS):
            n_reset += self.string.update(dt)
            if self.mode == DRIVE:
                self.string.drive(
                    self.driving_frequency, self.time, self.DRIVE_AMPLITUDE,
                )
        return n_reset

    def spectrum(self) -> list[float]:
        return analyze_harmonics(self.string.get_positions(), self.NUM_HARMONICS)

    def nodes(self, harmonic: int) -> list[int]:
        return get_nodes(harmonic, self.NUM_POINTS)

    def antinodes(self, harmonic: int) -> list[int]:
        return get_antinodes(harmonic, self.NUM_POINTS)
