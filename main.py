"""Entry point for the Physics Playground numerical core.

Runs one of the four simulations headless for a number of frames and
logs a summary:
- catenary: chain between the default anchors
- pendulum: butterfly-effect overlays of a double pendulum
- waves: a plucked (or driven) string and its harmonic spectrum
- epicycles: a three-circle flower chain

By default every frame advances by MAX_FRAME_DT. With --realtime the
frames are paced at ~60fps and each delta comes from a FrameClock, the
same path a renderer polling the engines would take.
"""

import argparse
import logging
import math
import time

from catenary.physics import polyline_length
from catenary.scene import CatenaryScene
from double_pendulum.physics import PendulumParams, PendulumState, energy
from double_pendulum.session import PendulumSession
from epicycles.orbit import Circle
from epicycles.session import EpicycleSession
from sim_common import MAX_FRAME_DT, FrameClock, Point
from standing_wave.session import DRIVE, PLUCK, WaveSession

logger = logging.getLogger(__name__)

FRAME_INTERVAL = 1.0 / 60


def frame_deltas(frames, realtime=False):
    """Yield one frame delta per frame, fixed or from the wall clock."""
    if not realtime:
        for _ in range(frames):
            yield MAX_FRAME_DT
        return
    clock = FrameClock()
    for _ in range(frames):
        time.sleep(FRAME_INTERVAL)
        yield clock.tick()


def run_catenary(frames):
    scene = CatenaryScene()
    scene.add_anchor(400.0, 320.0)
    for _ in range(frames):
        chains = scene.chains()
    for chain in chains:
        logger.info(
            "Chain %d->%d: %d points, length %.1f (target %.1f)",
            chain.anchor1.id, chain.anchor2.id, len(chain.points),
            polyline_length(chain.points), scene.params.chain_length,
        )


def run_pendulum(frames, overlays, realtime=False):
    params = PendulumParams(l1=1.0, l2=1.0, m1=2.0, m2=2.0)
    state0 = PendulumState(math.pi / 2, math.pi / 2, 0.0, 0.0)
    session = PendulumSession(
        params, state0, num_overlays=overlays, randomness=0.01,
        origin=Point(0.0, 0.0),
    )
    e0 = energy(state0, params).total
    for dt in frame_deltas(frames, realtime):
        session.advance(dt)
    e1 = energy(session.primary_state, params).total
    thetas = [s[0] for s in session.states]
    logger.info(
        "t = %.2f s, E drift = %+.6f J, theta1 spread = %.4f rad",
        session.time, e1 - e0, max(thetas) - min(thetas),
    )
    energies = session.overlay_energies()
    logger.info(
        "Overlay energies: min %.4f J, max %.4f J", energies.min(), energies.max(),
    )


def run_waves(frames, drive, realtime=False):
    session = WaveSession(mode=DRIVE if drive else PLUCK)
    if not drive:
        session.pluck(0.3, 40.0)
    logger.info(
        "Fundamental frequency: %.2f Hz", session.string.fundamental_frequency(),
    )
    n_reset = 0
    for dt in frame_deltas(frames, realtime):
        n_reset += session.advance(dt)
    spectrum = ", ".join(f"{a:.3f}" for a in session.spectrum())
    logger.info("Spectrum after %.2f s: [%s]", session.time, spectrum)
    if n_reset:
        logger.info("%d samples were reset for stability", n_reset)


def run_epicycles(frames, realtime=False):
    circles = [
        Circle(x=400.0, y=300.0, radius=100.0, speed=1.0),
        Circle(radius=60.0, speed=3.0),
        Circle(radius=30.0, speed=-2.0),
    ]
    session = EpicycleSession(circles)
    for dt in frame_deltas(frames, realtime):
        joints = session.advance(dt)
    logger.info(
        "t = %.2f s, pen at (%.1f, %.1f), trail %d points",
        session.time, joints[-1].x, joints[-1].y, len(session.trail),
    )


def main():
    parser = argparse.ArgumentParser(
        description="Run a physics simulation headless and log a summary.",
    )
    parser.add_argument(
        "simulation",
        choices=["catenary", "pendulum", "waves", "epicycles"],
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=600,
        help="Number of frames to simulate (default: 600)",
    )
    parser.add_argument(
        "--overlays",
        type=int,
        default=5,
        help="Pendulum overlays (default: 5)",
    )
    parser.add_argument(
        "--drive",
        action="store_true",
        help="Drive the string instead of plucking it",
    )
    parser.add_argument(
        "--realtime",
        action="store_true",
        help="Pace frames at ~60fps and take deltas from the wall clock",
    )
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    if args.simulation == "catenary":
        run_catenary(max(1, args.frames))
    elif args.simulation == "pendulum":
        run_pendulum(args.frames, args.overlays, args.realtime)
    elif args.simulation == "waves":
        run_waves(args.frames, args.drive, args.realtime)
    else:
        run_epicycles(max(1, args.frames), args.realtime)


if __name__ == "__main__":
    main()
