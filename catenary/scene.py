"""Catenary scene: anchors and the chains hung between them.

Headless counterpart of the catenary canvas. Anchors are kept in
insertion order; chains connect consecutive anchors sorted by x.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field

from catenary.physics import (
    CatenaryParams, parabola_approx, solve_catenary, tension_profile,
)
from sim_common import Anchor, Point

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChainFrame:
    """Everything a renderer needs to draw one chain."""

    anchor1: Anchor
    anchor2: Anchor
    points: list[Point]
    parabola: list[Point] | None = None
    tensions: list = field(default_factory=list)


class CatenaryScene:
    """Editable set of anchors with per-frame chain computation."""

    MIN_ANCHORS = 2
    PARABOLA_SAG = 100.0
    TENSION_STRIDE = 10

    def __init__(self, params: CatenaryParams | None = None, anchors=None):
        self.params = params if params is not None else CatenaryParams()
        self._ids = itertools.count(1)
        if anchors is None:
            anchors = [Point(150.0, 200.0), Point(650.0, 200.0)]
        self.anchors = [Anchor(p.x, p.y, next(self._ids)) for p in anchors]
        if len(self.anchors) < self.MIN_ANCHORS:
            raise ValueError(
                f"A scene needs at least {self.MIN_ANCHORS} anchors, "
                f"got {len(self.anchors)}"
            )
        self.show_parabola = False
        self.show_tension = False

    def add_anchor(self, x, y) -> Anchor:
        anchor = Anchor(x, y, next(self._ids))
        self.anchors.append(anchor)
        return anchor

    def move_anchor(self, anchor_id, x, y):
        self.anchors = [
            a._replace(x=x, y=y) if a.id == anchor_id else a for a in self.anchors
        ]

    def remove_anchor(self, anchor_id) -> bool:
        """Remove an anchor unless that would leave fewer than two."""
        if len(self.anchors) <= self.MIN_ANCHORS:
            logger.debug("Refusing to remove anchor %s: minimum reached", anchor_id)
            return False
        before = len(self.anchors)
        self.anchors = [a for a in self.anchors if a.id != anchor_id]
        return len(self.anchors) < before

    def anchor_near(self, x, y, radius=15.0):
        """First anchor within ``radius`` of (x, y), or None."""
        for anchor in self.anchors:
            if (anchor.x - x) ** 2 + (anchor.y - y) ** 2 < radius**2:
                return anchor
        return None

    def chains(self) -> list[ChainFrame]:
        """Solve every chain between x-consecutive anchors."""
        ordered = sorted(self.anchors, key=lambda a: a.x)
        frames = []
        for anchor1, anchor2 in zip(ordered, ordered[1:]):
            points = solve_catenary(anchor1, anchor2, self.params.chain_length)
            parabola = (
                parabola_approx(anchor1, anchor2, self.PARABOLA_SAG)
                if self.show_parabola else None
            )
            tensions = (
                tension_profile(
                    points, self.params.chain_mass, self.params.gravity,
                    stride=self.TENSION_STRIDE,
                )
                if self.show_tension else []
            )
            frames.append(ChainFrame(anchor1, anchor2, points, parabola, tensions))
        return frames
