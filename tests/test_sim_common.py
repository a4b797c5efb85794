"""Tests for sim_common.py: frame clamping and value types."""

import pytest

from sim_common import MAX_FRAME_DT, Anchor, FrameClock, Point, clamp_frame_dt


class FakeTime:
    """Time source that returns a scripted sequence of readings."""

    def __init__(self, readings):
        self._readings = iter(readings)

    def __call__(self):
        return next(self._readings)


class TestClampFrameDt:
    def test_passthrough(self):
        assert clamp_frame_dt(0.01) == 0.01

    def test_long_pause_clamped(self):
        assert clamp_frame_dt(5.0) == MAX_FRAME_DT

    def test_negative_is_zero(self):
        assert clamp_frame_dt(-0.5) == 0.0

    def test_custom_max(self):
        assert clamp_frame_dt(0.1, max_dt=0.05) == 0.05


class TestFrameClock:
    def test_ticks_are_clamped(self):
        clock = FrameClock(time_source=FakeTime([0.0, 0.01, 2.0, 2.005]))
        assert clock.tick() == pytest.approx(0.01)
        assert clock.tick() == MAX_FRAME_DT
        assert clock.tick() == pytest.approx(0.005)
        assert clock.elapsed == pytest.approx(0.01 + MAX_FRAME_DT + 0.005)

    def test_reset(self):
        clock = FrameClock(time_source=FakeTime([0.0, 0.01, 10.0, 10.004]))
        clock.tick()
        clock.reset()
        assert clock.elapsed == 0.0
        assert clock.tick() == pytest.approx(0.004)


class TestValueTypes:
    def test_point_unpacks(self):
        x, y = Point(1.0, 2.0)
        assert (x, y) == (1.0, 2.0)

    def test_anchor_point(self):
        anchor = Anchor(3.0, 4.0, 7)
        assert anchor.point == Point(3.0, 4.0)
        assert anchor.id == 7
