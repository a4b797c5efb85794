"""Tests for standing_wave/wave_string.py: integrator, pluck/drive, harmonics."""

import math

import numpy as np
import pytest

from standing_wave.wave_string import (
    WaveConfig, WaveString, analyze_harmonics, get_antinodes, get_nodes,
)


def make_string(num_points=200, **kwargs):
    params = dict(tension=500.0, mass=0.01, damping=0.1, length=1.0)
    params.update(kwargs)
    return WaveString(num_points, **params)


class TestConstruction:
    def test_starts_at_rest(self):
        string = make_string()
        assert np.all(string.get_positions() == 0.0)
        assert np.all(string.velocities == 0.0)

    def test_too_few_points(self):
        with pytest.raises(ValueError):
            make_string(num_points=2)


class TestFrequencies:
    def test_fundamental(self):
        string = make_string(tension=500.0, mass=0.01, length=1.0)
        assert string.fundamental_frequency() == pytest.approx(
            math.sqrt(500 / 0.01) / 2.0
        )
        assert string.fundamental_frequency() == pytest.approx(111.803, abs=1e-3)

    def test_harmonic_series(self):
        string = make_string()
        f0 = string.fundamental_frequency()
        assert string.harmonic_frequencies(3) == pytest.approx([f0, 2 * f0, 3 * f0])

    def test_courant_number(self):
        string = make_string()
        expected = math.sqrt(500 / 0.01 * 1e-6) * 0.012 / (1.0 / 199)
        assert string.courant_number(0.012) == pytest.approx(expected)


class TestPluck:
    def test_triangle_shape(self):
        string = make_string(num_points=11)
        string.pluck(0.5, 10.0)
        np.testing.assert_allclose(
            string.get_positions(), [0, 2, 4, 6, 8, 10, 8, 6, 4, 2, 0],
        )
        assert np.all(string.velocities == 0.0)

    def test_amplitude_clamped(self):
        string = make_string()
        string.pluck(0.3, 120.0)
        assert string.get_positions().max() == pytest.approx(50.0)
        string.pluck(0.3, -120.0)
        assert string.get_positions().min() == pytest.approx(-50.0)

    def test_pluck_at_end_stays_interior(self):
        string = make_string(num_points=11)
        string.pluck(0.0, 10.0)
        positions = string.get_positions()
        assert positions[0] == 0.0
        assert positions[1] == pytest.approx(10.0)

    def test_pluck_resets_velocity(self):
        string = make_string()
        string.drive(1.0, 0.25, 10.0)
        string.pluck(0.5, 10.0)
        assert np.all(string.velocities == 0.0)


class TestDrive:
    def test_kicks_velocity_not_position(self):
        string = make_string(num_points=201)
        string.drive(1.0, 0.25, 2.0)  # sin(pi/2) = 1
        velocities = string.velocities
        kick = 2.0 * WaveConfig().drive_scale
        for idx in (50, 100, 150):
            assert velocities[idx] == pytest.approx(kick)
        assert np.count_nonzero(velocities) == 3
        assert np.all(string.get_positions() == 0.0)


class TestUpdate:
    def test_rest_stays_at_rest(self):
        string = make_string()
        for _ in range(10):
            assert string.update(0.012) == 0
        assert np.all(string.get_positions() == 0.0)

    def test_endpoints_fixed(self):
        string = make_string()
        string.pluck(0.3, 40.0)
        for i in range(200):
            string.drive(100.0, i * 0.012, 15.0)
            string.update(0.012)
            positions = string.get_positions()
            assert positions[0] == 0.0
            assert positions[-1] == 0.0
        assert string.velocities[0] == 0.0
        assert string.velocities[-1] == 0.0

    def test_wave_moves_and_stays_bounded(self):
        string = make_string()
        string.pluck(0.5, 40.0)
        before = string.get_positions()
        n_reset = sum(string.update(0.012) for _ in range(100))
        after = string.get_positions()
        assert n_reset == 0
        assert not np.allclose(before, after)
        assert np.abs(after).max() <= 50.0 + 1e-9

    def test_damping_removes_energy(self):
        string = make_string(damping=5.0)
        string.pluck(0.5, 40.0)
        for _ in range(500):
            string.update(0.012)
        assert np.abs(string.get_positions()).max() < 40.0

    def test_unstable_samples_reset(self):
        string = make_string(config=WaveConfig(stiffness_scale=1.0))
        string.pluck(0.5, 40.0)
        total_reset = 0
        for _ in range(20):
            total_reset += string.update(0.012)
            positions = string.get_positions()
            assert np.all(np.isfinite(positions))
            assert np.abs(positions).max() <= 500.0
            assert np.abs(string.velocities).max() <= 1000.0
        assert total_reset > 0

    def test_reset(self):
        string = make_string()
        string.pluck(0.5, 10.0)
        string.update(0.012)
        string.reset()
        assert np.all(string.get_positions() == 0.0)
        assert np.all(string.velocities == 0.0)

    def test_positions_snapshot_is_a_copy(self):
        string = make_string()
        snapshot = string.get_positions()
        snapshot[5] = 99.0
        assert string.get_positions()[5] == 0.0


class TestAnalyzeHarmonics:
    def test_pure_mode(self):
        n_samples = 101
        x = np.arange(n_samples) / (n_samples - 1)
        positions = np.sin(2 * np.pi * x)
        amplitudes = analyze_harmonics(positions, 4)
        assert len(amplitudes) == 4
        assert amplitudes[1] == pytest.approx(50 / 101)
        for n in (0, 2, 3):
            assert amplitudes[n] < 1e-9

    def test_non_finite_samples_skipped(self):
        positions = [0.0, 1.0, float("nan"), 1.0, 0.0]
        amplitudes = analyze_harmonics(positions, 3)
        assert all(math.isfinite(a) for a in amplitudes)
        assert amplitudes[0] > 0

    def test_flat_string(self):
        assert analyze_harmonics(np.zeros(50), 5) == [0.0] * 5


class TestNodes:
    def test_fundamental_nodes_are_ends(self):
        assert get_nodes(1, 200) == [0, 199]

    def test_second_harmonic(self):
        assert get_nodes(2, 201) == [0, 100, 200]
        assert get_antinodes(2, 201) == [50, 150]

    def test_fundamental_antinode_in_middle(self):
        assert get_antinodes(1, 200) == [99]

    def test_counts(self):
        assert len(get_nodes(5, 200)) == 6
        assert len(get_antinodes(5, 200)) == 5

    def test_invalid_harmonic(self):
        with pytest.raises(ValueError):
            get_nodes(0, 200)
        with pytest.raises(ValueError):
            get_antinodes(0, 200)
