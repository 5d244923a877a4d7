# tests/test_drawing.py
"""
Tests for the incremental drawing state machine.
"""

import math

import numpy as np
import pytest

from spirograph3d.drawing import DrawState, draw_speed, step_size
from spirograph3d.equations import position
from spirograph3d.errors import InvalidParameterError
from spirograph3d.params import ParameterSnapshot


def _snapshot(**kwargs):
    return ParameterSnapshot(**kwargs)


class TestDrawSpeed:

    @pytest.mark.parametrize("speed, expected", [
        (0.01, 1), (0.2, 1), (0.5, 1), (0.7, 2), (1.0, 3), (1.5, 4), (2.0, 6), (5.0, 15),
    ])
    def test_values(self, speed, expected):
        """draw_speed = max(1, floor(3 * speed))."""
        assert draw_speed(speed) == expected

    def test_always_at_least_one(self):
        """Any positive speed draws at least one sample per tick."""
        for speed in np.geomspace(1e-6, 50, 200):
            assert draw_speed(float(speed)) >= 1

    @pytest.mark.parametrize("speed", [0, -1, -0.01, math.nan, math.inf])
    def test_non_positive_speed_rejected(self, speed):
        """Non-positive (or non-finite) speed is a configuration error."""
        with pytest.raises(InvalidParameterError):
            draw_speed(speed)
        with pytest.raises(InvalidParameterError):
            step_size(speed)

    @pytest.mark.parametrize("speed", [True, False])
    def test_bool_speed_rejected(self, speed):
        """Booleans are not accepted as a speed."""
        with pytest.raises(InvalidParameterError):
            draw_speed(speed)
        with pytest.raises(InvalidParameterError):
            step_size(speed)

    def test_step_size(self):
        """t advances 0.01 per unit of speed."""
        assert step_size(1.0) == pytest.approx(0.01)
        assert step_size(2.5) == pytest.approx(0.025)


class TestTick:

    def test_starts_empty(self):
        """Initial state: t = 0, no points, drawing."""
        state = DrawState()
        assert state.t == 0.0
        assert len(state) == 0
        assert state.is_drawing
        assert state.points_array().shape == (0, 3)
        assert state.latest_point is None

    def test_one_sample_per_tick_from_startup(self):
        """Before any parameter update a tick appends one sample."""
        state = DrawState()
        assert state.tick() == 1
        assert state.t == pytest.approx(0.01)
        np.testing.assert_allclose(state.latest_point, position(0.01, state.params))

    def test_update_derives_steps_from_speed(self):
        """After a parameter update a tick appends draw_speed(speed) samples."""
        state = DrawState()
        state.apply(_snapshot(speed=2.0))
        assert state.tick() == 6
        assert state.t == pytest.approx(6 * 0.02)

    def test_points_follow_curve_in_order(self):
        """Each appended point is position(t) at its sub-step."""
        state = DrawState()
        state.apply(_snapshot(speed=1.0))
        for _ in range(4):
            state.tick()
        P = state.points_array()
        assert P.shape == (12, 3)
        for i, p in enumerate(P, start=1):
            np.testing.assert_allclose(p, position(0.01 * i, state.params), atol=1e-9)

    def test_cap_stops_mid_tick(self):
        """Hitting max_points skips the rest of the tick and latches is_drawing."""
        state = DrawState(_snapshot(max_points=5))
        state.apply(_snapshot(max_points=5, speed=1.0))
        assert state.tick() == 3
        assert state.tick() == 2
        assert len(state) == 5
        assert state.is_drawing is False
        assert state.tick() == 0
        assert len(state) == 5

    def test_t_frozen_when_full(self):
        """t does not advance once drawing has stopped."""
        state = DrawState(_snapshot(max_points=3))
        for _ in range(10):
            state.tick()
        assert state.t == pytest.approx(0.03)

    def test_apply_resumes_without_truncation(self):
        """A parameter change sets is_drawing again and keeps existing points."""
        state = DrawState(_snapshot(max_points=4))
        for _ in range(6):
            state.tick()
        assert not state.is_drawing
        before = state.points_array().copy()

        state.apply(_snapshot(max_points=10, outer_radius=90.0))
        assert state.is_drawing
        np.testing.assert_array_equal(state.points_array(), before)
        state.tick()
        assert len(state) == 7
        np.testing.assert_array_equal(state.points_array()[:4], before)

    def test_shrinking_cap_does_not_truncate(self):
        """Lowering max_points below the drawn count keeps every point."""
        state = DrawState()
        for _ in range(8):
            state.tick()
        state.apply(_snapshot(max_points=3))
        assert len(state) == 8
        assert state.tick() == 0
        assert not state.is_drawing
        assert len(state) == 8


class TestResetClear:

    def test_clear_keeps_parameters(self):
        """clear() empties points and t but keeps the shape in use."""
        state = DrawState(_snapshot(outer_radius=95.0))
        for _ in range(20):
            state.tick()
        state.clear()
        assert len(state) == 0
        assert state.t == 0.0
        assert state.is_drawing
        assert state.params.outer_radius == 95.0

    def test_reset_rereads_parameters(self):
        """reset() adopts the given snapshot and starts over."""
        state = DrawState(_snapshot(outer_radius=95.0))
        for _ in range(20):
            state.tick()
        state.reset(_snapshot(outer_radius=70.0, speed=2.0))
        assert len(state) == 0
        assert state.t == 0.0
        assert state.is_drawing
        assert state.params.outer_radius == 70.0
        assert state.steps_per_tick == 6

    def test_clear_after_full(self):
        """clear() re-enables drawing after the cap was reached."""
        state = DrawState(_snapshot(max_points=2))
        for _ in range(5):
            state.tick()
        assert not state.is_drawing
        state.clear()
        assert state.is_drawing
        state.tick()
        assert len(state) == 1
