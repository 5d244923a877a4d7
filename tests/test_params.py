# tests/test_params.py
"""
Tests for ParameterStore validation and merge semantics.
"""

import math

import numpy as np
import pytest

from spirograph3d.errors import InvalidParameterError
from spirograph3d.params import CAMERA_DEFAULTS, DEFAULTS, CurveParameters, ParameterStore


class TestDefaults:

    def test_defaults(self):
        """A fresh store holds the documented defaults."""
        store = ParameterStore()
        snap = store.snapshot()
        assert snap.outer_radius == 80.0
        assert snap.inner_radius == 40.0
        assert snap.pen_offset == 60.0
        assert snap.height_amplitude == 30.0
        assert snap.speed == 1.0
        assert snap.max_points == 10000
        assert snap.show_gears is False
        assert snap.tangent_follow_enabled is False
        assert snap.camera_height_offset == 10.0
        assert snap.camera_longitudinal_offset == 0.0
        assert snap.camera_tilt_blend == 0.2
        assert snap.camera_lag == 0.0

    def test_overrides_at_construction(self):
        """Keyword overrides go through the same validation."""
        store = ParameterStore(max_points=50, speed=2)
        assert store["max_points"] == 50
        assert store["speed"] == 2.0
        with pytest.raises(InvalidParameterError):
            ParameterStore(speed=0)

    def test_curve_view(self):
        """snapshot().curve carries only the shape."""
        curve = ParameterStore(pen_offset=12).curve
        assert curve == CurveParameters(80.0, 40.0, 12.0, 30.0)


class TestUpdate:

    def test_merge_keeps_unspecified(self):
        """Unspecified fields are left unchanged."""
        store = ParameterStore()
        store.update({"outer_radius": 95})
        store.update({"pen_offset": 10})
        assert store["outer_radius"] == 95.0
        assert store["pen_offset"] == 10.0
        assert store["inner_radius"] == DEFAULTS["inner_radius"]

    def test_returns_changed_keys(self):
        """Only keys whose value differs are reported."""
        store = ParameterStore()
        changed = store.update({"outer_radius": 80.0, "speed": 2.5})
        assert changed == {"speed"}

    def test_snapshot_is_immutable(self):
        """Snapshots cannot be written to."""
        snap = ParameterStore().snapshot()
        with pytest.raises(Exception):
            snap.speed = 3.0

    def test_snapshot_not_affected_by_later_update(self):
        """A snapshot keeps the values it was taken with."""
        store = ParameterStore()
        snap = store.snapshot()
        store.update({"speed": 4.0})
        assert snap.speed == 1.0

    @pytest.mark.parametrize("partial", [
        {"inner_radius": 0},
        {"inner_radius": 0.0},
        {"speed": 0},
        {"speed": -1.5},
        {"speed": math.nan},
        {"outer_radius": math.inf},
        {"pen_offset": -1},
        {"height_amplitude": -0.1},
        {"max_points": 0},
        {"max_points": 10.5},
        {"camera_tilt_blend": 1.5},
        {"camera_tilt_blend": -0.1},
        {"camera_lag": -1},
        {"show_gears": "yes"},
        {"speed": True},
        {"primary_color": "red"},
        {"warp_factor": 9},
    ])
    def test_rejects_invalid(self, partial):
        """Invalid values raise InvalidParameterError."""
        with pytest.raises(InvalidParameterError):
            ParameterStore().update(partial)

    def test_rejected_update_writes_nothing(self):
        """A bad entry blocks the whole update."""
        store = ParameterStore()
        with pytest.raises(InvalidParameterError):
            store.update({"outer_radius": 120, "inner_radius": 0})
        assert store["outer_radius"] == 80.0
        assert store["inner_radius"] == 40.0

    def test_equal_radii_allowed(self):
        """R == r is degenerate but valid."""
        store = ParameterStore()
        store.update({"outer_radius": 40, "inner_radius": 40})
        assert store.curve.outer_radius == store.curve.inner_radius

    def test_numpy_values_accepted(self):
        """numpy scalars are cleaned to plain Python values."""
        store = ParameterStore()
        store.update({"speed": np.float64(1.5), "max_points": np.int64(20), "show_gears": np.bool_(True)})
        assert store["speed"] == 1.5 and type(store["speed"]) is float
        assert store["max_points"] == 20 and type(store["max_points"]) is int
        assert store["show_gears"] is True

    def test_colors_normalized(self):
        """Colors are stored lower-case."""
        store = ParameterStore()
        store.update({"primary_color": "#AABBCC"})
        assert store["primary_color"] == "#aabbcc"

    def test_reset_camera(self):
        """reset_camera restores the default height, distance and tilt."""
        store = ParameterStore(camera_height_offset=3, camera_longitudinal_offset=-4, camera_tilt_blend=0.9)
        store.reset_camera()
        for key, value in CAMERA_DEFAULTS.items():
            assert store[key] == value
