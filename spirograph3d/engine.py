"""Frame driver tying the parameter store, drawing, gears and camera together.

The host (a manim scene, the CLI, a test) calls ``tick`` once per frame and
applies UI changes between ticks through ``apply_parameter_update``.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .camera import CameraFollower, CameraPose
from .drawing import DrawState
from .gears import GearPose, gear_pose
from .params import ParameterStore

logger = logging.getLogger(__name__)

AUTO_ROTATE_STEP = 0.001

# Ranges used by ``randomize`` (inclusive)
RANDOM_OUTER_RADIUS = (30, 100)
RANDOM_INNER_RADIUS_MIN = 10
RANDOM_INNER_RADIUS_MAX = 90
RANDOM_PEN_OFFSET = (20, 120)
RANDOM_HEIGHT_AMPLITUDE = (0, 100)


@dataclass(frozen=True, eq=False)
class FrameOutput:
    """Everything the rendering layer needs for one frame."""
    points: np.ndarray
    t: float
    is_drawing: bool
    appended: int
    gear: Optional[GearPose] = None
    camera: Optional[CameraPose] = None
    orbit_enabled: bool = True
    pattern_rotation: float = 0.0


class SpirographEngine:

    def __init__(self, store=None):
        self.store = store if store is not None else ParameterStore()
        snap = self.store.snapshot()
        self.drawing = DrawState(snap)
        self.camera = CameraFollower(
            height_offset=snap.camera_height_offset,
            longitudinal_offset=snap.camera_longitudinal_offset,
            tilt_blend=snap.camera_tilt_blend,
            lag=snap.camera_lag,
        )
        self.pattern_rotation = 0.0
        if snap.tangent_follow_enabled:
            self.camera.set_tangent_follow(True, self.drawing.t, self.drawing.params)

    @property
    def t(self):
        return self.drawing.t

    @property
    def points(self):
        return self.drawing.points_array()

    @property
    def is_drawing(self):
        return self.drawing.is_drawing

    def apply_parameter_update(self, partial):
        """Merge a partial update into the store and propagate it.

        Raises InvalidParameterError (and changes nothing) if any value is
        rejected. Drawn points are kept; drawing resumes if it was full.
        """
        changed = self.store.update(partial)
        snap = self.store.snapshot()
        self.drawing.apply(snap)
        self._configure_camera(snap)
        if "tangent_follow_enabled" in changed:
            self.camera.set_tangent_follow(snap.tangent_follow_enabled, self.drawing.t, self.drawing.params)
        else:
            self.camera.refresh(self.drawing.params)
        return changed

    def _configure_camera(self, snap):
        self.camera.configure(
            height_offset=snap.camera_height_offset,
            longitudinal_offset=snap.camera_longitudinal_offset,
            tilt_blend=snap.camera_tilt_blend,
            lag=snap.camera_lag,
        )

    def set_tangent_follow(self, enabled):
        self.store.update({"tangent_follow_enabled": bool(enabled)})
        return self.camera.set_tangent_follow(bool(enabled), self.drawing.t, self.drawing.params)

    def reset(self):
        """Re-read every parameter from the store and restart the drawing."""
        snap = self.store.snapshot()
        self.drawing.reset(snap)
        self._configure_camera(snap)
        self.camera.update(self.drawing.t, self.drawing.params)

    def clear(self):
        """Restart the drawing with the parameters already in use."""
        self.drawing.clear()
        self.camera.update(self.drawing.t, self.drawing.params)

    def reset_camera(self):
        """Restore the default camera height, distance and tilt."""
        self.store.reset_camera()
        self.camera.reset_tuning()
        return self.camera.refresh(self.drawing.params)

    def randomize(self, rng=None):
        """Apply a random but well-formed curve shape. Returns the update used."""
        rng = rng if rng is not None else np.random.default_rng()
        outer = int(rng.integers(RANDOM_OUTER_RADIUS[0], RANDOM_OUTER_RADIUS[1] + 1))
        inner_max = min(RANDOM_INNER_RADIUS_MAX, outer - 10)
        inner = int(rng.integers(RANDOM_INNER_RADIUS_MIN, inner_max + 1))
        update = {
            "outer_radius": float(outer),
            "inner_radius": float(inner),
            "pen_offset": float(rng.integers(RANDOM_PEN_OFFSET[0], RANDOM_PEN_OFFSET[1] + 1)),
            "height_amplitude": float(rng.integers(RANDOM_HEIGHT_AMPLITUDE[0], RANDOM_HEIGHT_AMPLITUDE[1] + 1)),
        }
        logger.info(f"Randomized shape: {update}")
        self.apply_parameter_update(update)
        return update

    def tick(self):
        snap = self.store.snapshot()
        appended = self.drawing.tick()
        t = self.drawing.t
        params = self.drawing.params

        gear = gear_pose(t, params) if snap.show_gears else None
        camera = self.camera.update(t, params)
        if snap.auto_rotate and not self.camera.following:
            self.pattern_rotation += AUTO_ROTATE_STEP

        return FrameOutput(
            points=self.drawing.points_array(),
            t=t,
            is_drawing=self.drawing.is_drawing,
            appended=appended,
            gear=gear,
            camera=camera,
            orbit_enabled=self.camera.orbit_enabled,
            pattern_rotation=self.pattern_rotation,
        )

    def run(self, ticks):
        """Advance ``ticks`` frames; returns the last FrameOutput (or None)."""
        frame = None
        for _ in range(ticks):
            frame = self.tick()
        return frame
