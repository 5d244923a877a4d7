"""Incremental drawing: grow the curve a few samples per animation tick."""

import logging
import math

import numpy as np

from .equations import position
from .errors import InvalidParameterError
from .params import ParameterSnapshot

logger = logging.getLogger(__name__)

T_STEP = 0.01
SUBSTEPS_PER_SPEED = 3
# Samples per tick until the first parameter update or reset derives it from speed
INITIAL_STEPS_PER_TICK = 1


def _check_speed(speed):
    if isinstance(speed, bool) or not (isinstance(speed, (int, float)) and math.isfinite(speed) and speed > 0):
        raise InvalidParameterError(f"speed must be a finite number > 0, got {speed!r}")


def draw_speed(speed):
    """Number of samples appended per tick (always >= 1)."""
    _check_speed(speed)
    return max(1, int(math.floor(speed * SUBSTEPS_PER_SPEED)))


def step_size(speed):
    """Increment of t per sample."""
    _check_speed(speed)
    return T_STEP * speed


class DrawState:
    """Owns t and the ordered list of sampled points.

    Points are appended in temporal order and only ``reset``/``clear`` remove
    them. Reaching ``max_points`` latches ``is_drawing`` to False until the
    next parameter change, reset or clear.
    """

    def __init__(self, snapshot=None):
        snapshot = snapshot if snapshot is not None else ParameterSnapshot()
        self.t = 0.0
        self.points = []
        self.is_drawing = True
        self.steps_per_tick = INITIAL_STEPS_PER_TICK
        self._adopt(snapshot)

    def _adopt(self, snapshot, derive_steps=False):
        steps = draw_speed(snapshot.speed)
        self.params = snapshot.curve
        self.speed = snapshot.speed
        self.max_points = snapshot.max_points
        if derive_steps:
            self.steps_per_tick = steps

    def apply(self, snapshot):
        """Use new parameters for future samples; already drawn points stay."""
        self._adopt(snapshot, derive_steps=True)
        self.is_drawing = True

    def reset(self, snapshot):
        """Re-read every parameter and start over from t = 0."""
        self._adopt(snapshot, derive_steps=True)
        self._empty()
        logger.info("Drawing reset")

    def clear(self):
        """Start over from t = 0 with the parameters already in use."""
        self._empty()
        logger.info("Drawing cleared")

    def _empty(self):
        self.points = []
        self.t = 0.0
        self.is_drawing = True

    @property
    def is_full(self):
        return len(self.points) >= self.max_points

    @property
    def latest_point(self):
        return self.points[-1] if self.points else None

    def tick(self):
        """Advance one animation frame. Returns the number of points appended."""
        if not self.is_drawing:
            return 0
        appended = 0
        dt = step_size(self.speed)
        for _ in range(self.steps_per_tick):
            if self.is_full:
                self._finish()
                break
            self.t += dt
            self.points.append(position(self.t, self.params))
            appended += 1
            if self.is_full:
                self._finish()
                break
        return appended

    def _finish(self):
        self.is_drawing = False
        logger.info(f"Finished drawing: {len(self.points)} points, t={self.t:.4f}")

    def points_array(self):
        """Drawn points as (N,3)."""
        if not self.points:
            return np.zeros((0, 3), dtype=float)
        return np.vstack(self.points)

    def __len__(self):
        return len(self.points)

    def __repr__(self):
        return (f"DrawState(t={self.t:.4f}, points={len(self.points)}/{self.max_points}, "
                f"drawing={self.is_drawing})")
