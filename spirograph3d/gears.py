"""Driving gear annotation: where the rolling gear is and how far it has turned."""

from dataclasses import dataclass

import numpy as np

from .equations import driving_gear_position, position

RING_WIDTH = 1.0


@dataclass(frozen=True, eq=False)
class GearPose:
    center: np.ndarray
    pen: np.ndarray
    rotation: float
    outer_ring: tuple
    inner_ring: tuple

    @property
    def arm(self):
        """Segment from gear center to pen, shape (2,3)."""
        return np.stack([self.center, self.pen])


def gear_rotation(t, params):
    """Self-rotation of the inner gear rolling without slipping."""
    return -t * (params.outer_radius / params.inner_radius)


def gear_pose(t, params):
    R, r = params.outer_radius, params.inner_radius
    return GearPose(
        center=driving_gear_position(t, params),
        pen=position(t, params),
        rotation=gear_rotation(t, params),
        outer_ring=(R - RING_WIDTH, R),
        inner_ring=(r - RING_WIDTH, r),
    )
