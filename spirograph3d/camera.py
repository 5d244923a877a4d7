"""Tangent-frame chase camera ("rollercoaster view").

The camera rides the curve: it sits above the current point along the frame's
up vector, looks a few units ahead along the tangent and optionally banks
toward the center of the pattern. Every degenerate direction has a fallback,
so poses never contain NaN.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import numpy as np

from .equations import derivative, position
from .errors import DegenerateTangentError

logger = logging.getLogger(__name__)

WORLD_UP = np.array([0.0, 1.0, 0.0])
SECONDARY_AXIS = np.array([1.0, 0.0, 0.0])
FALLBACK_TANGENT = np.array([1.0, 0.0, 0.0])
LOOK_AHEAD_DISTANCE = 5.0
FRAME_EPS = 1e-9

DEFAULT_HEIGHT_OFFSET = 10.0
DEFAULT_LONGITUDINAL_OFFSET = 0.0
DEFAULT_TILT_BLEND = 0.2


def _unit(v, eps=FRAME_EPS):
    """v / |v|, or None when |v| is below eps (or not finite)."""
    n = float(np.linalg.norm(v))
    if not (n >= eps and np.isfinite(n)):
        return None
    return v / n


@dataclass(frozen=True, eq=False)
class TangentFrame:
    position: np.ndarray
    tangent: np.ndarray
    right: np.ndarray
    up: np.ndarray


@dataclass(frozen=True, eq=False)
class CameraPose:
    position: np.ndarray
    look_target: np.ndarray
    up: np.ndarray

    def is_finite(self):
        return bool(np.isfinite(np.concatenate([self.position, self.look_target, self.up])).all())


DEFAULT_FREE_POSE = CameraPose(
    position=np.array([100.0, 100.0, 200.0]),
    look_target=np.zeros(3),
    up=WORLD_UP.copy(),
)


def tangent_at(t, params, previous=None):
    """Unit tangent, reusing ``previous`` (or FALLBACK_TANGENT) where degenerate."""
    try:
        return derivative(t, params)
    except DegenerateTangentError as e:
        logger.debug(f"{e}; reusing previous tangent")
        return np.array(previous if previous is not None else FALLBACK_TANGENT, dtype=float)


def tangent_frame(t, params, previous_tangent=None):
    """Orthonormal (tangent, right, up) basis at t."""
    pos = position(t, params)
    tangent = tangent_at(t, params, previous_tangent)
    right = _unit(np.cross(tangent, WORLD_UP))
    if right is None:
        # Tangent is vertical; world up cannot define "right".
        logger.debug(f"Tangent parallel to world up at t={t:.6g}; using secondary axis")
        right = _unit(np.cross(tangent, SECONDARY_AXIS))
    up = _unit(np.cross(right, tangent))
    return TangentFrame(position=pos, tangent=tangent, right=right, up=up)


def banked_up(pos, tangent, up, tilt_blend):
    """Blend ``up`` toward the vector that leans into the turn."""
    if tilt_blend <= 0:
        return up
    toward_center = _unit(-pos)
    if toward_center is None:
        return up
    bank = _unit(np.cross(tangent, toward_center))
    if bank is None:
        return up
    blended = _unit(up + (bank - up) * tilt_blend)
    return up if blended is None else blended


def pose_from_frame(frame, height_offset=DEFAULT_HEIGHT_OFFSET,
                    longitudinal_offset=DEFAULT_LONGITUDINAL_OFFSET,
                    tilt_blend=DEFAULT_TILT_BLEND, look_ahead=LOOK_AHEAD_DISTANCE):
    cam_pos = frame.position + frame.up * height_offset + frame.tangent * longitudinal_offset
    target = frame.position + frame.tangent * look_ahead
    up = banked_up(frame.position, frame.tangent, frame.up, tilt_blend)
    return CameraPose(position=cam_pos, look_target=target, up=up)


def camera_pose(t, params, height_offset=DEFAULT_HEIGHT_OFFSET,
                longitudinal_offset=DEFAULT_LONGITUDINAL_OFFSET,
                tilt_blend=DEFAULT_TILT_BLEND, previous_tangent=None,
                look_ahead=LOOK_AHEAD_DISTANCE):
    frame = tangent_frame(t, params, previous_tangent)
    return pose_from_frame(frame, height_offset, longitudinal_offset, tilt_blend, look_ahead)


class CameraMode(Enum):
    FREE = "free"
    TANGENT_FOLLOW = "tangent_follow"


@dataclass
class CameraState:
    mode: CameraMode = CameraMode.FREE
    camera_t: float = 0.0
    height_offset: float = DEFAULT_HEIGHT_OFFSET
    longitudinal_offset: float = DEFAULT_LONGITUDINAL_OFFSET
    tilt_blend: float = DEFAULT_TILT_BLEND
    lag: float = 0.0
    pose: CameraPose = field(default_factory=lambda: DEFAULT_FREE_POSE)
    tangent: Optional[np.ndarray] = None


class CameraFollower:
    """Switches between free orbit and tangent-follow, and tracks the curve."""

    def __init__(self, height_offset=DEFAULT_HEIGHT_OFFSET,
                 longitudinal_offset=DEFAULT_LONGITUDINAL_OFFSET,
                 tilt_blend=DEFAULT_TILT_BLEND, lag=0.0):
        self.state = CameraState(
            height_offset=height_offset,
            longitudinal_offset=longitudinal_offset,
            tilt_blend=tilt_blend,
            lag=lag,
        )

    @property
    def following(self):
        return self.state.mode is CameraMode.TANGENT_FOLLOW

    @property
    def orbit_enabled(self):
        """Free orbit control is only active outside tangent-follow."""
        return not self.following

    @property
    def pose(self):
        return self.state.pose

    def configure(self, height_offset=None, longitudinal_offset=None, tilt_blend=None, lag=None):
        s = self.state
        if height_offset is not None:
            s.height_offset = height_offset
        if longitudinal_offset is not None:
            s.longitudinal_offset = longitudinal_offset
        if tilt_blend is not None:
            s.tilt_blend = tilt_blend
        if lag is not None:
            s.lag = lag

    def reset_tuning(self):
        self.configure(DEFAULT_HEIGHT_OFFSET, DEFAULT_LONGITUDINAL_OFFSET, DEFAULT_TILT_BLEND)

    def _camera_t(self, t):
        return max(0.0, t - self.state.lag)

    def set_tangent_follow(self, enabled, t, params):
        """Enter (snap to the curve) or leave (restore the free pose) tangent-follow."""
        if enabled:
            self.state.mode = CameraMode.TANGENT_FOLLOW
            self.state.tangent = None
            self._track(t, params)
            logger.info(f"Tangent-follow camera on at t={self.state.camera_t:.4f}")
        else:
            self.state.mode = CameraMode.FREE
            self.state.pose = DEFAULT_FREE_POSE
            logger.info("Tangent-follow camera off; free orbit restored")
        return self.state.pose

    def update(self, t, params):
        """Per-frame update. Returns the pose while following, else None."""
        if not self.following:
            return None
        return self._track(t, params)

    def refresh(self, params):
        """Recompute the pose at the current camera t (after a tuning change)."""
        if not self.following:
            return None
        s = self.state
        return self._evaluate(s.camera_t, params)

    def _track(self, t, params):
        self.state.camera_t = self._camera_t(t)
        return self._evaluate(self.state.camera_t, params)

    def _evaluate(self, camera_t, params):
        s = self.state
        frame = tangent_frame(camera_t, params, s.tangent)
        pose = pose_from_frame(frame, s.height_offset, s.longitudinal_offset, s.tilt_blend)
        if not pose.is_finite():
            raise RuntimeError(f"Non-finite camera pose at t={camera_t!r}: {pose!r}")
        s.tangent = frame.tangent
        s.pose = pose
        return pose
