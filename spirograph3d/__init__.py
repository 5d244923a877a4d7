"""3D spirograph curve, drawing state and tangent-follow camera."""

from .errors import DegenerateTangentError, InvalidParameterError
from .params import CurveParameters, ParameterSnapshot, ParameterStore
from .equations import derivative, driving_gear_position, position
from .drawing import DrawState, draw_speed, step_size
from .gears import GearPose, gear_pose
from .camera import CameraFollower, CameraMode, CameraPose
from .engine import FrameOutput, SpirographEngine

__version__ = "0.1.0"

__all__ = [
    "CameraFollower",
    "CameraMode",
    "CameraPose",
    "CurveParameters",
    "DegenerateTangentError",
    "DrawState",
    "FrameOutput",
    "GearPose",
    "InvalidParameterError",
    "ParameterSnapshot",
    "ParameterStore",
    "SpirographEngine",
    "derivative",
    "draw_speed",
    "driving_gear_position",
    "gear_pose",
    "position",
    "step_size",
]
