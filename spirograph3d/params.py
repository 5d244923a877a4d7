"""Curve parameters and the store that owns every tunable value.

``ParameterStore.update`` is the only place a value changes. Readers get an
immutable ``ParameterSnapshot`` (or its ``CurveParameters``), never the store's
own dict.
"""

import logging
import math
import numbers
import re
from dataclasses import asdict, dataclass, fields

import numpy as np

from .errors import InvalidParameterError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurveParameters:
    """Shape of the curve: R, r, d and h of the equations."""
    outer_radius: float = 80.0
    inner_radius: float = 40.0
    pen_offset: float = 60.0
    height_amplitude: float = 30.0

    def __post_init__(self):
        if self.inner_radius == 0:
            raise InvalidParameterError("inner_radius must be non-zero")


@dataclass(frozen=True)
class ParameterSnapshot:
    outer_radius: float = 80.0
    inner_radius: float = 40.0
    pen_offset: float = 60.0
    height_amplitude: float = 30.0
    speed: float = 1.0
    max_points: int = 10000
    show_gears: bool = False
    tangent_follow_enabled: bool = False
    camera_height_offset: float = 10.0
    camera_longitudinal_offset: float = 0.0
    camera_tilt_blend: float = 0.2
    camera_lag: float = 0.0
    auto_rotate: bool = True
    line_thickness: float = 3.0
    primary_color: str = "#ff0066"
    secondary_color: str = "#00ffcc"

    @property
    def curve(self):
        return CurveParameters(
            outer_radius=self.outer_radius,
            inner_radius=self.inner_radius,
            pen_offset=self.pen_offset,
            height_amplitude=self.height_amplitude,
        )

    def as_dict(self):
        return asdict(self)


DEFAULTS = ParameterSnapshot().as_dict()

CAMERA_DEFAULTS = {
    "camera_height_offset": DEFAULTS["camera_height_offset"],
    "camera_longitudinal_offset": DEFAULTS["camera_longitudinal_offset"],
    "camera_tilt_blend": DEFAULTS["camera_tilt_blend"],
}

CURVE_KEYS = tuple(f.name for f in fields(CurveParameters))

_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")


# Validators: return the cleaned value or raise InvalidParameterError

def _real(key, value):
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidParameterError(f"{key} must be a number, got {value!r}")
    value = float(value)
    if not math.isfinite(value):
        raise InvalidParameterError(f"{key} must be finite, got {value!r}")
    return value


def _positive(key, value):
    value = _real(key, value)
    if value <= 0:
        raise InvalidParameterError(f"{key} must be > 0, got {value!r}")
    return value


def _non_negative(key, value):
    value = _real(key, value)
    if value < 0:
        raise InvalidParameterError(f"{key} must be >= 0, got {value!r}")
    return value


def _unit_interval(key, value):
    value = _real(key, value)
    if not 0.0 <= value <= 1.0:
        raise InvalidParameterError(f"{key} must be in [0, 1], got {value!r}")
    return value


def _count(key, value):
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidParameterError(f"{key} must be an integer, got {value!r}")
    if value < 1:
        raise InvalidParameterError(f"{key} must be >= 1, got {value!r}")
    return int(value)


def _flag(key, value):
    if not isinstance(value, (bool, np.bool_)):
        raise InvalidParameterError(f"{key} must be a boolean, got {value!r}")
    return bool(value)


def _color(key, value):
    if not isinstance(value, str) or not _COLOR_RE.match(value):
        raise InvalidParameterError(f"{key} must be a '#rrggbb' color, got {value!r}")
    return value.lower()


VALIDATORS = {
    "outer_radius": _positive,
    "inner_radius": _positive,
    "pen_offset": _non_negative,
    "height_amplitude": _non_negative,
    "speed": _positive,
    "max_points": _count,
    "show_gears": _flag,
    "tangent_follow_enabled": _flag,
    "camera_height_offset": _real,
    "camera_longitudinal_offset": _real,
    "camera_tilt_blend": _unit_interval,
    "camera_lag": _non_negative,
    "auto_rotate": _flag,
    "line_thickness": _positive,
    "primary_color": _color,
    "secondary_color": _color,
}


def validate(partial):
    """Return a cleaned copy of ``partial``; raise on the first bad entry."""
    unknown = sorted(set(partial) - set(VALIDATORS))
    if unknown:
        raise InvalidParameterError(f"Unknown parameter(s): {', '.join(unknown)}")
    return {key: VALIDATORS[key](key, value) for key, value in partial.items()}


class ParameterStore:
    """Single owner of the tunable values. Updates merge, last write wins."""

    def __init__(self, **overrides):
        self._values = dict(DEFAULTS)
        if overrides:
            self.update(overrides)

    def __getitem__(self, key):
        return self._values[key]

    def __contains__(self, key):
        return key in self._values

    def update(self, partial):
        """Validate ``partial`` as a whole, then merge it.

        Nothing is written if any entry is rejected. Returns the keys whose
        value actually changed.
        """
        cleaned = validate(partial)
        changed = {k for k, v in cleaned.items() if self._values[k] != v}
        self._values.update(cleaned)
        if changed:
            logger.debug(f"Parameters changed: {sorted(changed)}")
        return changed

    def reset_camera(self):
        return self.update(CAMERA_DEFAULTS)

    def snapshot(self):
        return ParameterSnapshot(**self._values)

    @property
    def curve(self):
        return self.snapshot().curve

    def __repr__(self):
        return f"ParameterStore({self._values!r})"
