"""Closed-form spirograph equations.

The curve is a hypotrochoid in the X-Z plane with a vertical (Y) oscillation:

    x = (R - r) cos t + d cos((R - r) t / r)
    z = (R - r) sin t - d sin((R - r) t / r)
    y = h sin(3t) cos(2t)

Scalar functions return (3,) float arrays; ``sample`` returns (N,3).
"""

import math
from fractions import Fraction

import numpy as np

from .errors import DegenerateTangentError

TANGENT_EPS = 1e-9
GEAR_HEIGHT_DAMPING = 0.3


def _unpack(params):
    return params.outer_radius, params.inner_radius, params.pen_offset, params.height_amplitude


# Point on the curve

def position(t, params):
    R, r, d, h = _unpack(params)
    k = (R - r) / r
    x = (R - r) * math.cos(t) + d * math.cos(k * t)
    z = (R - r) * math.sin(t) - d * math.sin(k * t)
    y = h * math.sin(3 * t) * math.cos(2 * t)
    return np.array([x, y, z], dtype=float)


def raw_derivative(t, params):
    """dP/dt, not normalized."""
    R, r, d, h = _unpack(params)
    k = (R - r) / r
    dxdt = -(R - r) * math.sin(t) - d * k * math.sin(k * t)
    dzdt = (R - r) * math.cos(t) - d * k * math.cos(k * t)
    dydt = h * (3 * math.cos(3 * t) * math.cos(2 * t) - 2 * math.sin(3 * t) * math.sin(2 * t))
    return np.array([dxdt, dydt, dzdt], dtype=float)


def derivative(t, params, eps=TANGENT_EPS):
    """Unit tangent at t. Raises DegenerateTangentError when |dP/dt| < eps."""
    v = raw_derivative(t, params)
    norm = float(np.linalg.norm(v))
    if not norm >= eps:
        raise DegenerateTangentError(t, norm)
    return v / norm


def driving_gear_position(t, params):
    """Center of the rolling gear: same orbit as the curve, no pen term."""
    R, r, _, h = _unpack(params)
    x = (R - r) * math.cos(t)
    y = GEAR_HEIGHT_DAMPING * h * math.sin(3 * t)
    z = (R - r) * math.sin(t)
    return np.array([x, y, z], dtype=float)


# Vectorized (return (N,3))

def sample(ts, params):
    """Positions for an array of t values."""
    R, r, d, h = _unpack(params)
    t = np.asarray(ts, dtype=float).reshape(-1)
    k = (R - r) / r
    x = (R - r) * np.cos(t) + d * np.cos(k * t)
    z = (R - r) * np.sin(t) - d * np.sin(k * t)
    y = h * np.sin(3 * t) * np.cos(2 * t)
    return np.stack([x, y, z], axis=1).astype(float)


def curve_period(params, max_denominator=1000):
    """Smallest T with position(t + T) == position(t).

    (R - r)/r is approximated by p/q in lowest terms; the pen term then closes
    after q turns of the gear center, so T = 2*pi*q. The height term has
    period 2*pi and never lengthens it.
    """
    R, r, _, _ = _unpack(params)
    ratio = Fraction((R - r) / r).limit_denominator(max_denominator)
    if ratio == 0:
        return 2 * math.pi
    return 2 * math.pi * ratio.denominator
