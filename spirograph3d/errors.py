"""Exceptions raised by the spirograph core."""


class InvalidParameterError(ValueError):
    """A parameter update was rejected before being written to the store."""


class DegenerateTangentError(ArithmeticError):
    """The curve derivative is too small to define a direction at this t."""

    def __init__(self, t, magnitude):
        super().__init__(f"Degenerate tangent at t={t:.6g} (|dP/dt|={magnitude:.3e})")
        self.t = t
        self.magnitude = magnitude
