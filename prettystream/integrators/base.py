# prettystream/integrators/base.py

from __future__ import annotations
from typing import Callable, Optional, Protocol, Tuple

Point = Tuple[float, float]

# Direction function signature: unit tangent at a point, or None when the
# point is outside the domain or on a critical point
DirectionFn = Callable[[float, float], Optional[Point]]
"""
Direction field protocol.

Parameters
----------
x, y : float
    Query position

Returns
-------
tuple or None
    Unit vector (dx, dy) of the (possibly negated) normalized field, or
    None if the field is undefined or vanishes there.
"""


class StepFn(Protocol):
    """
    Protocol for fixed-step integrator functions.

    All schemes advance a single point along a normalized direction field
    by arc length ``h``.
    """

    def __call__(self, p: Point, h: float, direction: DirectionFn) -> Optional[Point]:
        """
        Advance one point by one step.

        Parameters
        ----------
        p : (x, y)
            Current position
        h : float
            Step length (arc length, since the field is normalized)
        direction : DirectionFn
            Unit tangent field

        Returns
        -------
        tuple or None
            New position, or None if any stage evaluation was undefined.
        """
        ...
