# prettystream/integrators/euler.py
"""
Forward Euler step along a normalized direction field.

Also used by the higher-order schemes' callers as the fallback step when
a stage leaves the domain near the boundary.
"""

from __future__ import annotations
from typing import Optional

from .base import DirectionFn, Point


def euler_step(p: Point, h: float, direction: DirectionFn) -> Optional[Point]:
    """
    Forward Euler integrator.

    Parameters
    ----------
    p : (x, y) position
    h : step length
    direction : callable(x, y) -> unit vector or None

    Returns
    -------
    (x, y) next position, or None if the direction is undefined at p
    """
    k1 = direction(p[0], p[1])
    if k1 is None:
        return None
    return p[0] + h * k1[0], p[1] + h * k1[1]
