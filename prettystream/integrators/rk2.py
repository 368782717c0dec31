# prettystream/integrators/rk2.py

from __future__ import annotations
from typing import Optional

from .base import DirectionFn, Point


def rk2_step(p: Point, h: float, direction: DirectionFn) -> Optional[Point]:
    """
    Runge-Kutta 2 (midpoint) integrator.

    Parameters
    ----------
    p : (x, y) position
    h : step length
    direction : callable(x, y) -> unit vector or None

    Returns
    -------
    (x, y) next position, or None if either stage is undefined
    """
    x, y = p
    k1 = direction(x, y)
    if k1 is None:
        return None

    half = 0.5 * h
    k2 = direction(x + half * k1[0], y + half * k1[1])
    if k2 is None:
        return None

    return x + h * k2[0], y + h * k2[1]
