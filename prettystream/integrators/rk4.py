# prettystream/integrators/rk4.py

from __future__ import annotations
from typing import Optional

from .base import DirectionFn, Point


def rk4_step(p: Point, h: float, direction: DirectionFn) -> Optional[Point]:
    """
    Runge-Kutta 4 integrator.

    Parameters
    ----------
    p : (x, y) position
    h : step length
    direction : callable(x, y) -> unit vector or None

    Returns
    -------
    (x, y) next position, or None if any of the four stages is undefined
    """
    x, y = p
    half = 0.5 * h

    k1 = direction(x, y)
    if k1 is None:
        return None

    k2 = direction(x + half * k1[0], y + half * k1[1])
    if k2 is None:
        return None

    k3 = direction(x + half * k2[0], y + half * k2[1])
    if k3 is None:
        return None

    k4 = direction(x + h * k3[0], y + h * k3[1])
    if k4 is None:
        return None

    sixth = h / 6.0
    return (
        x + sixth * (k1[0] + 2.0 * k2[0] + 2.0 * k3[0] + k4[0]),
        y + sixth * (k1[1] + 2.0 * k2[1] + 2.0 * k3[1] + k4[1]),
    )
