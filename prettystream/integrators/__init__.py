"""
prettystream integrators

Fixed-step schemes advancing a single point along a normalized direction
field. Each stepper follows the signature:

    new_p = step(p, h, direction)

where:
- p: (x, y) position
- h: step length (arc length)
- direction: callable (x, y) -> unit vector, or None where undefined
"""

from ..errors import ParameterError
from .base import DirectionFn, StepFn, Point
from .euler import euler_step
from .rk2 import rk2_step
from .rk4 import rk4_step

INTEGRATORS = {
    "euler": euler_step,
    "rk2": rk2_step,
    "rk4": rk4_step,
}


def get_integrator(name: str) -> StepFn:
    """Look up a step function by name ('euler', 'rk2', 'rk4')."""
    try:
        return INTEGRATORS[name.lower()]
    except (KeyError, AttributeError):
        raise ParameterError(f"Unknown integrator '{name}', expected one of {sorted(INTEGRATORS)}") from None


__all__ = [
    "DirectionFn",
    "StepFn",
    "Point",
    "euler_step",
    "rk2_step",
    "rk4_step",
    "INTEGRATORS",
    "get_integrator",
]
