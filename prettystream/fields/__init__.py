"""
Vector field representations.

- base: GridMeta and the BaseField protocol
- structured: VectorField with bilinear point and bulk sampling
- analytic: grid builders from functions and scalar gradients
"""

from .base import BaseField, GridMeta
from .structured import VectorField, sample
from .analytic import create_uniform_grid, gradient_field, demo_field

__all__ = [
    "BaseField",
    "GridMeta",
    "VectorField",
    "sample",
    "create_uniform_grid",
    "gradient_field",
    "demo_field",
]
