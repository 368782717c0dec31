# prettystream/fields/analytic.py
"""
Factory functions building VectorField grids from analytic definitions.
"""

from __future__ import annotations
from typing import Callable, Tuple, Union

import numpy as np

from .structured import VectorField


def create_uniform_grid(
    bounds: Tuple[Tuple[float, float], Tuple[float, float]],
    resolution: Union[int, Tuple[int, int]],
    velocity_function: Callable[[np.ndarray, np.ndarray], Tuple[np.ndarray, np.ndarray]],
    **kwargs,
) -> VectorField:
    """
    Create a uniform grid with an analytical velocity function.

    Parameters
    ----------
    bounds : tuple
        ((x_min, x_max), (y_min, y_max))
    resolution : int or tuple
        Nodes per axis. If int, uses the same resolution for both axes.
    velocity_function : callable
        Vectorized function(X, Y) -> (U, V) evaluated on meshgrid arrays
    **kwargs
        Additional VectorField arguments

    Returns
    -------
    VectorField
    """
    (x_min, x_max), (y_min, y_max) = bounds
    if isinstance(resolution, int):
        nx = ny = resolution
    else:
        nx, ny = resolution

    x = np.linspace(x_min, x_max, nx)
    y = np.linspace(y_min, y_max, ny)
    X, Y = np.meshgrid(x, y)
    U, V = velocity_function(X, Y)
    U = np.broadcast_to(np.asarray(U, dtype=np.float64), X.shape)
    V = np.broadcast_to(np.asarray(V, dtype=np.float64), X.shape)
    return VectorField(x=x, y=y, u=U, v=V, **kwargs)


def gradient_field(x: np.ndarray, y: np.ndarray, scalar: np.ndarray, **kwargs) -> VectorField:
    """
    Vector field of the gradient of a scalar sampled on a grid.

    ``scalar`` has shape (Ny, Nx). Central differences in the interior,
    one-sided at the edges (``np.gradient``), honouring non-uniform axes.
    """
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    Z = np.asarray(scalar, dtype=np.float64)
    dz_dy, dz_dx = np.gradient(Z, y, x)
    return VectorField(x=x, y=y, u=dz_dx, v=dz_dy, **kwargs)


def demo_field(resolution: int = 20) -> VectorField:
    """
    Example field: gradient of z = x * exp(-x^2 - y^2) on [-2, 2]^2.

    The surface has one local minimum and one local maximum, so the
    field carries a sink and a source.
    """
    vv = np.linspace(-2.0, 2.0, resolution)
    xx, yy = np.meshgrid(vv, vv)
    zz = xx * np.exp(-xx ** 2 - yy ** 2)
    return gradient_field(vv, vv, zz)
