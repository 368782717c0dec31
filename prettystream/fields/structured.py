# prettystream/fields/structured.py
"""
Rectilinear grid vector field with bilinear sampling.

The grid is given by two strictly increasing coordinate axes (spacing may
be non-uniform) and two component arrays laid out like ``np.meshgrid``
output: rows follow ``y``, columns follow ``x``.

Point sampling (``sample``) is a pure NumPy/float64 routine used by the
streamline integrator. Bulk sampling (``sample_many``) evaluates many
points at once and is jitted with JAX when available.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional, Tuple, Dict, Callable

import numpy as np

from ..errors import FieldConfigurationError
from ..utils.config import get_config
from ..utils.jax_utils import array_module, maybe_jit, to_numpy
from .base import GridMeta


# ------------------------- Internal helpers -------------------------

def _coerce_axis(coords, n: int, axis: int, name: str) -> np.ndarray:
    """
    Reduce a 1D axis or a 2D meshgrid coordinate array to a 1D axis.

    ``axis`` is the meshgrid dimension the coordinate varies along
    (1 for x, 0 for y).
    """
    arr = np.asarray(coords, dtype=np.float64)
    if arr.ndim == 2:
        ref = arr[0, :] if axis == 1 else arr[:, 0]
        expected = ref[None, :] if axis == 1 else ref[:, None]
        if not np.array_equal(arr, np.broadcast_to(expected, arr.shape)):
            raise FieldConfigurationError(f"2D {name} coordinates are not a meshgrid")
        arr = ref
    elif arr.ndim != 1:
        raise FieldConfigurationError(f"{name} coordinates must be 1D or 2D, got {arr.ndim}D")

    if arr.shape != (n,):
        raise FieldConfigurationError(
            f"{name} axis has {arr.shape[0]} points but components have {n} along it"
        )
    if n < 2:
        raise FieldConfigurationError(f"{name} axis needs at least 2 points, got {n}")
    if not np.all(np.isfinite(arr)):
        raise FieldConfigurationError(f"{name} axis contains non-finite values")
    if not np.all(np.diff(arr) > 0):
        raise FieldConfigurationError(f"{name} axis must be strictly increasing")
    return arr


def _locate(axis: np.ndarray, value: float) -> int:
    """Index i of the cell [axis[i], axis[i+1]] holding value (clamped)."""
    i = int(np.searchsorted(axis, value, side="right")) - 1
    return min(max(i, 0), axis.shape[0] - 2)


def _make_bilinear_kernel(xp) -> Callable:
    """Vectorized bilinear interpolation written against an array module."""

    def kernel(xs, ys, u, v, px, py):
        nx = xs.shape[0]
        ny = ys.shape[0]
        i = xp.clip(xp.searchsorted(xs, px, side="right") - 1, 0, nx - 2)
        j = xp.clip(xp.searchsorted(ys, py, side="right") - 1, 0, ny - 2)

        tx = (px - xs[i]) / (xs[i + 1] - xs[i])
        ty = (py - ys[j]) / (ys[j + 1] - ys[j])

        def interp(c):
            c0 = c[j, i] * (1.0 - tx) + c[j, i + 1] * tx
            c1 = c[j + 1, i] * (1.0 - tx) + c[j + 1, i + 1] * tx
            return c0 * (1.0 - ty) + c1 * ty

        inside = (px >= xs[0]) & (px <= xs[-1]) & (py >= ys[0]) & (py <= ys[-1])
        vals = xp.stack([interp(u), interp(v)], axis=1)
        return xp.where(inside[:, None], vals, xp.nan)

    return kernel


# ------------------------- Main class -------------------------

@dataclass(eq=False)
class VectorField:
    """
    2D vector field on a rectilinear grid.

    Attributes
    ----------
    x : array-like
        X coordinates, shape (Nx,), or a 2D meshgrid array of shape (Ny, Nx)
    y : array-like or None
        Y coordinates, shape (Ny,), or a 2D meshgrid array. None reuses ``x``.
    u, v : array-like
        Vector components, shape (Ny, Nx)
    epsilon : float
        Relative magnitude (w.r.t. the largest finite node magnitude) under
        which a sampled vector counts as a critical point.

    Arrays are copied to float64 and made read-only.
    """
    x: np.ndarray
    y: Optional[np.ndarray]
    u: np.ndarray
    v: np.ndarray
    epsilon: float = 1e-9

    grid_meta: GridMeta = field(init=False)
    _kernels: Dict[bool, Callable] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self):
        u = np.array(self.u, dtype=np.float64)
        v = np.array(self.v, dtype=np.float64)
        if u.ndim != 2:
            raise FieldConfigurationError(f"u must be 2D (Ny, Nx), got shape {u.shape}")
        if u.shape != v.shape:
            raise FieldConfigurationError(f"u shape {u.shape} doesn't match v shape {v.shape}")

        ny, nx = u.shape
        y_src = self.x if self.y is None else self.y
        self.x = _coerce_axis(self.x, nx, 1, "x")
        self.y = _coerce_axis(y_src, ny, 0, "y")
        self.u = u
        self.v = v
        for arr in (self.x, self.y, self.u, self.v):
            arr.setflags(write=False)

        if not (self.epsilon >= 0.0 and math.isfinite(self.epsilon)):
            raise FieldConfigurationError(f"epsilon must be finite and >= 0, got {self.epsilon}")

        self.x_min, self.x_max = float(self.x[0]), float(self.x[-1])
        self.y_min, self.y_max = float(self.y[0]), float(self.y[-1])

        mag = np.hypot(u, v)
        finite = np.isfinite(mag)
        self.max_magnitude = float(mag[finite].max()) if finite.any() else 0.0
        self._critical_threshold = self.epsilon * self.max_magnitude

        dx = np.diff(self.x)
        dy = np.diff(self.y)
        self.grid_meta = GridMeta(
            shape=(ny, nx),
            bounds=np.array([[self.x_min, self.y_min], [self.x_max, self.y_max]]),
            min_spacing=(float(dx.min()), float(dy.min())),
            uniform=bool(np.allclose(dx, dx[0]) and np.allclose(dy, dy[0])),
        )

    # ------------------------- Public API -------------------------

    def contains(self, x: float, y: float) -> bool:
        """True when (x, y) lies in the closed domain box."""
        return self.x_min <= x <= self.x_max and self.y_min <= y <= self.y_max

    def sample(self, x: float, y: float) -> Optional[Tuple[float, float]]:
        """
        Bilinear interpolation of the field at one point.

        Returns
        -------
        tuple or None
            (vx, vy) as Python floats, or None when (x, y) is outside the
            domain. A zero vector is returned as such; use ``is_critical``
            before normalizing.
        """
        if not self.contains(x, y):
            return None

        i = _locate(self.x, x)
        j = _locate(self.y, y)
        x0, x1 = self.x[i], self.x[i + 1]
        y0, y1 = self.y[j], self.y[j + 1]
        tx = (x - x0) / (x1 - x0)
        ty = (y - y0) / (y1 - y0)

        w00 = (1.0 - tx) * (1.0 - ty)
        w10 = tx * (1.0 - ty)
        w01 = (1.0 - tx) * ty
        w11 = tx * ty

        u, v = self.u, self.v
        vx = w00 * u[j, i] + w10 * u[j, i + 1] + w01 * u[j + 1, i] + w11 * u[j + 1, i + 1]
        vy = w00 * v[j, i] + w10 * v[j, i + 1] + w01 * v[j + 1, i] + w11 * v[j + 1, i + 1]
        return float(vx), float(vy)

    def is_critical(self, vx: float, vy: float) -> bool:
        """True for non-finite vectors and magnitudes at or below the critical threshold."""
        if not (math.isfinite(vx) and math.isfinite(vy)):
            return True
        return math.hypot(vx, vy) <= self._critical_threshold

    def cell_spacing(self, x: float, y: float) -> Tuple[float, float]:
        """Grid spacing (dx, dy) of the cell containing (x, y), clamped to the grid."""
        i = _locate(self.x, x)
        j = _locate(self.y, y)
        return float(self.x[i + 1] - self.x[i]), float(self.y[j + 1] - self.y[j])

    def get_spatial_bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        """Return spatial bounds as (min, max), each shape (2,)."""
        return self.grid_meta.bounds[0].copy(), self.grid_meta.bounds[1].copy()

    def sample_many(self, positions: np.ndarray) -> np.ndarray:
        """
        Sample the field at many positions.

        Parameters
        ----------
        positions : array-like, shape (N, 2)

        Returns
        -------
        np.ndarray
            Vectors, shape (N, 2); rows for points outside the domain are NaN.
            Runs through a jitted JAX kernel when JAX is installed and
            ``use_jax`` is enabled in the package config (single precision
            unless JAX x64 mode is on).
        """
        pos = np.asarray(positions, dtype=np.float64)
        if pos.ndim == 1:
            pos = pos.reshape(1, -1)
        if pos.ndim != 2 or pos.shape[1] != 2:
            raise ValueError(f"positions must have shape (N, 2), got {pos.shape}")
        if pos.shape[0] == 0:
            return np.zeros((0, 2), dtype=np.float64)

        use_jax = bool(get_config().use_jax)
        kernel = self._kernels.get(use_jax)
        if kernel is None:
            xp = array_module(use_jax)
            kernel = maybe_jit(_make_bilinear_kernel(xp), enable=use_jax)
            self._kernels[use_jax] = kernel

        xp = array_module(use_jax)
        out = kernel(
            xp.asarray(self.x), xp.asarray(self.y),
            xp.asarray(self.u), xp.asarray(self.v),
            xp.asarray(pos[:, 0]), xp.asarray(pos[:, 1]),
        )
        return np.asarray(to_numpy(out), dtype=np.float64)

    def magnitude_grid(self) -> np.ndarray:
        """Vector magnitude at the grid nodes, shape (Ny, Nx)."""
        return np.hypot(self.u, self.v)


def sample(field: VectorField, x: float, y: float) -> Optional[Tuple[float, float]]:
    """Functional form of ``VectorField.sample``."""
    return field.sample(x, y)
