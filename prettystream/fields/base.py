# prettystream/fields/base.py
"""
Base protocols and metadata for 2D vector fields.

Defines the BaseField protocol consumed by the integrator and seeder,
and the GridMeta record describing a rectilinear grid.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Protocol, Tuple

import numpy as np


@dataclass(frozen=True)
class GridMeta:
    """Rectilinear grid metadata."""
    shape: Tuple[int, int]         # (Ny, Nx) node counts, rows follow y
    bounds: np.ndarray             # (2, 2) [[xmin, ymin], [xmax, ymax]]
    min_spacing: Tuple[float, float]  # smallest (dx, dy) over all cells
    uniform: bool                  # True when both axes are evenly spaced

    @property
    def width(self) -> float:
        return float(self.bounds[1, 0] - self.bounds[0, 0])

    @property
    def height(self) -> float:
        return float(self.bounds[1, 1] - self.bounds[0, 1])

    @property
    def center(self) -> Tuple[float, float]:
        mid = 0.5 * (self.bounds[0] + self.bounds[1])
        return float(mid[0]), float(mid[1])


class BaseField(Protocol):
    """
    Base protocol for 2D vector fields.

    Everything the streamline integrator needs: point sampling, a
    critical-point test, local cell spacing and the domain box.
    """

    def sample(self, x: float, y: float) -> Optional[Tuple[float, float]]:
        """
        Sample the field at a single point.

        Returns
        -------
        tuple or None
            (vx, vy), or None when (x, y) lies outside the domain.
        """
        ...

    def contains(self, x: float, y: float) -> bool:
        """True when (x, y) lies inside the closed domain box."""
        ...

    def is_critical(self, vx: float, vy: float) -> bool:
        """True when the vector is (numerically) zero or not finite."""
        ...

    def cell_spacing(self, x: float, y: float) -> Tuple[float, float]:
        """Grid spacing (dx, dy) of the cell containing (x, y)."""
        ...

    def get_spatial_bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Return spatial bounds of the field domain.

        Returns
        -------
        Tuple[np.ndarray, np.ndarray]
            (bounds_min, bounds_max) each shape (2,) as [xmin, ymin], [xmax, ymax]
        """
        ...
