# prettystream/spatial/neighbors.py
"""
Nearest-neighbour distance queries over a growing 2D point set.

Uses a uniform hash grid keyed by integer cell coordinates. Each occupied
cell stores a contiguous (k, 2) coordinate array and the matching owner
ids, so a query touches only the few cells within the search radius.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple
import math

import numpy as np
from scipy.spatial import cKDTree

from ..errors import ParameterError

CellKey = Tuple[int, int]


def grid_cells(points: np.ndarray, cell_size: float, origin=(0.0, 0.0)) -> np.ndarray:
    """
    Integer cell coordinates of points on a uniform grid.

    Parameters
    ----------
    points : (N, 2)
    cell_size : scalar
    origin : (2,)

    Returns
    -------
    cells : (N, 2) int64 grid indices
    """
    P = np.asarray(points, dtype=np.float64)
    og = np.asarray(origin, dtype=np.float64)
    return np.floor((P - og) / float(cell_size)).astype(np.int64)


@dataclass
class SeparationIndex:
    """
    Uniform hash grid recording points of accepted streamlines.

    Attributes
    ----------
    cell_size : float
        Grid cell size; queries up to this radius scan the 3x3 cells
        around the query point. Pick it close to the separation distance.
    origin : (float, float)
        Grid anchor, normally the lower-left corner of the domain
    """
    cell_size: float
    origin: Tuple[float, float] = (0.0, 0.0)

    _cells: Dict[CellKey, np.ndarray] = field(default_factory=dict, init=False, repr=False)
    _ids: Dict[CellKey, np.ndarray] = field(default_factory=dict, init=False, repr=False)
    _count: int = field(default=0, init=False)

    def __post_init__(self):
        cs = float(self.cell_size)
        if not (cs > 0.0 and math.isfinite(cs)):
            raise ParameterError(f"cell_size must be positive and finite, got {self.cell_size}")
        self.cell_size = cs
        self.origin = (float(self.origin[0]), float(self.origin[1]))
        self._inv = 1.0 / cs

    def __len__(self) -> int:
        return self._count

    @property
    def n_cells(self) -> int:
        """Number of occupied cells."""
        return len(self._cells)

    def _cell_of(self, x: float, y: float) -> CellKey:
        return (
            math.floor((x - self.origin[0]) * self._inv),
            math.floor((y - self.origin[1]) * self._inv),
        )

    def insert(self, points: np.ndarray, line_id: int = -1) -> None:
        """
        Add points owned by one streamline.

        Parameters
        ----------
        points : array-like, shape (N, 2)
        line_id : int
            Owner id reported by ``nearest`` and usable with ``exclude``
        """
        P = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        if P.shape[0] == 0:
            return
        if not np.all(np.isfinite(P)):
            raise ValueError("Cannot index non-finite points")

        cells = grid_cells(P, self.cell_size, self.origin)
        uniq, inverse = np.unique(cells, axis=0, return_inverse=True)
        inverse = inverse.reshape(-1)
        order = np.argsort(inverse, kind="stable")
        splits = np.cumsum(np.bincount(inverse, minlength=uniq.shape[0]))[:-1]

        for key, idx in zip(map(tuple, uniq.tolist()), np.split(order, splits)):
            pts = P[idx]
            ids = np.full(idx.shape[0], int(line_id), dtype=np.int64)
            if key in self._cells:
                self._cells[key] = np.concatenate([self._cells[key], pts], axis=0)
                self._ids[key] = np.concatenate([self._ids[key], ids])
            else:
                self._cells[key] = pts
                self._ids[key] = ids

        self._count += P.shape[0]

    def nearest(
        self,
        point,
        max_radius: Optional[float] = None,
        exclude: Optional[int] = None,
    ) -> Tuple[float, int]:
        """
        Closest indexed point to ``point``.

        Parameters
        ----------
        point : (x, y)
        max_radius : float, optional
            Search radius; defaults to one cell size
        exclude : int, optional
            Ignore points owned by this line id

        Returns
        -------
        (distance, line_id)
            (inf, -1) when no point lies within ``max_radius``
        """
        x, y = float(point[0]), float(point[1])
        radius = self.cell_size if max_radius is None else float(max_radius)
        if not self._cells:
            return math.inf, -1

        reach = max(1, int(math.ceil(radius * self._inv)))
        cx, cy = self._cell_of(x, y)
        best = math.inf
        best_id = -1

        for i in range(cx - reach, cx + reach + 1):
            for j in range(cy - reach, cy + reach + 1):
                pts = self._cells.get((i, j))
                if pts is None:
                    continue
                d = np.hypot(pts[:, 0] - x, pts[:, 1] - y)
                if exclude is not None:
                    d = np.where(self._ids[(i, j)] == exclude, np.inf, d)
                k = int(np.argmin(d))
                if d[k] < best:
                    best = float(d[k])
                    best_id = int(self._ids[(i, j)][k])

        if best > radius:
            return math.inf, -1
        return best, best_id

    def nearest_distance(
        self,
        point,
        max_radius: Optional[float] = None,
        exclude: Optional[int] = None,
    ) -> float:
        """Distance to the closest indexed point (inf beyond ``max_radius``)."""
        return self.nearest(point, max_radius=max_radius, exclude=exclude)[0]


def nearest_other_line(polylines: Sequence[np.ndarray], radius: float = math.inf) -> List[np.ndarray]:
    """
    Distance from every vertex to the closest vertex of another polyline.

    Each line is queried against a KD-tree of the remaining lines only, so
    densely sampled stretches of a single line cost nothing extra.

    Parameters
    ----------
    polylines : sequence of (N_k, 2) arrays
    radius : float
        Search radius (inclusive); farther vertices get inf

    Returns
    -------
    list of (N_k,) arrays, one per polyline
    """
    lines = [np.asarray(p, dtype=np.float64).reshape(-1, 2) for p in polylines]
    out = [np.full(P.shape[0], np.inf) for P in lines]
    if len(lines) < 2:
        return out

    r = float(radius)
    bound = np.nextafter(r, np.inf) if math.isfinite(r) else np.inf
    pts = np.concatenate(lines, axis=0)
    owner = np.concatenate([np.full(P.shape[0], k) for k, P in enumerate(lines)])

    for k, P in enumerate(lines):
        others = pts[owner != k]
        if P.shape[0] == 0 or others.shape[0] == 0:
            continue
        d, _ = cKDTree(others).query(P, k=1, distance_upper_bound=bound)
        out[k] = np.where(d <= r, d, np.inf)
    return out
