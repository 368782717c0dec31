# prettystream/tracing/streamline.py
"""
Streamline storage with consistent data types and shapes.

A Streamline is an immutable (N, 2) float64 polyline with one separation
value per point. StreamlineDataset is the ordered collection produced by a
seeding run and read by the plotting functions.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

import numpy as np

from ..spatial.neighbors import nearest_other_line


class Termination(str, Enum):
    """Why integration stopped in one direction."""
    DOMAIN_EXIT = "domain_exit"
    CRITICAL_POINT = "critical_point"
    SEPARATION = "separation"
    MAX_STEPS = "max_steps"
    NON_FINITE = "non_finite"
    LOOP_CLOSED = "loop_closed"
    UNKNOWN = "unknown"


def _arc_length(points: np.ndarray) -> float:
    if points.shape[0] < 2:
        return 0.0
    return float(np.sum(np.hypot(*np.diff(points, axis=0).T)))


@dataclass(frozen=True, eq=False)
class Streamline:
    """
    One accepted streamline.

    Attributes
    ----------
    points : np.ndarray
        Polyline vertices, shape (N, 2), float64, ordered from the
        backward end through the seed to the forward end
    separation : np.ndarray
        Distance from each vertex to the nearest other streamline, shape
        (N,). inf where no other streamline was within the search radius.
    seed_index : int
        Index of the seed vertex in ``points``
    forward, backward : Termination
        Stop reason of each integration direction
    """
    points: np.ndarray
    separation: np.ndarray
    seed_index: int = 0
    forward: Termination = Termination.UNKNOWN
    backward: Termination = Termination.UNKNOWN

    def __post_init__(self):
        pts = np.array(self.points, dtype=np.float64).reshape(-1, 2)
        sep = np.array(self.separation, dtype=np.float64).reshape(-1)
        if sep.shape[0] != pts.shape[0]:
            raise ValueError(
                f"separation has {sep.shape[0]} values but streamline has {pts.shape[0]} points"
            )
        if not (0 <= self.seed_index < max(pts.shape[0], 1)):
            raise ValueError(f"seed_index {self.seed_index} out of range for {pts.shape[0]} points")
        pts.setflags(write=False)
        sep.setflags(write=False)
        object.__setattr__(self, "points", pts)
        object.__setattr__(self, "separation", sep)

    def __len__(self) -> int:
        return self.points.shape[0]

    @property
    def seed(self) -> Tuple[float, float]:
        p = self.points[self.seed_index]
        return float(p[0]), float(p[1])

    @property
    def length(self) -> float:
        """Arc length of the polyline."""
        return _arc_length(self.points)

    @property
    def closed(self) -> bool:
        return self.forward == Termination.LOOP_CLOSED


@dataclass
class StreamlineDataset:
    """
    Container for the output of one seeding run.

    Attributes
    ----------
    d_sep : float
        Separation distance the run was made with
    d_test : float
        Early-termination distance the run was made with
    bounds : np.ndarray, optional
        Domain box [[xmin, ymin], [xmax, ymax]]
    metadata : dict
        Run information (counters, timings, termination cause)
    """
    d_sep: float
    d_test: float
    bounds: Optional[np.ndarray] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    _lines: List[Streamline] = field(default_factory=list, init=False, repr=False)

    def add(self, line: Streamline) -> int:
        """Append an accepted streamline and return its id."""
        self._lines.append(line)
        return len(self._lines) - 1

    def streamlines(self) -> List[Streamline]:
        """Accepted streamlines in acceptance order."""
        return list(self._lines)

    def separation_at(self, streamline_id: int, point_index: int) -> float:
        """Recorded separation of one vertex of one streamline."""
        return float(self._lines[streamline_id].separation[point_index])

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[Streamline]:
        return iter(self._lines)

    def __getitem__(self, idx: int) -> Streamline:
        return self._lines[idx]

    @property
    def total_points(self) -> int:
        return int(sum(len(line) for line in self._lines))

    @property
    def total_length(self) -> float:
        return float(sum(line.length for line in self._lines))

    # ---------- Array conversion ----------

    def to_xy(self) -> np.ndarray:
        """
        All streamlines as one (M, 2) array, consecutive streamlines
        separated by a NaN row.
        """
        return self.to_xy_dist()[0]

    def to_xy_dist(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        NaN-separated vertices and the matching separation values.

        Returns
        -------
        xy : (M, 2)
        dist : (M,), NaN on separator rows
        """
        if not self._lines:
            return np.zeros((0, 2)), np.zeros((0,))
        gap_xy = np.full((1, 2), np.nan)
        gap_d = np.full((1,), np.nan)
        xy_parts: List[np.ndarray] = []
        d_parts: List[np.ndarray] = []
        for k, line in enumerate(self._lines):
            if k > 0:
                xy_parts.append(gap_xy)
                d_parts.append(gap_d)
            xy_parts.append(line.points)
            d_parts.append(line.separation)
        return np.concatenate(xy_parts, axis=0), np.concatenate(d_parts)

    @classmethod
    def from_xy(
        cls,
        xy: np.ndarray,
        dist: Optional[np.ndarray] = None,
        d_sep: float = float("nan"),
        d_test: float = float("nan"),
    ) -> "StreamlineDataset":
        """
        Rebuild a dataset from a NaN-separated vertex array.

        Separation values default to inf; termination reasons are unknown.
        """
        xy = np.asarray(xy, dtype=np.float64).reshape(-1, 2)
        d = np.full(xy.shape[0], np.inf) if dist is None else np.asarray(dist, dtype=np.float64).reshape(-1)
        if d.shape[0] != xy.shape[0]:
            raise ValueError(f"dist has {d.shape[0]} values but xy has {xy.shape[0]} rows")

        out = cls(d_sep=d_sep, d_test=d_test)
        gap = np.any(np.isnan(xy), axis=1)
        edges = np.flatnonzero(np.diff(np.concatenate([[0], (~gap).astype(np.int8), [0]])) != 0)
        for start, stop in zip(edges[0::2], edges[1::2]):
            out.add(Streamline(points=xy[start:stop], separation=d[start:stop]))
        return out

    # ---------- Separation ----------

    def refresh_separation(self, radius: Optional[float] = None) -> "StreamlineDataset":
        """
        Recompute every vertex's distance to the nearest *other* streamline
        against the complete set of streamlines.

        Parameters
        ----------
        radius : float, optional
            Search radius; defaults to ``d_sep``. Vertices with no other
            streamline within it get inf.

        Returns
        -------
        StreamlineDataset
            New dataset sharing bounds and metadata
        """
        r = self.d_sep if radius is None else float(radius)
        out = StreamlineDataset(d_sep=self.d_sep, d_test=self.d_test,
                                bounds=self.bounds, metadata=dict(self.metadata))
        if not self._lines:
            return out

        seps = nearest_other_line([line.points for line in self._lines], r)
        for line, sep in zip(self._lines, seps):
            out.add(replace(line, separation=sep))
        return out
