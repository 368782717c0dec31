"""
Spatial indexing and polyline geometry.

- neighbors: SeparationIndex hash grid and cross-line KD-tree distances
- polyline: arc-length sampling and normals
"""

from .neighbors import SeparationIndex, grid_cells, nearest_other_line
from .polyline import (
    arc_length,
    cumulative_arc_length,
    resample_every,
    vertex_normals,
)

__all__ = [
    "SeparationIndex",
    "grid_cells",
    "nearest_other_line",
    "arc_length",
    "cumulative_arc_length",
    "resample_every",
    "vertex_normals",
]
