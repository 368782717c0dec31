# prettystream/visualization/geometry.py
"""
Pure geometry for the streamline renderers.

Nothing here touches matplotlib; every function maps polylines to arrays
that the plotting functions hand to collections.
"""

from __future__ import annotations
from typing import List, Optional

import math
import numpy as np

from ..spatial.polyline import (
    arc_length,
    cumulative_arc_length,
    resample_every,
    vertex_normals,
)

__all__ = [
    "arc_length",
    "resample_every",
    "arrow_glyphs",
    "taper_widths",
    "taper_polygon",
    "polyline_segments",
    "texture_intensity",
]


def _rotate(vec: np.ndarray, degrees: float) -> np.ndarray:
    a = math.radians(degrees)
    c, s = math.cos(a), math.sin(a)
    return np.stack([c * vec[:, 0] - s * vec[:, 1], s * vec[:, 0] + c * vec[:, 1]], axis=1)


def arrow_glyphs(
    points: np.ndarray,
    spacing: float,
    length: float,
    tip_angle: float = 30.0,
    base_angle: float = 10.0,
    offset: Optional[float] = None,
) -> List[np.ndarray]:
    """
    Arrowhead outlines placed along a polyline.

    Parameters
    ----------
    points : (N, 2) polyline
    spacing : float
        Arc length between consecutive glyphs
    length : float
        Distance from the tip to the end of each barb
    tip_angle : float
        Half-angle at the tip, degrees
    base_angle : float
        Sweep of the back edges toward the tip, degrees (0 -> flat triangle)
    offset : float, optional
        Arc length of the first glyph; defaults to half the spacing

    Returns
    -------
    list of (4, 2) arrays
        Polygons [tip, left barb, notch, right barb], pointing downstream
    """
    if offset is None:
        offset = 0.5 * spacing
    centres, tangents = resample_every(points, spacing, offset=offset)
    if centres.shape[0] == 0:
        return []

    tips = centres + 0.5 * length * tangents
    left = tips - length * _rotate(tangents, -tip_angle)
    right = tips - length * _rotate(tangents, tip_angle)
    a = math.radians(tip_angle)
    depth = length * (math.cos(a) - math.sin(a) * math.tan(math.radians(base_angle)))
    notch = tips - max(depth, 0.0) * tangents
    return [np.stack([t, l, n, r]) for t, l, n, r in zip(tips, left, notch, right)]


def taper_widths(separation: np.ndarray, d_sep: float, width_min: float, width_max: float) -> np.ndarray:
    """Half-widths interpolated from width_min to width_max (fractions of d_sep) by separation / d_sep."""
    sep = np.asarray(separation, dtype=np.float64)
    ratio = np.clip(np.nan_to_num(sep / d_sep, nan=0.0, posinf=1.0), 0.0, 1.0)
    return d_sep * (width_min + (width_max - width_min) * ratio)


def taper_polygon(
    points: np.ndarray,
    separation: np.ndarray,
    d_sep: float,
    width_min: float,
    width_max: float,
) -> np.ndarray:
    """
    Closed outline of a streamline whose width follows its separation.

    Returns
    -------
    np.ndarray
        (2N, 2) vertices: the left side in order, then the right side reversed
    """
    P = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    if P.shape[0] < 2:
        return np.zeros((0, 2))
    w = taper_widths(separation, d_sep, width_min, width_max)
    n = vertex_normals(P)
    left = P + w[:, None] * n
    right = P - w[:, None] * n
    return np.concatenate([left, right[::-1]], axis=0)


def polyline_segments(points: np.ndarray) -> np.ndarray:
    """Consecutive vertex pairs, shape (N-1, 2, 2)."""
    P = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    if P.shape[0] < 2:
        return np.zeros((0, 2, 2))
    return np.stack([P[:-1], P[1:]], axis=1)


def texture_intensity(points: np.ndarray, period: float, phase: float = 0.0) -> np.ndarray:
    """
    Sawtooth intensity in [0, 1) at each segment midpoint.

    Intensity ramps up over every ``period`` of arc length; ``phase`` is a
    fraction of a period and shifts the pattern downstream.
    """
    if period <= 0:
        raise ValueError(f"period must be positive, got {period}")
    cum = cumulative_arc_length(points)
    if cum.size < 2:
        return np.zeros(0)
    mid = 0.5 * (cum[:-1] + cum[1:])
    return np.mod(mid / period - phase, 1.0)
