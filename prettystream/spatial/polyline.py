# prettystream/spatial/polyline.py
"""
Arc-length utilities for 2D polylines.

Shared by the seeder (candidate spacing along accepted streamlines) and
the renderers (arrow placement, taper outlines, texture phase).
"""

from __future__ import annotations
from typing import Tuple

import numpy as np

Array = np.ndarray


def _dedupe(points: Array) -> Array:
    """Drop vertices identical to their predecessor."""
    P = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    if P.shape[0] < 2:
        return P
    keep = np.ones(P.shape[0], dtype=bool)
    keep[1:] = np.any(np.diff(P, axis=0) != 0.0, axis=1)
    return P[keep]


def cumulative_arc_length(points: Array) -> Array:
    """Arc length from the first vertex to each vertex, shape (N,)."""
    P = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    if P.shape[0] == 0:
        return np.zeros(0)
    seg = np.hypot(*np.diff(P, axis=0).T)
    return np.concatenate([[0.0], np.cumsum(seg)])


def arc_length(points: Array) -> float:
    """Total arc length of a polyline."""
    cum = cumulative_arc_length(points)
    return float(cum[-1]) if cum.size else 0.0


def resample_every(points: Array, spacing: float, offset: float = 0.0) -> Tuple[Array, Array]:
    """
    Points and unit tangents at fixed arc-length intervals.

    Parameters
    ----------
    points : (N, 2) polyline
    spacing : float
        Arc-length interval (> 0)
    offset : float
        Arc length of the first sample

    Returns
    -------
    positions : (K, 2)
    tangents : (K, 2) unit vectors of the segment each sample falls on
    """
    if spacing <= 0:
        raise ValueError(f"spacing must be positive, got {spacing}")
    P = _dedupe(points)
    if P.shape[0] < 2:
        return np.zeros((0, 2)), np.zeros((0, 2))

    seg = np.diff(P, axis=0)
    seglen = np.hypot(seg[:, 0], seg[:, 1])
    cum = np.concatenate([[0.0], np.cumsum(seglen)])
    total = cum[-1]
    if offset > total:
        return np.zeros((0, 2)), np.zeros((0, 2))

    s = np.arange(offset, total + spacing * 1e-9, spacing)
    s = s[s <= total]
    idx = np.clip(np.searchsorted(cum, s, side="right") - 1, 0, seg.shape[0] - 1)
    t = (s - cum[idx]) / seglen[idx]
    positions = P[idx] + t[:, None] * seg[idx]
    tangents = seg[idx] / seglen[idx][:, None]
    return positions, tangents


def vertex_normals(points: Array) -> Array:
    """
    Unit left-hand normals at each vertex, averaging adjacent segment
    directions. Shape (N, 2); zero rows for degenerate polylines.
    """
    P = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    n = P.shape[0]
    if n < 2:
        return np.zeros((n, 2))
    seg = np.diff(P, axis=0)
    seglen = np.hypot(seg[:, 0], seg[:, 1])
    unit = np.divide(seg, seglen[:, None], out=np.zeros_like(seg), where=seglen[:, None] > 0)

    tan = np.zeros((n, 2))
    tan[:-1] += unit
    tan[1:] += unit
    norm = np.hypot(tan[:, 0], tan[:, 1])
    tan = np.divide(tan, norm[:, None], out=np.zeros_like(tan), where=norm[:, None] > 0)
    return np.stack([-tan[:, 1], tan[:, 0]], axis=1)
