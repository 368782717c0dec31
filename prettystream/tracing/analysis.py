# prettystream/tracing/analysis.py
"""
Streamline dataset analysis for prettystream.

Provides functions to measure spacing between streamlines, compute
summary statistics, and validate dataset integrity.
"""

import numpy as np
from typing import Dict, Any, Tuple, Optional
from collections import Counter

from ..spatial.neighbors import nearest_other_line


def nearest_other_distances(dataset, radius: Optional[float] = None) -> np.ndarray:
    """
    Distance from every vertex to the closest vertex of another streamline.

    Parameters
    ----------
    dataset : StreamlineDataset
    radius : float, optional
        Search radius; defaults to the dataset's d_sep. Vertices with no
        other streamline within it get inf.

    Returns
    -------
    np.ndarray
        Shape (total_points,), in dataset order
    """
    lines = dataset.streamlines()
    if not lines:
        return np.zeros(0)
    r = float(dataset.d_sep if radius is None else radius)
    return np.concatenate(nearest_other_line([line.points for line in lines], r))


def min_pairwise_separation(dataset, radius: Optional[float] = None) -> float:
    """Smallest vertex-to-vertex distance between two distinct streamlines (inf if none within radius)."""
    d = nearest_other_distances(dataset, radius)
    return float(d.min()) if d.size else float("inf")


def validate_dataset(dataset) -> Dict[str, Any]:
    """
    Check a dataset for integrity problems.

    Returns
    -------
    dict
        'valid' flag plus the list of 'issues' found
    """
    issues = []
    lines = dataset.streamlines()

    for k, line in enumerate(lines):
        if len(line) < 2:
            issues.append(f"streamline {k} has fewer than 2 points")
        if not np.all(np.isfinite(line.points)):
            issues.append(f"streamline {k} has non-finite points")
        if dataset.bounds is not None:
            lo, hi = dataset.bounds
            tol = 1e-9 * max(float(np.max(hi - lo)), 1.0)
            if np.any(line.points < lo - tol) or np.any(line.points > hi + tol):
                issues.append(f"streamline {k} leaves the domain")

    if lines and np.isfinite(dataset.d_test):
        closest = min_pairwise_separation(dataset, radius=dataset.d_test)
        if closest < dataset.d_test:
            issues.append(f"streamlines closer than d_test ({closest:.3g} < {dataset.d_test:.3g})")

    return {"valid": not issues, "issues": issues, "n_streamlines": len(lines)}


def compute_dataset_statistics(dataset) -> Dict[str, Any]:
    """Summary statistics for a StreamlineDataset."""
    lines = dataset.streamlines()
    lengths = np.array([line.length for line in lines]) if lines else np.zeros(0)
    counts = np.array([len(line) for line in lines]) if lines else np.zeros(0, dtype=int)
    seps = np.concatenate([line.separation for line in lines]) if lines else np.zeros(0)
    finite = seps[np.isfinite(seps)]

    terminations = Counter()
    for line in lines:
        terminations[line.forward.value] += 1
        terminations[line.backward.value] += 1

    stats = {
        "n_streamlines": len(lines),
        "n_points": int(counts.sum()),
        "length": {
            "total": float(lengths.sum()),
            "mean": float(lengths.mean()) if lengths.size else 0.0,
            "max": float(lengths.max()) if lengths.size else 0.0,
        },
        "separation": {
            "min": float(finite.min()) if finite.size else float("inf"),
            "mean": float(finite.mean()) if finite.size else float("inf"),
            "fraction_unbounded": float(1.0 - finite.size / seps.size) if seps.size else 0.0,
        },
        "terminations": dict(terminations),
        "closed_loops": sum(1 for line in lines if line.closed),
    }
    return stats


def analyze_streamlines(dataset, verbose: bool = True) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Analyze seeding results.

    Parameters
    ----------
    dataset : StreamlineDataset
    verbose : bool, default True
        Whether to print analysis results

    Returns
    -------
    Tuple[Dict[str, Any], Dict[str, Any]]
        (statistics, validation_results)
    """
    stats = compute_dataset_statistics(dataset)
    validation = validate_dataset(dataset)

    if verbose:
        print(f"\n📊 Analyzing streamline results...")
        print(f"   🎯 Streamlines: {stats['n_streamlines']} ({stats['n_points']} points)")
        print(f"   📏 Length: total {stats['length']['total']:.3f}, mean {stats['length']['mean']:.3f}")
        print(f"   ↔️  Separation: min {stats['separation']['min']:.4g}, mean {stats['separation']['mean']:.4g}")
        if stats["terminations"]:
            causes = ", ".join(f"{k}={v}" for k, v in sorted(stats["terminations"].items()))
            print(f"   🛑 Terminations: {causes}")
        print(f"   ✅ Data validation: {'PASSED' if validation['valid'] else 'FAILED'}")
        if not validation["valid"]:
            print(f"      ⚠️  Issues found: {', '.join(validation['issues'])}")

    return stats, validation
