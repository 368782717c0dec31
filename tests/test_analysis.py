"""Tests for dataset statistics and validation."""

import math

import numpy as np
import pytest

from prettystream.tracing import (
    Streamline,
    StreamlineDataset,
    Termination,
    analyze_streamlines,
    compute_dataset_statistics,
    min_pairwise_separation,
    nearest_other_distances,
    validate_dataset,
)


def _line(y, forward=Termination.DOMAIN_EXIT, backward=Termination.DOMAIN_EXIT):
    xs = np.linspace(0.0, 2.0, 5)
    pts = np.column_stack([xs, np.full(5, y)])
    return Streamline(points=pts, separation=np.full(5, np.inf), forward=forward, backward=backward)


def _dataset(*ys, d_sep=1.0, d_test=0.5):
    ds = StreamlineDataset(d_sep=d_sep, d_test=d_test, bounds=np.array([[0.0, 0.0], [2.0, 3.0]]))
    for y in ys:
        ds.add(_line(y))
    return ds


def test_nearest_other_distances():
    ds = _dataset(0.0, 0.75, 2.5)
    d = nearest_other_distances(ds)
    assert d.shape == (15,)
    np.testing.assert_allclose(d[:10], 0.75)
    assert np.all(np.isinf(d[10:]))
    assert nearest_other_distances(StreamlineDataset(d_sep=1.0, d_test=0.5)).shape == (0,)


def test_min_pairwise_separation():
    assert min_pairwise_separation(_dataset(0.0, 0.75, 2.5)) == pytest.approx(0.75)
    assert min_pairwise_separation(_dataset(0.0, 0.75), radius=0.5) == math.inf
    assert min_pairwise_separation(_dataset(1.0)) == math.inf


def test_validate_flags_close_lines():
    assert validate_dataset(_dataset(0.0, 0.75))["valid"]
    result = validate_dataset(_dataset(0.0, 0.25))
    assert not result["valid"]
    assert any("d_test" in issue for issue in result["issues"])


def test_validate_dataset_with_piled_vertices():
    ds = _dataset(0.0, 2.0)
    approach = np.linspace([0.5, 1.0], [1.0, 1.0], 6)
    pile = np.tile([[1.0, 1.0]], (30_000, 1))
    pts = np.concatenate([approach, pile])
    ds.add(Streamline(points=pts, separation=np.full(pts.shape[0], np.inf)))
    result = validate_dataset(ds)
    assert result["valid"], result["issues"]
    d = nearest_other_distances(ds)
    assert d.shape == (ds.total_points,)
    np.testing.assert_allclose(d[-30_000:], 1.0)


def test_validate_flags_points_outside_bounds():
    ds = _dataset(0.0)
    ds.add(_line(5.0))
    result = validate_dataset(ds)
    assert not result["valid"]
    assert any("leaves the domain" in issue for issue in result["issues"])


def test_statistics():
    ds = _dataset(0.0, 1.0)
    ds.add(_line(2.0, forward=Termination.SEPARATION))
    stats = compute_dataset_statistics(ds)
    assert stats["n_streamlines"] == 3
    assert stats["n_points"] == 15
    assert stats["length"]["total"] == pytest.approx(6.0)
    assert stats["length"]["mean"] == pytest.approx(2.0)
    assert stats["terminations"] == {"domain_exit": 5, "separation": 1}
    assert stats["separation"]["fraction_unbounded"] == 1.0
    assert stats["closed_loops"] == 0


def test_statistics_of_empty_dataset():
    stats = compute_dataset_statistics(StreamlineDataset(d_sep=1.0, d_test=0.5))
    assert stats["n_streamlines"] == 0
    assert stats["length"]["total"] == 0.0
    assert stats["separation"]["min"] == math.inf


def test_analyze_streamlines_prints(capsys):
    stats, validation = analyze_streamlines(_dataset(0.0, 1.0), verbose=True)
    out = capsys.readouterr().out
    assert "Streamlines: 2" in out
    assert "PASSED" in out
    assert validation["valid"]
    assert stats["n_points"] == 10

    analyze_streamlines(_dataset(0.0, 1.0), verbose=False)
    assert capsys.readouterr().out == ""
