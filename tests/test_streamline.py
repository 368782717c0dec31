"""Tests for Streamline and StreamlineDataset."""

import math

import numpy as np
import pytest

from prettystream.tracing import Streamline, StreamlineDataset, Termination


def _line(y, n=5, x0=0.0, x1=4.0, sep=math.inf):
    xs = np.linspace(x0, x1, n)
    return Streamline(points=np.column_stack([xs, np.full(n, y)]), separation=np.full(n, sep))


def _dataset(*lines):
    ds = StreamlineDataset(d_sep=1.0, d_test=0.5, bounds=np.array([[0.0, 0.0], [4.0, 4.0]]))
    for line in lines:
        ds.add(line)
    return ds


def test_streamline_is_immutable():
    line = _line(1.0)
    with pytest.raises(ValueError):
        line.points[0, 0] = 7.0
    with pytest.raises(AttributeError):
        line.seed_index = 2
    assert line.length == pytest.approx(4.0)
    assert len(line) == 5
    assert not line.closed


def test_streamline_validation():
    with pytest.raises(ValueError):
        Streamline(points=np.zeros((3, 2)), separation=np.zeros(2))
    with pytest.raises(ValueError):
        Streamline(points=np.zeros((3, 2)), separation=np.zeros(3), seed_index=3)


def test_dataset_accessors():
    ds = _dataset(_line(1.0, sep=1.0), _line(2.0, n=3, sep=2.0))
    assert len(ds) == 2
    assert ds.total_points == 8
    assert ds.total_length == pytest.approx(8.0)
    assert ds.separation_at(1, 2) == 2.0
    assert [l.points[0, 1] for l in ds] == [1.0, 2.0]
    assert ds[1].points.shape == (3, 2)
    # streamlines() hands out a copy of the list
    ds.streamlines().clear()
    assert len(ds) == 2


def test_to_xy_separates_lines_with_nan():
    ds = _dataset(_line(1.0, n=3, sep=0.7), _line(2.0, n=4), _line(3.0, n=2))
    xy, dist = ds.to_xy_dist()
    assert xy.shape == (3 + 4 + 2 + 2, 2)
    gaps = np.flatnonzero(np.isnan(xy[:, 0]))
    np.testing.assert_array_equal(gaps, [3, 8])
    assert np.all(np.isnan(dist[gaps]))
    assert dist[0] == 0.7
    np.testing.assert_array_equal(ds.to_xy(), xy)


def test_empty_dataset_arrays():
    ds = StreamlineDataset(d_sep=1.0, d_test=0.5)
    xy, dist = ds.to_xy_dist()
    assert xy.shape == (0, 2) and dist.shape == (0,)
    assert len(StreamlineDataset.from_xy(xy)) == 0


def test_from_xy_rebuilds_lines():
    ds = _dataset(_line(1.0, n=3, sep=0.7), _line(2.0, n=4, sep=1.5))
    xy, dist = ds.to_xy_dist()
    back = StreamlineDataset.from_xy(xy, dist, d_sep=1.0, d_test=0.5)
    assert len(back) == 2
    for a, b in zip(ds, back):
        np.testing.assert_array_equal(a.points, b.points)
        np.testing.assert_array_equal(a.separation, b.separation)
        assert b.forward == Termination.UNKNOWN


def test_from_xy_tolerates_leading_and_repeated_gaps():
    nan = [np.nan, np.nan]
    xy = np.array([nan, [0, 0], [1, 0], nan, nan, [0, 1], [1, 1], nan])
    back = StreamlineDataset.from_xy(xy)
    assert len(back) == 2
    assert np.all(np.isinf(back[0].separation))
    with pytest.raises(ValueError):
        StreamlineDataset.from_xy(xy, dist=np.zeros(3))


def test_refresh_separation_uses_all_lines():
    # The first line was placed before the others, so it carries no neighbours
    ds = _dataset(_line(1.0), _line(1.8, sep=0.8), _line(3.5, sep=1.7))
    fresh = ds.refresh_separation()
    np.testing.assert_allclose(fresh[0].separation, 0.8)
    np.testing.assert_allclose(fresh[1].separation, 0.8)
    assert np.all(np.isinf(fresh[2].separation))
    np.testing.assert_allclose(ds.refresh_separation(radius=2.0)[2].separation, 1.7)
    # the original is untouched
    assert np.all(np.isinf(ds[0].separation))
    assert fresh.bounds is ds.bounds
