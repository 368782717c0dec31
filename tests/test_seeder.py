"""Tests for evenly-spaced streamline placement."""

import math

import numpy as np
import pytest

from prettystream import ParameterError
from prettystream.fields import VectorField, demo_field, gradient_field
from prettystream.tracing import (
    EvenSeeder,
    IntegrationOptions,
    SeedingOptions,
    SeederState,
    Termination,
    even_stream_data,
    min_pairwise_separation,
    validate_dataset,
)


def test_uniform_field_gives_parallel_lines(uniform_field):
    seeder = EvenSeeder(uniform_field, d_sep=1.0, d_test=0.5)
    ds = seeder.run(seed=(5.0, 5.0))

    first = ds[0]
    np.testing.assert_array_equal(first.points[:, 1], 5.0)
    assert first.points[0, 0] == pytest.approx(0.0)
    assert first.points[-1, 0] == pytest.approx(10.0)

    heights = [line.points[0, 1] for line in ds]
    assert heights == [5.0, 6.0, 4.0, 7.0, 3.0, 8.0, 2.0, 9.0, 1.0, 10.0, 0.0]
    for line in ds:
        assert np.all(line.points[:, 1] == line.points[0, 1])
        assert line.points[0, 0] == pytest.approx(0.0)
        assert line.points[-1, 0] == pytest.approx(10.0)
    np.testing.assert_allclose(np.diff(sorted(heights)), 1.0)

    assert seeder.state == SeederState.TERMINAL
    assert ds.metadata["stop_reason"] == "queue_empty"
    assert ds.metadata["accepted"] == 11


def test_placement_separation_values(uniform_field):
    ds = EvenSeeder(uniform_field, d_sep=1.0, d_test=0.5).run(seed=(5.0, 5.0))
    assert np.all(np.isinf(ds[0].separation))
    np.testing.assert_allclose(ds[1].separation, 1.0)


def test_candidates_left_then_right(uniform_field):
    seeder = EvenSeeder(uniform_field, d_sep=1.0, d_test=0.5)
    seeder.start((5.0, 5.0))
    cands = seeder.candidates_for(seeder.dataset[0], 0)
    assert len(cands) == 22
    assert cands[0].point == pytest.approx((0.0, 6.0))
    assert cands[1].point == pytest.approx((0.0, 4.0))
    assert (cands[0].side, cands[1].side) == (1, -1)
    assert cands[2].point == pytest.approx((1.0, 6.0))
    assert len(seeder.queue) == 22


def test_default_seed_is_domain_centre(uniform_field):
    ds = EvenSeeder(uniform_field, d_sep=1.0, d_test=0.5).run()
    assert ds[0].seed == (5.0, 5.0)


def test_deterministic():
    field = demo_field(resolution=20)
    a = EvenSeeder(field, d_sep=0.3, d_test=0.15).run()
    b = EvenSeeder(field, d_sep=0.3, d_test=0.15).run()
    assert len(a) == len(b) > 1
    np.testing.assert_array_equal(a.to_xy(), b.to_xy())
    xa, da = a.to_xy_dist()
    xb, db = b.to_xy_dist()
    np.testing.assert_array_equal(da, db)


def test_distinct_lines_stay_apart():
    field = demo_field(resolution=20)
    ds = EvenSeeder(field, d_sep=0.25, d_test=0.125).run()
    assert len(ds) > 5
    assert min_pairwise_separation(ds) >= ds.d_test
    result = validate_dataset(ds)
    assert result["valid"], result["issues"]


def _random_landscape():
    """Gradient of a random surface on a 16 x 12 grid with uneven spacing."""
    rng = np.random.default_rng(0)
    x = np.concatenate([[0.0], np.cumsum(rng.uniform(0.05, 0.2, 15))])
    y = np.concatenate([[0.0], np.cumsum(rng.uniform(0.05, 0.2, 11))])
    return gradient_field(x, y, rng.standard_normal((12, 16)))


def test_uneven_random_field_keeps_spacing():
    field = _random_landscape()
    assert not field.grid_meta.uniform
    ds = EvenSeeder(field, d_sep=0.15, d_test=0.07).run()
    assert len(ds) > 5
    for line in ds:
        assert Termination.MAX_STEPS not in (line.forward, line.backward)
        # no piles of coincident vertices at sinks
        seg = np.hypot(*np.diff(line.points, axis=0).T)
        assert np.count_nonzero(seg < 1e-6) <= 2
    assert min_pairwise_separation(ds) >= ds.d_test
    result = validate_dataset(ds)
    assert result["valid"], result["issues"]


def test_zero_field_gives_no_streamlines():
    axis = np.linspace(0.0, 1.0, 6)
    field = VectorField(x=axis, y=None, u=np.zeros((6, 6)), v=np.zeros((6, 6)))
    ds = EvenSeeder(field, d_sep=0.2, d_test=0.1).run()
    assert len(ds) == 0
    assert ds.metadata["trivial"] > 0
    assert ds.metadata["stop_reason"] == "queue_empty"


def test_critical_point_at_centre(source_field):
    seeder = EvenSeeder(source_field, d_sep=0.2, d_test=0.1)
    assert seeder.start() is None
    ds = seeder.run()
    assert len(ds) > 0
    for line in ds:
        assert Termination.MAX_STEPS not in (line.forward, line.backward)
        assert np.hypot(*line.points.T).min() > 0.0
    assert validate_dataset(ds)["valid"]


def test_seed_outside_domain_is_skipped(uniform_field):
    seeder = EvenSeeder(uniform_field, d_sep=1.0, d_test=0.5)
    assert seeder.start((20.0, 20.0)) is None
    assert seeder.state == SeederState.ACTIVE
    ds = seeder.run()
    assert len(ds) == 11


def test_outside_seed_without_gap_filling(uniform_field):
    opts = SeedingOptions(fill_gaps=False)
    ds = EvenSeeder(uniform_field, d_sep=1.0, d_test=0.5, options=opts).run(seed=(-3.0, 5.0))
    assert len(ds) == 0


def test_gap_filling_reaches_isolated_regions():
    # Two bands of flow separated by a dead zone
    axis = np.linspace(0.0, 4.0, 41)
    X, Y = np.meshgrid(axis, axis)
    u = np.where(np.abs(Y - 2.0) > 0.6, 1.0, 0.0)
    field = VectorField(x=axis, y=axis, u=u, v=np.zeros_like(u))
    with_fill = EvenSeeder(field, d_sep=0.5, d_test=0.25).run(seed=(2.0, 0.5))
    without = EvenSeeder(field, d_sep=0.5, d_test=0.25, options=SeedingOptions(fill_gaps=False)).run(seed=(2.0, 0.5))
    assert max(l.points[0, 1] for l in with_fill) > 2.5
    assert max(l.points[0, 1] for l in without) < 2.0
    assert with_fill.metadata["sweep"] > 0


def test_start_twice_raises(uniform_field):
    seeder = EvenSeeder(uniform_field, d_sep=1.0, d_test=0.5)
    seeder.start()
    with pytest.raises(RuntimeError):
        seeder.start()


def test_step_after_finish(uniform_field):
    seeder = EvenSeeder(uniform_field, d_sep=1.0, d_test=0.5)
    while seeder.step():
        pass
    assert seeder.state == SeederState.TERMINAL
    assert not seeder.step()
    assert len(seeder.dataset) == 11


def test_iteration_cap_warns(uniform_field):
    opts = SeedingOptions(max_iterations=1)
    with pytest.warns(UserWarning, match="max_iterations"):
        ds = EvenSeeder(uniform_field, d_sep=1.0, d_test=0.5, options=opts).run()
    assert ds.metadata["stop_reason"] == "max_iterations"
    assert ds.metadata["popped"] == 1
    assert 1 <= len(ds) <= 2


def test_time_cap_warns(uniform_field):
    opts = SeedingOptions(max_seconds=1e-9)
    with pytest.warns(UserWarning, match="max_seconds"):
        ds = EvenSeeder(uniform_field, d_sep=1.0, d_test=0.5, options=opts).run()
    assert ds.metadata["stop_reason"] == "max_seconds"
    assert len(ds) >= 1


def test_final_separation_mode():
    field = demo_field(resolution=20)
    placed = EvenSeeder(field, d_sep=0.3, d_test=0.15).run()
    final = EvenSeeder(field, d_sep=0.3, d_test=0.15, options=SeedingOptions(separation_mode="final")).run()
    refreshed = placed.refresh_separation()
    assert final.metadata["separation_mode"] == "final"
    for a, b in zip(final, refreshed):
        np.testing.assert_array_equal(a.separation, b.separation)
    # the first streamline gets neighbours once every line is known
    assert np.isfinite(final[0].separation).any()
    assert np.all(np.isinf(placed[0].separation))


@pytest.mark.parametrize(
    "d_sep, d_test",
    [(1.0, 1.0), (1.0, 1.5), (-1.0, -2.0), (1.0, 0.0), (math.nan, 0.5)],
)
def test_invalid_distances(uniform_field, d_sep, d_test):
    with pytest.raises(ParameterError):
        EvenSeeder(uniform_field, d_sep=d_sep, d_test=d_test)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"separation_mode": "exact"},
        {"seed_spacing": 0.0},
        {"max_iterations": 0},
        {"max_seconds": -1.0},
        {"progress_style": "fancy"},
    ],
)
def test_invalid_seeding_options(kwargs):
    with pytest.raises(ParameterError):
        SeedingOptions(**kwargs)


def test_even_stream_data_routes_options():
    axis = np.arange(11, dtype=float)
    X, Y = np.meshgrid(axis, axis)
    ds = even_stream_data(X, Y, np.ones_like(X), np.zeros_like(X), 1.0, 0.5,
                          seed=(5.0, 5.0), integrator="euler", fill_gaps=False)
    assert len(ds) == 11
    assert ds.metadata["integrator"] == "euler"
    with pytest.raises(ParameterError):
        even_stream_data(axis, None, np.ones((11, 11)), np.zeros((11, 11)), 1.0, 0.5, integrator="magic")


def test_seed_spacing_option(uniform_field):
    opts = SeedingOptions(seed_spacing=2.5)
    seeder = EvenSeeder(uniform_field, d_sep=1.0, d_test=0.5, options=opts)
    seeder.start()
    assert len(seeder.queue) == 2 * 5


def test_progress_and_verbose_output(uniform_field, capsys):
    opts = SeedingOptions(progress_style="simple", verbose=True,
                          integration=IntegrationOptions(integrator="rk2"))
    EvenSeeder(uniform_field, d_sep=1.0, d_test=0.5, options=opts).run()
    out = capsys.readouterr().out
    assert "Seeding" in out
    assert "Placed 11 streamlines" in out


def test_tqdm_progress(uniform_field):
    opts = SeedingOptions(progress_style="tqdm")
    ds = EvenSeeder(uniform_field, d_sep=1.0, d_test=0.5, options=opts).run()
    assert len(ds) == 11
