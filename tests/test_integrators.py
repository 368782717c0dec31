"""Tests for the fixed-step integration schemes."""

import math

import pytest

from prettystream import ParameterError
from prettystream.integrators import INTEGRATORS, euler_step, get_integrator, rk2_step, rk4_step


def rotation(x, y):
    r = math.hypot(x, y)
    return -y / r, x / r


def test_euler_step_constant_direction():
    assert euler_step((1.0, 2.0), 0.5, lambda x, y: (0.6, 0.8)) == pytest.approx((1.3, 2.4))


def test_rk2_step_on_circle():
    h = 0.1
    x, y = rk2_step((1.0, 0.0), h, rotation)
    assert (x, y) == pytest.approx((math.cos(h), math.sin(h)), abs=1e-3)


def test_rk4_step_on_circle():
    h = 0.1
    x, y = rk4_step((1.0, 0.0), h, rotation)
    assert (x, y) == pytest.approx((math.cos(h), math.sin(h)), abs=1e-5)


def test_rk4_more_accurate_than_euler():
    h = 0.2
    exact = (math.cos(h), math.sin(h))
    e = euler_step((1.0, 0.0), h, rotation)
    r = rk4_step((1.0, 0.0), h, rotation)
    assert math.dist(r, exact) < math.dist(e, exact)


@pytest.mark.parametrize("step", [euler_step, rk2_step, rk4_step])
def test_undefined_start_gives_none(step):
    assert step((0.0, 0.0), 0.1, lambda x, y: None) is None


@pytest.mark.parametrize("step", [rk2_step, rk4_step])
def test_undefined_stage_gives_none(step):
    def direction(x, y):
        return None if x > 1.02 else (1.0, 0.0)

    assert step((1.0, 0.0), 0.1, direction) is None
    assert euler_step((1.0, 0.0), 0.1, direction) == pytest.approx((1.1, 0.0))


def test_get_integrator():
    assert get_integrator("rk4") is rk4_step
    assert get_integrator("Euler") is euler_step
    assert set(INTEGRATORS) == {"euler", "rk2", "rk4"}
    with pytest.raises(ParameterError):
        get_integrator("rk45")
    with pytest.raises(ParameterError):
        get_integrator(None)
