"""Shared fixtures for the prettystream test suite."""

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest

from prettystream.fields import VectorField
from prettystream.utils.config import reset_config


@pytest.fixture(autouse=True)
def _fresh_config():
    reset_config()
    yield
    reset_config()


@pytest.fixture(autouse=True)
def _close_figures():
    yield
    import matplotlib.pyplot as plt
    plt.close("all")


@pytest.fixture
def uniform_field():
    """Constant (1, 0) field on [0, 10]^2 with unit grid spacing."""
    axis = np.arange(11, dtype=float)
    u = np.ones((11, 11))
    v = np.zeros((11, 11))
    return VectorField(x=axis, y=None, u=u, v=v)


@pytest.fixture
def vortex_field():
    """Solid-body rotation u = -y, v = x on [-1, 1]^2."""
    axis = np.linspace(-1.0, 1.0, 21)
    X, Y = np.meshgrid(axis, axis)
    return VectorField(x=axis, y=axis, u=-Y, v=X)


@pytest.fixture
def source_field():
    """Radial source u = x, v = y on [-1, 1]^2; critical point at the centre."""
    axis = np.linspace(-1.0, 1.0, 21)
    X, Y = np.meshgrid(axis, axis)
    return VectorField(x=axis, y=axis, u=X, v=Y)
