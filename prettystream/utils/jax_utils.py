# prettystream/utils/jax_utils.py
from __future__ import annotations
from typing import Any, Callable, Optional, Sequence

try:
    import jax
    import jax.numpy as jnp
    from jax import jit as _jit
    JAX_AVAILABLE = True
except Exception:
    JAX_AVAILABLE = False
    jax = None  # type: ignore
    jnp = None  # type: ignore

import numpy as np


def to_numpy(x: Any) -> np.ndarray:
    """Convert JAX/NumPy arrays to NumPy; leaves Python scalars unchanged."""
    return np.asarray(x)


def array_module(use_jax: bool = True):
    """Return ``jax.numpy`` when JAX is installed and requested, else ``numpy``."""
    if JAX_AVAILABLE and use_jax:
        return jnp
    return np


def maybe_jit(fn: Callable, enable: bool = True, static_argnums: Optional[Sequence[int]] = None):
    """
    JIT-wrap `fn` with JAX when available and enabled; otherwise return `fn` unchanged.
    """
    if JAX_AVAILABLE and enable:
        return _jit(fn, static_argnums=static_argnums)
    return fn
