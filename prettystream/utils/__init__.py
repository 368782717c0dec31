# prettystream/utils/__init__.py
"""
Utilities for prettystream.

Contains:
- jax_utils: optional JAX detection and jit helpers
- config: package-wide defaults (configure / get_config / reset_config)
- logging: timers, memory monitoring, progress reporting

JAX is optional; every code path has a NumPy implementation.
"""

from .jax_utils import (
    JAX_AVAILABLE,
    to_numpy,
    array_module,
    maybe_jit,
)

from .config import (
    PackageConfig,
    get_config,
    configure,
    reset_config,
)

from .logging import (
    Timer,
    timeit,
    memory_info,
    create_progress_callback,
    ProgressCallback,
    ProgressReporter,
)

__all__ = [
    # jax_utils
    "JAX_AVAILABLE",
    "to_numpy",
    "array_module",
    "maybe_jit",
    # config
    "PackageConfig",
    "get_config",
    "configure",
    "reset_config",
    # logging
    "Timer",
    "timeit",
    "memory_info",
    "create_progress_callback",
    "ProgressCallback",
    "ProgressReporter",
]
