# prettystream/utils/config.py
"""
Global package configuration.

Provides centralized defaults for integration, progress reporting and
the optional JAX path used by bulk field sampling. Per-run option objects
(IntegrationOptions, SeedingOptions) read their defaults from here when
they are constructed.
"""

from __future__ import annotations
from dataclasses import dataclass, asdict
import warnings

from .jax_utils import JAX_AVAILABLE
from ..errors import ParameterError

PROGRESS_STYLES = ("none", "simple", "tqdm")
INTEGRATOR_NAMES = ("euler", "rk2", "rk4")


@dataclass
class PackageConfig:
    """
    Global configuration for prettystream.

    Controls bulk sampling, the default integration scheme and
    progress output for seeding runs.
    """
    # Bulk sampling
    use_jax: bool = True                # jit sample_many when JAX is installed

    # Integration defaults
    integrator: str = "rk4"             # 'euler' | 'rk2' | 'rk4'
    step_fraction: float = 0.25         # step size as fraction of local cell size
    max_steps: int = 10_000             # per direction

    # Progress and monitoring
    progress_style: str = "none"        # 'none' | 'simple' | 'tqdm'
    verbose: bool = False

    def __post_init__(self):
        self._validate_config()

    def _validate_config(self):
        """Validate configuration settings."""
        if self.integrator not in INTEGRATOR_NAMES:
            raise ParameterError(f"integrator must be one of {INTEGRATOR_NAMES}, got '{self.integrator}'")
        if not (0.0 < self.step_fraction <= 1.0):
            raise ParameterError(f"step_fraction must be in (0, 1], got {self.step_fraction}")
        if int(self.max_steps) < 1:
            raise ParameterError(f"max_steps must be positive, got {self.max_steps}")
        if self.progress_style not in PROGRESS_STYLES:
            raise ParameterError(f"progress_style must be one of {PROGRESS_STYLES}, got '{self.progress_style}'")
        if self.use_jax and not JAX_AVAILABLE and self.verbose:
            warnings.warn("use_jax is set but JAX is not installed; bulk sampling uses NumPy")


# Global configuration instance
_global_config = PackageConfig()


def get_config() -> PackageConfig:
    """Get global package configuration."""
    return _global_config


def configure(**kwargs) -> None:
    """
    Configure package settings.

    Parameters
    ----------
    **kwargs : dict
        Configuration parameters to update. Unknown keys are ignored
        with a warning.
    """
    previous = asdict(_global_config)
    for key, value in kwargs.items():
        if hasattr(_global_config, key):
            setattr(_global_config, key, value)
        else:
            warnings.warn(f"Unknown configuration parameter: {key}")

    try:
        _global_config._validate_config()
    except ParameterError:
        for key, value in previous.items():
            setattr(_global_config, key, value)
        raise


def reset_config() -> None:
    """Reset configuration to defaults."""
    global _global_config
    _global_config = PackageConfig()
