"""
prettystream: evenly-spaced streamlines for 2D vector fields.

Places streamlines with the Jobard & Lefer (1997) algorithm and renders
them in four styles:
- plain lines
- lines with arrowheads
- tapered width following local separation
- textured dash (static or animated)

Core workflow:
1. Wrap gridded components → VectorField
2. Place streamlines → EvenSeeder / even_stream_data
3. Inspect results → StreamlineDataset, analyze_streamlines
4. Render → plot_stream_line / arrow / taper / texture
"""

from __future__ import annotations

# Version info
__version__ = "0.1.0"
__author__ = "prettystream Contributors"

from .errors import FieldConfigurationError, ParameterError

# Utilities - JAX availability and package configuration
from .utils.jax_utils import JAX_AVAILABLE
from .utils.config import configure, get_config, reset_config
from .utils.logging import Timer, timeit

# Fields - gridded vector fields
from .fields import (
    VectorField,
    sample,
    create_uniform_grid,
    gradient_field,
    demo_field,
)

# Integrators - numerical schemes
from .integrators import euler_step, rk2_step, rk4_step, get_integrator

# Spatial - separation queries
from .spatial import SeparationIndex

# Tracing - streamline placement
from .tracing import (
    Streamline,
    StreamlineDataset,
    Termination,
    IntegrationOptions,
    StreamlineIntegrator,
    integrate,
    EvenSeeder,
    SeedingOptions,
    SeederState,
    even_stream_data,
    analyze_streamlines,
    min_pairwise_separation,
)

# Visualization
from .visualization import (
    LineStyle,
    ArrowStyle,
    TaperStyle,
    TextureStyle,
    plot_stream_line,
    plot_stream_arrow,
    plot_stream_taper,
    plot_stream_texture,
    plot_vector_field,
    animate_stream_texture,
)

__all__ = [
    # Version
    "__version__",
    # Errors
    "FieldConfigurationError",
    "ParameterError",
    # Utilities
    "JAX_AVAILABLE",
    "configure",
    "get_config",
    "reset_config",
    "Timer",
    "timeit",
    # Fields
    "VectorField",
    "sample",
    "create_uniform_grid",
    "gradient_field",
    "demo_field",
    # Integrators
    "euler_step",
    "rk2_step",
    "rk4_step",
    "get_integrator",
    # Spatial
    "SeparationIndex",
    # Tracing
    "Streamline",
    "StreamlineDataset",
    "Termination",
    "IntegrationOptions",
    "StreamlineIntegrator",
    "integrate",
    "EvenSeeder",
    "SeedingOptions",
    "SeederState",
    "even_stream_data",
    "analyze_streamlines",
    "min_pairwise_separation",
    # Visualization
    "LineStyle",
    "ArrowStyle",
    "TaperStyle",
    "TextureStyle",
    "plot_stream_line",
    "plot_stream_arrow",
    "plot_stream_taper",
    "plot_stream_texture",
    "plot_vector_field",
    "animate_stream_texture",
]
