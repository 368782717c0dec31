"""
Streamline tracing and evenly-spaced placement.

- streamline: Streamline, Termination, StreamlineDataset
- integrate: single-streamline tracing against a separation index
- seeder: Jobard-Lefer queue loop and the even_stream_data convenience call
- analysis: separation statistics and dataset validation
"""

from .streamline import Streamline, StreamlineDataset, Termination
from .integrate import (
    IntegrationOptions,
    StreamlineIntegrator,
    integrate,
    validate_separation,
)
from .seeder import (
    EvenSeeder,
    SeedCandidate,
    SeederState,
    SeedingOptions,
    even_stream_data,
)
from .analysis import (
    analyze_streamlines,
    compute_dataset_statistics,
    min_pairwise_separation,
    nearest_other_distances,
    validate_dataset,
)

__all__ = [
    "Streamline",
    "StreamlineDataset",
    "Termination",
    "IntegrationOptions",
    "StreamlineIntegrator",
    "integrate",
    "validate_separation",
    "EvenSeeder",
    "SeedCandidate",
    "SeederState",
    "SeedingOptions",
    "even_stream_data",
    "analyze_streamlines",
    "compute_dataset_statistics",
    "min_pairwise_separation",
    "nearest_other_distances",
    "validate_dataset",
]
