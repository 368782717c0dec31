# prettystream/tracing/seeder.py
"""
Evenly-spaced streamline placement (Jobard & Lefer, 1997).

The seeder keeps a FIFO queue of candidate seeds. Every accepted
streamline spawns candidates at ``d_sep`` arc-length intervals along both
of its sides, offset by ``d_sep`` along the local normal. A candidate
becomes a seed only if no accepted streamline lies within ``d_sep`` of it.
The run ends when the queue is empty; accepted streamlines are never
revised.

References
----------
Jobard, B., & Lefer, W. (1997). Creating Evenly-Spaced Streamlines of
Arbitrary Density. Visualization in Scientific Computing '97, 43-55.
"""

from __future__ import annotations

import math
import time
import warnings
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, Iterator, Optional, Tuple

import numpy as np

from ..errors import ParameterError
from ..fields.base import BaseField
from ..fields.structured import VectorField
from ..spatial.neighbors import SeparationIndex
from ..spatial.polyline import resample_every
from ..utils.config import get_config
from ..utils.logging import ProgressReporter
from .integrate import IntegrationOptions, StreamlineIntegrator, validate_separation
from .streamline import Streamline, StreamlineDataset

# Candidates this close to d_sep (relative) still count as far enough
SEPARATION_RTOL = 1e-9

SEPARATION_MODES = ("placement", "final")


class SeederState(str, Enum):
    """Seeder lifecycle."""
    EMPTY = "empty"          # no streamline placed yet
    ACTIVE = "active"        # candidates may remain
    TERMINAL = "terminal"    # queue drained or a cap was hit


@dataclass(frozen=True)
class SeedCandidate:
    """A proposed seed point and where it came from."""
    x: float
    y: float
    parent: int = -1         # id of the spawning streamline, -1 for sweep/initial seeds
    side: int = 0            # +1 left, -1 right of the parent, 0 otherwise

    @property
    def point(self) -> Tuple[float, float]:
        return self.x, self.y


@dataclass
class SeedingOptions:
    """
    Configuration options for one seeding run.

    Integration settings live in ``integration``; the remaining fields
    control the queue loop.
    """
    integration: IntegrationOptions = field(default_factory=IntegrationOptions)

    # Candidate generation
    seed_spacing: Optional[float] = None     # arc length between candidates; None -> d_sep
    fill_gaps: bool = True                   # sweep the domain when the queue drains

    # Safety caps
    max_iterations: Optional[int] = None     # popped candidates
    max_seconds: Optional[float] = None      # wall clock

    # Separation values recorded on the output
    separation_mode: str = "placement"       # 'placement' | 'final'

    # Progress monitoring
    progress_style: Optional[str] = None     # 'none' | 'simple' | 'tqdm'; None -> package config
    verbose: Optional[bool] = None

    def __post_init__(self):
        cfg = get_config()
        if self.progress_style is None:
            self.progress_style = cfg.progress_style
        if self.verbose is None:
            self.verbose = cfg.verbose

        if self.seed_spacing is not None and not (float(self.seed_spacing) > 0 and math.isfinite(self.seed_spacing)):
            raise ParameterError(f"seed_spacing must be positive, got {self.seed_spacing}")
        if self.max_iterations is not None and int(self.max_iterations) < 1:
            raise ParameterError(f"max_iterations must be positive, got {self.max_iterations}")
        if self.max_seconds is not None and not float(self.max_seconds) > 0:
            raise ParameterError(f"max_seconds must be positive, got {self.max_seconds}")
        if self.separation_mode not in SEPARATION_MODES:
            raise ParameterError(f"separation_mode must be one of {SEPARATION_MODES}, got '{self.separation_mode}'")
        if self.progress_style not in ("none", "simple", "tqdm"):
            raise ParameterError(f"Unknown progress_style: {self.progress_style}")


class EvenSeeder:
    """
    Queue-driven evenly-spaced streamline placement.

    Parameters
    ----------
    field : BaseField
        Vector field (normally a VectorField)
    d_sep : float
        Minimum distance between distinct streamlines (density)
    d_test : float
        Early-termination distance while tracing, 0 < d_test < d_sep
    options : SeedingOptions, optional

    Example
    -------
    >>> seeder = EvenSeeder(field, d_sep=0.2, d_test=0.1)
    >>> dataset = seeder.run()
    """

    def __init__(
        self,
        field: BaseField,
        d_sep: float,
        d_test: float,
        options: Optional[SeedingOptions] = None,
    ):
        self.d_sep, self.d_test = validate_separation(d_sep, d_test)
        self.field = field
        self.options = options if options is not None else SeedingOptions()

        lo, hi = field.get_spatial_bounds()
        self._lo = np.asarray(lo, dtype=np.float64)
        self._hi = np.asarray(hi, dtype=np.float64)

        self.index = SeparationIndex(cell_size=self.d_sep, origin=(float(self._lo[0]), float(self._lo[1])))
        self.integrator = StreamlineIntegrator(
            field=field, d_sep=self.d_sep, d_test=self.d_test,
            index=self.index, options=self.options.integration,
        )
        self.dataset = StreamlineDataset(
            d_sep=self.d_sep, d_test=self.d_test,
            bounds=np.stack([self._lo, self._hi]),
        )
        self.queue: Deque[SeedCandidate] = deque()
        self.state = SeederState.EMPTY

        self._spacing = self.d_sep if self.options.seed_spacing is None else float(self.options.seed_spacing)
        self._sweep: Optional[Iterator[SeedCandidate]] = None
        self._stats = {"popped": 0, "accepted": 0, "rejected": 0, "trivial": 0, "sweep": 0}
        self._started_at: Optional[float] = None
        self.stop_reason: Optional[str] = None

    # ------------------------ Candidate handling ------------------------

    def _is_free(self, x: float, y: float) -> bool:
        """Candidate test: inside the domain and at least d_sep from every accepted line."""
        if not (math.isfinite(x) and math.isfinite(y)) or not self.field.contains(x, y):
            return False
        d = self.index.nearest_distance((x, y), max_radius=self.d_sep)
        return d >= self.d_sep * (1.0 - SEPARATION_RTOL)

    def candidates_for(self, line: Streamline, line_id: int) -> list:
        """Seed candidates every seed_spacing along both sides of a streamline."""
        positions, tangents = resample_every(line.points, self._spacing)
        out = []
        for (px, py), (tx, ty) in zip(positions.tolist(), tangents.tolist()):
            nx, ny = -ty, tx
            out.append(SeedCandidate(px + self.d_sep * nx, py + self.d_sep * ny, line_id, 1))
            out.append(SeedCandidate(px - self.d_sep * nx, py - self.d_sep * ny, line_id, -1))
        return out

    def _sweep_candidates(self) -> Iterator[SeedCandidate]:
        """Row-major grid of domain points at d_sep spacing."""
        xs = np.arange(self._lo[0], self._hi[0] + 0.5 * self.d_sep, self.d_sep)
        ys = np.arange(self._lo[1], self._hi[1] + 0.5 * self.d_sep, self.d_sep)
        xs = np.minimum(xs, self._hi[0])
        ys = np.minimum(ys, self._hi[1])
        for y in ys.tolist():
            for x in xs.tolist():
                yield SeedCandidate(x, y)

    def _accept(self, candidate: SeedCandidate) -> Optional[int]:
        """Trace from an accepted seed; store and enqueue if non-trivial."""
        line = self.integrator.trace(candidate.point)
        if line is None:
            self._stats["trivial"] += 1
            return None
        line_id = self.dataset.add(line)
        self.index.insert(line.points, line_id)
        self.queue.extend(self.candidates_for(line, line_id))
        self._stats["accepted"] += 1
        return line_id

    # ------------------------ State machine ------------------------

    def start(self, seed: Optional[Tuple[float, float]] = None) -> Optional[int]:
        """
        Place the first streamline.

        Parameters
        ----------
        seed : (x, y), optional
            Initial seed; defaults to the centre of the domain. A seed
            outside the domain is skipped.

        Returns
        -------
        int or None
            Id of the first streamline, or None if the seed gave nothing
        """
        if self.state != SeederState.EMPTY:
            raise RuntimeError(f"Seeder already started (state={self.state.value})")
        if seed is None:
            mid = 0.5 * (self._lo + self._hi)
            seed = (float(mid[0]), float(mid[1]))
        self._started_at = time.perf_counter()
        self.state = SeederState.ACTIVE

        x, y = float(seed[0]), float(seed[1])
        if not self._is_free(x, y):
            return None
        return self._accept(SeedCandidate(x, y))

    def _next_candidate(self) -> Optional[SeedCandidate]:
        if self.queue:
            return self.queue.popleft()
        if not self.options.fill_gaps:
            return None
        if self._sweep is None:
            self._sweep = self._sweep_candidates()
        for candidate in self._sweep:
            self._stats["sweep"] += 1
            if self._is_free(candidate.x, candidate.y):
                return candidate
        return None

    def step(self) -> bool:
        """
        Pop and process one candidate.

        Returns
        -------
        bool
            False once the seeder is terminal
        """
        if self.state == SeederState.EMPTY:
            self.start()
        if self.state == SeederState.TERMINAL:
            return False

        candidate = self._next_candidate()
        if candidate is None:
            self._finish("queue_empty")
            return False

        self._stats["popped"] += 1
        if self._is_free(candidate.x, candidate.y):
            self._accept(candidate)
        else:
            self._stats["rejected"] += 1
        return True

    def _cap_reached(self) -> Optional[str]:
        opts = self.options
        if opts.max_iterations is not None and self._stats["popped"] >= int(opts.max_iterations):
            return "max_iterations"
        if opts.max_seconds is not None and self._started_at is not None:
            if time.perf_counter() - self._started_at >= float(opts.max_seconds):
                return "max_seconds"
        return None

    def _finish(self, reason: str) -> None:
        self.state = SeederState.TERMINAL
        self.stop_reason = reason
        if reason != "queue_empty":
            warnings.warn(
                f"Seeding stopped early ({reason}) with {len(self.queue)} candidates left; "
                f"returning {len(self.dataset)} streamlines"
            )

    def run(self, seed: Optional[Tuple[float, float]] = None) -> StreamlineDataset:
        """
        Run the placement loop to completion.

        Parameters
        ----------
        seed : (x, y), optional
            Initial seed; defaults to the domain centre

        Returns
        -------
        StreamlineDataset
        """
        if self.state == SeederState.EMPTY:
            self.start(seed)

        progress = ProgressReporter(self.options.progress_style, desc="Seeding")
        try:
            while self.state != SeederState.TERMINAL:
                reason = self._cap_reached()
                if reason is not None:
                    self._finish(reason)
                    break
                if not self.step():
                    break
                popped = self._stats["popped"]
                progress.update(popped, popped + len(self.queue), lines=len(self.dataset))
        finally:
            progress.close(self._stats["popped"], lines=len(self.dataset))

        elapsed = time.perf_counter() - self._started_at if self._started_at is not None else 0.0
        self.dataset.metadata.update({
            "stop_reason": self.stop_reason,
            "elapsed_s": elapsed,
            "integrator": self.options.integration.integrator,
            "separation_mode": self.options.separation_mode,
            **self._stats,
        })

        result = self.dataset
        if self.options.separation_mode == "final":
            result = result.refresh_separation()

        if self.options.verbose:
            print(f"🌊 Placed {len(result)} streamlines "
                  f"({result.total_points} points, length {result.total_length:.3f}) "
                  f"in {elapsed:.3f}s")
            print(f"   Candidates: {self._stats['popped']} popped, {self._stats['accepted']} accepted, "
                  f"{self._stats['rejected']} rejected, {self._stats['trivial']} trivial")
        return result


def even_stream_data(
    x,
    y,
    u,
    v,
    d_sep: float,
    d_test: float,
    seed: Optional[Tuple[float, float]] = None,
    **options,
) -> StreamlineDataset:
    """
    Compute evenly-spaced streamlines for a gridded vector field.

    Parameters
    ----------
    x, y : array-like
        Grid axes (1D) or meshgrid arrays (2D); ``y=None`` reuses ``x``
    u, v : array-like
        Vector components, shape (len(y), len(x))
    d_sep : float
        Separation distance
    d_test : float
        Tracing termination distance, 0 < d_test < d_sep
    seed : (x, y), optional
        Initial seed; defaults to the domain centre
    **options
        SeedingOptions fields; IntegrationOptions fields are accepted too
        and routed to ``SeedingOptions.integration``

    Returns
    -------
    StreamlineDataset
    """
    integration_keys = set(IntegrationOptions.__dataclass_fields__)
    integration_kwargs = {k: options.pop(k) for k in list(options) if k in integration_keys}
    seeding = SeedingOptions(integration=IntegrationOptions(**integration_kwargs), **options)
    vf = VectorField(x=x, y=y, u=u, v=v)
    return EvenSeeder(vf, d_sep, d_test, seeding).run(seed)
