# prettystream/tracing/integrate.py
"""
Single-streamline tracing with separation-aware termination.

A streamline is integrated from its seed forward and then backward along
the normalized field. Each direction stops on its own when it leaves the
domain, reaches a critical point, comes closer than ``d_test`` to an
already accepted streamline, produces a non-finite position, or runs out
of steps.
"""

from __future__ import annotations

import math
import dataclasses
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from ..errors import ParameterError
from ..fields.base import BaseField
from ..integrators import DirectionFn, Point, get_integrator
from ..spatial.neighbors import SeparationIndex
from ..utils.config import get_config
from .streamline import Streamline, Termination

# Interior steps shorter than this fraction of h mean the stages disagree,
# i.e. a critical point lies within one step
_STALL_FRACTION = 0.1
# Clipped exit segments shorter than this fraction of h are dropped
_CLIP_FRACTION = 1e-9
# Streamlines this short are dropped regardless of min_length
_MIN_ARC = 1e-12


def validate_separation(d_sep: float, d_test: float) -> Tuple[float, float]:
    """Check 0 < d_test < d_sep, both finite; return them as floats."""
    try:
        d_sep = float(d_sep)
        d_test = float(d_test)
    except (TypeError, ValueError):
        raise ParameterError(f"d_sep and d_test must be numbers, got {d_sep!r}, {d_test!r}") from None
    if not (math.isfinite(d_sep) and math.isfinite(d_test)):
        raise ParameterError(f"d_sep and d_test must be finite, got {d_sep}, {d_test}")
    if d_sep <= 0.0:
        raise ParameterError(f"d_sep must be positive, got {d_sep}")
    if d_test <= 0.0:
        raise ParameterError(f"d_test must be positive, got {d_test}")
    if d_test >= d_sep:
        raise ParameterError(f"d_test must be smaller than d_sep, got d_test={d_test}, d_sep={d_sep}")
    return d_sep, d_test


@dataclass
class IntegrationOptions:
    """
    Settings for tracing one streamline.

    Fields left as None take the package-wide defaults from
    ``get_config()`` at construction time.
    """
    integrator: Optional[str] = None        # 'euler' | 'rk2' | 'rk4'
    step_fraction: Optional[float] = None   # step as fraction of local cell size
    max_step: Optional[float] = None        # absolute step cap; None -> d_test / 2
    max_steps: Optional[int] = None         # per direction
    max_turn_angle: float = 90.0            # degrees between consecutive steps
    min_length: float = 0.0                 # drop streamlines at or below this arc length
    close_loops: bool = True                # stop when the forward trace returns to its seed

    def __post_init__(self):
        cfg = get_config()
        if self.integrator is None:
            self.integrator = cfg.integrator
        if self.step_fraction is None:
            self.step_fraction = cfg.step_fraction
        if self.max_steps is None:
            self.max_steps = cfg.max_steps

        get_integrator(self.integrator)
        if not (0.0 < float(self.step_fraction) <= 1.0):
            raise ParameterError(f"step_fraction must be in (0, 1], got {self.step_fraction}")
        if self.max_step is not None and not (float(self.max_step) > 0.0 and math.isfinite(self.max_step)):
            raise ParameterError(f"max_step must be positive, got {self.max_step}")
        if int(self.max_steps) < 1:
            raise ParameterError(f"max_steps must be positive, got {self.max_steps}")
        if not (0.0 < float(self.max_turn_angle) <= 180.0):
            raise ParameterError(f"max_turn_angle must be in (0, 180], got {self.max_turn_angle}")
        if float(self.min_length) < 0.0:
            raise ParameterError(f"min_length must be >= 0, got {self.min_length}")
        self.max_steps = int(self.max_steps)


@dataclass
class StreamlineIntegrator:
    """
    Traces streamlines against a SeparationIndex of accepted streamlines.

    The index is only read here; inserting accepted streamlines is the
    caller's job, so the line being traced is never compared with itself.

    Attributes
    ----------
    field : BaseField
        Vector field to follow
    d_sep : float
        Separation distance; also the radius of separation queries
    d_test : float
        Tracing stops before a point closer than this to another streamline
    index : SeparationIndex
        Points of accepted streamlines
    options : IntegrationOptions
    """
    field: BaseField
    d_sep: float
    d_test: float
    index: SeparationIndex
    options: IntegrationOptions = dataclasses.field(default_factory=IntegrationOptions)

    def __post_init__(self):
        self.d_sep, self.d_test = validate_separation(self.d_sep, self.d_test)
        self._step_fn = get_integrator(self.options.integrator)
        self._max_step = self.d_test / 2.0 if self.options.max_step is None else float(self.options.max_step)
        self._cos_turn = math.cos(math.radians(self.options.max_turn_angle))
        lo, hi = self.field.get_spatial_bounds()
        self._lo = (float(lo[0]), float(lo[1]))
        self._hi = (float(hi[0]), float(hi[1]))

    # ------------------------ Helpers ------------------------

    def _direction(self, sign: float, outside: Optional[List[Point]] = None) -> DirectionFn:
        """Unit field direction times ``sign``; positions outside the domain are appended to ``outside``."""
        fld = self.field

        def direction(x: float, y: float) -> Optional[Point]:
            v = fld.sample(x, y)
            if v is None:
                if outside is not None:
                    outside.append((x, y))
                return None
            vx, vy = v
            if fld.is_critical(vx, vy):
                return None
            m = math.hypot(vx, vy)
            return sign * vx / m, sign * vy / m

        return direction

    def step_length(self, x: float, y: float) -> float:
        """Step at (x, y): a fraction of the local cell size, capped by max_step."""
        dx, dy = self.field.cell_spacing(x, y)
        return min(self.options.step_fraction * min(dx, dy), self._max_step)

    def separation(self, x: float, y: float) -> float:
        """Distance to the nearest accepted streamline (inf beyond d_sep)."""
        return self.index.nearest_distance((x, y), max_radius=self.d_sep)

    def _clip_to_domain(self, x0: float, y0: float, x1: float, y1: float) -> Point:
        """Point where the segment (x0, y0) -> (x1, y1) leaves the domain box."""
        (xmin, ymin), (xmax, ymax) = self._lo, self._hi
        dx, dy = x1 - x0, y1 - y0
        t = 1.0
        if x1 < xmin and dx != 0.0:
            t = min(t, (xmin - x0) / dx)
        elif x1 > xmax and dx != 0.0:
            t = min(t, (xmax - x0) / dx)
        if y1 < ymin and dy != 0.0:
            t = min(t, (ymin - y0) / dy)
        elif y1 > ymax and dy != 0.0:
            t = min(t, (ymax - y0) / dy)
        t = max(t, 0.0)
        cx = min(max(x0 + t * dx, xmin), xmax)
        cy = min(max(y0 + t * dy, ymin), ymax)
        return cx, cy

    # ------------------------ Tracing ------------------------

    def _trace_direction(self, seed: Point, sign: float) -> Tuple[List[Point], List[float], Termination]:
        """Integrate one direction; the seed itself is not included."""
        fld = self.field
        outside: List[Point] = []
        direction = self._direction(sign, outside)
        pts: List[Point] = []
        seps: List[float] = []
        x, y = seed
        prev_dir: Optional[Point] = None
        travelled = 0.0

        for _ in range(self.options.max_steps):
            h = self.step_length(x, y)
            del outside[:]
            nxt = self._step_fn((x, y), h, direction)
            if nxt is None:
                # A stage left the domain: take an Euler step. Otherwise a stage hit a critical point.
                if not outside:
                    return pts, seps, Termination.CRITICAL_POINT
                k1 = direction(x, y)
                if k1 is None:
                    return pts, seps, Termination.CRITICAL_POINT
                nxt = (x + h * k1[0], y + h * k1[1])

            nx, ny = nxt
            if not (math.isfinite(nx) and math.isfinite(ny)):
                return pts, seps, Termination.NON_FINITE

            exiting = not fld.contains(nx, ny)
            if exiting:
                nx, ny = self._clip_to_domain(x, y, nx, ny)

            sx, sy = nx - x, ny - y
            seg = math.hypot(sx, sy)
            if exiting and seg <= _CLIP_FRACTION * h:
                return pts, seps, Termination.DOMAIN_EXIT
            if not exiting and seg < _STALL_FRACTION * h:
                return pts, seps, Termination.CRITICAL_POINT

            v = fld.sample(nx, ny)
            if v is None:
                return pts, seps, Termination.DOMAIN_EXIT
            if fld.is_critical(v[0], v[1]):
                return pts, seps, Termination.CRITICAL_POINT

            if prev_dir is not None and (sx * prev_dir[0] + sy * prev_dir[1]) / seg < self._cos_turn:
                return pts, seps, Termination.CRITICAL_POINT

            d = self.separation(nx, ny)
            if d < self.d_test:
                return pts, seps, Termination.SEPARATION

            if (
                self.options.close_loops
                and sign > 0
                and travelled + seg >= 2.0 * self.d_sep
                and math.hypot(nx - seed[0], ny - seed[1]) <= h
            ):
                return pts, seps, Termination.LOOP_CLOSED

            pts.append((nx, ny))
            seps.append(d)
            travelled += seg
            prev_dir = (sx / seg, sy / seg)
            x, y = nx, ny

            if exiting:
                return pts, seps, Termination.DOMAIN_EXIT

        return pts, seps, Termination.MAX_STEPS

    def trace(self, seed) -> Optional[Streamline]:
        """
        Trace a streamline through ``seed``.

        Returns
        -------
        Streamline or None
            None when the seed is outside the domain, on a critical point,
            closer than d_test to another streamline, or when the result
            is no longer than ``options.min_length``.
        """
        sx, sy = float(seed[0]), float(seed[1])
        if not (math.isfinite(sx) and math.isfinite(sy)) or not self.field.contains(sx, sy):
            return None
        v = self.field.sample(sx, sy)
        if v is None or self.field.is_critical(v[0], v[1]):
            return None
        seed_sep = self.separation(sx, sy)
        if seed_sep < self.d_test:
            return None

        s = (sx, sy)
        fwd, fwd_sep, fwd_term = self._trace_direction(s, 1.0)
        if fwd_term == Termination.LOOP_CLOSED:
            points = [s] + fwd + [s]
            seps = [seed_sep] + fwd_sep + [seed_sep]
            seed_index = 0
            bwd_term = Termination.LOOP_CLOSED
        else:
            bwd, bwd_sep, bwd_term = self._trace_direction(s, -1.0)
            points = bwd[::-1] + [s] + fwd
            seps = bwd_sep[::-1] + [seed_sep] + fwd_sep
            seed_index = len(bwd)

        if len(points) < 2:
            return None
        line = Streamline(
            points=np.asarray(points, dtype=np.float64),
            separation=np.asarray(seps, dtype=np.float64),
            seed_index=seed_index,
            forward=fwd_term,
            backward=bwd_term,
        )
        if line.length <= max(float(self.options.min_length), _MIN_ARC):
            return None
        return line


def integrate(
    field: BaseField,
    seed,
    d_sep: float,
    d_test: float,
    index: SeparationIndex,
    options: Optional[IntegrationOptions] = None,
) -> Optional[Streamline]:
    """Functional form of ``StreamlineIntegrator(...).trace(seed)``."""
    integrator = StreamlineIntegrator(
        field=field, d_sep=d_sep, d_test=d_test, index=index,
        options=options if options is not None else IntegrationOptions(),
    )
    return integrator.trace(seed)
