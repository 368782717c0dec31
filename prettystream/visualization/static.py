# prettystream/visualization/static.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple
import math
import numpy as np

try:
    import matplotlib.pyplot as plt
    from matplotlib.collections import LineCollection, PolyCollection
    from matplotlib import colormaps
    from matplotlib.colors import is_color_like
    MPL_AVAILABLE = True
except Exception:
    MPL_AVAILABLE = False

from ..errors import ParameterError
from .geometry import arrow_glyphs, polyline_segments, taper_polygon, texture_intensity


def _ensure_mpl():
    if not MPL_AVAILABLE:
        raise RuntimeError("Matplotlib is required (pip install matplotlib)")


def _check_color(name: str, value) -> None:
    if value is not None and not is_color_like(value):
        raise ParameterError(f"{name} is not a valid color: {value!r}")


def _check_positive(name: str, value, allow_none: bool = False) -> None:
    if value is None and allow_none:
        return
    if value is None or not (float(value) > 0 and math.isfinite(value)):
        raise ParameterError(f"{name} must be positive, got {value}")


# ------------------------ Style options ------------------------

@dataclass
class LineStyle:
    """Plain streamline style."""
    color: str = "k"
    linewidth: float = 0.5
    linestyle: str = "-"
    alpha: float = 1.0

    def __post_init__(self):
        _ensure_mpl()
        _check_color("color", self.color)
        _check_positive("linewidth", self.linewidth)
        if not (0.0 <= float(self.alpha) <= 1.0):
            raise ParameterError(f"alpha must be in [0, 1], got {self.alpha}")


@dataclass
class ArrowStyle(LineStyle):
    """
    Streamlines decorated with arrowheads.

    Lengths are in data units; None means a multiple of the dataset's
    d_sep (arrow_space -> 4 * d_sep, arrow_length -> d_sep / 2).
    """
    arrow_space: Optional[float] = None
    arrow_length: Optional[float] = None
    tip_angle: float = 30.0              # degrees
    base_angle: float = 10.0             # degrees
    arrow_color: Optional[str] = None    # None -> color

    def __post_init__(self):
        super().__post_init__()
        _check_positive("arrow_space", self.arrow_space, allow_none=True)
        _check_positive("arrow_length", self.arrow_length, allow_none=True)
        if not (0.0 < float(self.tip_angle) < 90.0):
            raise ParameterError(f"tip_angle must be in (0, 90), got {self.tip_angle}")
        if not (0.0 <= float(self.base_angle) < 90.0 - float(self.tip_angle)):
            raise ParameterError(
                f"base_angle must be in [0, {90.0 - float(self.tip_angle)}), got {self.base_angle}"
            )
        _check_color("arrow_color", self.arrow_color)


@dataclass
class TaperStyle:
    """Filled streamlines whose half-width grows with local separation (fractions of d_sep)."""
    color: str = "k"
    width_min: float = 0.02
    width_max: float = 0.15
    alpha: float = 1.0

    def __post_init__(self):
        _ensure_mpl()
        _check_color("color", self.color)
        if not (0.0 <= float(self.width_min) <= float(self.width_max)):
            raise ParameterError(
                f"need 0 <= width_min <= width_max, got {self.width_min}, {self.width_max}"
            )
        if float(self.width_max) > 0.5:
            raise ParameterError(f"width_max must not exceed 0.5 (half of d_sep), got {self.width_max}")
        if not (0.0 <= float(self.alpha) <= 1.0):
            raise ParameterError(f"alpha must be in [0, 1], got {self.alpha}")


@dataclass
class TextureStyle:
    """
    Sawtooth-shaded streamlines.

    ``period`` is in data units; None -> 20% of the domain width. Each
    streamline gets a random phase drawn from ``seed``.
    """
    linewidth: float = 1.0
    period: Optional[float] = None
    cmap: str = "gray"
    seed: int = 0

    def __post_init__(self):
        _ensure_mpl()
        _check_positive("linewidth", self.linewidth)
        _check_positive("period", self.period, allow_none=True)
        if self.cmap not in colormaps:
            raise ParameterError(f"Unknown colormap: {self.cmap}")


# ------------------------ Helpers ------------------------

def _domain_limits(dataset) -> Optional[Tuple[Tuple[float, float], Tuple[float, float]]]:
    if dataset.bounds is not None:
        (xmin, ymin), (xmax, ymax) = np.asarray(dataset.bounds, dtype=np.float64)
        return (xmin, xmax), (ymin, ymax)
    if dataset.total_points == 0:
        return None
    pts = np.concatenate([line.points for line in dataset], axis=0)
    (xmin, ymin), (xmax, ymax) = pts.min(axis=0), pts.max(axis=0)
    return (xmin, xmax), (ymin, ymax)


def _texture_period(dataset, style: TextureStyle) -> float:
    if style.period is not None:
        return float(style.period)
    limits = _domain_limits(dataset)
    if limits is None:
        return 1.0
    (xmin, xmax), _ = limits
    return 0.2 * (xmax - xmin) if xmax > xmin else 1.0


def texture_phases(n_lines: int, seed: int = 0) -> np.ndarray:
    """Deterministic per-streamline phase offsets in [0, 1)."""
    return np.random.default_rng(seed).random(n_lines)


def texture_arrays(dataset, style: TextureStyle, phase: float = 0.0) -> Tuple[np.ndarray, np.ndarray]:
    """
    Segments and intensities for the textured style.

    Returns
    -------
    segments : (M, 2, 2)
    intensity : (M,)
    """
    period = _texture_period(dataset, style)
    offsets = texture_phases(len(dataset), style.seed)
    segs, vals = [], []
    for line, off in zip(dataset, offsets):
        segs.append(polyline_segments(line.points))
        vals.append(texture_intensity(line.points, period, phase=phase + off))
    if not segs:
        return np.zeros((0, 2, 2)), np.zeros(0)
    return np.concatenate(segs, axis=0), np.concatenate(vals)


def _prepare_axes(ax):
    if ax is None:
        fig, ax = plt.subplots(figsize=(6, 6), dpi=120)
    else:
        fig = ax.figure
    return fig, ax


def _finish_axes(fig, ax, limits, title, equal, show, save_path):
    if limits is not None:
        (xmin, xmax), (ymin, ymax) = limits
        ax.set_xlim(xmin, xmax); ax.set_ylim(ymin, ymax)
    if equal:
        ax.set_aspect("equal", adjustable="box")
    if title:
        ax.set_title(title)
    fig.tight_layout()
    if save_path is not None:
        fig.savefig(save_path, bbox_inches="tight")
    if show:
        plt.show()
    return fig, ax


# ------------------------ Plotting ------------------------

def plot_stream_line(
    dataset,
    style: Optional[LineStyle] = None,
    ax: Optional["plt.Axes"] = None,
    title: Optional[str] = None,
    equal: bool = True,
    show: bool = True,
    save_path: Optional[str] = None,
):
    """
    Plot streamlines as plain lines.

    dataset: StreamlineDataset
    style: LineStyle (defaults if None)
    """
    _ensure_mpl()
    style = style if style is not None else LineStyle()
    fig, ax = _prepare_axes(ax)

    lc = LineCollection(
        [line.points for line in dataset],
        colors=style.color, linewidths=style.linewidth,
        linestyles=style.linestyle, alpha=style.alpha,
    )
    ax.add_collection(lc)
    return _finish_axes(fig, ax, _domain_limits(dataset), title, equal, show, save_path)


def plot_stream_arrow(
    dataset,
    style: Optional[ArrowStyle] = None,
    ax: Optional["plt.Axes"] = None,
    title: Optional[str] = None,
    equal: bool = True,
    show: bool = True,
    save_path: Optional[str] = None,
):
    """
    Plot streamlines with arrowheads every ``arrow_space`` of arc length.

    dataset: StreamlineDataset
    style: ArrowStyle (defaults if None)
    """
    _ensure_mpl()
    style = style if style is not None else ArrowStyle()
    space = style.arrow_space if style.arrow_space is not None else 4.0 * dataset.d_sep
    length = style.arrow_length if style.arrow_length is not None else 0.5 * dataset.d_sep

    fig, ax = plot_stream_line(dataset, style=style, ax=ax, equal=False, show=False)

    glyphs = []
    for line in dataset:
        glyphs.extend(arrow_glyphs(line.points, space, length, style.tip_angle, style.base_angle))
    color = style.arrow_color if style.arrow_color is not None else style.color
    ax.add_collection(PolyCollection(glyphs, facecolors=color, edgecolors="none", alpha=style.alpha))
    return _finish_axes(fig, ax, _domain_limits(dataset), title, equal, show, save_path)


def plot_stream_taper(
    dataset,
    style: Optional[TaperStyle] = None,
    ax: Optional["plt.Axes"] = None,
    title: Optional[str] = None,
    equal: bool = True,
    show: bool = True,
    save_path: Optional[str] = None,
):
    """
    Plot streamlines as filled shapes, widest where neighbours are far.

    dataset: StreamlineDataset (separation values drive the width)
    style: TaperStyle (defaults if None)
    """
    _ensure_mpl()
    style = style if style is not None else TaperStyle()
    fig, ax = _prepare_axes(ax)

    polys = [
        taper_polygon(line.points, line.separation, dataset.d_sep, style.width_min, style.width_max)
        for line in dataset
    ]
    polys = [p for p in polys if p.shape[0] >= 3]
    ax.add_collection(PolyCollection(polys, facecolors=style.color, edgecolors="none", alpha=style.alpha))
    return _finish_axes(fig, ax, _domain_limits(dataset), title, equal, show, save_path)


def plot_stream_texture(
    dataset,
    style: Optional[TextureStyle] = None,
    phase: float = 0.0,
    ax: Optional["plt.Axes"] = None,
    title: Optional[str] = None,
    equal: bool = True,
    show: bool = True,
    save_path: Optional[str] = None,
):
    """
    Plot streamlines shaded by a sawtooth along arc length (LIC-like for dense lines).

    dataset: StreamlineDataset
    style: TextureStyle (defaults if None)
    phase: pattern shift, fraction of a period
    """
    _ensure_mpl()
    style = style if style is not None else TextureStyle()
    fig, ax = _prepare_axes(ax)

    segments, intensity = texture_arrays(dataset, style, phase)
    lc = LineCollection(segments, cmap=style.cmap, linewidths=style.linewidth)
    lc.set_array(intensity)
    lc.set_clim(0.0, 1.0)
    ax.add_collection(lc)
    return _finish_axes(fig, ax, _domain_limits(dataset), title, equal, show, save_path)


def plot_vector_field(
    field,
    resolution: int = 200,
    cmap: str = "viridis",
    quiver: bool = True,
    ax: Optional["plt.Axes"] = None,
    title: Optional[str] = None,
    equal: bool = True,
    show: bool = True,
    save_path: Optional[str] = None,
):
    """
    Plot a vector field as a speed image with grid-node arrows on top.

    The speed background is evaluated with ``field.sample_many`` on a
    ``resolution`` x ``resolution`` grid spanning the domain.

    Parameters
    ----------
    field : VectorField
    resolution : int
        Background samples per axis, at least 2
    cmap : str
        Colormap of the speed image
    quiver : bool
        Draw one arrow per grid node
    """
    _ensure_mpl()
    if int(resolution) < 2:
        raise ParameterError(f"resolution must be at least 2, got {resolution}")
    if cmap not in colormaps:
        raise ParameterError(f"Unknown colormap: {cmap}")
    fig, ax = _prepare_axes(ax)

    lo, hi = field.get_spatial_bounds()
    xs = np.linspace(lo[0], hi[0], int(resolution))
    ys = np.linspace(lo[1], hi[1], int(resolution))
    X, Y = np.meshgrid(xs, ys)
    vec = field.sample_many(np.column_stack([X.ravel(), Y.ravel()]))
    speed = np.hypot(vec[:, 0], vec[:, 1]).reshape(X.shape)

    vmax = float(np.max(field.magnitude_grid()))
    mesh = ax.pcolormesh(X, Y, speed, shading="auto", cmap=cmap, vmin=0.0, vmax=vmax if vmax > 0 else 1.0)
    fig.colorbar(mesh, ax=ax, label="|v|")
    if quiver:
        ax.quiver(field.x, field.y, field.u, field.v, color="w")

    limits = ((float(lo[0]), float(hi[0])), (float(lo[1]), float(hi[1])))
    return _finish_axes(fig, ax, limits, title, equal, show, save_path)
