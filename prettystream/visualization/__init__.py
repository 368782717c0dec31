"""
Visualization utilities for prettystream.

- geometry: arrow glyphs, taper outlines, texture intensity (pure NumPy)
- static: Matplotlib plots in the line, arrow, taper and texture styles, plus the field itself
- dynamic: animated texture (Matplotlib FuncAnimation)
"""

from .geometry import (
    arrow_glyphs,
    polyline_segments,
    taper_polygon,
    taper_widths,
    texture_intensity,
)
from .static import (
    ArrowStyle,
    LineStyle,
    TaperStyle,
    TextureStyle,
    plot_stream_arrow,
    plot_stream_line,
    plot_stream_taper,
    plot_stream_texture,
    plot_vector_field,
)
from .dynamic import animate_stream_texture

__all__ = [
    # geometry
    "arrow_glyphs",
    "polyline_segments",
    "taper_polygon",
    "taper_widths",
    "texture_intensity",
    # static
    "LineStyle",
    "ArrowStyle",
    "TaperStyle",
    "TextureStyle",
    "plot_stream_line",
    "plot_stream_arrow",
    "plot_stream_taper",
    "plot_stream_texture",
    "plot_vector_field",
    # dynamic
    "animate_stream_texture",
]
