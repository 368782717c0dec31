# prettystream/visualization/dynamic.py
from __future__ import annotations
from typing import Optional

try:
    import matplotlib.pyplot as plt
    from matplotlib.animation import FuncAnimation
    MPL_AVAILABLE = True
except Exception:
    MPL_AVAILABLE = False

from ..errors import ParameterError
from .static import TextureStyle, plot_stream_texture, texture_arrays


def _ensure_mpl():
    if not MPL_AVAILABLE:
        raise RuntimeError("Matplotlib is required for animation (pip install matplotlib)")


def animate_stream_texture(
    dataset,
    frames: int = 30,
    style: Optional[TextureStyle] = None,
    interval: int = 50,
    ax: Optional["plt.Axes"] = None,
    title: Optional[str] = None,
    save_path: Optional[str] = None,
    fps: int = 20,
) -> "FuncAnimation":
    """
    Animate the textured style so the dash pattern flows downstream.

    One full period is covered over ``frames`` frames, so the animation
    loops seamlessly.

    dataset: StreamlineDataset
    frames: number of frames per cycle
    interval: delay between frames in milliseconds
    save_path: optional output file (e.g. '.gif', written with Pillow)
    """
    _ensure_mpl()
    if int(frames) < 1:
        raise ParameterError(f"frames must be positive, got {frames}")
    style = style if style is not None else TextureStyle()

    fig, ax = plot_stream_texture(dataset, style=style, ax=ax, title=title, show=False)
    collection = ax.collections[-1]

    def update(k: int):
        _, intensity = texture_arrays(dataset, style, phase=k / frames)
        collection.set_array(intensity)
        return (collection,)

    anim = FuncAnimation(fig, update, frames=int(frames), interval=interval, blit=False)
    if save_path is not None:
        anim.save(save_path, writer="pillow", fps=fps)
    return anim
