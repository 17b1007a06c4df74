"""Matplotlib-based preview display for rendered images.

Example:
    >>> from raycaster.preview.display import show_preview
    >>> from raycaster.core.renderer import Renderer
    >>>
    >>> renderer = Renderer(800, 600)
    >>> renderer.render()
    >>> show_preview(renderer)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from raycaster.preview.export import image_to_uint8

if TYPE_CHECKING:
    from raycaster.core.renderer import Renderer


def show_preview(
    source: Renderer | npt.NDArray[np.floating] | npt.NDArray[np.uint8],
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 6),
    block: bool = True,
) -> None:
    """Display a render as a Matplotlib figure.

    Args:
        source: A Renderer that has rendered, or an (H, W, 3) image array.
        title: Custom title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    if isinstance(source, np.ndarray):
        image = source if source.dtype == np.uint8 else image_to_uint8(source)
    else:
        image = source.get_image_uint8()

    fig, ax = plt.subplots(1, 1, figsize=figsize)

    ax.imshow(image)
    ax.axis("off")

    if title is None:
        height, width = image.shape[:2]
        title = f"Render Preview - {width}x{height}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
