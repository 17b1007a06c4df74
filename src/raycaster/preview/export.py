"""Image export utilities for rendered images.

Rendered colors are unbounded floats. For 8-bit output each channel is
clamped to [0, 1], scaled by 255 and rounded to the nearest integer. No tone
mapping or gamma encoding is applied.

Supported formats:
    - PNG (8-bit RGB via Pillow)

Example:
    >>> from raycaster.preview.export import save_png
    >>> from raycaster.core.renderer import Renderer
    >>>
    >>> renderer = Renderer(800, 600)
    >>> renderer.render()
    >>> save_png(renderer, "output.png")
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from raycaster.core.renderer import Renderer


def image_to_uint8(image: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Convert a float image to uint8 for display/export.

    Args:
        image: Image array of shape (H, W, 3), any float range.

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.

    Raises:
        ValueError: If the array is not (H, W, 3).
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Image must have shape (H, W, 3), got {image.shape}")

    clamped = np.clip(image.astype(np.float64), 0.0, 1.0)
    return np.rint(clamped * 255.0).astype(np.uint8)


def save_png_from_array(
    image: npt.NDArray[np.floating] | npt.NDArray[np.uint8],
    filepath: str | Path,
) -> None:
    """Save a NumPy array as a PNG file.

    Args:
        image: Image array of shape (H, W, 3); uint8 arrays are written
            as-is, float arrays are converted with image_to_uint8().
        filepath: Output file path (should end in .png).
    """
    if image.dtype == np.uint8:
        image_uint8 = image
    else:
        image_uint8 = image_to_uint8(image)

    pil_image = PILImage.fromarray(np.ascontiguousarray(image_uint8))
    pil_image.save(filepath)


def save_png(renderer: Renderer, filepath: str | Path) -> None:
    """Save the rendered image of a renderer as a PNG file.

    Args:
        renderer: The Renderer instance to save.
        filepath: Output file path (should end in .png).

    Raises:
        RuntimeError: If the renderer has not rendered yet.
    """
    save_png_from_array(renderer.get_image_numpy(), filepath)
