"""Preview module for output and visualization.

Components:
    export: 8-bit conversion and PNG export (Pillow)
    display: Matplotlib-based static preview

Example:
    >>> from raycaster.preview import save_png, show_preview
    >>> from raycaster.core.renderer import Renderer
    >>>
    >>> renderer = Renderer(800, 600)
    >>> renderer.render()
    >>> show_preview(renderer)
    >>> save_png(renderer, "output.png")
"""

from raycaster.preview.display import show_preview
from raycaster.preview.export import image_to_uint8, save_png, save_png_from_array

__all__ = [
    "show_preview",
    "save_png",
    "save_png_from_array",
    "image_to_uint8",
]
