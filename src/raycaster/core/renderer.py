"""High-level rendering API.

This module wraps the integrator functions behind two entry points:

- render(config): build the scene described by a SceneConfig, render it and
  return the image as a (height, width, 3) uint8 array.
- Renderer: holds the render settings for repeated renders of the scene
  currently loaded in the scene tables.

Example:
    >>> from raycaster.core.runtime import init_taichi
    >>> init_taichi()
    >>> from raycaster.core.renderer import Renderer
    >>> from raycaster.scene.showcase import create_showcase_scene
    >>>
    >>> scene = create_showcase_scene(320, 240)
    >>> renderer = Renderer.from_scene(scene)
    >>> renderer.render()
    >>> renderer.save_image("showcase.png")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from raycaster.core.color import BACKGROUND_COLOR, Color
from raycaster.core.integrator import (
    DEFAULT_FOV,
    get_image_numpy,
    render_image,
    render_pixel,
    setup_render_target,
)
from raycaster.scene.lights import DEFAULT_SHADOW_BIAS, set_shadow_bias
from raycaster.scene.manager import SceneConfig, SceneManager

if TYPE_CHECKING:
    from pathlib import Path


class Renderer:
    """A ray casting renderer bound to a set of render settings.

    The renderer renders whatever scene is currently loaded in the scene
    tables (see SceneManager). Settings are applied to the device-side
    state each time render() is called, and each renderer keeps a copy of its
    own last image.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        fov: Horizontal field of view in degrees.
        shadow_bias: Offset applied to shadow ray origins.
        background: Color for rays that hit nothing.
    """

    def __init__(
        self,
        width: int,
        height: int,
        fov: float = DEFAULT_FOV,
        shadow_bias: float = DEFAULT_SHADOW_BIAS,
        background: Color | tuple[float, float, float] = BACKGROUND_COLOR,
    ) -> None:
        """Initialize the renderer.

        Args:
            width: Image width in pixels (max 2048, at least height).
            height: Image height in pixels (max 2048).
            fov: Horizontal field of view in degrees.
            shadow_bias: Offset applied to shadow ray origins.
            background: Color for rays that hit nothing.

        Raises:
            ValueError: If any setting is invalid.
        """
        self._width = width
        self._height = height
        self._fov = fov
        self._shadow_bias = shadow_bias
        self._background = Color.coerce(background)
        self._image: npt.NDArray[np.float32] | None = None
        self._apply_settings()

    @classmethod
    def from_scene(cls, scene: SceneManager) -> Renderer:
        """Create a renderer using the settings of a scene."""
        return cls(
            scene.width,
            scene.height,
            fov=scene.fov,
            shadow_bias=scene.shadow_bias,
            background=scene.background,
        )

    def _apply_settings(self) -> None:
        setup_render_target(self._width, self._height, self._fov, self._background)
        set_shadow_bias(self._shadow_bias)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def fov(self) -> float:
        """Get the horizontal field of view in degrees."""
        return self._fov

    @property
    def shadow_bias(self) -> float:
        """Get the shadow ray offset."""
        return self._shadow_bias

    @property
    def background(self) -> Color:
        """Get the background color."""
        return self._background

    def render(self) -> None:
        """Render the loaded scene into the render target."""
        self._apply_settings()
        render_image()
        self._image = get_image_numpy()

    def render_pixel(self, x: int, y: int) -> tuple[float, float, float]:
        """Compute the unclamped color of one pixel (0, 0 = top-left)."""
        self._apply_settings()
        return render_pixel(x, y)

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the rendered image as unclamped floats.

        Returns:
            NumPy array of shape (height, width, 3) with dtype float32.

        Raises:
            RuntimeError: If render() has not been called.
        """
        if self._image is None:
            raise RuntimeError("Nothing rendered yet. Call render() first.")
        return self._image.copy()

    def get_image_uint8(self) -> npt.NDArray[np.uint8]:
        """Get the rendered image as 8-bit channels.

        Colors are clamped to [0, 1], scaled by 255 and rounded.

        Returns:
            NumPy array of shape (height, width, 3) with dtype uint8.
        """
        from raycaster.preview.export import image_to_uint8

        return image_to_uint8(self.get_image_numpy())

    def save_image(self, filepath: str | Path) -> None:
        """Save the rendered image as a PNG file."""
        from raycaster.preview.export import save_png

        save_png(self, filepath)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"Renderer(width={self.width}, height={self.height}, fov={self.fov}, "
            f"rendered={self._image is not None})"
        )


def render(config: SceneConfig | SceneManager) -> npt.NDArray[np.uint8]:
    """Render a scene and return the 8-bit image.

    Args:
        config: A SceneConfig to build and render, or a SceneManager whose
            scene is already loaded.

    Returns:
        NumPy array of shape (height, width, 3) with dtype uint8.

    Raises:
        ValueError: If the scene description is invalid.
    """
    if isinstance(config, SceneConfig):
        scene = SceneManager()
        scene.from_config(config)
    else:
        scene = config

    renderer = Renderer.from_scene(scene)
    renderer.render()
    return renderer.get_image_uint8()
