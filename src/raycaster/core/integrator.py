"""Ray casting integrator: render target and the per-pixel kernel.

Every pixel gets exactly one primary ray. A ray that hits the scene is
shaded with direct Lambertian lighting (see raycaster.core.shading); a ray
that misses takes the background color. There is no sampling and no
accumulation, so one call to render_image() produces the final image.

The pixel loop is serialized and visits pixels in row-major order (row by
row from the top, left to right within a row).

Example:
    >>> from raycaster.core.runtime import init_taichi
    >>> init_taichi()
    >>> from raycaster.core.integrator import (
    ...     get_image_numpy, render_image, setup_render_target
    ... )
    >>> from raycaster.scene.showcase import create_showcase_scene
    >>>
    >>> scene = create_showcase_scene()
    >>> setup_render_target(scene.width, scene.height, scene.fov)
    >>> render_image()
    >>> image = get_image_numpy()
"""

import numpy as np
import numpy.typing as npt
import taichi as ti

from raycaster.camera.primary import check_fov, check_image_dimensions, make_prime_ray
from raycaster.core.color import BACKGROUND_COLOR, Color
from raycaster.core.ray import vec3
from raycaster.core.shading import shade_diffuse
from raycaster.scene.intersection import trace

# Horizontal field of view used when none is given
DEFAULT_FOV = 90.0

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Camera and background
_fov = ti.field(dtype=ti.f64, shape=())
_background = ti.Vector.field(3, dtype=ti.f32, shape=())

# Color buffer indexed [x, y], y = 0 the top row (preallocated to max size)
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(
    width: int,
    height: int,
    fov: float = DEFAULT_FOV,
    background: Color | tuple[float, float, float] = BACKGROUND_COLOR,
) -> None:
    """Initialize the render target and camera parameters.

    Sets the active image dimensions and clears the buffer. The buffer is
    preallocated to MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT to avoid Taichi
    kernel recompilation issues.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT, at most width).
        fov: Horizontal field of view in degrees.
        background: Color written for rays that hit nothing.

    Raises:
        ValueError: If the dimensions are invalid or exceed the maximum
            supported size, or fov is out of range.
    """
    check_image_dimensions(width, height)
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )
    check_fov(fov)
    bg = Color.coerce(background)

    _image_width[None] = width
    _image_height[None] = height
    _fov[None] = fov
    _background[None] = [bg.red, bg.green, bg.blue]
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the color buffer to zero."""
    _color_buffer.fill(0.0)


def reset_render_target() -> None:
    """Forget the render target so it must be set up again."""
    _render_target_initialized[None] = 0
    clear_render_target()


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions.

    Returns:
        Tuple of (width, height).
    """
    return int(_image_width[None]), int(_image_height[None])


def get_fov() -> float:
    """Get the horizontal field of view in degrees."""
    return float(_fov[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Ray Casting Core
# =============================================================================


@ti.func
def cast_pixel(x: ti.i32, y: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    """Compute the color of one pixel.

    Args:
        x: Pixel column (0 = left).
        y: Pixel row (0 = top).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        The shaded color of the nearest hit, or the background color.
    """
    ray = make_prime_ray(x, y, width, height, _fov[None])
    intersection = trace(ray)

    bg = _background[None]
    color = vec3(bg.x, bg.y, bg.z)
    if intersection.hit == 1:
        color = shade_diffuse(ray, intersection)
    return color


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_all_pixels(width: ti.i32, height: ti.i32):
    """Cast one ray per pixel in row-major order and store the colors."""
    ti.loop_config(serialize=True)
    for y, x in ti.ndrange(height, width):
        _color_buffer[x, y] = cast_pixel(x, y, width, height)


@ti.kernel
def _render_single_pixel(x: ti.i32, y: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    """Compute the color of a single pixel without writing the buffer."""
    return cast_pixel(x, y, width, height)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_pixel(x: int, y: int) -> tuple[float, float, float]:
    """Compute the color of a single pixel.

    Useful for testing and debugging. For full images use render_image().

    Args:
        x: Pixel column (0 = left).
        y: Pixel row (0 = top).

    Returns:
        Tuple of (R, G, B) color values, unclamped.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If the pixel lies outside the image.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    if not (0 <= x < width and 0 <= y < height):
        raise ValueError(f"Pixel ({x}, {y}) outside image of size {width}x{height}")
    color = _render_single_pixel(x, y, width, height)

    return (float(color[0]), float(color[1]), float(color[2]))


def render_image() -> None:
    """Render every pixel of the render target.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    _render_all_pixels(width, height)


def get_image_numpy() -> npt.NDArray[np.float32]:
    """Get the rendered image as a NumPy array.

    The colors are returned unclamped. Row 0 of the array is the top row
    of the image.

    Returns:
        NumPy array of shape (height, width, 3) with dtype float32.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()

    # Extract active region and transpose from (width, height, 3)
    image = _color_buffer.to_numpy()[:width, :height, :]
    image = np.transpose(image, (1, 0, 2))

    return np.ascontiguousarray(image, dtype=np.float32)
