"""Primary ray generation for a fixed pinhole camera.

The camera sits at the world origin looking down -z with +y up. The image
plane lies at z = -1 and its half-width is tan(fov / 2), with fov the
horizontal field of view in degrees. Pixel (0, 0) is the top-left corner of
the image; rays pass through pixel centers.

For a pixel (x, y) of a width x height image:
    fov_adjustment = tan(radians(fov) / 2)
    aspect_ratio   = width / height
    sensor_x = (((x + 0.5) / width) * 2 - 1) * aspect_ratio * fov_adjustment
    sensor_y = (1 - ((y + 0.5) / height) * 2) * fov_adjustment

The aspect ratio scales the horizontal sensor extent, which is only a valid
framing for landscape or square images.

Example:
    >>> from raycaster.core.runtime import init_taichi
    >>> init_taichi()
    >>> from raycaster.camera.primary import make_prime_ray
    >>> @ti.kernel
    ... def center_ray() -> vec3:
    ...     return make_prime_ray(1, 1, 2, 2, 90.0).direction
"""

import math

import taichi as ti
import taichi.math as tm

from raycaster.core.ray import Ray, normalize, vec3


def check_image_dimensions(width: int, height: int) -> None:
    """Validate the image size before rendering.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.

    Raises:
        ValueError: If either dimension is not positive, or the image is
            taller than it is wide.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width < height:
        raise ValueError(
            f"Image width ({width}) must be at least the image height ({height})"
        )


def check_fov(fov: float) -> None:
    """Validate a horizontal field of view in degrees.

    Raises:
        ValueError: If fov is not strictly between 0 and 180 degrees.
    """
    if not (0.0 < fov < 180.0) or not math.isfinite(fov):
        raise ValueError(f"Field of view must be in (0, 180) degrees, got {fov}")


@ti.func
def make_prime_ray(x: ti.i32, y: ti.i32, width: ti.i32, height: ti.i32, fov: ti.f64) -> Ray:
    """Create the primary ray through the center of pixel (x, y).

    Args:
        x: Pixel column (0 = left).
        y: Pixel row (0 = top).
        width: Image width in pixels.
        height: Image height in pixels.
        fov: Horizontal field of view in degrees.

    Returns:
        A Ray from the origin with unit direction.
    """
    fw = ti.cast(width, ti.f64)
    fh = ti.cast(height, ti.f64)
    fov_adjustment = ti.tan(tm.radians(fov) / 2.0)
    aspect_ratio = fw / fh

    sensor_x = (((ti.cast(x, ti.f64) + 0.5) / fw) * 2.0 - 1.0) * aspect_ratio * fov_adjustment
    sensor_y = (1.0 - ((ti.cast(y, ti.f64) + 0.5) / fh) * 2.0) * fov_adjustment

    return Ray(
        origin=vec3(0.0, 0.0, 0.0),
        direction=normalize(vec3(sensor_x, sensor_y, -1.0)),
    )
