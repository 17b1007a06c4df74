"""Camera module for primary ray generation.

Components:
    primary: Fixed pinhole camera at the origin looking down -z

Pixel coordinates:
    x in [0, width):  left to right across the image
    y in [0, height): top to bottom across the image

One ray is cast through the center of each pixel; there is no jitter and
no anti-aliasing.
"""

from .primary import check_fov, check_image_dimensions, make_prime_ray

__all__ = [
    "make_prime_ray",
    "check_image_dimensions",
    "check_fov",
]
