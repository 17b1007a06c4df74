"""Core rendering module.

This module contains the fundamental building blocks for ray casting:

Components:
    runtime: Taichi initialization (CPU, 64-bit default floats)
    ray: Ray data structure and vector utilities (Taichi functions)
    vector: Python-side vector validation and normalization
    color: RGB color type used to describe scenes
    shading: Direct Lambertian lighting with shadow rays
    integrator: Render target and the per-pixel render kernel
    renderer: High-level render entry point

The pixel loop casts one primary ray per pixel, finds the nearest hit and
shades it from every light in the scene. There is no sampling, no recursion
and no accumulation: one pass produces the final image.
"""

from .color import BACKGROUND_COLOR, BLACK, WHITE, Color
from .ray import (
    Ray,
    cross,
    dot,
    length,
    length_squared,
    make_ray,
    make_reflection_ray,
    near_zero,
    normalize,
    ray_at,
    reflect,
    safe_normalize,
    vec2,
    vec3,
)
from .runtime import init_taichi

# Note: shading, integrator and renderer are NOT imported here because they
# allocate Taichi fields at import time. Import them after init_taichi():
#   from raycaster.core.renderer import Renderer, render

__all__ = [
    "init_taichi",
    "Color",
    "BACKGROUND_COLOR",
    "BLACK",
    "WHITE",
    "Ray",
    "ray_at",
    "make_ray",
    "make_reflection_ray",
    "vec2",
    "vec3",
    "length",
    "length_squared",
    "normalize",
    "safe_normalize",
    "near_zero",
    "dot",
    "cross",
    "reflect",
]
