"""Geometry module for shape primitives.

This module provides the two primitive kinds the scene supports:

Components:
    sphere: Sphere with geometric ray-sphere intersection
    plane: One-sided infinite plane

Each primitive implements the same three operations as Taichi functions:
    intersect_<kind>(ray, shape) -> HitRecord(hit, distance)
    <kind>_normal(...)           -> unit shading normal
    <kind>_texture_coords(...)   -> (u, v) texture coordinates

The scene module stores primitives in one tagged table and dispatches to
these functions by kind.
"""

from .plane import (
    PLANE_EPSILON,
    Plane,
    intersect_plane,
    make_plane,
    plane_basis,
    plane_normal,
    plane_texture_coords,
)
from .sphere import (
    HitRecord,
    Sphere,
    intersect_sphere,
    make_miss,
    make_sphere,
    sphere_normal,
    sphere_texture_coords,
)

__all__ = [
    "HitRecord",
    "make_miss",
    "Sphere",
    "intersect_sphere",
    "make_sphere",
    "sphere_normal",
    "sphere_texture_coords",
    "Plane",
    "PLANE_EPSILON",
    "intersect_plane",
    "make_plane",
    "plane_basis",
    "plane_normal",
    "plane_texture_coords",
]
