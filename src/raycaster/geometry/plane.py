"""Infinite plane primitive with one-sided ray-plane intersection.

A plane is defined by:
- point: Any point on the plane
- normal: A unit normal

The stored normal points away from the side the plane is seen from: a ray
hits the plane only when its direction has a positive component along the
normal. The normal presented for shading is the negated stored normal, so
it faces back toward the incoming ray.

For example, a ground plane at y = -1 viewed from above is stored with
normal (0, -1, 0) and shades with normal (0, 1, 0).

Example:
    >>> from raycaster.core.runtime import init_taichi
    >>> init_taichi()
    >>> from raycaster.geometry.plane import Plane, intersect_plane
    >>> ground = Plane(point=vec3(0, -1, 0), normal=vec3(0, -1, 0))
    >>> # Use intersect_plane within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from raycaster.core.ray import Ray, near_zero, vec2, vec3
from raycaster.geometry.sphere import HitRecord, make_miss

# Minimum dot(normal, direction) for a ray to count as facing the plane
PLANE_EPSILON = 1e-6


@ti.dataclass
class Plane:
    """A plane defined by a point on it and a unit normal.

    Attributes:
        point: A point on the plane (vec3).
        normal: Unit normal pointing away from the visible side (vec3).
    """

    point: vec3
    normal: vec3


@ti.func
def intersect_plane(ray: Ray, plane: Plane) -> HitRecord:
    """Test for ray-plane intersection.

    Solves dot(origin + t * d - point, normal) = 0:
        t = dot(point - origin, normal) / dot(d, normal)

    Rays that are parallel to the plane, or that approach it from the side
    the normal points to, are rejected (denominator <= PLANE_EPSILON), as
    are intersections behind the ray origin.

    Args:
        ray: The ray to test (direction must be unit length).
        plane: The plane to test against.

    Returns:
        A HitRecord containing the intersection distance if hit == 1.
    """
    result = make_miss()

    denom = tm.dot(plane.normal, ray.direction)
    if denom > PLANE_EPSILON:
        distance = tm.dot(plane.point - ray.origin, plane.normal) / denom
        if distance >= 0.0:
            result = HitRecord(hit=1, distance=distance)

    return result


@ti.func
def plane_normal(plane: Plane) -> vec3:
    """Compute the shading normal of a plane.

    Returns:
        The negated stored normal, facing the incoming ray side.
    """
    return -plane.normal


@ti.func
def plane_basis(plane: Plane):
    """Build two unit axes spanning the plane.

    The first axis is normal x (0, 0, 1). When the normal is parallel to the
    z-axis that cross product vanishes, and normal x (0, 1, 0) is used
    instead. The second axis is normal x first_axis.

    Args:
        plane: The plane to compute the basis for.

    Returns:
        Tuple (x_axis, y_axis) of unit vectors lying in the plane.
    """
    x_axis = tm.cross(plane.normal, vec3(0.0, 0.0, 1.0))
    if near_zero(x_axis):
        x_axis = tm.cross(plane.normal, vec3(0.0, 1.0, 0.0))
    x_axis = tm.normalize(x_axis)
    y_axis = tm.cross(plane.normal, x_axis)
    return x_axis, y_axis


@ti.func
def plane_texture_coords(plane: Plane, point: vec3) -> vec2:
    """Map a point on the plane to planar texture coordinates.

    The offset from the plane's reference point is projected onto the
    plane basis, so one texture repeat spans one world unit.

    Args:
        plane: The plane.
        point: A point on the plane.

    Returns:
        Texture coordinates (u, v), unbounded; wrapping happens at sampling.
    """
    x_axis, y_axis = plane_basis(plane)
    offset = point - plane.point
    return vec2(tm.dot(offset, x_axis), tm.dot(offset, y_axis))


@ti.func
def make_plane(point: vec3, normal: vec3) -> Plane:
    """Create a plane from a point and unit normal inside a kernel."""
    return Plane(point=point, normal=normal)
