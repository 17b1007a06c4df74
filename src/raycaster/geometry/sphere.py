"""Sphere primitive with geometric ray-sphere intersection.

This module provides the Sphere dataclass and the per-primitive operations
the scene dispatches to: intersection distance, surface normal and texture
coordinates.

Intersection uses the geometric (projection) method rather than the
algebraic quadratic: the vector from the ray origin to the center is
projected onto the (unit) ray direction, and the squared distance from the
center to the ray is compared against radius^2 before any square root is
taken.

Example:
    >>> from raycaster.core.runtime import init_taichi
    >>> init_taichi()
    >>> from raycaster.geometry.sphere import Sphere, intersect_sphere
    >>> sphere = Sphere(center=vec3(0, 0, -5), radius=1.0)
    >>> # Use intersect_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from raycaster.core.ray import Ray, safe_normalize, vec2, vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f64


@ti.dataclass
class HitRecord:
    """Result of a ray-primitive intersection test.

    Attributes:
        hit: Whether the ray intersected the primitive (1 if hit, 0 if miss).
        distance: Distance along the ray to the intersection.
            Only valid if hit == 1.
    """

    hit: ti.i32
    distance: ti.f64


@ti.func
def make_miss() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(hit=0, distance=0.0)


@ti.func
def intersect_sphere(ray: Ray, sphere: Sphere) -> HitRecord:
    """Test for ray-sphere intersection.

    With to_center = center - origin and a unit direction d:
        adj = dot(to_center, d)           (distance to the closest approach)
        d2  = |to_center|^2 - adj^2    (squared distance from center to ray)
    The ray misses if d2 > radius^2. Otherwise the roots are
        t0 = adj - sqrt(radius^2 - d2), t1 = adj + sqrt(radius^2 - d2)
    and the nearer non-negative one is returned. A ray starting inside the
    sphere therefore hits the far side.

    Args:
        ray: The ray to test (direction must be unit length).
        sphere: The sphere to test against.

    Returns:
        A HitRecord; hit == 0 if both roots are behind the origin or the ray
        passes outside the sphere.
    """
    result = make_miss()

    to_center = sphere.center - ray.origin
    adj = tm.dot(to_center, ray.direction)
    d2 = tm.dot(to_center, to_center) - adj * adj
    radius2 = sphere.radius * sphere.radius

    if d2 <= radius2:
        thc = ti.sqrt(radius2 - d2)
        t0 = adj - thc
        t1 = adj + thc

        if t0 >= 0.0:
            result = HitRecord(hit=1, distance=t0)
        elif t1 >= 0.0:
            result = HitRecord(hit=1, distance=t1)

    return result


@ti.func
def sphere_normal(sphere: Sphere, point: vec3) -> vec3:
    """Compute the outward unit normal at a point on the sphere.

    Args:
        sphere: The sphere.
        point: A point on the sphere surface.

    Returns:
        normalize(point - center). A point at the exact center yields +y.
    """
    return safe_normalize(point - sphere.center, vec3(0.0, 1.0, 0.0))


@ti.func
def sphere_texture_coords(sphere: Sphere, point: vec3) -> vec2:
    """Map a surface point to spherical texture coordinates.

    u follows longitude around the y-axis, v follows latitude from the top
    pole (v = 0) to the bottom pole (v = 1):
        u = (1 + atan2(h.z, h.x) / pi) / 2
        v = acos(h.y / radius) / pi
    with h = point - center. The acos argument is clamped so points slightly
    off the surface do not produce NaN.

    Args:
        sphere: The sphere.
        point: A point on the sphere surface.

    Returns:
        Texture coordinates (u, v), both in [0, 1].
    """
    h = point - sphere.center
    cos_theta = tm.clamp(h.y / sphere.radius, -1.0, 1.0)
    u = (1.0 + ti.atan2(h.z, h.x) / tm.pi) * 0.5
    v = ti.acos(cos_theta) / tm.pi
    return vec2(u, v)


@ti.func
def make_sphere(center: vec3, radius: ti.f64) -> Sphere:
    """Create a sphere from center and radius inside a kernel."""
    return Sphere(center=center, radius=radius)
