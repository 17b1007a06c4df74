"""Ray data structure and vector utilities for ray casting.

This module provides the Ray dataclass and the vector helpers used by the
intersection and shading code. All operations are Taichi functions and must
be called from within Taichi kernels.

Vectors are 64-bit (vec3 = ti.types.vector(3, ti.f64)). Points and directions
share the same type; by convention directions passed to intersection code
are unit length.

Example:
    >>> from raycaster.core.runtime import init_taichi
    >>> init_taichi()
    >>> origin = vec3(0.0, 0.0, 0.0)
    >>> direction = vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

# 3D vector of doubles, used for both points and directions
vec3 = ti.types.vector(3, ti.f64)

# Texture coordinates (u, v)
vec2 = ti.types.vector(2, ti.f64)

# Squared length below which a vector is treated as degenerate
ZERO_LENGTH_SQUARED = 1e-24


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Expected to be
            unit length; constructors in this package normalize it.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f64) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction.

    Args:
        origin: The starting point of the ray.
        direction: The direction vector (should be normalized).

    Returns:
        A new Ray instance.
    """
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length(v: vec3) -> ti.f64:
    """Compute the Euclidean length of a vector."""
    return tm.length(v)


@ti.func
def length_squared(v: vec3) -> ti.f64:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes.
    """
    return tm.dot(v, v)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f64:
    """Compute the dot product a . b."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product a x b."""
    return tm.cross(a, b)


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    The input must not be zero length; use safe_normalize() when that
    cannot be ruled out.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v.
    """
    return v / tm.length(v)


@ti.func
def near_zero(v: vec3) -> ti.i32:
    """Check if a vector is too short to be normalized.

    Args:
        v: The vector to check.

    Returns:
        1 if the squared length is below ZERO_LENGTH_SQUARED, 0 otherwise.
    """
    return length_squared(v) < ZERO_LENGTH_SQUARED


@ti.func
def safe_normalize(v: vec3, fallback: vec3) -> vec3:
    """Normalize a vector, substituting a fallback for degenerate input.

    Args:
        v: The input vector.
        fallback: Unit vector returned when v has (near) zero length.

    Returns:
        normalize(v), or fallback if v is degenerate.
    """
    result = fallback
    if not near_zero(v):
        result = v / tm.length(v)
    return result


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def make_reflection_ray(normal: vec3, incident: vec3, hit_point: vec3, bias: ti.f64) -> Ray:
    """Create the mirror reflection ray leaving a surface.

    The origin is pushed off the surface along the normal by bias. The
    direct-lighting shader never calls this; it is the building block for
    reflective materials.

    Args:
        normal: The surface normal at the hit point (unit length).
        incident: The direction of the incoming ray (unit length).
        hit_point: The intersection point on the surface.
        bias: Offset along the normal to avoid self-intersection.

    Returns:
        A Ray leaving hit_point in the mirror direction.
    """
    return Ray(origin=hit_point + normal * bias, direction=reflect(incident, normal))
