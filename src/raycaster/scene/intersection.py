"""Scene-level primitive storage and nearest-hit ray casting.

This module keeps every primitive of the scene in one ordered, tagged table
and answers the queries the renderer needs:

    trace(ray)                       -> nearest Intersection (or a miss)
    surface_normal(primitive_id, p)  -> unit shading normal
    texture_coords(primitive_id, p)  -> (u, v)
    get_primitive_material_id(id)    -> material index

Primitives are tested in insertion order and a later primitive only replaces
the current hit when it is strictly closer, so on equal distances the first
inserted primitive wins.

The table is a Structure of Arrays in Taichi fields. Spheres use the
position and radius columns; planes use the position and normal columns.

Example:
    >>> from raycaster.core.runtime import init_taichi
    >>> init_taichi()
    >>> from raycaster.materials.lambertian import add_flat_material
    >>> from raycaster.scene.intersection import add_plane, add_sphere, clear_scene
    >>> clear_scene()
    >>> green = add_flat_material((0.4, 1.0, 0.4), albedo=0.18)
    >>> add_sphere((0, 0, -5), 1.0, material_id=green)
    >>> add_plane((0, -1, -3), (0, -1, 0), material_id=green)
    >>> # Use trace within a Taichi kernel
"""

from enum import IntEnum

import taichi as ti

from raycaster.core.ray import Ray, vec2, vec3
from raycaster.core.vector import Vec3Like, as_vector, normalized
from raycaster.geometry.plane import (
    Plane,
    intersect_plane,
    plane_normal,
    plane_texture_coords,
)
from raycaster.geometry.sphere import (
    HitRecord,
    Sphere,
    intersect_sphere,
    make_miss,
    sphere_normal,
    sphere_texture_coords,
)
from raycaster.materials.lambertian import get_material_count


class PrimitiveKind(IntEnum):
    """Enumeration of primitive kinds, used for dispatch in kernels."""

    SPHERE = 0
    PLANE = 1


@ti.dataclass
class Intersection:
    """Nearest hit of a ray against the whole scene.

    Attributes:
        hit: 1 if any primitive was hit, 0 for a miss.
        distance: Distance along the ray to the hit point.
            Only valid if hit == 1.
        primitive_id: Index of the hit primitive in the primitive table.
            Only valid if hit == 1; -1 for a miss.
    """

    hit: ti.i32
    distance: ti.f64
    primitive_id: ti.i32


# Maximum number of primitives supported in the scene
MAX_PRIMITIVES = 1024

# Primitive storage: Structure of Arrays layout
primitive_kinds = ti.field(dtype=ti.i32, shape=MAX_PRIMITIVES)
# Sphere center or a point on the plane
primitive_positions = ti.Vector.field(3, dtype=ti.f64, shape=MAX_PRIMITIVES)
primitive_radii = ti.field(dtype=ti.f64, shape=MAX_PRIMITIVES)
primitive_normals = ti.Vector.field(3, dtype=ti.f64, shape=MAX_PRIMITIVES)
primitive_material_ids = ti.field(dtype=ti.i32, shape=MAX_PRIMITIVES)
num_primitives = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all primitives from the scene.

    Resets the primitive count to zero. The actual field data is not
    cleared but will be overwritten when new primitives are added.
    """
    num_primitives[None] = 0


def _check_material_id(material_id: int) -> None:
    if material_id < 0 or material_id >= get_material_count():
        raise ValueError(
            f"Invalid material_id {material_id}: {get_material_count()} material(s) registered"
        )


def _next_primitive_index() -> int:
    idx = num_primitives[None]
    if idx >= MAX_PRIMITIVES:
        raise RuntimeError(f"Maximum number of primitives ({MAX_PRIMITIVES}) exceeded")
    return idx


def add_sphere(center: Vec3Like, radius: float, material_id: int) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (must be positive).
        material_id: Index of a registered material.

    Returns:
        The index of the added primitive.

    Raises:
        ValueError: If the radius is not positive or the material is unknown.
        RuntimeError: If the maximum number of primitives is exceeded.
    """
    center_vec = as_vector(center, "center")
    if not radius > 0.0:
        raise ValueError(f"Sphere radius must be positive, got {radius}")
    _check_material_id(material_id)

    idx = _next_primitive_index()
    primitive_kinds[idx] = int(PrimitiveKind.SPHERE)
    primitive_positions[idx] = center_vec.tolist()
    primitive_radii[idx] = radius
    primitive_normals[idx] = [0.0, 0.0, 0.0]
    primitive_material_ids[idx] = material_id
    num_primitives[None] = idx + 1
    return idx


def add_plane(point: Vec3Like, normal: Vec3Like, material_id: int) -> int:
    """Add a one-sided infinite plane to the scene.

    The normal points away from the visible side: a camera above a ground
    plane at y = -1 sees it with normal (0, -1, 0).

    Args:
        point: Any point on the plane.
        normal: The plane normal; normalized before storage.
        material_id: Index of a registered material.

    Returns:
        The index of the added primitive.

    Raises:
        ValueError: If the normal has zero length or the material is unknown.
        RuntimeError: If the maximum number of primitives is exceeded.
    """
    point_vec = as_vector(point, "point")
    normal_vec = normalized(normal, "normal")
    _check_material_id(material_id)

    idx = _next_primitive_index()
    primitive_kinds[idx] = int(PrimitiveKind.PLANE)
    primitive_positions[idx] = point_vec.tolist()
    primitive_radii[idx] = 0.0
    primitive_normals[idx] = normal_vec.tolist()
    primitive_material_ids[idx] = material_id
    num_primitives[None] = idx + 1
    return idx


def get_primitive_count() -> int:
    """Get the number of primitives in the scene."""
    return int(num_primitives[None])


def get_primitive_kind(primitive_id: int) -> PrimitiveKind:
    """Get the kind of a primitive by index.

    Raises:
        ValueError: If primitive_id is out of range.
    """
    if primitive_id < 0 or primitive_id >= num_primitives[None]:
        raise ValueError(f"Invalid primitive_id: {primitive_id}")
    return PrimitiveKind(int(primitive_kinds[primitive_id]))


# =============================================================================
# Kind dispatch (Taichi functions)
# =============================================================================


@ti.func
def _sphere_at(primitive_id: ti.i32) -> Sphere:
    return Sphere(center=primitive_positions[primitive_id], radius=primitive_radii[primitive_id])


@ti.func
def _plane_at(primitive_id: ti.i32) -> Plane:
    return Plane(point=primitive_positions[primitive_id], normal=primitive_normals[primitive_id])


@ti.func
def intersect_primitive(primitive_id: ti.i32, ray: Ray) -> HitRecord:
    """Intersect a ray with one primitive of the table.

    Args:
        primitive_id: Index of the primitive.
        ray: The ray to test (unit direction).

    Returns:
        The primitive's HitRecord.
    """
    rec = make_miss()
    kind = primitive_kinds[primitive_id]
    if kind == int(PrimitiveKind.SPHERE):
        rec = intersect_sphere(ray, _sphere_at(primitive_id))
    elif kind == int(PrimitiveKind.PLANE):
        rec = intersect_plane(ray, _plane_at(primitive_id))
    return rec


@ti.func
def surface_normal(primitive_id: ti.i32, point: vec3) -> vec3:
    """Unit shading normal of a primitive at a hit point."""
    normal = vec3(0.0, 1.0, 0.0)
    kind = primitive_kinds[primitive_id]
    if kind == int(PrimitiveKind.SPHERE):
        normal = sphere_normal(_sphere_at(primitive_id), point)
    elif kind == int(PrimitiveKind.PLANE):
        normal = plane_normal(_plane_at(primitive_id))
    return normal


@ti.func
def texture_coords(primitive_id: ti.i32, point: vec3) -> vec2:
    """Texture coordinates of a primitive at a hit point."""
    uv = vec2(0.0, 0.0)
    kind = primitive_kinds[primitive_id]
    if kind == int(PrimitiveKind.SPHERE):
        uv = sphere_texture_coords(_sphere_at(primitive_id), point)
    elif kind == int(PrimitiveKind.PLANE):
        uv = plane_texture_coords(_plane_at(primitive_id), point)
    return uv


@ti.func
def get_primitive_material_id(primitive_id: ti.i32) -> ti.i32:
    """Material index of a primitive."""
    return primitive_material_ids[primitive_id]


@ti.func
def make_no_intersection() -> Intersection:
    """Create an Intersection indicating a miss."""
    return Intersection(hit=0, distance=0.0, primitive_id=-1)


@ti.func
def trace(ray: Ray) -> Intersection:
    """Find the nearest primitive hit by a ray.

    Iterates through all primitives in insertion order, keeping a hit only
    if it is strictly closer than the current one.

    Args:
        ray: The ray to cast (unit direction).

    Returns:
        The nearest Intersection, or a miss if nothing was hit.
    """
    result = make_no_intersection()

    n = num_primitives[None]
    for i in range(n):
        rec = intersect_primitive(i, ray)
        if rec.hit == 1:
            if result.hit == 0 or rec.distance < result.distance:
                result = Intersection(hit=1, distance=rec.distance, primitive_id=i)

    return result
