"""Lambertian (ideal diffuse) materials.

A material couples a coloration (flat color or texture) with an albedo, the
scalar diffuse reflectance. Shading uses the energy-conserving Lambertian
BRDF normalization:

    f_r = albedo / pi

Albedo is not limited to [0, 1]: values above 1 deliberately brighten a
surface beyond what a physical diffuser would reflect.

Example:
    >>> from raycaster.core.runtime import init_taichi
    >>> init_taichi()
    >>> from raycaster.materials.lambertian import add_flat_material
    >>> green = add_flat_material((0.4, 1.0, 0.4), albedo=0.18)
"""

import taichi as ti
import taichi.math as tm

from raycaster.core.color import Color
from raycaster.core.ray import vec2, vec3
from raycaster.materials.coloration import (
    ColorationKind,
    get_texture_count,
    resolve_coloration,
)

# =============================================================================
# BRDF
# =============================================================================


@ti.func
def eval_lambertian(albedo: ti.f64) -> ti.f64:
    """Evaluate the Lambertian BRDF.

    The BRDF is constant for all directions:
        f_r = albedo / pi

    The cosine term is applied separately by the shader.

    Args:
        albedo: The diffuse reflectance.

    Returns:
        The fraction of incident light reflected toward the viewer.
    """
    return albedo / tm.pi


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of materials in the scene
MAX_MATERIALS = 256

material_albedos = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
material_coloration_kinds = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
material_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_texture_ids = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_materials() -> None:
    """Clear all materials.

    Resets the material count to zero. Existing data in the fields will be
    overwritten when new materials are added.
    """
    num_materials[None] = 0


def _validate_albedo(albedo: float) -> None:
    if albedo < 0.0:
        raise ValueError(f"Albedo = {albedo} is negative.")


def _store_material(kind: ColorationKind, color: Color, texture_id: int, albedo: float) -> int:
    idx = num_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    material_albedos[idx] = albedo
    material_coloration_kinds[idx] = int(kind)
    material_colors[idx] = [color.red, color.green, color.blue]
    material_texture_ids[idx] = texture_id
    num_materials[None] = idx + 1
    return idx


def add_flat_material(color: Color | tuple[float, float, float], albedo: float) -> int:
    """Add a material with a single flat color.

    Args:
        color: The surface color as a Color or (R, G, B) tuple.
        albedo: The diffuse reflectance (non-negative, may exceed 1).

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If albedo is negative.
    """
    _validate_albedo(albedo)
    return _store_material(ColorationKind.FLAT, Color.coerce(color), -1, albedo)


def add_textured_material(texture_id: int, albedo: float) -> int:
    """Add a material colored by a texture.

    Args:
        texture_id: ID returned by coloration.add_texture().
        albedo: The diffuse reflectance (non-negative, may exceed 1).

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If albedo is negative or texture_id is unknown.
    """
    _validate_albedo(albedo)
    if texture_id < 0 or texture_id >= get_texture_count():
        raise ValueError(f"Invalid texture_id: {texture_id}")
    return _store_material(ColorationKind.TEXTURE, Color(0.0, 0.0, 0.0), texture_id, albedo)


def get_material_count() -> int:
    """Get the number of materials in the registry."""
    return int(num_materials[None])


@ti.func
def get_material_albedo(material_idx: ti.i32) -> ti.f64:
    """Get the albedo for a material by index."""
    return ti.cast(material_albedos[material_idx], ti.f64)


@ti.func
def get_surface_color(material_idx: ti.i32, uv: vec2) -> vec3:
    """Resolve the base color of a material at the given texture coordinates.

    Args:
        material_idx: The index of the material in the registry.
        uv: Texture coordinates at the hit point.

    Returns:
        The surface color (RGB), flat or sampled from the texture.
    """
    flat = material_colors[material_idx]
    return resolve_coloration(
        material_coloration_kinds[material_idx],
        vec3(flat.x, flat.y, flat.z),
        material_texture_ids[material_idx],
        uv,
    )
