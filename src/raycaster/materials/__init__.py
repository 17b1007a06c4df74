"""Materials module for surface appearance.

Components:
    coloration: Flat colors and wrapped image textures (texel pool)
    texture_loader: Image decoding with Pillow
    lambertian: Ideal diffuse materials and the material registry

A material is a coloration plus an albedo. Shading evaluates the Lambertian
BRDF (albedo / pi) and multiplies it with the coloration resolved at the hit
point's texture coordinates.

Note: coloration and lambertian allocate Taichi fields at import time, so
this package must be imported after init_taichi().
"""

from .coloration import (
    MAX_TEXELS,
    MAX_TEXTURES,
    ColorationKind,
    add_texture,
    clear_textures,
    get_texture_count,
    get_texture_size,
    resolve_coloration,
    sample_texture,
    wrap,
)
from .lambertian import (
    MAX_MATERIALS,
    add_flat_material,
    add_textured_material,
    clear_materials,
    eval_lambertian,
    get_material_albedo,
    get_material_count,
    get_surface_color,
)
from .texture_loader import load_texture_array

__all__ = [
    # Coloration
    "ColorationKind",
    "MAX_TEXTURES",
    "MAX_TEXELS",
    "add_texture",
    "clear_textures",
    "get_texture_count",
    "get_texture_size",
    "wrap",
    "sample_texture",
    "resolve_coloration",
    "load_texture_array",
    # Lambertian
    "MAX_MATERIALS",
    "eval_lambertian",
    "add_flat_material",
    "add_textured_material",
    "clear_materials",
    "get_material_count",
    "get_material_albedo",
    "get_surface_color",
]
