"""Scene module for scene management and ray casting.

This module handles scene representation and ray-scene queries:

Components:
    intersection: Primitive table, nearest-hit trace and kind dispatch
    lights: Directional and spherical lights
    manager: Scene builder, render settings and serialization
    showcase: Demo scene of three spheres over a ground plane

Scene data is organized for kernel access:
    - Structure-of-Arrays layout for primitives and lights
    - Integer kind tags for dispatch inside kernels
    - Primitives referenced by index from intersections

Note: these modules allocate Taichi fields at import time, so this package
must be imported after init_taichi().
"""

from .intersection import (
    MAX_PRIMITIVES,
    Intersection,
    PrimitiveKind,
    add_plane,
    add_sphere,
    clear_scene,
    get_primitive_count,
    get_primitive_kind,
    get_primitive_material_id,
    intersect_primitive,
    surface_normal,
    texture_coords,
    trace,
)
from .lights import (
    DEFAULT_SHADOW_BIAS,
    MAX_LIGHTS,
    LightKind,
    add_directional_light,
    add_spherical_light,
    clear_lights,
    direction_to_light,
    distance_to_light,
    get_light_count,
    get_shadow_bias,
    light_color,
    light_intensity,
    reset_shadow_bias,
    set_shadow_bias,
)
from .manager import (
    LightInfo,
    MaterialInfo,
    PlaneInfo,
    SceneConfig,
    SceneManager,
    SphereInfo,
    TextureInfo,
    scene_config_from_dict,
)
from .showcase import ShowcaseLights, create_showcase_scene

__all__ = [
    # Intersection module
    "MAX_PRIMITIVES",
    "Intersection",
    "PrimitiveKind",
    "add_sphere",
    "add_plane",
    "clear_scene",
    "get_primitive_count",
    "get_primitive_kind",
    "get_primitive_material_id",
    "intersect_primitive",
    "surface_normal",
    "texture_coords",
    "trace",
    # Lights module
    "MAX_LIGHTS",
    "LightKind",
    "add_directional_light",
    "add_spherical_light",
    "clear_lights",
    "get_light_count",
    "direction_to_light",
    "distance_to_light",
    "light_intensity",
    "light_color",
    "DEFAULT_SHADOW_BIAS",
    "set_shadow_bias",
    "reset_shadow_bias",
    "get_shadow_bias",
    # Manager module
    "SceneManager",
    "SceneConfig",
    "TextureInfo",
    "MaterialInfo",
    "SphereInfo",
    "PlaneInfo",
    "LightInfo",
    "scene_config_from_dict",
    # Showcase module
    "create_showcase_scene",
    "ShowcaseLights",
]
