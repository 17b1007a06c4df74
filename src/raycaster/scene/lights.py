"""Light sources for direct illumination.

Two kinds of lights are supported:
    DIRECTIONAL: light arriving from infinitely far away along a fixed
        direction (the direction the light travels), e.g. the sun.
    SPHERICAL: a point light at a position radiating its power equally in
        all directions; its intensity falls off with the inverse square of
        the distance.

For a shaded point p:
    directional: L = -direction, distance = inf,       I = intensity
    spherical:   L = normalize(position - p), distance = |position - p|,
                 I = intensity / (4 * pi * distance^2)

Lights are stored in Taichi fields and iterated in insertion order by the
shader. The shadow bias (the distance shadow rays start off a surface) is a
scene setting and is stored here too.
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

from raycaster.core.color import Color
from raycaster.core.ray import ZERO_LENGTH_SQUARED, safe_normalize, vec3
from raycaster.core.vector import Vec3Like, as_vector, normalized


class LightKind(IntEnum):
    """Enumeration of light kinds, used for dispatch in kernels."""

    DIRECTIONAL = 0
    SPHERICAL = 1


# Maximum number of lights in the scene
MAX_LIGHTS = 64

# Light storage: direction of travel for directional lights, position for
# spherical lights
light_kinds = ti.field(dtype=ti.i32, shape=MAX_LIGHTS)
light_vectors = ti.Vector.field(3, dtype=ti.f64, shape=MAX_LIGHTS)
light_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_intensities = ti.field(dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def clear_lights() -> None:
    """Remove all lights from the scene."""
    num_lights[None] = 0


def _store_light(kind: LightKind, vector, color, intensity: float) -> int:
    if intensity < 0.0:
        raise ValueError(f"Light intensity must be non-negative, got {intensity}")
    rgb = Color.coerce(color)

    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")

    light_kinds[idx] = int(kind)
    light_vectors[idx] = vector.tolist()
    light_colors[idx] = [rgb.red, rgb.green, rgb.blue]
    light_intensities[idx] = intensity
    num_lights[None] = idx + 1
    return idx


def add_directional_light(
    direction: Vec3Like,
    color: Color | tuple[float, float, float],
    intensity: float,
) -> int:
    """Add a directional light.

    Args:
        direction: The direction the light travels; normalized before storage.
        color: Light color.
        intensity: Irradiance scale (non-negative).

    Returns:
        The index of the added light.

    Raises:
        ValueError: If direction has zero length or intensity is negative.
        RuntimeError: If the maximum number of lights is exceeded.
    """
    return _store_light(
        LightKind.DIRECTIONAL, normalized(direction, "direction"), color, intensity
    )


def add_spherical_light(
    position: Vec3Like,
    color: Color | tuple[float, float, float],
    intensity: float,
) -> int:
    """Add a spherical (point) light.

    Args:
        position: Light position in world space.
        color: Light color.
        intensity: Luminous power (non-negative), spread over the sphere
            of directions.

    Returns:
        The index of the added light.

    Raises:
        ValueError: If intensity is negative.
        RuntimeError: If the maximum number of lights is exceeded.
    """
    return _store_light(LightKind.SPHERICAL, as_vector(position, "position"), color, intensity)


def get_light_count() -> int:
    """Get the number of lights in the scene."""
    return int(num_lights[None])


# =============================================================================
# Shadow ray settings
# =============================================================================

# Offset applied to shadow ray origins unless a scene sets its own
DEFAULT_SHADOW_BIAS = 1e-10

shadow_bias = ti.field(dtype=ti.f64, shape=())
shadow_bias[None] = DEFAULT_SHADOW_BIAS


def set_shadow_bias(bias: float) -> None:
    """Set the distance shadow rays start off the surface.

    Raises:
        ValueError: If bias is negative.
    """
    if bias < 0.0:
        raise ValueError(f"Shadow bias must be non-negative, got {bias}")
    shadow_bias[None] = bias


def reset_shadow_bias() -> None:
    """Restore the default shadow ray offset."""
    shadow_bias[None] = DEFAULT_SHADOW_BIAS


def get_shadow_bias() -> float:
    return float(shadow_bias[None])


# =============================================================================
# Light queries (Taichi functions)
# =============================================================================


@ti.func
def direction_to_light(light_id: ti.i32, point: vec3) -> vec3:
    """Unit vector from a point toward a light."""
    result = -light_vectors[light_id]
    if light_kinds[light_id] == int(LightKind.SPHERICAL):
        result = safe_normalize(light_vectors[light_id] - point, vec3(0.0, 1.0, 0.0))
    return result


@ti.func
def distance_to_light(light_id: ti.i32, point: vec3) -> ti.f64:
    """Distance from a point to a light; infinite for directional lights."""
    result = tm.inf
    if light_kinds[light_id] == int(LightKind.SPHERICAL):
        result = tm.length(light_vectors[light_id] - point)
    return result


@ti.func
def light_intensity(light_id: ti.i32, point: vec3) -> ti.f64:
    """Intensity of a light arriving at a point, ignoring occlusion.

    A spherical light sitting on the point contributes nothing.
    """
    intensity = ti.cast(light_intensities[light_id], ti.f64)
    if light_kinds[light_id] == int(LightKind.SPHERICAL):
        to_light = light_vectors[light_id] - point
        r2 = tm.dot(to_light, to_light)
        if r2 < ZERO_LENGTH_SQUARED:
            intensity = 0.0
        else:
            intensity = intensity / (4.0 * tm.pi * r2)
    return intensity


@ti.func
def light_color(light_id: ti.i32) -> vec3:
    """Color of a light."""
    c = light_colors[light_id]
    return vec3(c.x, c.y, c.z)
