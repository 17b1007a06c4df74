"""Direct Lambertian lighting with shadow rays.

For a primary ray that hit the scene, every light contributes

    color += surface * light_color * max(0, N . L) * I * albedo / pi

where surface is the material's coloration at the hit point, N the shading
normal, L the unit vector toward the light and I the light's intensity at
the hit point. I is zero when the light is occluded: a shadow ray is cast
from the hit point toward the light, and the light is blocked when the
nearest shadow hit is strictly closer than the light itself. Directional
lights are infinitely far away, so any shadow hit blocks them.

The shadow ray origin is pushed off the surface by the shadow bias (see
raycaster.scene.lights.set_shadow_bias) along the normal, on the light's
side, so the surface does not shadow itself.

The accumulated color is not clamped.
"""

import taichi as ti
import taichi.math as tm

from raycaster.core.ray import Ray, ray_at, vec3
from raycaster.materials.lambertian import (
    eval_lambertian,
    get_material_albedo,
    get_surface_color,
)
from raycaster.scene.intersection import (
    Intersection,
    get_primitive_material_id,
    surface_normal,
    texture_coords,
    trace,
)
from raycaster.scene.lights import (
    direction_to_light,
    distance_to_light,
    light_color,
    light_intensity,
    num_lights,
    shadow_bias,
)


@ti.func
def _offset_ray_origin(point: vec3, normal: vec3, direction: vec3, bias: ti.f64) -> vec3:
    """Offset a ray origin off the surface, on the side the ray leaves toward."""
    offset_dir = normal
    if tm.dot(direction, normal) < 0.0:
        offset_dir = -normal
    return point + bias * offset_dir


@ti.func
def light_visible(light_id: ti.i32, point: vec3, normal: vec3) -> ti.i32:
    """Check whether a light reaches a surface point.

    Args:
        light_id: Index of the light.
        point: The surface point.
        normal: The shading normal at the point.

    Returns:
        1 if no primitive lies strictly between the point and the light.
    """
    to_light = direction_to_light(light_id, point)
    shadow_ray = Ray(
        origin=_offset_ray_origin(point, normal, to_light, shadow_bias[None]),
        direction=to_light,
    )
    shadow_hit = trace(shadow_ray)

    visible = 1
    if shadow_hit.hit == 1 and shadow_hit.distance < distance_to_light(light_id, point):
        visible = 0
    return visible


@ti.func
def shade_diffuse(ray: Ray, intersection: Intersection) -> vec3:
    """Compute the directly lit color of a hit point.

    Args:
        ray: The primary ray that produced the intersection.
        intersection: A hit (intersection.hit == 1).

    Returns:
        The unclamped RGB color, summed over all lights.
    """
    primitive_id = intersection.primitive_id
    hit_point = ray_at(ray, intersection.distance)
    normal = surface_normal(primitive_id, hit_point)

    material_id = get_primitive_material_id(primitive_id)
    surface = get_surface_color(material_id, texture_coords(primitive_id, hit_point))
    reflected = eval_lambertian(get_material_albedo(material_id))

    color = vec3(0.0, 0.0, 0.0)
    for light_id in range(num_lights[None]):
        to_light = direction_to_light(light_id, hit_point)
        intensity = 0.0
        if light_visible(light_id, hit_point, normal) == 1:
            intensity = light_intensity(light_id, hit_point)
        diffuse = tm.max(tm.dot(normal, to_light), 0.0) * intensity
        color += surface * light_color(light_id) * diffuse * reflected

    return color
