"""Showcase scene: three colored spheres over a ground plane.

The scene is laid out in front of the camera (which looks down -z):
- Green sphere at (0, 0, -5), radius 1.0
- Yellow sphere at (-3, 0, -5), radius 1.2
- Blue sphere at (3, 0, -5), radius 1.7
- Olive ground plane at y = -1, seen from above
- A white sun shining down and toward the scene
- A warm point light above and in front of the spheres

Example:
    >>> from raycaster.core.runtime import init_taichi
    >>> init_taichi()
    >>> from raycaster.scene.showcase import create_showcase_scene
    >>> scene = create_showcase_scene()
"""

from dataclasses import dataclass

from raycaster.core.color import BACKGROUND_COLOR
from raycaster.scene.manager import SceneManager

# Diffuse reflectance shared by every showcase surface
SHOWCASE_ALBEDO = 0.18


@dataclass
class ShowcaseLights:
    """Light settings for the showcase scene.

    Attributes:
        sun_direction: Direction the sunlight travels.
        sun_color: RGB color of the sun.
        sun_intensity: Irradiance of the sun.
        point_position: Position of the point light.
        point_color: RGB color of the point light.
        point_intensity: Power of the point light.
    """

    sun_direction: tuple[float, float, float] = (-0.25, -1.0, -1.0)
    sun_color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    sun_intensity: float = 20.0
    point_position: tuple[float, float, float] = (-2.0, 4.0, -3.0)
    point_color: tuple[float, float, float] = (1.0, 0.8, 0.6)
    point_intensity: float = 5000.0


def create_showcase_scene(
    width: int = 800,
    height: int = 600,
    fov: float = 90.0,
    lights: ShowcaseLights | None = None,
) -> SceneManager:
    """Create the showcase scene.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        fov: Horizontal field of view in degrees.
        lights: Light settings; defaults to ShowcaseLights().

    Returns:
        The populated SceneManager.
    """
    if lights is None:
        lights = ShowcaseLights()

    scene = SceneManager(width=width, height=height, fov=fov, background=BACKGROUND_COLOR)

    scene.add_flat_sphere((0.0, 0.0, -5.0), 1.0, color=(0.4, 1.0, 0.4), albedo=SHOWCASE_ALBEDO)
    scene.add_flat_sphere((-3.0, 0.0, -5.0), 1.2, color=(1.0, 1.0, 0.4), albedo=SHOWCASE_ALBEDO)
    scene.add_flat_sphere((3.0, 0.0, -5.0), 1.7, color=(0.0, 0.2, 1.0), albedo=SHOWCASE_ALBEDO)

    # Ground plane seen from above: its normal points away from the camera side
    scene.add_flat_plane(
        (0.0, -1.0, -3.0), (0.0, -1.0, 0.0), color=(0.4, 0.4, 0.1), albedo=SHOWCASE_ALBEDO
    )

    scene.add_directional_light(lights.sun_direction, lights.sun_color, lights.sun_intensity)
    scene.add_spherical_light(lights.point_position, lights.point_color, lights.point_intensity)

    return scene
