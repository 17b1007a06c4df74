"""Unified scene manager coordinating textures, materials, primitives and lights.

This module provides a high-level scene building API on top of the Taichi
field tables. Every add_* call writes the device-side tables immediately and
records a Python-side info object, so the scene can be inspected and
serialized after it has been built.

The SceneManager maintains:
- Render settings (image size, field of view, shadow bias, background)
- Textures, materials, primitives and lights, each with its own id space
- Primitives in insertion order, which decides ties between equal hits
- Scene serialization to and from plain dictionaries (JSON compatible)

Example:
    >>> from raycaster.core.runtime import init_taichi
    >>> init_taichi()
    >>> from raycaster.scene.manager import SceneManager
    >>> scene = SceneManager(width=800, height=600, fov=90.0)
    >>> green = scene.add_flat_material(color=(0.4, 1.0, 0.4), albedo=0.18)
    >>> scene.add_sphere(center=(0, 0, -5), radius=1.0, material_id=green)
    >>> scene.add_directional_light(direction=(0, -1, -1), color=(1, 1, 1), intensity=20)
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import numpy as np
import numpy.typing as npt

from raycaster.camera.primary import check_fov, check_image_dimensions
from raycaster.core.color import BACKGROUND_COLOR, Color
from raycaster.core.vector import Vec3Like, as_vector, normalized
from raycaster.materials.coloration import (
    ColorationKind,
    add_texture,
    clear_textures,
    get_texture_count,
    get_texture_size,
)
from raycaster.materials.lambertian import (
    add_flat_material,
    add_textured_material,
    clear_materials,
    get_material_count,
)
from raycaster.materials.texture_loader import load_texture_array
from raycaster.scene.intersection import (
    MAX_PRIMITIVES,
    add_plane,
    add_sphere,
    clear_scene,
    get_primitive_count,
)
from raycaster.scene.lights import (
    DEFAULT_SHADOW_BIAS,
    MAX_LIGHTS,
    LightKind,
    add_directional_light,
    add_spherical_light,
    clear_lights,
    get_light_count,
)

Vec3Tuple = tuple[float, float, float]


def _as_tuple(value: Vec3Like, name: str) -> Vec3Tuple:
    array = as_vector(value, name)
    return (float(array[0]), float(array[1]), float(array[2]))


@dataclass
class TextureInfo:
    """Information about an uploaded texture.

    Attributes:
        texture_id: The texture ID.
        width: Texture width in texels.
        height: Texture height in texels.
        path: The image file the texture was loaded from, if any.
        pixels: The uint8 pixels for textures supplied as arrays.
    """

    texture_id: int
    width: int
    height: int
    path: str | None = None
    pixels: npt.NDArray[np.uint8] | None = None


@dataclass
class MaterialInfo:
    """Information about a registered material.

    Attributes:
        material_id: The material ID.
        coloration: FLAT or TEXTURE.
        albedo: The diffuse reflectance.
        color: The flat color (FLAT materials only).
        texture_id: The texture ID (TEXTURE materials only).
    """

    material_id: int
    coloration: ColorationKind
    albedo: float
    color: Color | None = None
    texture_id: int | None = None


@dataclass
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        primitive_id: The index in the primitive table.
        center: The center of the sphere.
        radius: The radius of the sphere.
        material_id: The material ID assigned to the sphere.
    """

    primitive_id: int
    center: Vec3Tuple
    radius: float
    material_id: int


@dataclass
class PlaneInfo:
    """Information about a plane in the scene.

    Attributes:
        primitive_id: The index in the primitive table.
        point: A point on the plane.
        normal: The unit plane normal (pointing away from the visible side).
        material_id: The material ID assigned to the plane.
    """

    primitive_id: int
    point: Vec3Tuple
    normal: Vec3Tuple
    material_id: int


@dataclass
class LightInfo:
    """Information about a light in the scene.

    Attributes:
        light_id: The index in the light table.
        kind: DIRECTIONAL or SPHERICAL.
        vector: Unit direction of travel (directional) or position (spherical).
        color: The light color.
        intensity: The light intensity.
    """

    light_id: int
    kind: LightKind
    vector: Vec3Tuple
    color: Color
    intensity: float


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        fov: Horizontal field of view in degrees.
        shadow_bias: Offset applied to shadow ray origins.
        background: Color for rays that hit nothing, as [R, G, B].
        textures: List of texture configurations ({"path": ...} or
            {"pixels": nested uint8 lists}).
        materials: List of material configurations.
        primitives: List of primitive configurations in insertion order, each
            with a "kind" of "sphere" or "plane".
        lights: List of light configurations.
    """

    width: int = 800
    height: int = 600
    fov: float = 90.0
    shadow_bias: float = DEFAULT_SHADOW_BIAS
    background: list[float] = field(default_factory=lambda: list(BACKGROUND_COLOR.as_tuple()))
    textures: list[dict[str, Any]] = field(default_factory=list)
    materials: list[dict[str, Any]] = field(default_factory=list)
    primitives: list[dict[str, Any]] = field(default_factory=list)
    lights: list[dict[str, Any]] = field(default_factory=list)


class SceneManager:
    """Scene builder coordinating the device-side scene tables.

    Creating a SceneManager clears all scene tables, so only one scene is
    active at a time.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        fov: Horizontal field of view in degrees.
        shadow_bias: Offset applied to shadow ray origins.
        background: Color for rays that hit nothing.
        textures: TextureInfo for all uploaded textures.
        materials: MaterialInfo for all registered materials.
        primitives: SphereInfo and PlaneInfo in primitive id order.
        lights: LightInfo for all lights in the scene.

    Example:
        >>> scene = SceneManager(width=320, height=240)
        >>> checker = scene.add_texture_file("checker.png")
        >>> floor = scene.add_textured_material(checker, albedo=0.5)
        >>> scene.add_plane((0, -1, 0), (0, -1, 0), floor)
        >>> scene.add_flat_sphere((0, 0, -5), 1.0, color=(1, 0, 0), albedo=0.3)
        >>> scene.add_spherical_light((0, 5, -3), (1, 1, 1), intensity=10000)
    """

    def __init__(
        self,
        width: int = 800,
        height: int = 600,
        fov: float = 90.0,
        shadow_bias: float = DEFAULT_SHADOW_BIAS,
        background: Color | tuple[float, float, float] = BACKGROUND_COLOR,
    ) -> None:
        """Initialize an empty scene.

        Raises:
            ValueError: If any render setting is invalid.
        """
        self.textures: list[TextureInfo] = []
        self.materials: list[MaterialInfo] = []
        self.primitives: list[SphereInfo | PlaneInfo] = []
        self.lights: list[LightInfo] = []
        self.set_render_settings(width, height, fov, shadow_bias, background)
        self._clear_all()

    def _clear_all(self) -> None:
        """Clear all scene data including Taichi fields."""
        clear_scene()
        clear_lights()
        clear_materials()
        clear_textures()
        self.textures.clear()
        self.materials.clear()
        self.primitives.clear()
        self.lights.clear()

    def clear(self) -> None:
        """Clear the entire scene, keeping the render settings."""
        self._clear_all()

    def set_render_settings(
        self,
        width: int,
        height: int,
        fov: float,
        shadow_bias: float = DEFAULT_SHADOW_BIAS,
        background: Color | tuple[float, float, float] = BACKGROUND_COLOR,
    ) -> None:
        """Set the image size, camera and shading parameters.

        Raises:
            ValueError: If the image is taller than wide or has a
                non-positive size, fov is outside (0, 180), or the shadow
                bias is negative.
        """
        check_image_dimensions(width, height)
        check_fov(fov)
        if shadow_bias < 0.0:
            raise ValueError(f"Shadow bias must be non-negative, got {shadow_bias}")
        self.width = width
        self.height = height
        self.fov = fov
        self.shadow_bias = shadow_bias
        self.background = Color.coerce(background)

    # =========================================================================
    # Texture Management
    # =========================================================================

    def add_texture(self, pixels: npt.ArrayLike) -> int:
        """Upload a decoded image as a texture.

        Args:
            pixels: Array of shape (H, W, 3) or (H, W, 4), row 0 at the top.

        Returns:
            The texture ID.

        Raises:
            ValueError: If the array has an unsupported shape.
            RuntimeError: If texture storage is exhausted.
        """
        texture_id = add_texture(pixels)
        width, height = get_texture_size(texture_id)
        array = np.asarray(pixels)
        stored = array[:, :, :3] if np.issubdtype(array.dtype, np.integer) else None
        self.textures.append(
            TextureInfo(
                texture_id=texture_id,
                width=width,
                height=height,
                pixels=None if stored is None else stored.astype(np.uint8),
            )
        )
        return texture_id

    def add_texture_file(self, image_path: str | Path) -> int:
        """Load an image file and upload it as a texture.

        Raises:
            FileNotFoundError: If the image file doesn't exist.
            ValueError: If the file cannot be decoded.
            RuntimeError: If texture storage is exhausted.
        """
        texture_id = add_texture(load_texture_array(image_path))
        width, height = get_texture_size(texture_id)
        self.textures.append(
            TextureInfo(texture_id=texture_id, width=width, height=height, path=str(image_path))
        )
        return texture_id

    def get_texture_count(self) -> int:
        """Get the number of textures in the scene."""
        return get_texture_count()

    # =========================================================================
    # Material Management
    # =========================================================================

    def add_flat_material(self, color: Color | tuple[float, float, float], albedo: float) -> int:
        """Add a material with a single flat color.

        Returns:
            The material ID.

        Raises:
            ValueError: If albedo is negative.
            RuntimeError: If the maximum number of materials is exceeded.
        """
        rgb = Color.coerce(color)
        material_id = add_flat_material(rgb, albedo)
        self.materials.append(
            MaterialInfo(
                material_id=material_id,
                coloration=ColorationKind.FLAT,
                albedo=albedo,
                color=rgb,
            )
        )
        return material_id

    def add_textured_material(self, texture_id: int, albedo: float) -> int:
        """Add a material colored by a texture.

        Returns:
            The material ID.

        Raises:
            ValueError: If albedo is negative or texture_id is unknown.
            RuntimeError: If the maximum number of materials is exceeded.
        """
        material_id = add_textured_material(texture_id, albedo)
        self.materials.append(
            MaterialInfo(
                material_id=material_id,
                coloration=ColorationKind.TEXTURE,
                albedo=albedo,
                texture_id=texture_id,
            )
        )
        return material_id

    def get_material_count(self) -> int:
        """Get the total number of materials in the scene."""
        return get_material_count()

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """Get information about a material by ID, or None if not found."""
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    # =========================================================================
    # Primitive Management
    # =========================================================================

    def add_sphere(self, center: Vec3Like, radius: float, material_id: int) -> int:
        """Add a sphere to the scene.

        Returns:
            The primitive ID of the sphere.

        Raises:
            ValueError: If radius is not positive or material_id is invalid.
            RuntimeError: If the maximum number of primitives is exceeded.
        """
        primitive_id = add_sphere(center, radius, material_id)
        self.primitives.append(
            SphereInfo(
                primitive_id=primitive_id,
                center=_as_tuple(center, "center"),
                radius=radius,
                material_id=material_id,
            )
        )
        return primitive_id

    def add_plane(self, point: Vec3Like, normal: Vec3Like, material_id: int) -> int:
        """Add a one-sided plane to the scene.

        Returns:
            The primitive ID of the plane.

        Raises:
            ValueError: If normal has zero length or material_id is invalid.
            RuntimeError: If the maximum number of primitives is exceeded.
        """
        primitive_id = add_plane(point, normal, material_id)
        self.primitives.append(
            PlaneInfo(
                primitive_id=primitive_id,
                point=_as_tuple(point, "point"),
                normal=_as_tuple(normalized(normal, "normal"), "normal"),
                material_id=material_id,
            )
        )
        return primitive_id

    def add_flat_sphere(
        self,
        center: Vec3Like,
        radius: float,
        color: Color | tuple[float, float, float],
        albedo: float,
    ) -> tuple[int, int]:
        """Add a sphere with a new flat-colored material.

        Returns:
            Tuple of (primitive_id, material_id).
        """
        material_id = self.add_flat_material(color, albedo)
        primitive_id = self.add_sphere(center, radius, material_id)
        return primitive_id, material_id

    def add_flat_plane(
        self,
        point: Vec3Like,
        normal: Vec3Like,
        color: Color | tuple[float, float, float],
        albedo: float,
    ) -> tuple[int, int]:
        """Add a plane with a new flat-colored material.

        Returns:
            Tuple of (primitive_id, material_id).
        """
        material_id = self.add_flat_material(color, albedo)
        primitive_id = self.add_plane(point, normal, material_id)
        return primitive_id, material_id

    @property
    def spheres(self) -> list[SphereInfo]:
        """The spheres of the scene in primitive id order."""
        return [p for p in self.primitives if isinstance(p, SphereInfo)]

    @property
    def planes(self) -> list[PlaneInfo]:
        """The planes of the scene in primitive id order."""
        return [p for p in self.primitives if isinstance(p, PlaneInfo)]

    def get_primitive_count(self) -> int:
        """Get the total number of primitives in the scene."""
        return get_primitive_count()

    # =========================================================================
    # Light Management
    # =========================================================================

    def add_directional_light(
        self,
        direction: Vec3Like,
        color: Color | tuple[float, float, float],
        intensity: float,
    ) -> int:
        """Add a directional light; direction is the way the light travels.

        Raises:
            ValueError: If direction has zero length or intensity is negative.
            RuntimeError: If the maximum number of lights is exceeded.
        """
        rgb = Color.coerce(color)
        light_id = add_directional_light(direction, rgb, intensity)
        self.lights.append(
            LightInfo(
                light_id=light_id,
                kind=LightKind.DIRECTIONAL,
                vector=_as_tuple(normalized(direction, "direction"), "direction"),
                color=rgb,
                intensity=intensity,
            )
        )
        return light_id

    def add_spherical_light(
        self,
        position: Vec3Like,
        color: Color | tuple[float, float, float],
        intensity: float,
    ) -> int:
        """Add a spherical (point) light.

        Raises:
            ValueError: If intensity is negative.
            RuntimeError: If the maximum number of lights is exceeded.
        """
        rgb = Color.coerce(color)
        light_id = add_spherical_light(position, rgb, intensity)
        self.lights.append(
            LightInfo(
                light_id=light_id,
                kind=LightKind.SPHERICAL,
                vector=_as_tuple(position, "position"),
                color=rgb,
                intensity=intensity,
            )
        )
        return light_id

    def get_light_count(self) -> int:
        """Get the number of lights in the scene."""
        return get_light_count()

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object.

        Returns:
            A SceneConfig containing all settings and scene objects.
        """
        config = SceneConfig(
            width=self.width,
            height=self.height,
            fov=self.fov,
            shadow_bias=self.shadow_bias,
            background=list(self.background.as_tuple()),
        )

        for tex in self.textures:
            if tex.path is not None:
                config.textures.append({"path": tex.path})
            elif tex.pixels is not None:
                config.textures.append({"pixels": tex.pixels.tolist()})
            else:
                raise ValueError(
                    f"Texture {tex.texture_id} was supplied as a float array and cannot be serialized"
                )

        for mat in self.materials:
            mat_config: dict[str, Any] = {
                "coloration": mat.coloration.name.lower(),
                "albedo": mat.albedo,
            }
            if mat.coloration == ColorationKind.FLAT:
                mat_config["color"] = list(mat.color.as_tuple())
            else:
                mat_config["texture_id"] = mat.texture_id
            config.materials.append(mat_config)

        for prim in self.primitives:
            if isinstance(prim, SphereInfo):
                prim_config = {
                    "kind": "sphere",
                    "center": list(prim.center),
                    "radius": prim.radius,
                }
            else:
                prim_config = {
                    "kind": "plane",
                    "point": list(prim.point),
                    "normal": list(prim.normal),
                }
            prim_config["material_id"] = prim.material_id
            config.primitives.append(prim_config)

        for light in self.lights:
            key = "direction" if light.kind == LightKind.DIRECTIONAL else "position"
            config.lights.append(
                {
                    "type": light.kind.name.lower(),
                    key: list(light.vector),
                    "color": list(light.color.as_tuple()),
                    "intensity": light.intensity,
                }
            )

        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Clears the current scene and loads the configuration. Textures are
        loaded first, then materials, so that ids referenced by later
        entries exist. Primitives are added in list order, so their ids
        match their positions in config.primitives.

        Args:
            config: The scene configuration to load.

        Raises:
            ValueError: If the configuration contains invalid data.
            FileNotFoundError: If a texture file doesn't exist.
        """
        self.clear()
        self.set_render_settings(
            config.width,
            config.height,
            config.fov,
            config.shadow_bias,
            tuple(config.background),
        )

        for tex_config in config.textures:
            if "path" in tex_config:
                self.add_texture_file(tex_config["path"])
            elif "pixels" in tex_config:
                self.add_texture(np.asarray(tex_config["pixels"], dtype=np.uint8))
            else:
                raise ValueError(f"Texture entry needs 'path' or 'pixels': {tex_config}")

        for mat_config in config.materials:
            coloration = mat_config.get("coloration", "flat").lower()
            albedo = mat_config.get("albedo", 0.18)
            if coloration == "flat":
                self.add_flat_material(tuple(mat_config.get("color", [1.0, 1.0, 1.0])), albedo)
            elif coloration == "texture":
                if "texture_id" not in mat_config:
                    raise ValueError(f"Textured material needs 'texture_id': {mat_config}")
                self.add_textured_material(mat_config["texture_id"], albedo)
            else:
                raise ValueError(f"Unknown coloration: {coloration}")

        for prim_config in config.primitives:
            kind = prim_config.get("kind", "").lower()
            if kind == "sphere":
                self.add_sphere(
                    prim_config.get("center", [0.0, 0.0, 0.0]),
                    prim_config.get("radius", 1.0),
                    prim_config.get("material_id", 0),
                )
            elif kind == "plane":
                self.add_plane(
                    prim_config.get("point", [0.0, 0.0, 0.0]),
                    prim_config.get("normal", [0.0, -1.0, 0.0]),
                    prim_config.get("material_id", 0),
                )
            else:
                raise ValueError(f"Unknown primitive kind: {kind}")

        for light_config in config.lights:
            light_type = light_config.get("type", "").lower()
            color = tuple(light_config.get("color", [1.0, 1.0, 1.0]))
            intensity = light_config.get("intensity", 1.0)
            if light_type == "directional":
                self.add_directional_light(
                    light_config.get("direction", [0.0, -1.0, 0.0]), color, intensity
                )
            elif light_type == "spherical":
                self.add_spherical_light(
                    light_config.get("position", [0.0, 0.0, 0.0]), color, intensity
                )
            else:
                raise ValueError(f"Unknown light type: {light_type}")

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization).

        Returns:
            A dictionary representation of the scene.
        """
        config = self.to_config()
        return {
            "width": config.width,
            "height": config.height,
            "fov": config.fov,
            "shadow_bias": config.shadow_bias,
            "background": config.background,
            "textures": config.textures,
            "materials": config.materials,
            "primitives": config.primitives,
            "lights": config.lights,
        }

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary.

        Missing keys take the SceneConfig defaults.

        Args:
            data: Dictionary with the keys produced by to_dict().
        """
        self.from_config(scene_config_from_dict(data))

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_primitives() -> int:
        """Get the maximum number of primitives supported."""
        return MAX_PRIMITIVES

    @staticmethod
    def get_max_lights() -> int:
        """Get the maximum number of lights supported."""
        return MAX_LIGHTS

    def __repr__(self) -> str:
        return (
            f"SceneManager({self.width}x{self.height}, fov={self.fov}, "
            f"primitives={self.get_primitive_count()}, lights={self.get_light_count()})"
        )


def scene_config_from_dict(data: dict[str, Any]) -> SceneConfig:
    """Build a SceneConfig from a dictionary, filling in defaults."""
    defaults = SceneConfig()
    return SceneConfig(
        width=data.get("width", defaults.width),
        height=data.get("height", defaults.height),
        fov=data.get("fov", defaults.fov),
        shadow_bias=data.get("shadow_bias", defaults.shadow_bias),
        background=data.get("background", defaults.background),
        textures=data.get("textures", []),
        materials=data.get("materials", []),
        primitives=data.get("primitives", []),
        lights=data.get("lights", []),
    )
