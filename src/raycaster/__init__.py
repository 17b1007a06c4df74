"""Taichi ray caster for spheres and planes.

This package renders still images of simple scenes by casting one primary
ray per pixel from a camera at the world origin, with:
- Sphere and plane primitives
- Directional and spherical (point) lights with hard shadows
- Lambertian shading with flat colors or wrapped image textures

Subpackages:
    core: Ray and vector utilities, colors, shading and the render loop
    geometry: Sphere and plane intersection, normals and texture coordinates
    materials: Material registry and coloration (flat color / texture)
    scene: Primitive and light tables, nearest-hit queries, scene manager
    camera: Primary ray generation
    preview: Image export and preview utilities

Taichi must be initialized (see raycaster.core.runtime.init_taichi) before
importing any module that allocates fields.
"""

__version__ = "0.1.0"


def render(config):
    """Render a scene and return a (height, width, 3) uint8 image.

    Convenience wrapper around raycaster.core.renderer.render(); Taichi must
    already be initialized.
    """
    from raycaster.core.renderer import render as _render

    return _render(config)
