"""Unit tests for scene-level intersection.

Tests cover:
- Primitive storage, validation and clearing
- Nearest-hit selection across spheres and planes
- Tie breaking in insertion order
- Kind dispatch for normals, texture coordinates and material ids
"""

import math

import numpy as np
import pytest
import taichi as ti


@pytest.fixture
def material():
    """A single flat material for primitives."""
    from raycaster.materials.lambertian import add_flat_material

    return add_flat_material((1.0, 1.0, 1.0), albedo=0.18)


def _trace(origin, direction):
    from raycaster.core.ray import Ray, normalize, vec3
    from raycaster.scene.intersection import trace

    hit = ti.field(dtype=ti.i32, shape=())
    distance = ti.field(dtype=ti.f64, shape=())
    primitive_id = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel():
        ray = Ray(
            origin=vec3(origin[0], origin[1], origin[2]),
            direction=normalize(vec3(direction[0], direction[1], direction[2])),
        )
        rec = trace(ray)
        hit[None] = rec.hit
        distance[None] = rec.distance
        primitive_id[None] = rec.primitive_id

    test_kernel()
    return hit[None], distance[None], primitive_id[None]


class TestScenePrimitiveStorage:
    """Tests for scene primitive storage and management."""

    def test_add_sphere_and_plane(self, material):
        """Test primitives share one ordered table."""
        from raycaster.scene.intersection import (
            PrimitiveKind,
            add_plane,
            add_sphere,
            get_primitive_count,
            get_primitive_kind,
        )

        assert get_primitive_count() == 0
        assert add_sphere((0, 0, -5), 1.0, material) == 0
        assert add_plane((0, -1, 0), (0, -1, 0), material) == 1
        assert get_primitive_count() == 2
        assert get_primitive_kind(0) == PrimitiveKind.SPHERE
        assert get_primitive_kind(1) == PrimitiveKind.PLANE

    def test_clear_scene(self, material):
        """Test clearing all primitives from the scene."""
        from raycaster.scene.intersection import add_sphere, clear_scene, get_primitive_count

        add_sphere((0, 0, -5), 1.0, material)
        clear_scene()
        assert get_primitive_count() == 0

    @pytest.mark.parametrize("radius", [0.0, -1.0])
    def test_non_positive_radius_rejected(self, material, radius):
        """Test spheres need a positive radius."""
        from raycaster.scene.intersection import add_sphere

        with pytest.raises(ValueError, match="radius"):
            add_sphere((0, 0, -5), radius, material)

    def test_zero_normal_rejected(self, material):
        """Test planes need a non-zero normal."""
        from raycaster.scene.intersection import add_plane

        with pytest.raises(ValueError, match="non-zero length"):
            add_plane((0, -1, 0), (0, 0, 0), material)

    def test_unknown_material_rejected(self):
        """Test primitives must reference a registered material."""
        from raycaster.scene.intersection import add_sphere

        with pytest.raises(ValueError, match="Invalid material_id"):
            add_sphere((0, 0, -5), 1.0, 0)

    def test_plane_normal_normalized_on_insertion(self, material):
        """Test stored plane normals have unit length."""
        from raycaster.scene.intersection import add_plane, primitive_normals

        idx = add_plane((0, -1, 0), (0, -4, 0), material)
        assert np.allclose(primitive_normals[idx].to_numpy(), [0.0, -1.0, 0.0])

    def test_invalid_primitive_kind_lookup(self):
        """Test kind lookup outside the table raises."""
        from raycaster.scene.intersection import get_primitive_kind

        with pytest.raises(ValueError, match="Invalid primitive_id"):
            get_primitive_kind(0)


class TestTrace:
    """Tests for nearest-hit queries."""

    def test_empty_scene_misses(self):
        """Test tracing an empty scene returns a miss."""
        hit, _, primitive_id = _trace((0, 0, 0), (0, 0, -1))
        assert hit == 0
        assert primitive_id == -1

    def test_nearest_sphere_wins(self, material):
        """Test the closer of two spheres is reported regardless of order."""
        from raycaster.scene.intersection import add_sphere

        add_sphere((0, 0, -10), 1.0, material)
        near = add_sphere((0, 0, -5), 1.0, material)

        hit, distance, primitive_id = _trace((0, 0, 0), (0, 0, -1))
        assert hit == 1
        assert primitive_id == near
        assert abs(distance - 4.0) < 1e-9

    def test_nearest_is_minimum_over_primitives(self, material):
        """Test trace agrees with the smallest individual hit distance."""
        from raycaster.scene.intersection import add_plane, add_sphere

        add_sphere((0.5, -0.5, -6), 1.5, material)
        add_sphere((-1, 0, -4), 0.75, material)
        add_plane((0, -1, 0), (0, -1, 0), material)

        direction = np.array([-0.2, -0.15, -1.0])
        direction /= np.linalg.norm(direction)

        # Reference distances computed with NumPy
        candidates = []
        for center, radius in (((0.5, -0.5, -6), 1.5), ((-1, 0, -4), 0.75)):
            to_center = np.array(center, dtype=float)
            adj = to_center.dot(direction)
            d2 = to_center.dot(to_center) - adj * adj
            if d2 <= radius * radius:
                thc = math.sqrt(radius * radius - d2)
                roots = [t for t in (adj - thc, adj + thc) if t >= 0]
                if roots:
                    candidates.append(min(roots))
        denom = np.array([0, -1, 0]).dot(direction)
        if denom > 1e-6:
            candidates.append(np.array([0, -1, 0]).dot(np.array([0, -1, 0])) / denom)

        hit, distance, _ = _trace((0, 0, 0), tuple(direction))
        assert hit == 1
        assert abs(distance - min(candidates)) < 1e-9

    def test_ties_resolve_to_first_inserted(self, material):
        """Test equal distances keep the earlier primitive."""
        from raycaster.materials.lambertian import add_flat_material
        from raycaster.scene.intersection import add_sphere

        other = add_flat_material((1.0, 0.0, 0.0), albedo=0.5)
        first = add_sphere((0, 0, -5), 1.0, material)
        add_sphere((0, 0, -5), 1.0, other)

        _, _, primitive_id = _trace((0, 0, 0), (0, 0, -1))
        assert primitive_id == first

    def test_sphere_in_front_of_plane(self, material):
        """Test a sphere occludes the ground plane behind it."""
        from raycaster.scene.intersection import add_plane, add_sphere

        plane = add_plane((0, -1, -3), (0, -1, 0), material)
        sphere = add_sphere((0, -1, -5), 1.0, material)

        _, _, straight = _trace((0, 0, 0), (0, -0.2, -1))
        _, _, down = _trace((0, 0, 0), (0, -1, -0.5))
        assert straight == sphere
        assert down == plane


class TestPrimitiveDispatch:
    """Tests for kind dispatch in kernels."""

    def test_normals_uv_and_material(self, material):
        """Test per-kind normal, texture coordinates and material id."""
        from raycaster.core.ray import vec3
        from raycaster.materials.lambertian import add_flat_material
        from raycaster.scene.intersection import (
            add_plane,
            add_sphere,
            get_primitive_material_id,
            surface_normal,
            texture_coords,
        )

        plane_material = add_flat_material((0.4, 0.4, 0.1), albedo=0.18)
        sphere = add_sphere((0, 0, -5), 1.0, material)
        plane = add_plane((0, -1, -3), (0, -1, 0), plane_material)

        normals = ti.Vector.field(3, dtype=ti.f64, shape=2)
        uvs = ti.Vector.field(2, dtype=ti.f64, shape=2)
        materials = ti.field(dtype=ti.i32, shape=2)

        @ti.kernel
        def test_kernel(s: ti.i32, p: ti.i32):
            normals[0] = surface_normal(s, vec3(0.0, 0.0, -4.0))
            normals[1] = surface_normal(p, vec3(2.0, -1.0, -7.0))
            uvs[0] = texture_coords(s, vec3(0.0, 1.0, -5.0))
            uvs[1] = texture_coords(p, vec3(0.0, -1.0, -3.0))
            materials[0] = get_primitive_material_id(s)
            materials[1] = get_primitive_material_id(p)

        test_kernel(sphere, plane)
        assert np.allclose(normals[0].to_numpy(), [0.0, 0.0, 1.0])
        assert np.allclose(normals[1].to_numpy(), [0.0, 1.0, 0.0])
        assert abs(uvs[0][1]) < 1e-12  # top pole
        assert np.allclose(uvs[1].to_numpy(), [0.0, 0.0])
        assert materials[0] == material
        assert materials[1] == plane_material
