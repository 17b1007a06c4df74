"""Unit tests for plane intersection.

Tests cover:
- One-sided hits (ray travelling along the normal)
- Parallel and back-side rays missing
- Plane behind the ray origin
- Shading normal and planar texture coordinates
"""

import taichi as ti


def _intersect(origin, direction, point, normal):
    from raycaster.core.ray import Ray, normalize, vec3
    from raycaster.geometry.plane import Plane, intersect_plane

    hit = ti.field(dtype=ti.i32, shape=())
    distance = ti.field(dtype=ti.f64, shape=())

    @ti.kernel
    def test_kernel():
        ray = Ray(
            origin=vec3(origin[0], origin[1], origin[2]),
            direction=normalize(vec3(direction[0], direction[1], direction[2])),
        )
        plane = Plane(
            point=vec3(point[0], point[1], point[2]),
            normal=normalize(vec3(normal[0], normal[1], normal[2])),
        )
        rec = intersect_plane(ray, plane)
        hit[None] = rec.hit
        distance[None] = rec.distance

    test_kernel()
    return hit[None], distance[None]


class TestPlaneIntersection:
    """Tests for ray-plane intersection."""

    def test_straight_down_hit(self):
        """Test a ray pointing straight down hits a ground plane at distance 1."""
        hit, distance = _intersect((0, 0, 0), (0, -1, 0), (0, -1, -3), (0, -1, 0))
        assert hit == 1
        assert abs(distance - 1.0) < 1e-12

    def test_oblique_hit(self):
        """Test an oblique ray hits at the expected slant distance."""
        hit, distance = _intersect((0, 0, 0), (0, -1, -1), (0, -1, 0), (0, -1, 0))
        assert hit == 1
        assert abs(distance - 2.0**0.5) < 1e-12

    def test_parallel_ray_misses(self):
        """Test a ray parallel to the plane misses."""
        hit, _ = _intersect((0, 0, 0), (0, 0, -1), (0, -1, -3), (0, -1, 0))
        assert hit == 0

    def test_ray_from_back_side_misses(self):
        """Test a ray travelling against the normal is rejected."""
        hit, _ = _intersect((0, -2, 0), (0, 1, 0), (0, -1, 0), (0, -1, 0))
        assert hit == 0

    def test_plane_behind_origin_misses(self):
        """Test the plane lies behind the ray origin."""
        hit, _ = _intersect((0, -2, 0), (0, -1, 0), (0, -1, 0), (0, -1, 0))
        assert hit == 0


class TestPlaneSurface:
    """Tests for the plane normal and texture coordinates."""

    def test_make_plane_and_normal_is_negated(self):
        """Test the shading normal faces the viewer side."""
        from raycaster.core.ray import vec3
        from raycaster.geometry.plane import make_plane, plane_normal

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            plane = make_plane(vec3(0.0, -1.0, 0.0), vec3(0.0, -1.0, 0.0))
            result[None] = plane_normal(plane)

        test_kernel()
        n = result[None]
        assert abs(n[0]) < 1e-12
        assert abs(n[1] - 1.0) < 1e-12
        assert abs(n[2]) < 1e-12

    def test_basis_is_orthonormal(self):
        """Test the plane basis axes are unit length and lie in the plane."""
        from raycaster.core.ray import normalize, vec3
        from raycaster.geometry.plane import Plane, plane_basis

        x_axis = ti.Vector.field(3, dtype=ti.f64, shape=())
        y_axis = ti.Vector.field(3, dtype=ti.f64, shape=())
        normal = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            n = normalize(vec3(1.0, -2.0, 0.5))
            plane = Plane(point=vec3(0.0, 0.0, 0.0), normal=n)
            x, y = plane_basis(plane)
            x_axis[None] = x
            y_axis[None] = y
            normal[None] = n

        test_kernel()
        x = x_axis[None].to_numpy()
        y = y_axis[None].to_numpy()
        n = normal[None].to_numpy()
        assert abs(x.dot(x) - 1.0) < 1e-12
        assert abs(y.dot(y) - 1.0) < 1e-12
        assert abs(x.dot(y)) < 1e-12
        assert abs(x.dot(n)) < 1e-12
        assert abs(y.dot(n)) < 1e-12

    def test_basis_fallback_for_z_normal(self):
        """Test a normal parallel to z uses the y-axis fallback."""
        from raycaster.core.ray import vec3
        from raycaster.geometry.plane import Plane, plane_basis

        x_axis = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            plane = Plane(point=vec3(0.0, 0.0, -10.0), normal=vec3(0.0, 0.0, -1.0))
            x, _ = plane_basis(plane)
            x_axis[None] = x

        test_kernel()
        x = x_axis[None].to_numpy()
        assert abs(x.dot(x) - 1.0) < 1e-12
        assert abs(abs(x[0]) - 1.0) < 1e-12

    def test_texture_coords_relative_to_reference_point(self):
        """Test texture coordinates are zero at the reference point and unbounded."""
        from raycaster.core.ray import vec3
        from raycaster.geometry.plane import Plane, plane_texture_coords

        at_point = ti.Vector.field(2, dtype=ti.f64, shape=())
        far_away = ti.Vector.field(2, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            plane = Plane(point=vec3(0.0, -1.0, -3.0), normal=vec3(0.0, -1.0, 0.0))
            at_point[None] = plane_texture_coords(plane, vec3(0.0, -1.0, -3.0))
            far_away[None] = plane_texture_coords(plane, vec3(7.0, -1.0, -13.0))

        test_kernel()
        a = at_point[None]
        f = far_away[None]
        assert abs(a[0]) < 1e-12
        assert abs(a[1]) < 1e-12
        # Offsets lie in the plane, so the uv distance equals the world distance
        assert abs((f[0] ** 2 + f[1] ** 2) - (7.0**2 + 10.0**2)) < 1e-9
