"""Unit tests for direct Lambertian shading and shadow rays.

The shaded point in most tests is the front of a unit sphere at (0, 0, -5),
reached by the ray from the origin along -z at distance 4. Its normal is +z.
"""

import math

import numpy as np
import pytest
import taichi as ti


@pytest.fixture
def target_sphere():
    """A white sphere with albedo 0.5 in front of the camera."""
    from raycaster.materials.lambertian import add_flat_material
    from raycaster.scene.intersection import add_sphere

    white = add_flat_material((1.0, 1.0, 1.0), albedo=0.5)
    return add_sphere((0, 0, -5), 1.0, white)


def _shade(primitive_id, distance=4.0):
    from raycaster.core.ray import Ray, vec3
    from raycaster.core.shading import shade_diffuse
    from raycaster.scene.intersection import Intersection

    result = ti.Vector.field(3, dtype=ti.f64, shape=())

    @ti.kernel
    def test_kernel(idx: ti.i32, t: ti.f64):
        ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 0.0, -1.0))
        result[None] = shade_diffuse(ray, Intersection(hit=1, distance=t, primitive_id=idx))

    test_kernel(primitive_id, distance)
    return result[None].to_numpy()


def _occluder(center, radius):
    from raycaster.materials.lambertian import add_flat_material
    from raycaster.scene.intersection import add_sphere

    return add_sphere(center, radius, add_flat_material((1.0, 0.0, 0.0), albedo=1.0))


class TestShadowBias:
    """Tests for the shadow bias setting."""

    def test_default_and_override(self):
        """Test the bias can be changed and reset."""
        from raycaster.scene.lights import (
            DEFAULT_SHADOW_BIAS,
            get_shadow_bias,
            reset_shadow_bias,
            set_shadow_bias,
        )

        assert get_shadow_bias() == DEFAULT_SHADOW_BIAS
        set_shadow_bias(1e-4)
        assert get_shadow_bias() == pytest.approx(1e-4)
        reset_shadow_bias()
        assert get_shadow_bias() == DEFAULT_SHADOW_BIAS

    def test_negative_bias_rejected(self):
        """Test negative bias raises ValueError."""
        from raycaster.scene.lights import set_shadow_bias

        with pytest.raises(ValueError, match="non-negative"):
            set_shadow_bias(-1e-3)


class TestDirectLighting:
    """Tests for the unshadowed lighting formula."""

    def test_spherical_light_reference_value(self, target_sphere):
        """Test color = surface * light color * cos * I/(4 pi r^2) * albedo/pi."""
        from raycaster.scene.lights import add_spherical_light

        add_spherical_light((0, 0, 0), (1.0, 0.5, 0.25), 100.0)
        color = _shade(target_sphere)

        irradiance = 100.0 / (4.0 * math.pi * 16.0)
        expected = np.array([1.0, 0.5, 0.25]) * irradiance * 0.5 / math.pi
        assert np.allclose(color, expected, rtol=1e-9, atol=0.0)

    def test_directional_light_cosine(self, target_sphere):
        """Test a directional light is scaled by the cosine of its angle."""
        from raycaster.scene.lights import add_directional_light

        # Light travels toward -z and -y at 60 degrees from the normal
        add_directional_light((0.0, -math.sin(math.pi / 3), -math.cos(math.pi / 3)), (1, 1, 1), 2.0)
        color = _shade(target_sphere)

        expected = 0.5 * 2.0 * 0.5 / math.pi
        assert np.allclose(color, [expected] * 3, atol=1e-9)

    def test_light_behind_surface_contributes_nothing(self, target_sphere):
        """Test a light below the horizon adds no color."""
        from raycaster.scene.lights import add_directional_light

        add_directional_light((0, 0, 1), (1, 1, 1), 50.0)
        assert np.allclose(_shade(target_sphere), [0.0, 0.0, 0.0])

    def test_lights_add_up(self, target_sphere):
        """Test contributions of several lights are summed."""
        from raycaster.scene.lights import add_directional_light

        add_directional_light((0, 0, -1), (1, 0, 0), 1.0)
        single = _shade(target_sphere)
        add_directional_light((0, 0, -1), (0, 0, 1), 1.0)
        both = _shade(target_sphere)

        assert np.allclose(both, single + single[[2, 1, 0]])

    def test_no_lights_is_black(self, target_sphere):
        """Test a hit with no lights is black, not the background."""
        assert np.allclose(_shade(target_sphere), [0.0, 0.0, 0.0])

    def test_light_on_surface_point_is_finite(self, target_sphere):
        """Test a spherical light placed on the shaded point adds nothing."""
        from raycaster.scene.lights import add_spherical_light

        add_spherical_light((0, 0, -4), (1, 1, 1), 100.0)
        color = _shade(target_sphere)
        assert np.all(np.isfinite(color))
        assert np.allclose(color, [0.0, 0.0, 0.0])

    def test_albedo_above_one_not_clamped(self):
        """Test bright surfaces exceed 1 without clamping."""
        from raycaster.materials.lambertian import add_flat_material
        from raycaster.scene.intersection import add_sphere
        from raycaster.scene.lights import add_directional_light

        bright = add_flat_material((1.0, 1.0, 1.0), albedo=4.0)
        idx = add_sphere((0, 0, -5), 1.0, bright)
        add_directional_light((0, 0, -1), (1, 1, 1), 10.0)

        color = _shade(idx)
        assert np.allclose(color, [40.0 / math.pi] * 3)
        assert color[0] > 1.0


class TestShadows:
    """Tests for shadow ray occlusion."""

    def test_occluder_between_point_and_light(self, target_sphere):
        """Test a primitive closer than the spherical light blocks it."""
        from raycaster.scene.lights import add_spherical_light

        add_spherical_light((0, 0, 0), (1, 1, 1), 100.0)
        _occluder((0, 0, -2), 0.5)
        assert np.allclose(_shade(target_sphere), [0.0, 0.0, 0.0])

    def test_occluder_beyond_spherical_light(self, target_sphere):
        """Test a primitive farther away than the light does not block it."""
        from raycaster.scene.lights import add_spherical_light

        add_spherical_light((0, 0, 0), (1, 1, 1), 100.0)
        _occluder((0, 0, 3), 0.5)
        assert _shade(target_sphere)[0] > 0.0

    def test_directional_light_blocked_by_any_hit(self, target_sphere):
        """Test any primitive along a directional light's path blocks it."""
        from raycaster.scene.lights import add_directional_light

        add_directional_light((0, 0, -1), (1, 1, 1), 10.0)
        _occluder((0, 0, 50), 0.5)
        assert np.allclose(_shade(target_sphere), [0.0, 0.0, 0.0])

    def test_surface_does_not_shadow_itself(self, target_sphere):
        """Test the shaded sphere does not occlude its own lit side."""
        from raycaster.scene.lights import add_directional_light

        add_directional_light((0, 0, -1), (1, 1, 1), 1.0)
        assert np.allclose(_shade(target_sphere), [0.5 / math.pi] * 3, atol=1e-9)

    def test_plane_lit_from_above(self):
        """Test a ground plane is lit by a light on its visible side."""
        from raycaster.core.ray import Ray, normalize, vec3
        from raycaster.core.shading import shade_diffuse
        from raycaster.materials.lambertian import add_flat_material
        from raycaster.scene.intersection import add_plane, trace
        from raycaster.scene.lights import add_directional_light

        ground = add_flat_material((0.4, 0.4, 0.1), albedo=1.0)
        add_plane((0, -1, 0), (0, -1, 0), ground)
        add_directional_light((0, -1, 0), (1, 1, 1), 1.0)

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=normalize(vec3(0.0, -1.0, -1.0)))
            result[None] = shade_diffuse(ray, trace(ray))

        test_kernel()
        expected = np.array([0.4, 0.4, 0.1]) / math.pi
        assert np.allclose(result[None].to_numpy(), expected, atol=1e-6)

    def test_light_visible_flags(self, target_sphere):
        """Test light_visible reports each light separately."""
        from raycaster.core.ray import vec3
        from raycaster.core.shading import light_visible
        from raycaster.scene.lights import add_spherical_light

        open_light = add_spherical_light((0, 0, 0), (1, 1, 1), 1.0)
        blocked_light = add_spherical_light((0, 0, 10), (1, 1, 1), 1.0)
        _occluder((0, 0, 5), 0.5)

        flags = ti.field(dtype=ti.i32, shape=2)

        @ti.kernel
        def test_kernel(a: ti.i32, b: ti.i32):
            p = vec3(0.0, 0.0, -4.0)
            n = vec3(0.0, 0.0, 1.0)
            flags[0] = light_visible(a, p, n)
            flags[1] = light_visible(b, p, n)

        test_kernel(open_light, blocked_light)
        assert flags[0] == 1
        assert flags[1] == 0
