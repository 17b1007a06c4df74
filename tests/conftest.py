"""Pytest configuration for ray caster tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    from raycaster.core.runtime import init_taichi

    init_taichi()
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene data before and after each test.

    This ensures tests are isolated from each other.
    """
    # Import here so Taichi is initialized before fields are allocated
    from raycaster.core.integrator import reset_render_target
    from raycaster.materials.coloration import clear_textures
    from raycaster.materials.lambertian import clear_materials
    from raycaster.scene.intersection import clear_scene
    from raycaster.scene.lights import clear_lights, reset_shadow_bias

    def _clear_all():
        clear_scene()
        clear_lights()
        clear_materials()
        clear_textures()
        reset_shadow_bias()
        reset_render_target()

    _clear_all()

    yield

    _clear_all()
