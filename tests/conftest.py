"""Pytest configuration for pathweave tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield
    # Note: We don't call ti.reset() here as it can cause issues
    # with subsequent tests if any cleanup happens after


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene data before each test.

    This ensures tests are isolated from each other.
    """
    # Import here so the fields are created after Taichi is initialized
    from pathweave.materials.lambertian import clear_lambertian_materials
    from pathweave.materials.metal import clear_metal_materials
    from pathweave.scene.intersection import clear_scene
    from pathweave.scene.manager import _clear_material_tracking

    def _clear_all():
        clear_scene()
        clear_lambertian_materials()
        clear_metal_materials()
        _clear_material_tracking()

        try:
            from pathweave.core.integrator import clear_render_target

            clear_render_target()
        except (ImportError, RuntimeError):
            # Integrator not imported yet or render target never set up
            pass

    _clear_all()

    yield

    _clear_all()
