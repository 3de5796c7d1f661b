"""Tests for the subpackage public interfaces.

Each subpackage re-exports its helpers through ``__all__``; every listed
name must resolve, and helpers nothing renders with are not exported.

Note: Imports are done inside test methods to avoid Taichi initialization issues.
"""

import importlib

import pytest

SUBPACKAGES = [
    "pathweave.camera",
    "pathweave.core",
    "pathweave.geometry",
    "pathweave.materials",
    "pathweave.output",
    "pathweave.scene",
]


class TestExports:
    """Tests for __all__ in each subpackage."""

    @pytest.mark.parametrize("name", SUBPACKAGES)
    def test_all_names_resolve(self, name):
        module = importlib.import_module(name)
        missing = [attr for attr in module.__all__ if not hasattr(module, attr)]
        assert missing == []

    @pytest.mark.parametrize(
        "name, attr",
        [
            ("pathweave.camera", "get_camera_origin"),
            ("pathweave.core", "random_on_hemisphere"),
            ("pathweave.materials", "LambertianMaterial"),
            ("pathweave.materials", "MetalMaterial"),
        ],
    )
    def test_unused_helpers_not_exported(self, name, attr):
        module = importlib.import_module(name)
        assert attr not in module.__all__
        assert not hasattr(module, attr)

    def test_manager_has_no_capacity_getters(self):
        """Test capacity is read from the module constants instead."""
        from pathweave.scene.intersection import MAX_SPHERES
        from pathweave.scene.manager import MAX_MATERIALS, SceneManager

        assert not hasattr(SceneManager, "get_max_spheres")
        assert not hasattr(SceneManager, "get_max_materials")
        assert MAX_SPHERES == 1024
        assert MAX_MATERIALS > 0
