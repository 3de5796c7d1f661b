"""Tests for the SceneManager and the reference world.

Covers material registration, shared materials, sphere validation,
serialization and the default scene layout.
"""

import pytest
import taichi as ti


class TestMaterialRegistration:
    """Tests for unified material ids."""

    def test_ids_are_sequential_across_types(self):
        from pathweave.scene.manager import MaterialType, SceneManager

        scene = SceneManager()
        lam = scene.add_lambertian_material((0.5, 0.5, 0.5))
        metal = scene.add_metal_material((0.8, 0.8, 0.8), roughness=0.1)
        lam2 = scene.add_lambertian_material((0.1, 0.2, 0.3))

        assert (lam, metal, lam2) == (0, 1, 2)
        assert scene.get_material_count() == 3
        assert scene.get_material_type_python(metal) == MaterialType.METAL
        assert scene.get_material_info(lam2).type_index == 1
        assert scene.get_material_info(99) is None

    def test_kernel_side_lookup(self):
        """Test get_material_type and get_material_type_index inside kernels."""
        from pathweave.scene.manager import (
            MaterialType,
            SceneManager,
            get_material_type,
            get_material_type_index,
        )

        scene = SceneManager()
        scene.add_lambertian_material((0.5, 0.5, 0.5))
        scene.add_metal_material((0.8, 0.8, 0.8))

        types = ti.field(dtype=ti.i32, shape=3)
        indices = ti.field(dtype=ti.i32, shape=3)

        @ti.kernel
        def test_kernel():
            for i in range(3):
                types[i] = get_material_type(i)
                indices[i] = get_material_type_index(i)

        test_kernel()
        assert types[0] == int(MaterialType.LAMBERTIAN)
        assert types[1] == int(MaterialType.METAL)
        assert indices[0] == 0
        assert indices[1] == 0
        # Unregistered ids resolve to -1
        assert types[2] == -1
        assert indices[2] == -1

    def test_invalid_albedo_propagates(self):
        from pathweave.scene.manager import SceneManager

        scene = SceneManager()
        with pytest.raises(ValueError):
            scene.add_lambertian_material((1.5, 0.0, 0.0))
        assert scene.get_material_count() == 0


class TestSphereManagement:
    """Tests for adding spheres through the manager."""

    def test_spheres_share_material(self):
        from pathweave.scene.manager import SceneManager

        scene = SceneManager()
        mat = scene.add_lambertian_material((0.5, 0.5, 0.5))
        scene.add_sphere((0.0, 0.0, -1.0), 0.5, mat)
        scene.add_sphere((1.0, 0.0, -1.0), 0.5, mat)

        assert scene.get_sphere_count() == 2
        assert scene.get_material_count() == 1
        assert all(s.material_id == mat for s in scene.spheres)

    def test_unknown_material_rejected(self):
        from pathweave.scene.manager import SceneManager

        scene = SceneManager()
        with pytest.raises(ValueError, match="Invalid material_id"):
            scene.add_sphere((0.0, 0.0, -1.0), 0.5, 0)

    @pytest.mark.parametrize("radius", [0.0, -1.0])
    def test_non_positive_radius_rejected(self, radius):
        from pathweave.scene.manager import SceneManager

        scene = SceneManager()
        mat = scene.add_lambertian_material((0.5, 0.5, 0.5))
        with pytest.raises(ValueError, match="radius"):
            scene.add_sphere((0.0, 0.0, -1.0), radius, mat)

    def test_convenience_methods(self):
        from pathweave.scene.manager import SceneManager

        scene = SceneManager()
        assert scene.add_lambertian_sphere((0, 0, -1), 0.5, (0.7, 0.3, 0.3)) == (0, 0)
        assert scene.add_metal_sphere((1, 0, -1), 0.5, (0.8, 0.6, 0.2), 0.5) == (1, 1)

    def test_clear(self):
        from pathweave.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_lambertian_sphere((0, 0, -1), 0.5, (0.7, 0.3, 0.3))
        scene.clear()
        assert scene.get_sphere_count() == 0
        assert scene.get_material_count() == 0


class TestSerialization:
    """Tests for to_dict / from_dict."""

    def test_roundtrip(self):
        from pathweave.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_lambertian_sphere((0.0, -100.5, -1.0), 100.0, (0.8, 0.8, 0.0))
        scene.add_metal_sphere((1.0, 0.0, -1.0), 0.5, (0.8, 0.6, 0.2), 0.3)
        data = scene.to_dict()

        assert data["materials"][0] == {"type": "lambertian", "albedo": [0.8, 0.8, 0.0]}
        assert data["materials"][1]["roughness"] == 0.3
        assert data["spheres"][1]["material_id"] == 1

        restored = SceneManager()
        restored.from_dict(data)
        assert restored.to_dict() == data

    def test_unknown_type_rejected(self):
        from pathweave.scene.manager import SceneManager

        scene = SceneManager()
        with pytest.raises(ValueError, match="Unknown material type"):
            scene.from_dict({"materials": [{"type": "glass"}], "spheres": []})


class TestDefaultWorld:
    """Tests for the reference scene."""

    def test_with_metal(self):
        from pathweave.scene.default_world import GROUND_RADIUS, create_default_scene

        scene, camera = create_default_scene()

        assert scene.get_sphere_count() == 4
        assert scene.get_material_count() == 4
        assert scene.spheres[0].radius == GROUND_RADIUS
        assert scene.spheres[0].center == (0.0, -100.5, -1.0)
        assert camera.lookfrom == (0.0, 0.0, 0.0)

    def test_without_metal(self):
        from pathweave.scene.default_world import create_default_scene
        from pathweave.scene.manager import MaterialType

        scene, _ = create_default_scene(include_metal=False)

        assert scene.get_sphere_count() == 2
        assert all(
            m.material_type == MaterialType.LAMBERTIAN for m in scene.materials
        )

    def test_camera_aspect_ratio(self):
        from pathweave.scene.default_world import create_default_scene

        _, camera = create_default_scene(aspect_ratio=2.0)
        assert camera.aspect_ratio == 2.0
