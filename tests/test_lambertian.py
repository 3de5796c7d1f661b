"""Unit tests for the Lambertian material.

Tests cover:
- Attenuation equals albedo
- Scatter directions stay on the normal's side
- Registry validation and capacity
"""

import pytest
import taichi as ti


class TestScatterLambertian:
    """Tests for scatter_lambertian."""

    def test_attenuation_is_albedo(self):
        """Test the attenuation is exactly the material albedo."""
        from pathweave.materials.lambertian import scatter_lambertian, vec3

        attenuation = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            _, atten = scatter_lambertian(vec3(0.7, 0.3, 0.3), vec3(0.0, 1.0, 0.0))
            attenuation[None] = atten

        test_kernel()
        a = attenuation[None]
        assert abs(a[0] - 0.7) < 1e-6
        assert abs(a[1] - 0.3) < 1e-6
        assert abs(a[2] - 0.3) < 1e-6

    def test_direction_in_normal_hemisphere(self):
        """Test normal + unit vector never points below the surface."""
        from pathweave.materials.lambertian import scatter_lambertian, vec3

        min_dot = ti.field(dtype=ti.f32, shape=())
        min_dot[None] = 10.0

        @ti.kernel
        def test_kernel():
            normal = vec3(0.0, 0.0, 1.0)
            for _i in range(2000):
                direction, _ = scatter_lambertian(vec3(0.5, 0.5, 0.5), normal)
                ti.atomic_min(min_dot[None], direction.dot(normal))

        test_kernel()
        assert min_dot[None] >= -1e-5

    def test_direction_never_degenerate(self):
        """Test the scatter direction is never a near-zero vector."""
        from pathweave.materials.lambertian import scatter_lambertian, vec3

        min_len_sq = ti.field(dtype=ti.f32, shape=())
        min_len_sq[None] = 10.0

        @ti.kernel
        def test_kernel():
            normal = vec3(1.0, 0.0, 0.0)
            for _i in range(2000):
                direction, _ = scatter_lambertian(vec3(0.5, 0.5, 0.5), normal)
                ti.atomic_min(min_len_sq[None], direction.dot(direction))

        test_kernel()
        assert min_len_sq[None] > 1e-12

    def test_mean_direction_along_normal(self):
        """Test the scatter lobe is centered on the normal."""
        from pathweave.materials.lambertian import scatter_lambertian, vec3

        total = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            normal = vec3(0.0, 1.0, 0.0)
            for _i in range(4000):
                direction, _ = scatter_lambertian(vec3(0.5, 0.5, 0.5), normal)
                total[None] += direction.normalized()

        test_kernel()
        mean = total[None] / 4000.0
        assert abs(mean[0]) < 0.05
        assert abs(mean[2]) < 0.05
        assert mean[1] > 0.5


class TestLambertianRegistry:
    """Tests for the Lambertian material registry."""

    def test_add_and_read_back(self):
        """Test albedo is stored and retrievable by index."""
        from pathweave.materials.lambertian import (
            add_lambertian_material,
            get_lambertian_albedo,
            get_lambertian_material_count,
        )

        idx0 = add_lambertian_material((0.8, 0.8, 0.0))
        idx1 = add_lambertian_material((0.7, 0.3, 0.3))
        assert (idx0, idx1) == (0, 1)
        assert get_lambertian_material_count() == 2

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = get_lambertian_albedo(1)

        test_kernel()
        a = result[None]
        assert abs(a[0] - 0.7) < 1e-6
        assert abs(a[1] - 0.3) < 1e-6

    def test_scatter_by_id(self):
        """Test scatter_lambertian_by_id uses the stored albedo."""
        from pathweave.materials.lambertian import (
            add_lambertian_material,
            scatter_lambertian_by_id,
            vec3,
        )

        idx = add_lambertian_material((0.25, 0.5, 0.75))
        attenuation = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel(material_idx: ti.i32):
            _, atten = scatter_lambertian_by_id(material_idx, vec3(0.0, 1.0, 0.0))
            attenuation[None] = atten

        test_kernel(idx)
        a = attenuation[None]
        assert abs(a[0] - 0.25) < 1e-6
        assert abs(a[1] - 0.5) < 1e-6
        assert abs(a[2] - 0.75) < 1e-6

    @pytest.mark.parametrize("albedo", [(1.2, 0.5, 0.5), (0.5, -0.1, 0.5)])
    def test_invalid_albedo(self, albedo):
        """Test albedo components outside [0, 1] are rejected."""
        from pathweave.materials.lambertian import add_lambertian_material

        with pytest.raises(ValueError, match="outside \\[0, 1\\]"):
            add_lambertian_material(albedo)

    def test_capacity_exceeded(self):
        """Test the registry refuses materials past its capacity."""
        from pathweave.materials.lambertian import (
            MAX_LAMBERTIAN_MATERIALS,
            add_lambertian_material,
        )

        for _ in range(MAX_LAMBERTIAN_MATERIALS):
            add_lambertian_material((0.5, 0.5, 0.5))

        with pytest.raises(RuntimeError):
            add_lambertian_material((0.5, 0.5, 0.5))
