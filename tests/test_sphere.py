"""Unit tests for sphere intersection.

Tests cover:
- Ray hitting a sphere from outside (front face)
- Ray missing a sphere
- Ray starting inside a sphere (back face, flipped normal)
- Strict t_min / t_max bounds and root selection
- Unnormalized ray directions
"""

import taichi as ti


def _intersect(origin, direction, center, radius, t_min=0.001, t_max=1000.0):
    """Run hit_sphere in a kernel and return the record as a dict."""
    from pathweave.geometry.sphere import Sphere, hit_sphere, vec3

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())
    point = ti.field(dtype=ti.math.vec3, shape=())
    normal = ti.field(dtype=ti.math.vec3, shape=())
    front_face = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel(
        ox: ti.f32, oy: ti.f32, oz: ti.f32,
        dx: ti.f32, dy: ti.f32, dz: ti.f32,
        cx: ti.f32, cy: ti.f32, cz: ti.f32,
        r: ti.f32, lo: ti.f32, hi: ti.f32,
    ):
        sphere = Sphere(center=vec3(cx, cy, cz), radius=r)
        record = hit_sphere(vec3(ox, oy, oz), vec3(dx, dy, dz), sphere, lo, hi)
        hit[None] = record.hit
        t_val[None] = record.t
        point[None] = record.point
        normal[None] = record.normal
        front_face[None] = record.front_face

    test_kernel(*origin, *direction, *center, radius, t_min, t_max)
    return {
        "hit": hit[None],
        "t": t_val[None],
        "point": point[None],
        "normal": normal[None],
        "front_face": front_face[None],
    }


class TestSphereBasics:
    """Tests for Sphere dataclass and basic operations."""

    def test_make_sphere(self):
        """Test make_sphere convenience function."""
        from pathweave.geometry.sphere import make_sphere, vec3

        center_result = ti.field(dtype=ti.math.vec3, shape=())
        radius_result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = make_sphere(vec3(1.0, 2.0, 3.0), 0.5)
            center_result[None] = sphere.center
            radius_result[None] = sphere.radius

        test_kernel()
        c = center_result[None]
        assert abs(c[0] - 1.0) < 1e-6
        assert abs(c[1] - 2.0) < 1e-6
        assert abs(c[2] - 3.0) < 1e-6
        assert abs(radius_result[None] - 0.5) < 1e-6


class TestSphereIntersection:
    """Tests for ray-sphere intersection."""

    def test_direct_hit(self):
        """Test ray hitting a unit sphere head-on from z=5."""
        rec = _intersect((0, 0, 5), (0, 0, -1), (0, 0, 0), 1.0)

        assert rec["hit"] == 1
        assert abs(rec["t"] - 4.0) < 1e-5
        p = rec["point"]
        assert abs(p[0]) < 1e-5
        assert abs(p[1]) < 1e-5
        assert abs(p[2] - 1.0) < 1e-5
        n = rec["normal"]
        assert abs(n[2] - 1.0) < 1e-5
        assert rec["front_face"] == 1

    def test_miss(self):
        """Test ray passing beside the sphere."""
        rec = _intersect((0, 2, 5), (0, 0, -1), (0, 0, 0), 1.0)
        assert rec["hit"] == 0

    def test_inside_sphere_back_face(self):
        """Test ray starting at the center hits the far side with a flipped normal."""
        rec = _intersect((0, 0, 0), (0, 0, -1), (0, 0, 0), 1.0)

        assert rec["hit"] == 1
        assert abs(rec["t"] - 1.0) < 1e-5
        assert rec["front_face"] == 0
        # Normal opposes the ray, so it points back toward the center
        n = rec["normal"]
        assert abs(n[2] - 1.0) < 1e-5

    def test_normal_always_opposes_ray(self):
        """Test dot(direction, normal) <= 0 for outside and inside hits."""
        outside = _intersect((0.3, 0.2, 5), (0, 0, -1), (0, 0, 0), 1.0)
        inside = _intersect((0.1, 0.1, 0), (0.2, -0.3, 1), (0, 0, 0), 1.0)

        for rec, direction in ((outside, (0, 0, -1)), (inside, (0.2, -0.3, 1))):
            assert rec["hit"] == 1
            n = rec["normal"]
            d = sum(n[i] * direction[i] for i in range(3))
            assert d <= 0.0

    def test_near_root_preferred(self):
        """Test the nearer of two valid roots is returned."""
        rec = _intersect((0, 0, 10), (0, 0, -1), (0, 0, 0), 2.0)
        assert rec["hit"] == 1
        assert abs(rec["t"] - 8.0) < 1e-5

    def test_far_root_when_near_below_t_min(self):
        """Test the far root is used when the near one is excluded by t_min."""
        rec = _intersect((0, 0, 10), (0, 0, -1), (0, 0, 0), 2.0, t_min=9.0)
        assert rec["hit"] == 1
        assert abs(rec["t"] - 12.0) < 1e-4
        assert rec["front_face"] == 0

    def test_t_max_excludes_hit(self):
        """Test no hit is reported when both roots are beyond t_max."""
        rec = _intersect((0, 0, 10), (0, 0, -1), (0, 0, 0), 2.0, t_max=7.5)
        assert rec["hit"] == 0

    def test_surface_origin_not_rehit(self):
        """Test a ray leaving the surface does not hit it again at t near 0."""
        rec = _intersect((0, 0, 1), (0, 0, 1), (0, 0, 0), 1.0)
        assert rec["hit"] == 0

    def test_sphere_behind_ray(self):
        """Test a sphere entirely behind the ray origin is not hit."""
        rec = _intersect((0, 0, 5), (0, 0, 1), (0, 0, 0), 1.0)
        assert rec["hit"] == 0

    def test_unnormalized_direction(self):
        """Test t is measured in units of the given direction vector."""
        rec = _intersect((0, 0, 5), (0, 0, -2), (0, 0, 0), 1.0)
        assert rec["hit"] == 1
        assert abs(rec["t"] - 2.0) < 1e-5
        assert abs(rec["point"][2] - 1.0) < 1e-5

    def test_unit_normal_on_large_sphere(self):
        """Test the normal is unit length on the large ground sphere."""
        rec = _intersect((0, 0, 0), (0, -1, -1), (0, -100.5, -1), 100.0)
        assert rec["hit"] == 1
        n = rec["normal"]
        assert abs((n[0] ** 2 + n[1] ** 2 + n[2] ** 2) - 1.0) < 1e-4
        assert n[1] > 0.9
