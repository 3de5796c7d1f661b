"""Ray data structure and vector algebra for the path tracer.

The same three-component vector type serves as a point, a direction and a
linear (unscaled) RGB color. All helpers are pure Taichi functions so they
can be called from any kernel; the random sampling helpers draw from the
Taichi kernel RNG, which is seeded once through ``ti.init(random_seed=...)``.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> @ti.kernel
    ... def point_z() -> ti.f32:
    ...     ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -2.0))
    ...     return ray_at(ray, 0.5).z
    >>> point_z()
    -1.0
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors (points, directions and linear colors)
vec3 = tm.vec3


@ti.dataclass
class Ray:
    """A half-line with an origin point and a direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). It is not required
            to be unit length; camera rays in particular are left unnormalized.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Evaluate the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parametric distance along the direction vector.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction inside a kernel."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Algebra
# =============================================================================


@ti.func
def length(v: vec3) -> ti.f32:
    """Euclidean length of a vector."""
    return tm.length(v)


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Squared length of a vector, avoiding the square root."""
    return tm.dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Scale a vector to unit length.

    The zero vector has no direction; callers must not pass one. Well-formed
    scenes (positive radii, non-degenerate rays) never produce it.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v.
    """
    return tm.normalize(v)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Dot product a . b."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Cross product a x b."""
    return tm.cross(a, b)


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Mirror an incident direction about a surface normal.

    Computes ``incident - 2 (incident . normal) normal``. The normal must be
    unit length; the incident vector keeps whatever length it had.

    Args:
        incident: The incoming direction (pointing toward the surface).
        normal: The unit surface normal.

    Returns:
        The reflected direction.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def near_zero(v: vec3) -> ti.i32:
    """Return 1 when every component of v is within 1e-8 of zero."""
    s = 1e-8
    return ti.abs(v.x) < s and ti.abs(v.y) < s and ti.abs(v.z) < s


# =============================================================================
# Random Sampling
# =============================================================================


@ti.func
def random_in_unit_sphere() -> vec3:
    """Draw a point uniformly from the interior of the unit sphere.

    Rejection sampling inside the [-1, 1]^3 cube. The loop is bounded so the
    kernel cannot spin forever; the acceptance rate is about 52%, so the bound
    is never reached in practice.

    Returns:
        A random point with length < 1.
    """
    p = vec3(0.0, 0.0, 0.0)
    found = False
    for _ in range(100):
        if not found:
            p = vec3(
                ti.random(ti.f32) * 2.0 - 1.0,
                ti.random(ti.f32) * 2.0 - 1.0,
                ti.random(ti.f32) * 2.0 - 1.0,
            )
            if length_squared(p) < 1.0 and length_squared(p) > 1e-12:
                found = True
    return p


@ti.func
def random_unit_vector() -> vec3:
    """Draw a direction uniformly from the surface of the unit sphere."""
    return normalize(random_in_unit_sphere())

