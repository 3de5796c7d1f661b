"""Sphere primitive with closed-form ray intersection.

Substituting the ray equation ``P(t) = O + t D`` into the implicit sphere
``|P - C|^2 = r^2`` gives the quadratic

    a t^2 + 2 h t + c = 0

with ``a = D . D``, ``h = D . (O - C)`` and ``c = |O - C|^2 - r^2``. The
half-b form keeps the discriminant as ``h^2 - a c``. A negative discriminant
means the ray misses; otherwise the near root is tried first and the far
root second, and a root only counts when it lies strictly inside
``(t_min, t_max)``.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathweave.geometry.sphere import Sphere, hit_sphere, vec3
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """Record of a ray-sphere intersection.

    Attributes:
        hit: 1 if the ray intersected the sphere inside the search range.
        t: Parametric distance of the intersection. Only valid if hit == 1.
        point: The intersection point. Only valid if hit == 1.
        normal: Unit surface normal, flipped so that it always opposes the
            incoming ray. Only valid if hit == 1.
        front_face: 1 if the ray arrived from outside the sphere (the stored
            normal is the geometric outward normal), 0 if it arrived from
            inside. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    front_face: ti.i32


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: Sphere,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Intersect a ray with a sphere.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (need not be unit).
        sphere: The sphere to test.
        t_min: Exclusive lower bound on t. Callers pass a small positive value
            so that a ray leaving a surface does not re-hit it.
        t_max: Exclusive upper bound on t.

    Returns:
        A HitRecord; check the hit field before reading the others.
    """
    oc = ray_origin - sphere.center
    a = tm.dot(ray_direction, ray_direction)
    h = tm.dot(ray_direction, oc)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = h * h - a * c

    # Taichi requires outer-scope declaration
    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)
    is_front_face = 0

    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)

        # Near root first, then the far root
        t = (-h - sqrt_d) / a
        valid = (t > t_min) and (t < t_max)

        if not valid:
            t = (-h + sqrt_d) / a
            valid = (t > t_min) and (t < t_max)

        if valid:
            did_hit = 1
            hit_t = t
            hit_point = ray_origin + t * ray_direction

            outward_normal = (hit_point - sphere.center) / sphere.radius

            if tm.dot(ray_direction, outward_normal) < 0.0:
                is_front_face = 1
                hit_normal = outward_normal
            else:
                # Ray is inside the sphere
                is_front_face = 0
                hit_normal = -outward_normal

    return HitRecord(
        hit=did_hit,
        t=hit_t,
        point=hit_point,
        normal=hit_normal,
        front_face=is_front_face,
    )


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from center and radius inside a kernel."""
    return Sphere(center=center, radius=radius)
