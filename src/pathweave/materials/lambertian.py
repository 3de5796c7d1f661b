"""Lambertian (ideal diffuse) material.

A diffuse surface reflects incoming light in a direction drawn around the
surface normal: ``normal + random_unit_vector()``. Adding a uniform point on
the unit sphere to the unit normal yields directions whose density is
proportional to the cosine of the angle with the normal, so the attenuation
is simply the albedo and the surface always scatters.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathweave.materials.lambertian import scatter_lambertian
    >>> # Use within a Taichi kernel:
    >>> # direction, attenuation = scatter_lambertian(albedo, normal)
"""

import taichi as ti
import taichi.math as tm

from pathweave.core.ray import (
    near_zero,
    random_unit_vector,
)

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def scatter_lambertian(
    albedo: vec3,
    normal: vec3,
):
    """Sample a diffuse scatter direction.

    Args:
        albedo: The diffuse reflectance color (RGB).
        normal: The unit surface normal at the hit point, facing the ray.

    Returns:
        A tuple of (scattered_direction, attenuation). The direction is not
        normalized; it falls back to the normal when the random sample almost
        exactly cancels it.
    """
    scattered_direction = normal + random_unit_vector()

    if near_zero(scattered_direction):
        scattered_direction = normal

    attenuation = albedo

    return scattered_direction, attenuation


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of Lambertian materials in the scene
MAX_LAMBERTIAN_MATERIALS = 256

lambertian_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LAMBERTIAN_MATERIALS)
num_lambertian_materials = ti.field(dtype=ti.i32, shape=())


def clear_lambertian_materials() -> None:
    """Clear all Lambertian materials."""
    num_lambertian_materials[None] = 0


def add_lambertian_material(albedo: tuple[float, float, float]) -> int:
    """Add a Lambertian material to the registry.

    Args:
        albedo: The diffuse reflectance color as (R, G, B), each in [0, 1].

    Returns:
        The type-local index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any albedo component is outside [0, 1].
    """
    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )

    idx = num_lambertian_materials[None]
    if idx >= MAX_LAMBERTIAN_MATERIALS:
        raise RuntimeError(
            f"Maximum number of Lambertian materials ({MAX_LAMBERTIAN_MATERIALS}) exceeded"
        )

    lambertian_albedos[idx] = vec3(albedo[0], albedo[1], albedo[2])
    num_lambertian_materials[None] = idx + 1
    return idx


def get_lambertian_material_count() -> int:
    """Get the number of Lambertian materials in the registry."""
    return int(num_lambertian_materials[None])


@ti.func
def get_lambertian_albedo(material_idx: ti.i32) -> vec3:
    """Get the albedo for a Lambertian material by type-local index."""
    return lambertian_albedos[material_idx]


@ti.func
def scatter_lambertian_by_id(
    material_idx: ti.i32,
    normal: vec3,
):
    """Look up a Lambertian material and scatter off it.

    Args:
        material_idx: The type-local index of the material.
        normal: The unit surface normal at the hit point.

    Returns:
        A tuple of (scattered_direction, attenuation).
    """
    albedo = get_lambertian_albedo(material_idx)
    return scatter_lambertian(albedo, normal)
