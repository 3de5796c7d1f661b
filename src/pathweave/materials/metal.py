"""Metal (specular reflective) material.

The incoming direction is normalized and mirrored about the surface normal:

    R = I - 2(I . N)N

An optional roughness perturbs R by a random point inside a sphere of that
radius. The ray is absorbed when the outgoing direction does not point
strictly away from the surface (``R . N <= 0``); this is a normal terminal
state of a path, not an error.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathweave.materials.metal import scatter_metal
    >>> # Use within a Taichi kernel:
    >>> # direction, attenuation, did_scatter = scatter_metal(
    >>> #     albedo, roughness, incident_dir, normal
    >>> # )
"""

import taichi as ti
import taichi.math as tm

from pathweave.core.ray import (
    normalize,
    random_in_unit_sphere,
    reflect,
)

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def scatter_metal(
    albedo: vec3,
    roughness: ti.f32,
    incident_direction: vec3,
    normal: vec3,
):
    """Reflect an incoming ray off a metal surface.

    Args:
        albedo: The reflective color (RGB).
        roughness: Fuzz radius in [0, 1]. 0 = perfect mirror.
        incident_direction: The incoming ray direction (any non-zero length).
        normal: The unit surface normal.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where
        did_scatter is 1 if the reflection leaves the surface and 0 if the ray
        is absorbed. The direction is the zero vector when absorbed.
    """
    reflected = reflect(normalize(incident_direction), normal)

    scattered_direction = reflected
    if roughness > 0.0:
        scattered_direction = reflected + roughness * random_in_unit_sphere()

    did_scatter = 1
    if tm.dot(scattered_direction, normal) <= 0.0:
        did_scatter = 0
        scattered_direction = vec3(0.0, 0.0, 0.0)

    attenuation = albedo

    return scattered_direction, attenuation, did_scatter


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of metal materials in the scene
MAX_METAL_MATERIALS = 256

metal_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_METAL_MATERIALS)
metal_roughnesses = ti.field(dtype=ti.f32, shape=MAX_METAL_MATERIALS)
num_metal_materials = ti.field(dtype=ti.i32, shape=())


def clear_metal_materials() -> None:
    """Clear all metal materials."""
    num_metal_materials[None] = 0


def add_metal_material(
    albedo: tuple[float, float, float],
    roughness: float = 0.0,
) -> int:
    """Add a metal material to the registry.

    Args:
        albedo: The reflective color as (R, G, B), each in [0, 1].
        roughness: Fuzz radius in [0, 1]. Default is 0 (perfect mirror).

    Returns:
        The type-local index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any albedo component or the roughness is outside [0, 1].
    """
    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )

    if roughness < 0.0 or roughness > 1.0:
        raise ValueError(
            f"Roughness = {roughness} is outside [0, 1]. "
            "Roughness must be between 0 (perfect mirror) and 1 (maximum fuzz)."
        )

    idx = num_metal_materials[None]
    if idx >= MAX_METAL_MATERIALS:
        raise RuntimeError(
            f"Maximum number of metal materials ({MAX_METAL_MATERIALS}) exceeded"
        )

    metal_albedos[idx] = vec3(albedo[0], albedo[1], albedo[2])
    metal_roughnesses[idx] = roughness
    num_metal_materials[None] = idx + 1
    return idx


def get_metal_material_count() -> int:
    """Get the number of metal materials in the registry."""
    return int(num_metal_materials[None])


@ti.func
def get_metal_albedo(material_idx: ti.i32) -> vec3:
    """Get the albedo for a metal material by type-local index."""
    return metal_albedos[material_idx]


@ti.func
def get_metal_roughness(material_idx: ti.i32) -> ti.f32:
    """Get the roughness for a metal material by type-local index."""
    return metal_roughnesses[material_idx]


@ti.func
def scatter_metal_by_id(
    material_idx: ti.i32,
    incident_direction: vec3,
    normal: vec3,
):
    """Look up a metal material and reflect off it.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter).
    """
    albedo = get_metal_albedo(material_idx)
    roughness = get_metal_roughness(material_idx)
    return scatter_metal(albedo, roughness, incident_direction, normal)
