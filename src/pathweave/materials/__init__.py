"""Materials module: scattering laws attached to primitives.

Components:
    lambertian: Ideal diffuse reflection, always scatters
    metal: Mirror reflection with optional fuzz, may absorb

Each material turns an incoming ray and a hit into an attenuation color and,
when it scatters, an outgoing direction. Material parameters live in
per-type Taichi fields; the scene manager maps unified material ids onto
these registries.
"""

from .lambertian import (
    add_lambertian_material,
    clear_lambertian_materials,
    get_lambertian_albedo,
    get_lambertian_material_count,
    scatter_lambertian,
    scatter_lambertian_by_id,
)
from .metal import (
    add_metal_material,
    clear_metal_materials,
    get_metal_albedo,
    get_metal_material_count,
    get_metal_roughness,
    scatter_metal,
    scatter_metal_by_id,
)

__all__ = [
    # Lambertian
    "scatter_lambertian",
    "scatter_lambertian_by_id",
    "add_lambertian_material",
    "clear_lambertian_materials",
    "get_lambertian_material_count",
    "get_lambertian_albedo",
    # Metal
    "scatter_metal",
    "scatter_metal_by_id",
    "add_metal_material",
    "clear_metal_materials",
    "get_metal_material_count",
    "get_metal_albedo",
    "get_metal_roughness",
]
