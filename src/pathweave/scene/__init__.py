"""Scene module: the aggregate of primitives and the material arena.

Components:
    intersection: Sphere storage in Taichi fields and closest-hit queries
    manager: SceneManager mapping unified material ids to material registries
    default_world: Reference world of a small sphere on a large ground sphere

Scene data is built once on the Python side before rendering and is only
read by kernels while an image is being rendered.
"""

from .default_world import create_default_scene
from .intersection import (
    MAX_SPHERES,
    SceneHitRecord,
    add_sphere,
    clear_scene,
    get_sphere_count,
    intersect_scene,
)
from .manager import (
    MAX_MATERIALS,
    MaterialInfo,
    MaterialType,
    SceneConfig,
    SceneManager,
    SphereInfo,
    get_material_type,
    get_material_type_index,
    material_type_indices,
    material_types,
    num_materials,
)

__all__ = [
    # Intersection module
    "SceneHitRecord",
    "add_sphere",
    "clear_scene",
    "get_sphere_count",
    "intersect_scene",
    "MAX_SPHERES",
    # Manager module
    "SceneManager",
    "MaterialType",
    "MaterialInfo",
    "SphereInfo",
    "SceneConfig",
    "MAX_MATERIALS",
    "get_material_type",
    "get_material_type_index",
    "material_types",
    "material_type_indices",
    "num_materials",
    # Default world
    "create_default_scene",
]
