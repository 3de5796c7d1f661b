"""Scene manager coordinating spheres and their materials.

Materials are registered once and referred to by a unified material id;
any number of spheres may point at the same id. The manager records which
material type each id belongs to and its index in that type's registry, so
the integrator can dispatch to the right scattering law inside a kernel.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathweave.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> ground = scene.add_lambertian_material(albedo=(0.8, 0.8, 0.0))
    >>> scene.add_sphere(center=(0, -100.5, -1), radius=100, material_id=ground)
    0
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

import taichi as ti
import taichi.math as tm

from pathweave.materials.lambertian import (
    add_lambertian_material,
    clear_lambertian_materials,
)
from pathweave.materials.metal import (
    add_metal_material,
    clear_metal_materials,
)
from pathweave.scene.intersection import (
    add_sphere,
    clear_scene,
    get_sphere_count,
)

# Type alias for 3D vectors
vec3 = tm.vec3


class MaterialType(IntEnum):
    """Material variants understood by the integrator's dispatch."""

    LAMBERTIAN = 0
    METAL = 1


# Maximum number of materials across all types
MAX_MATERIALS = 512  # 256 per type * 2 types

# material_types[i] stores the MaterialType for material_id i
material_types = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
# material_type_indices[i] stores the type-local index for material_id i
material_type_indices = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def _clear_material_tracking() -> None:
    """Clear the material tracking fields."""
    num_materials[None] = 0


@ti.func
def get_material_type(material_id: ti.i32) -> ti.i32:
    """Get the material type for a material id inside a kernel.

    Returns:
        The MaterialType as an integer, or -1 for an unknown id.
    """
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_types[material_id]
    return result


@ti.func
def get_material_type_index(material_id: ti.i32) -> ti.i32:
    """Get the index into the type-specific registry for a material id.

    Returns:
        The type-local index, or -1 for an unknown id.
    """
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_type_indices[material_id]
    return result


@dataclass
class MaterialInfo:
    """Python-side record of a registered material.

    Attributes:
        material_id: The unified material id.
        material_type: The material variant.
        type_index: The index within the type-specific registry.
        params: The parameters the material was created with.
    """

    material_id: int
    material_type: MaterialType
    type_index: int
    params: dict[str, Any]


@dataclass
class SphereInfo:
    """Python-side record of a sphere in the scene."""

    sphere_index: int
    center: tuple[float, float, float]
    radius: float
    material_id: int


@dataclass
class SceneConfig:
    """Plain-data description of a scene, suitable for JSON.

    Attributes:
        materials: Material configurations in id order.
        spheres: Sphere configurations referring to materials by id.
    """

    materials: list[dict[str, Any]] = field(default_factory=list)
    spheres: list[dict[str, Any]] = field(default_factory=list)


class SceneManager:
    """Builds the scene aggregate and the material arena.

    The Taichi fields behind the manager are module-level, so there is one
    active scene per process. Creating a SceneManager clears it.

    Attributes:
        materials: MaterialInfo for every registered material, indexed by id.
        spheres: SphereInfo for every sphere, in insertion order.

    Example:
        >>> scene = SceneManager()
        >>> matte = scene.add_lambertian_material(albedo=(0.7, 0.3, 0.3))
        >>> mirror = scene.add_metal_material(albedo=(0.8, 0.8, 0.8))
        >>> scene.add_sphere((0, 0, -1), 0.5, matte)
        >>> scene.add_sphere((1, 0, -1), 0.5, mirror)
        >>> scene.add_sphere((-1, 0, -1), 0.5, mirror)  # shares the material
    """

    def __init__(self) -> None:
        self.materials: list[MaterialInfo] = []
        self.spheres: list[SphereInfo] = []
        self._clear_all()

    def _clear_all(self) -> None:
        clear_scene()
        clear_lambertian_materials()
        clear_metal_materials()
        _clear_material_tracking()
        self.materials.clear()
        self.spheres.clear()

    def clear(self) -> None:
        """Remove every sphere and material."""
        self._clear_all()

    # =========================================================================
    # Material Management
    # =========================================================================

    def _register_material(
        self,
        material_type: MaterialType,
        type_index: int,
        params: dict[str, Any],
    ) -> int:
        material_id = num_materials[None]
        if material_id >= MAX_MATERIALS:
            raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

        material_types[material_id] = int(material_type)
        material_type_indices[material_id] = type_index
        num_materials[None] = material_id + 1

        self.materials.append(
            MaterialInfo(
                material_id=material_id,
                material_type=material_type,
                type_index=type_index,
                params=params,
            )
        )
        return material_id

    def add_lambertian_material(
        self,
        albedo: tuple[float, float, float],
    ) -> int:
        """Add a Lambertian (diffuse) material.

        Args:
            albedo: The diffuse reflectance as (R, G, B), each in [0, 1].

        Returns:
            The unified material id.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If any albedo component is outside [0, 1].
        """
        type_index = add_lambertian_material(albedo)
        return self._register_material(
            MaterialType.LAMBERTIAN, type_index, {"albedo": tuple(albedo)}
        )

    def add_metal_material(
        self,
        albedo: tuple[float, float, float],
        roughness: float = 0.0,
    ) -> int:
        """Add a metal (specular) material.

        Args:
            albedo: The reflective color as (R, G, B), each in [0, 1].
            roughness: Fuzz radius in [0, 1]. Default is 0 (perfect mirror).

        Returns:
            The unified material id.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If albedo or roughness is outside [0, 1].
        """
        type_index = add_metal_material(albedo, roughness)
        return self._register_material(
            MaterialType.METAL,
            type_index,
            {"albedo": tuple(albedo), "roughness": roughness},
        )

    def get_material_count(self) -> int:
        """Get the total number of materials in the scene."""
        return int(num_materials[None])

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """Get the MaterialInfo for an id, or None if it does not exist."""
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    def get_material_type_python(self, material_id: int) -> MaterialType | None:
        """Get the material type for an id outside of kernels.

        For kernel-side lookup use the get_material_type() Taichi function.
        """
        info = self.get_material_info(material_id)
        if info is None:
            return None
        return info.material_type

    # =========================================================================
    # Primitive Management
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material_id: int,
    ) -> int:
        """Add a sphere referring to an existing material.

        Args:
            center: The center point as (x, y, z).
            radius: The radius (must be positive).
            material_id: A unified material id returned by an add_*_material call.

        Returns:
            The index of the added sphere.

        Raises:
            RuntimeError: If the maximum number of spheres is exceeded.
            ValueError: If material_id is unknown or radius is not positive.
        """
        if material_id < 0 or material_id >= num_materials[None]:
            raise ValueError(f"Invalid material_id: {material_id}")
        if radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")

        center_vec = vec3(center[0], center[1], center[2])
        sphere_index = add_sphere(center_vec, radius, material_id)

        self.spheres.append(
            SphereInfo(
                sphere_index=sphere_index,
                center=tuple(center),
                radius=radius,
                material_id=material_id,
            )
        )
        return sphere_index

    def add_lambertian_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        albedo: tuple[float, float, float],
    ) -> tuple[int, int]:
        """Add a sphere with a new Lambertian material.

        Returns:
            A tuple of (sphere_index, material_id).
        """
        material_id = self.add_lambertian_material(albedo)
        sphere_index = self.add_sphere(center, radius, material_id)
        return sphere_index, material_id

    def add_metal_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        albedo: tuple[float, float, float],
        roughness: float = 0.0,
    ) -> tuple[int, int]:
        """Add a sphere with a new metal material.

        Returns:
            A tuple of (sphere_index, material_id).
        """
        material_id = self.add_metal_material(albedo, roughness)
        sphere_index = self.add_sphere(center, radius, material_id)
        return sphere_index, material_id

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return get_sphere_count()

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a SceneConfig."""
        config = SceneConfig()

        for mat in self.materials:
            mat_config: dict[str, Any] = {"type": mat.material_type.name.lower()}
            for key, value in mat.params.items():
                mat_config[key] = list(value) if isinstance(value, tuple) else value
            config.materials.append(mat_config)

        for sphere in self.spheres:
            config.spheres.append(
                {
                    "center": list(sphere.center),
                    "radius": sphere.radius,
                    "material_id": sphere.material_id,
                }
            )

        return config

    def from_config(self, config: SceneConfig) -> None:
        """Replace the current scene with the one described by config.

        Raises:
            ValueError: If a material type is unknown or any value is invalid.
        """
        self.clear()

        # Materials first, spheres refer to them by id
        for mat_config in config.materials:
            mat_type = mat_config.get("type", "").lower()
            albedo_list = mat_config.get("albedo", [0.5, 0.5, 0.5])
            albedo: tuple[float, float, float] = (
                albedo_list[0],
                albedo_list[1],
                albedo_list[2],
            )
            if mat_type == "lambertian":
                self.add_lambertian_material(albedo)
            elif mat_type == "metal":
                self.add_metal_material(albedo, mat_config.get("roughness", 0.0))
            else:
                raise ValueError(f"Unknown material type: {mat_type}")

        for sphere_config in config.spheres:
            center_list = sphere_config.get("center", [0, 0, 0])
            center: tuple[float, float, float] = (
                center_list[0],
                center_list[1],
                center_list[2],
            )
            radius = sphere_config.get("radius", 1.0)
            material_id = sphere_config.get("material_id", 0)
            self.add_sphere(center, radius, material_id)

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        config = self.to_config()
        return {
            "materials": config.materials,
            "spheres": config.spheres,
        }

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary with 'materials' and 'spheres' keys."""
        config = SceneConfig(
            materials=data.get("materials", []),
            spheres=data.get("spheres", []),
        )
        self.from_config(config)
