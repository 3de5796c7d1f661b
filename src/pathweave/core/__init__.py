"""Core rendering module.

Components:
    ray: Ray data structure, vector algebra and random sampling helpers
    config: RenderConfig and ShadingMode
    integrator: Radiance estimator, sky gradient and scanline kernels
    renderer: Scanline renderer with streaming PPM output

Only the Taichi-free and field-free pieces are re-exported here; import the
integrator and renderer directly, after ``ti.init`` has been called.
"""

from .config import RenderConfig, ShadingMode
from .ray import (
    Ray,
    cross,
    dot,
    length,
    length_squared,
    make_ray,
    near_zero,
    normalize,
    random_in_unit_sphere,
    random_unit_vector,
    ray_at,
    reflect,
    vec3,
)

__all__ = [
    "RenderConfig",
    "ShadingMode",
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "reflect",
    "near_zero",
    "random_in_unit_sphere",
    "random_unit_vector",
]
