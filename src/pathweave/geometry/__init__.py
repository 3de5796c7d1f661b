"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive with closed-form ray-sphere intersection

Intersection routines are Taichi functions (@ti.func) returning a HitRecord
whose ``hit`` flag tells whether the remaining fields are valid.
"""

from .sphere import HitRecord, Sphere, hit_sphere, make_sphere

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "make_sphere",
]
