"""Pinhole camera model for primary ray generation.

The camera builds an orthonormal basis (u, v, w) from its view parameters:
- w: points from lookat toward lookfrom (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

A virtual viewport sits ``focal_length`` in front of the eye. Its height is
derived from the vertical field of view and its width from the aspect
ratio. ``get_ray(u, v)`` aims from the eye at the viewport point with
normalized coordinates (u, v), where (0, 0) is the lower-left corner.

Derived vectors are written to Taichi fields once by ``setup_camera`` and
only read afterwards, so ray generation has no hidden mutable state.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathweave.camera.pinhole import default_camera, setup_camera, get_ray
    >>> setup_camera(default_camera(aspect_ratio=16.0 / 9.0))
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(0.5, 0.5)  # Ray through image center
"""

import math
from dataclasses import dataclass

import numpy as np
import taichi as ti
import taichi.math as tm

from pathweave.core.ray import Ray, make_ray, vec3

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class PinholeCamera:
    """Configuration for a pinhole (perspective) camera.

    Attributes:
        lookfrom: Eye position in world space (x, y, z).
        lookat: Point the camera looks at (x, y, z).
        vup: Up direction used to orient the camera (typically (0, 1, 0)).
        vfov: Vertical field of view in degrees.
        aspect_ratio: Viewport width divided by height.
        focal_length: Distance from the eye to the viewport plane.
    """

    lookfrom: tuple[float, float, float]
    lookat: tuple[float, float, float]
    vup: tuple[float, float, float]
    vfov: float
    aspect_ratio: float
    focal_length: float = 1.0


def default_camera(aspect_ratio: float = 16.0 / 9.0) -> PinholeCamera:
    """The reference camera: eye at the origin looking down -z.

    A 90 degree vertical field of view at unit focal length gives a viewport
    two units tall, centered on (0, 0, -1).
    """
    return PinholeCamera(
        lookfrom=(0.0, 0.0, 0.0),
        lookat=(0.0, 0.0, -1.0),
        vup=(0.0, 1.0, 0.0),
        vfov=90.0,
        aspect_ratio=aspect_ratio,
        focal_length=1.0,
    )


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())

# Orthonormal basis vectors
_camera_u = ti.Vector.field(3, dtype=ti.f32, shape=())  # Right
_camera_v = ti.Vector.field(3, dtype=ti.f32, shape=())  # Up
_camera_w = ti.Vector.field(3, dtype=ti.f32, shape=())  # Backward (opposite view)

# Viewport vectors for ray computation
_viewport_horizontal = ti.Vector.field(3, dtype=ti.f32, shape=())  # Full width
_viewport_vertical = ti.Vector.field(3, dtype=ti.f32, shape=())  # Full height
_lower_left_corner = ti.Vector.field(3, dtype=ti.f32, shape=())


# =============================================================================
# Camera Setup (Python-side, called once per camera configuration)
# =============================================================================


def setup_camera(camera: PinholeCamera) -> None:
    """Derive the camera basis and viewport and store them for kernels.

    Args:
        camera: Camera configuration with position, orientation and FOV.

    Raises:
        ValueError: If the view direction is degenerate or parallel to vup,
            or if vfov, aspect_ratio or focal_length is out of range.
    """
    if not 0.0 < camera.vfov < 180.0:
        raise ValueError(f"vfov must be in (0, 180) degrees, got {camera.vfov}")
    if camera.aspect_ratio <= 0.0:
        raise ValueError(f"aspect_ratio must be positive, got {camera.aspect_ratio}")
    if camera.focal_length <= 0.0:
        raise ValueError(f"focal_length must be positive, got {camera.focal_length}")

    theta = math.radians(camera.vfov)
    h = math.tan(theta / 2.0)

    viewport_height = 2.0 * h * camera.focal_length
    viewport_width = camera.aspect_ratio * viewport_height

    lookfrom = np.array(camera.lookfrom, dtype=np.float64)
    lookat = np.array(camera.lookat, dtype=np.float64)
    vup = np.array(camera.vup, dtype=np.float64)

    w = lookfrom - lookat
    w_norm = np.linalg.norm(w)
    if w_norm == 0.0:
        raise ValueError("lookfrom and lookat must be different points")
    w = w / w_norm

    u = np.cross(vup, w)
    u_norm = np.linalg.norm(u)
    if u_norm == 0.0:
        raise ValueError("vup must not be parallel to the view direction")
    u = u / u_norm

    v = np.cross(w, u)

    horizontal = viewport_width * u
    vertical = viewport_height * v
    lower_left = lookfrom - camera.focal_length * w - horizontal / 2.0 - vertical / 2.0

    _camera_origin[None] = lookfrom.tolist()
    _camera_u[None] = u.tolist()
    _camera_v[None] = v.tolist()
    _camera_w[None] = w.tolist()
    _viewport_horizontal[None] = horizontal.tolist()
    _viewport_vertical[None] = vertical.tolist()
    _lower_left_corner[None] = lower_left.tolist()


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def get_ray(u: ti.f32, v: ti.f32) -> Ray:
    """Generate a primary ray through normalized viewport coordinates.

    u runs left to right and v bottom to top, both nominally in [0, 1].
    Values outside that range are allowed and simply aim past the viewport
    edge. The direction is left unnormalized.

    Args:
        u: Horizontal viewport coordinate.
        v: Vertical viewport coordinate.

    Returns:
        A Ray from the eye through the viewport point.
    """
    origin = _camera_origin[None]
    direction = (
        _lower_left_corner[None]
        + u * _viewport_horizontal[None]
        + v * _viewport_vertical[None]
        - origin
    )
    return make_ray(origin, direction)


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get the derived camera vectors for inspection.

    Returns:
        Dictionary with origin, u, v, w, horizontal, vertical, lower_left.
    """
    fields = {
        "origin": _camera_origin,
        "u": _camera_u,
        "v": _camera_v,
        "w": _camera_w,
        "horizontal": _viewport_horizontal,
        "vertical": _viewport_vertical,
        "lower_left": _lower_left_corner,
    }
    info = {}
    for name, vector_field in fields.items():
        vec = vector_field[None]
        info[name] = (float(vec[0]), float(vec[1]), float(vec[2]))
    return info
