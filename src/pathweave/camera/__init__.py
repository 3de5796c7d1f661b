"""Camera module for primary ray generation.

Components:
    pinhole: Pinhole (perspective) camera with look-at placement

Ray generation uses normalized viewport coordinates:
    u in [0, 1]: left to right across the image
    v in [0, 1]: bottom to top across the image
"""

from .pinhole import (
    PinholeCamera,
    default_camera,
    get_camera_info,
    get_ray,
    setup_camera,
)

__all__ = [
    "PinholeCamera",
    "default_camera",
    "setup_camera",
    "get_ray",
    "get_camera_info",
]
