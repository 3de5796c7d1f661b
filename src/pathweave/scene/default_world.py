"""Reference world: a small sphere resting on a very large ground sphere.

The ground is a radius-100 sphere centered far below the camera, so its top
reads as a flat horizon. The centre sphere of radius 0.5 sits one unit in
front of the default camera. Optionally two metal spheres flank it.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathweave.camera.pinhole import setup_camera
    >>> from pathweave.scene.default_world import create_default_scene
    >>> scene, camera = create_default_scene()
    >>> setup_camera(camera)
"""

from pathweave.camera.pinhole import PinholeCamera, default_camera
from pathweave.scene.manager import SceneManager

GROUND_CENTER = (0.0, -100.5, -1.0)
GROUND_RADIUS = 100.0
GROUND_ALBEDO = (0.8, 0.8, 0.0)

CENTER_SPHERE_CENTER = (0.0, 0.0, -1.0)
CENTER_SPHERE_RADIUS = 0.5
CENTER_SPHERE_ALBEDO = (0.7, 0.3, 0.3)

LEFT_METAL_CENTER = (-1.0, 0.0, -1.0)
LEFT_METAL_ALBEDO = (0.8, 0.8, 0.8)
RIGHT_METAL_CENTER = (1.0, 0.0, -1.0)
RIGHT_METAL_ALBEDO = (0.8, 0.6, 0.2)


def create_default_scene(
    aspect_ratio: float = 16.0 / 9.0,
    include_metal: bool = True,
) -> tuple[SceneManager, PinholeCamera]:
    """Build the reference world and a matching camera.

    Args:
        aspect_ratio: Aspect ratio handed to the camera.
        include_metal: Add the two metal spheres either side of the centre one.

    Returns:
        A tuple of (SceneManager, PinholeCamera). The camera still has to be
        passed to setup_camera() before rendering.
    """
    scene = SceneManager()

    ground_mat = scene.add_lambertian_material(albedo=GROUND_ALBEDO)
    center_mat = scene.add_lambertian_material(albedo=CENTER_SPHERE_ALBEDO)

    scene.add_sphere(GROUND_CENTER, GROUND_RADIUS, ground_mat)
    scene.add_sphere(CENTER_SPHERE_CENTER, CENTER_SPHERE_RADIUS, center_mat)

    if include_metal:
        scene.add_metal_sphere(LEFT_METAL_CENTER, CENTER_SPHERE_RADIUS, LEFT_METAL_ALBEDO)
        scene.add_metal_sphere(RIGHT_METAL_CENTER, CENTER_SPHERE_RADIUS, RIGHT_METAL_ALBEDO)

    return scene, default_camera(aspect_ratio)
