"""Radiance estimator and per-pixel sampler.

A primary ray is followed through the scene: at every hit the struck
material either scatters it, multiplying the running throughput by its
attenuation, or absorbs it. A path ends in one of three ways:

1. The bounce budget is exhausted: black, no more light is gathered.
2. The ray is absorbed by a material: black.
3. The ray escapes the scene: throughput times the sky gradient.

This is the single-sample estimator of the recursive form
``color(ray, depth) = attenuation * color(scattered, depth - 1)`` written as
a loop, since Taichi functions cannot recurse.

Pixels are rendered one scanline per kernel launch, top scanline first. The
column loop inside the kernel is serialized, so the Taichi RNG stream is
consumed in a fixed raster order and a given ``ti.init(random_seed=...)``
reproduces the same image.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, random_seed=0)
    >>> from pathweave.camera.pinhole import setup_camera
    >>> from pathweave.core.integrator import render_image, setup_render_target
    >>> from pathweave.scene.default_world import create_default_scene
    >>> scene, camera = create_default_scene()
    >>> setup_camera(camera)
    >>> setup_render_target(400, 225)
    >>> render_image(samples_per_pixel=100, max_depth=50)
"""

from collections.abc import Callable

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from pathweave.camera.pinhole import get_ray
from pathweave.core.config import ShadingMode
from pathweave.materials.lambertian import (
    get_lambertian_albedo,
    scatter_lambertian,
)
from pathweave.materials.metal import (
    get_metal_albedo,
    get_metal_roughness,
    scatter_metal,
)
from pathweave.scene.intersection import intersect_scene
from pathweave.scene.manager import (
    MaterialType,
    get_material_type,
    get_material_type_index,
)

# Type alias for 3D vectors
vec3 = tm.vec3

# Callback receives (scanlines_remaining, total_scanlines)
ScanlineCallback = Callable[[int, int], None]

# =============================================================================
# Rendering Constants
# =============================================================================

# Default bounce budget per path
DEFAULT_MAX_DEPTH = 50

# Lower bound on hit distance; keeps scattered rays from re-hitting their origin
T_MIN = 0.001
T_MAX = 1e10

# Sky gradient endpoints
HORIZON_COLOR = vec3(1.0, 1.0, 1.0)
ZENITH_COLOR = vec3(0.5, 0.7, 1.0)

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Preallocated to avoid kernel recompilation on resize
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Per-pixel sum of samples, indexed [column, row] with row 0 at the bottom
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Sums for the most recently rendered scanline
_scanline_buffer = ti.Vector.field(3, dtype=ti.f32, shape=MAX_IMAGE_WIDTH)

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Set the active image size and clear the buffers.

    Args:
        width: Image width in pixels, in [2, MAX_IMAGE_WIDTH].
        height: Image height in pixels, in [2, MAX_IMAGE_HEIGHT].

    Raises:
        ValueError: If the dimensions are too small or exceed the maximum.
    """
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )
    # Viewport coordinates divide by (size - 1)
    if width < 2 or height < 2:
        raise ValueError(f"Image dimensions ({width}x{height}) must be at least 2x2")

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the render target buffers to zero."""
    _color_buffer.fill(0.0)
    _scanline_buffer.fill(0.0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


def get_image() -> "ti.MatrixField":
    """Get the raw per-pixel sum buffer.

    This is the full preallocated buffer; use get_image_dimensions() for
    the active region.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    return _color_buffer


# =============================================================================
# Background
# =============================================================================


@ti.func
def background_color(direction: vec3) -> vec3:
    """Sky gradient seen by a ray that escapes the scene.

    Blends from white (t = 0, straight down) to sky blue (t = 1, straight
    up) on the vertical component of the unit direction. Horizontal
    direction has no effect.
    """
    unit_direction = tm.normalize(direction)
    t = 0.5 * (unit_direction.y + 1.0)
    return (1.0 - t) * HORIZON_COLOR + t * ZENITH_COLOR


# =============================================================================
# Material Dispatch
# =============================================================================


@ti.func
def _scatter_material(
    material_id: ti.i32,
    incident_direction: vec3,
    normal: vec3,
):
    """Dispatch to the scattering law of the struck material.

    Args:
        material_id: The unified material id from the hit record.
        incident_direction: The incoming ray direction.
        normal: The unit surface normal, facing the incoming ray.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter). Unknown
        material ids absorb the ray.
    """
    mat_type = get_material_type(material_id)
    type_index = get_material_type_index(material_id)

    scattered_direction = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(0.0, 0.0, 0.0)
    did_scatter = 0

    if mat_type == int(MaterialType.LAMBERTIAN):
        albedo = get_lambertian_albedo(type_index)
        scattered_direction, attenuation = scatter_lambertian(albedo, normal)
        did_scatter = 1

    elif mat_type == int(MaterialType.METAL):
        albedo = get_metal_albedo(type_index)
        roughness = get_metal_roughness(type_index)
        scattered_direction, attenuation, did_scatter = scatter_metal(
            albedo, roughness, incident_direction, normal
        )

    return scattered_direction, attenuation, did_scatter


# =============================================================================
# Radiance Estimation
# =============================================================================


@ti.func
def ray_color(origin: vec3, direction: vec3, max_depth: ti.i32) -> vec3:
    """Estimate the radiance arriving along a ray.

    Args:
        origin: The ray origin.
        direction: The ray direction (any non-zero length).
        max_depth: Number of surface interactions allowed. Zero returns black.

    Returns:
        The estimated linear RGB radiance.
    """
    color = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)
    ray_origin = origin
    ray_direction = direction

    # Taichi doesn't support break in ti.func loops
    active = 1

    for _ in range(max_depth):
        if active == 1:
            hit_record = intersect_scene(ray_origin, ray_direction, T_MIN, T_MAX)

            if hit_record.hit == 0:
                color = throughput * background_color(ray_direction)
                active = 0
            else:
                scattered_direction, attenuation, did_scatter = _scatter_material(
                    hit_record.material_id, ray_direction, hit_record.normal
                )

                if did_scatter == 0:
                    active = 0
                else:
                    throughput *= attenuation
                    ray_origin = hit_record.point
                    ray_direction = scattered_direction

    # A path still active here ran out of bounces and contributes black
    return color


@ti.func
def normal_color(origin: vec3, direction: vec3) -> vec3:
    """Map the normal at the first hit to a color, or the sky on a miss."""
    color = vec3(0.0, 0.0, 0.0)
    hit_record = intersect_scene(origin, direction, T_MIN, T_MAX)
    if hit_record.hit == 1:
        color = 0.5 * (hit_record.normal + vec3(1.0, 1.0, 1.0))
    else:
        color = background_color(direction)
    return color


@ti.func
def shade(origin: vec3, direction: vec3, max_depth: ti.i32, shading: ti.i32) -> vec3:
    """Color a primary ray according to the shading mode."""
    color = vec3(0.0, 0.0, 0.0)
    if shading == int(ShadingMode.NORMALS):
        color = normal_color(origin, direction)
    else:
        color = ray_color(origin, direction, max_depth)
    return color


# =============================================================================
# Pixel Sampling
# =============================================================================


@ti.func
def sample_pixel(
    column: ti.i32,
    row: ti.i32,
    width: ti.i32,
    height: ti.i32,
    max_depth: ti.i32,
    shading: ti.i32,
) -> vec3:
    """Trace one primary ray jittered uniformly inside a pixel.

    Args:
        column: Pixel column (0 = left).
        row: Pixel row (0 = bottom).
        width: Image width in pixels.
        height: Image height in pixels.
        max_depth: Bounce budget for the path.
        shading: ShadingMode as an integer.

    Returns:
        The radiance estimate for this sample.
    """
    u = (ti.cast(column, ti.f32) + ti.random(ti.f32)) / ti.cast(width - 1, ti.f32)
    v = (ti.cast(row, ti.f32) + ti.random(ti.f32)) / ti.cast(height - 1, ti.f32)
    ray = get_ray(u, v)
    return shade(ray.origin, ray.direction, max_depth, shading)


@ti.kernel
def _render_scanline(
    row: ti.i32,
    width: ti.i32,
    height: ti.i32,
    samples_per_pixel: ti.i32,
    max_depth: ti.i32,
    shading: ti.i32,
):
    """Render every pixel of one scanline, left to right.

    Each pixel starts a fresh sum, adds samples_per_pixel estimates and
    stores the sum in both the image buffer and the scanline buffer.
    """
    ti.loop_config(serialize=True)
    for column in range(width):
        pixel_sum = vec3(0.0, 0.0, 0.0)
        for _ in range(samples_per_pixel):
            pixel_sum += sample_pixel(column, row, width, height, max_depth, shading)
        _color_buffer[column, row] = pixel_sum
        _scanline_buffer[column] = pixel_sum


@ti.kernel
def _render_single_sample(
    column: ti.i32,
    row: ti.i32,
    width: ti.i32,
    height: ti.i32,
    max_depth: ti.i32,
    shading: ti.i32,
) -> vec3:
    return sample_pixel(column, row, width, height, max_depth, shading)


@ti.kernel
def _trace_ray(
    ox: ti.f32,
    oy: ti.f32,
    oz: ti.f32,
    dx: ti.f32,
    dy: ti.f32,
    dz: ti.f32,
    max_depth: ti.i32,
) -> vec3:
    return ray_color(vec3(ox, oy, oz), vec3(dx, dy, dz), max_depth)


@ti.kernel
def _sky_color(dx: ti.f32, dy: ti.f32, dz: ti.f32) -> vec3:
    return background_color(vec3(dx, dy, dz))


# =============================================================================
# Public Rendering API
# =============================================================================


def render_scanline(
    row: int,
    samples_per_pixel: int,
    max_depth: int = DEFAULT_MAX_DEPTH,
    shading: ShadingMode = ShadingMode.SCATTER,
) -> npt.NDArray[np.float32]:
    """Render one scanline and return its per-pixel sums.

    Args:
        row: Scanline index (0 = bottom of the image).
        samples_per_pixel: Number of jittered samples summed per pixel.
        max_depth: Bounce budget for each path.
        shading: Shading mode for primary rays.

    Returns:
        Array of shape (width, 3) holding the summed samples, left to right.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If row is outside the image.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    if not 0 <= row < height:
        raise ValueError(f"Row {row} is outside the image (height {height})")

    _render_scanline(row, width, height, samples_per_pixel, max_depth, int(shading))
    return _scanline_buffer.to_numpy()[:width]


def render_image(
    samples_per_pixel: int,
    max_depth: int = DEFAULT_MAX_DEPTH,
    shading: ShadingMode = ShadingMode.SCATTER,
    callback: ScanlineCallback | None = None,
) -> None:
    """Render the whole image, top scanline first.

    Args:
        samples_per_pixel: Number of jittered samples summed per pixel.
        max_depth: Bounce budget for each path.
        shading: Shading mode for primary rays.
        callback: Called after each scanline with
            (scanlines_remaining, total_scanlines).

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    _, height = get_image_dimensions()
    for row in range(height - 1, -1, -1):
        render_scanline(row, samples_per_pixel, max_depth, shading)
        if callback is not None:
            callback(row, height)


def render_sample(
    column: int,
    row: int,
    max_depth: int = DEFAULT_MAX_DEPTH,
    shading: ShadingMode = ShadingMode.SCATTER,
) -> tuple[float, float, float]:
    """Trace a single jittered sample for one pixel.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    color = _render_single_sample(column, row, width, height, max_depth, int(shading))
    return (float(color[0]), float(color[1]), float(color[2]))


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> tuple[float, float, float]:
    """Estimate the radiance along an arbitrary ray through the current scene."""
    color = _trace_ray(
        origin[0], origin[1], origin[2], direction[0], direction[1], direction[2], max_depth
    )
    return (float(color[0]), float(color[1]), float(color[2]))


def sky_color(direction: tuple[float, float, float]) -> tuple[float, float, float]:
    """Evaluate the background gradient for a direction."""
    color = _sky_color(direction[0], direction[1], direction[2])
    return (float(color[0]), float(color[1]), float(color[2]))


def get_image_sum_numpy() -> npt.NDArray[np.float32]:
    """Get the per-pixel sums as an array in raster order.

    Returns:
        Array of shape (height, width, 3); row 0 is the top scanline.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()

    full_image = _color_buffer.to_numpy()
    image = full_image[:width, :height, :]

    # (width, height, 3) -> (height, width, 3), then put the top row first
    image = np.transpose(image, (1, 0, 2))
    image = np.flipud(image)

    return np.ascontiguousarray(image, dtype=np.float32)
