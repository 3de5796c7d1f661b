"""Render configuration.

Groups the knobs that control image size and sampling cost. Scene contents
and camera placement are configured separately (see ``scene.manager`` and
``camera.pinhole``).

Example:
    >>> config = RenderConfig(image_width=20, samples_per_pixel=1, max_depth=1)
    >>> config.image_height
    11
"""

from dataclasses import dataclass
from enum import IntEnum


class ShadingMode(IntEnum):
    """How the integrator turns a primary ray into a color.

    SCATTER runs the full material scattering estimator. NORMALS maps the
    surface normal at the first hit to a color, which is handy for checking
    geometry and camera setup without any noise.
    """

    SCATTER = 0
    NORMALS = 1


@dataclass
class RenderConfig:
    """Image and sampling parameters for one render.

    Attributes:
        aspect_ratio: Image width divided by image height.
        image_width: Image width in pixels.
        samples_per_pixel: Jittered primary rays averaged per pixel.
        max_depth: Bounce budget for each path. A depth of zero renders black.
        gamma: Output gamma. 1.0 writes linear values, 2.0 applies a square
            root before quantization.
        seed: Seed for the Taichi kernel RNG. It only takes effect through
            ``ti.init(random_seed=config.seed)``, which must run before the
            scene, camera and integrator modules are imported. The Renderer
            does not reseed the RNG.
        shading: Shading mode for primary rays.
    """

    aspect_ratio: float = 16.0 / 9.0
    image_width: int = 400
    samples_per_pixel: int = 100
    max_depth: int = 50
    gamma: float = 1.0
    seed: int = 0
    shading: ShadingMode = ShadingMode.SCATTER

    @property
    def image_height(self) -> int:
        """Image height derived from width and aspect ratio (truncated)."""
        return int(self.image_width / self.aspect_ratio)

    def validate(self) -> None:
        """Check that the configuration describes a renderable image.

        Raises:
            ValueError: If any size, sample count, depth or gamma is out of range.
        """
        if self.aspect_ratio <= 0.0:
            raise ValueError(f"aspect_ratio must be positive, got {self.aspect_ratio}")
        if self.image_width < 2:
            raise ValueError(f"image_width must be at least 2, got {self.image_width}")
        if self.image_height < 2:
            raise ValueError(
                f"image_height ({self.image_height}) derived from width "
                f"{self.image_width} and aspect ratio {self.aspect_ratio} must be at least 2"
            )
        if self.samples_per_pixel < 1:
            raise ValueError(
                f"samples_per_pixel must be at least 1, got {self.samples_per_pixel}"
            )
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")
        if self.gamma <= 0.0:
            raise ValueError(f"gamma must be positive, got {self.gamma}")
