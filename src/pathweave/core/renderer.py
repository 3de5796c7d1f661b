"""Scanline renderer tying the integrator to image output.

The Renderer owns a RenderConfig, sets up the render target and walks the
image one scanline at a time from the top. Each finished scanline can be
encoded and written straight away, so a PPM stream grows in raster order
while the render is still running.

Example:
    >>> import sys
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, random_seed=0)
    >>> from pathweave.camera.pinhole import setup_camera
    >>> from pathweave.core.config import RenderConfig
    >>> from pathweave.core.renderer import Renderer
    >>> from pathweave.scene.default_world import create_default_scene
    >>>
    >>> scene, camera = create_default_scene()
    >>> setup_camera(camera)
    >>> renderer = Renderer(RenderConfig(image_width=200, samples_per_pixel=10))
    >>> renderer.render_to_stream(sys.stdout)
"""

from collections.abc import Generator
from pathlib import Path
from typing import TextIO

import numpy as np
import numpy.typing as npt

from pathweave.core.config import RenderConfig
from pathweave.core.integrator import (
    ScanlineCallback,
    get_image_sum_numpy,
    render_scanline,
    setup_render_target,
)
from pathweave.output.encoder import average_samples, encode_image
from pathweave.output.export import (
    save_png,
    save_ppm,
    write_ppm,
    write_ppm_header,
    write_ppm_pixels,
)


class Renderer:
    """Renders the current scene with the current camera.

    Scene and camera are module-level Taichi state; build them (SceneManager,
    setup_camera) before calling any render method. The RNG is whatever
    ``ti.init`` seeded; see RenderConfig.seed.

    Attributes:
        config: The render configuration.
    """

    def __init__(self, config: RenderConfig | None = None) -> None:
        """Validate the configuration and allocate the render target.

        Raises:
            ValueError: If the configuration is invalid or the image is larger
                than the render target supports.
        """
        self.config = config if config is not None else RenderConfig()
        self.config.validate()
        setup_render_target(self.width, self.height)
        self._rendered = False

    @property
    def width(self) -> int:
        """Get the image width."""
        return self.config.image_width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self.config.image_height

    def iter_scanlines(self) -> Generator[tuple[int, npt.NDArray[np.uint8]], None, None]:
        """Render scanlines from the top down, yielding each one encoded.

        Yields:
            Tuple of (row, pixels) where row counts from the bottom of the
            image and pixels is a (width, 3) uint8 array, left to right.
        """
        config = self.config
        for row in range(self.height - 1, -1, -1):
            sums = render_scanline(
                row,
                config.samples_per_pixel,
                config.max_depth,
                config.shading,
            )
            yield row, encode_image(sums, config.samples_per_pixel, config.gamma)
        self._rendered = True

    def render(self, callback: ScanlineCallback | None = None) -> None:
        """Render the whole image into the accumulation buffer.

        Args:
            callback: Called after each scanline with
                (scanlines_remaining, total_scanlines).
        """
        for row, _ in self.iter_scanlines():
            if callback is not None:
                callback(row, self.height)

    def render_to_stream(
        self,
        stream: TextIO,
        callback: ScanlineCallback | None = None,
    ) -> None:
        """Render and write a P3 image, emitting each scanline as it finishes.

        Args:
            stream: Text stream receiving the PPM data.
            callback: Called after each scanline with
                (scanlines_remaining, total_scanlines).
        """
        write_ppm_header(stream, self.width, self.height)
        for row, pixels in self.iter_scanlines():
            write_ppm_pixels(stream, pixels)
            if callback is not None:
                callback(row, self.height)
        stream.flush()

    def _check_rendered(self) -> None:
        if not self._rendered:
            raise RuntimeError("Nothing rendered yet. Call render() first.")

    def get_image_numpy(self) -> npt.NDArray[np.float64]:
        """Get the averaged linear image, shape (height, width, 3), top row first.

        Raises:
            RuntimeError: If the image has not been rendered.
        """
        self._check_rendered()
        return average_samples(get_image_sum_numpy(), self.config.samples_per_pixel)

    def get_image_uint8(self) -> npt.NDArray[np.uint8]:
        """Get the encoded image, shape (height, width, 3), top row first.

        Raises:
            RuntimeError: If the image has not been rendered.
        """
        self._check_rendered()
        return encode_image(
            get_image_sum_numpy(), self.config.samples_per_pixel, self.config.gamma
        )

    def write_ppm(self, stream: TextIO) -> None:
        """Write the rendered image as P3 to a text stream."""
        write_ppm(stream, self.get_image_uint8())

    def save_image(self, filepath: str | Path) -> None:
        """Save the rendered image; ``.png`` uses Pillow, anything else is P3."""
        path = Path(filepath)
        if path.suffix.lower() == ".png":
            save_png(path, self.get_image_uint8())
        else:
            save_ppm(path, self.get_image_uint8())

    def __repr__(self) -> str:
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"samples={self.config.samples_per_pixel}, max_depth={self.config.max_depth})"
        )
