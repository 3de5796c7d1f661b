"""Image sinks for encoded pixels.

Supported formats:
    - Plain (ASCII) PPM, "P3": a three-line header followed by one
      ``R G B`` line per pixel in raster order (top scanline first, left to
      right). The format has no pixel addressing, so order is the layout.
    - PNG (8-bit via Pillow)

The PPM writer works on any text stream, which lets the renderer emit each
scanline as soon as it is finished.

Example:
    >>> import io
    >>> import numpy as np
    >>> stream = io.StringIO()
    >>> write_ppm(stream, np.zeros((1, 2, 3), dtype=np.uint8))
    >>> stream.getvalue()
    'P3\\n2 1\\n255\\n0 0 0\\n0 0 0\\n'
"""

from __future__ import annotations

from pathlib import Path
from typing import TextIO

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from pathweave.output.encoder import MAX_CHANNEL_VALUE

PPM_MAGIC = "P3"


def write_ppm_header(stream: TextIO, width: int, height: int) -> None:
    """Write the P3 header: magic, dimensions and maximum channel value."""
    stream.write(f"{PPM_MAGIC}\n{width} {height}\n{MAX_CHANNEL_VALUE}\n")


def write_ppm_pixels(stream: TextIO, rgb: npt.NDArray[np.uint8]) -> None:
    """Write encoded pixels one triplet per line, in array order.

    Args:
        stream: Text stream to write to.
        rgb: Array whose last axis is RGB, e.g. one scanline (W, 3) or a
            whole image (H, W, 3) with the top row first.
    """
    for r, g, b in np.asarray(rgb).reshape(-1, 3):
        stream.write(f"{int(r)} {int(g)} {int(b)}\n")


def write_ppm(stream: TextIO, rgb: npt.NDArray[np.uint8]) -> None:
    """Write a complete P3 image.

    Args:
        stream: Text stream to write to.
        rgb: Encoded image of shape (H, W, 3), top row first.

    Raises:
        ValueError: If the array is not (H, W, 3).
    """
    image = np.asarray(rgb)
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {image.shape}")

    height, width, _ = image.shape
    write_ppm_header(stream, width, height)
    write_ppm_pixels(stream, image)


def save_ppm(filepath: str | Path, rgb: npt.NDArray[np.uint8]) -> None:
    """Write a P3 image to a file with Unix line endings."""
    with open(filepath, "w", encoding="ascii", newline="\n") as f:
        write_ppm(f, rgb)


def save_png(filepath: str | Path, rgb: npt.NDArray[np.uint8]) -> None:
    """Save an encoded (H, W, 3) image as an 8-bit PNG using Pillow."""
    image = np.ascontiguousarray(rgb, dtype=np.uint8)
    pil_image = PILImage.fromarray(image)
    pil_image.save(str(filepath))
