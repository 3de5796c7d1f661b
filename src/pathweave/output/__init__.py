"""Output module: encoding and image sinks.

Components:
    encoder: Averaging, optional gamma, clamping and 8-bit quantization
    export: Plain PPM (P3) writer and PNG export via Pillow
"""

from pathweave.output.encoder import (
    MAX_CHANNEL_VALUE,
    apply_gamma,
    average_samples,
    encode_color,
    encode_image,
)
from pathweave.output.export import (
    save_png,
    save_ppm,
    write_ppm,
    write_ppm_header,
    write_ppm_pixels,
)

__all__ = [
    # Encoding
    "MAX_CHANNEL_VALUE",
    "average_samples",
    "apply_gamma",
    "encode_image",
    "encode_color",
    # Export
    "write_ppm_header",
    "write_ppm_pixels",
    "write_ppm",
    "save_ppm",
    "save_png",
]
