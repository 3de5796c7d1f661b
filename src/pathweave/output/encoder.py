"""Conversion of summed linear radiance to 8-bit channel values.

Each pixel arrives as the sum of its samples. Encoding divides by the sample
count, optionally applies gamma, clamps every channel to [0, 0.999] and
truncates ``256 * value`` to an integer. Scaling by 256 rather than 255
gives every output level an equal share of the [0, 1) range, while the clamp
keeps a saturated channel at 255 instead of wrapping to 256.

Example:
    >>> encode_color((1.5, -0.2, 0.5), samples_per_pixel=1)
    (255, 0, 128)
"""

import numpy as np
import numpy.typing as npt

MAX_CHANNEL_VALUE = 255

# Upper clamp so that 256 * value truncates to at most 255
_CLAMP_MAX = 0.999


def average_samples(
    pixel_sums: npt.ArrayLike,
    samples_per_pixel: int,
) -> npt.NDArray[np.float64]:
    """Divide summed samples by the sample count.

    Raises:
        ValueError: If samples_per_pixel is not positive.
    """
    if samples_per_pixel < 1:
        raise ValueError(f"samples_per_pixel must be at least 1, got {samples_per_pixel}")
    return np.asarray(pixel_sums, dtype=np.float64) / float(samples_per_pixel)


def apply_gamma(
    image: npt.NDArray[np.float64],
    gamma: float = 1.0,
) -> npt.NDArray[np.float64]:
    """Raise linear values to 1/gamma; negative values become 0 first."""
    if gamma == 1.0:
        return image
    if gamma <= 0.0:
        raise ValueError(f"gamma must be positive, got {gamma}")
    return np.power(np.maximum(image, 0.0), 1.0 / gamma)


def encode_image(
    pixel_sums: npt.ArrayLike,
    samples_per_pixel: int,
    gamma: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Encode summed radiance into channel values in [0, 255].

    Args:
        pixel_sums: Array whose last axis holds RGB sums, e.g. (H, W, 3).
        samples_per_pixel: Number of samples each sum was built from.
        gamma: Output gamma; 1.0 leaves values linear.

    Returns:
        A uint8 array of the same shape.
    """
    image = average_samples(pixel_sums, samples_per_pixel)
    image = apply_gamma(image, gamma)

    # NaN from a degenerate path maps to black, infinities saturate
    image = np.nan_to_num(image, nan=0.0, posinf=1.0, neginf=0.0)
    image = np.clip(image, 0.0, _CLAMP_MAX)

    return np.floor(256.0 * image).astype(np.uint8)


def encode_color(
    pixel_sum: tuple[float, float, float],
    samples_per_pixel: int,
    gamma: float = 1.0,
) -> tuple[int, int, int]:
    """Encode a single pixel's summed color into an (R, G, B) triplet."""
    r, g, b = encode_image(pixel_sum, samples_per_pixel, gamma).reshape(3)
    return (int(r), int(g), int(b))
