from typing import Sequence

import numpy as np

from .errors import InsufficientChannels
from .pixel_buffer import ArrayPixelBuffer, PixelBuffer

# ITU-R BT.709-6, "Derivation of luminance signal"
LUMA_WEIGHTS = (0.2126, 0.7152, 0.0722)


def luma(sample: Sequence[float]) -> float:
    """
    Luminance of one (r, g, b[, ...]) sample, in the sample's own domain.
    Channels past the third (alpha) are ignored.
    """
    if len(sample) < 3:
        raise InsufficientChannels(f"Luma needs 3 channels, got {len(sample)}.")
    r, g, b = sample[0], sample[1], sample[2]
    return (LUMA_WEIGHTS[0] * r) + (LUMA_WEIGHTS[1] * g) + (LUMA_WEIGHTS[2] * b)


def luma_plane(pixels: np.ndarray) -> np.ndarray:
    """
    Vectorised luma over an (..., C) array with C >= 3. Returns float64.
    """
    if pixels.ndim < 1 or pixels.shape[-1] < 3:
        raise InsufficientChannels("Luma needs an array with at least 3 channels.")
    rgb = pixels[..., :3].astype(np.float64)
    return (LUMA_WEIGHTS[0] * rgb[..., 0]) + (LUMA_WEIGHTS[1] * rgb[..., 1]) + (LUMA_WEIGHTS[2] * rgb[..., 2])


def window_samples(buffer: PixelBuffer, window) -> np.ndarray:
    """
    Row-major luma sequence of one window, length ``size * size``.
    """
    if buffer.channels < 3:
        raise InsufficientChannels(f"Luma needs 3 channels, buffer has {buffer.channels}.")

    if isinstance(buffer, ArrayPixelBuffer):
        block = buffer.region(window.origin_x, window.origin_y, window.size)
        return luma_plane(block).ravel()

    out = np.empty(window.size * window.size, dtype=np.float64)
    i = 0
    for y in range(window.origin_y, window.origin_y + window.size):
        for x in range(window.origin_x, window.origin_x + window.size):
            out[i] = luma([buffer.sample(x, y, c) for c in range(3)])
            i += 1
    return out
