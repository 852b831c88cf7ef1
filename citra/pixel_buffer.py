"""Pixel buffer contract read by the SSIM core."""

from __future__ import annotations

from typing import Protocol

import numpy as np

from .errors import EmptyBuffer, OutOfBounds


_DTYPE_BIT_DEPTH = {
    np.dtype(np.uint8): 8,
    np.dtype(np.uint16): 16,
}


class PixelBuffer(Protocol):
    """Rectangular grid of per-channel samples.

    The core only reads through ``sample``; it never mutates a buffer.
    """

    width: int
    height: int
    channels: int
    bit_depth: int

    def sample(self, x: int, y: int, channel: int) -> float:
        ...


def dynamic_range_for(bit_depth: int) -> float:
    """
    Maximum representable sample value for a bit depth.
    A bit depth of 0 means "not applicable" and falls back to 8-bit.
    """
    if bit_depth < 0:
        raise ValueError("bit_depth must be >= 0")
    depth = bit_depth or 8
    return float(2 ** depth - 1)


class ArrayPixelBuffer:
    """
    PixelBuffer backed by a numpy array of shape (H, W) or (H, W, C).
    """

    def __init__(self, data: np.ndarray, bit_depth: int | None = None):
        arr = np.asarray(data)
        if arr.ndim == 2:
            arr = arr[:, :, None]
        if arr.ndim != 3:
            raise ValueError("Pixel data must be 2D (H, W) or 3D (H, W, C).")
        if bit_depth is None:
            bit_depth = _DTYPE_BIT_DEPTH.get(arr.dtype, 0)
        if bit_depth < 0:
            raise ValueError("bit_depth must be >= 0")

        # read-only view, callers keep their own array writable
        view = arr.view()
        view.flags.writeable = False
        self._data = view
        self.height, self.width, self.channels = (int(n) for n in arr.shape)
        self.bit_depth = int(bit_depth)

    @classmethod
    def from_rows(cls, rows, bit_depth: int = 8) -> "ArrayPixelBuffer":
        """Build a buffer from nested ``rows[y][x] -> (r, g, b, ...)`` lists."""
        arr = np.asarray(rows, dtype=np.float64)
        if arr.size == 0:
            raise EmptyBuffer("Pixel rows are empty.")
        return cls(arr, bit_depth=bit_depth)

    @property
    def shape(self) -> tuple[int, int, int]:
        return self.height, self.width, self.channels

    @property
    def dynamic_range(self) -> float:
        return dynamic_range_for(self.bit_depth)

    def sample(self, x: int, y: int, channel: int) -> float:
        if not (0 <= x < self.width and 0 <= y < self.height and 0 <= channel < self.channels):
            raise OutOfBounds(
                f"Sample ({x}, {y}, {channel}) outside buffer "
                f"{self.width}x{self.height}x{self.channels}."
            )
        return float(self._data[y, x, channel])

    def region(self, x: int, y: int, size: int) -> np.ndarray:
        """Return the (size, size, C) block whose top-left corner is (x, y)."""
        if x < 0 or y < 0 or size <= 0 or x + size > self.width or y + size > self.height:
            raise OutOfBounds(
                f"Region ({x}, {y}) size {size} outside buffer {self.width}x{self.height}."
            )
        return self._data[y:y + size, x:x + size, :]

    def __repr__(self) -> str:
        return (
            f"ArrayPixelBuffer(width={self.width}, height={self.height}, "
            f"channels={self.channels}, bit_depth={self.bit_depth})"
        )
