"""Partitioning of an image's coordinate space into square comparison windows."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from citra.errors import EmptyBuffer

_LOGGER = logging.getLogger(__name__)

DEFAULT_WINDOW_SIZE = 8


@dataclass(frozen=True)
class Window:
    origin_x: int
    origin_y: int
    size: int
    row: int = 0
    col: int = 0


def is_positive_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def effective_window_size(width: int, height: int, requested_size: int = DEFAULT_WINDOW_SIZE) -> int:
    """Window size clamped so at least one window fits in a non-empty image."""
    if not is_positive_int(requested_size):
        raise ValueError("Window size must be a positive integer.")
    if width <= 0 or height <= 0:
        raise EmptyBuffer(f"Cannot partition an empty {width}x{height} image.")
    return min(requested_size, width, height)


class WindowGrid:
    """
    Row-major grid of windows over a ``width`` x ``height`` area.

    Iteration is lazy and can be restarted any number of times. Windows that
    would cross the right or bottom edge are dropped, never padded.
    """

    def __init__(self, width: int, height: int, size: int, step: int):
        self.width = width
        self.height = height
        self.size = size
        self.step = step
        self.rows = (height - size) // step + 1
        self.cols = (width - size) // step + 1

    @property
    def shape(self) -> Tuple[int, int]:
        return self.rows, self.cols

    def __len__(self) -> int:
        return self.rows * self.cols

    def __iter__(self) -> Iterator[Window]:
        for row in range(self.rows):
            for col in range(self.cols):
                yield Window(col * self.step, row * self.step, self.size, row, col)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WindowGrid):
            return NotImplemented
        return (self.width, self.height, self.size, self.step) == (
            other.width, other.height, other.size, other.step
        )

    def __repr__(self) -> str:
        return (
            f"WindowGrid({self.width}x{self.height}, size={self.size}, "
            f"step={self.step}, shape={self.shape})"
        )


def partition(
    width: int,
    height: int,
    requested_size: int = DEFAULT_WINDOW_SIZE,
    step: Optional[int] = None,
) -> WindowGrid:
    """
    Split a width x height area into square windows.

    ``step`` defaults to the effective window size (non-overlapping tiles).
    A smaller step gives overlapping windows, a larger one skips pixels.
    """
    size = effective_window_size(width, height, requested_size)
    if step is None:
        step = size
    elif not is_positive_int(step):
        raise ValueError("Window step must be a positive integer.")
    grid = WindowGrid(width, height, size, step)
    _LOGGER.debug("Partitioned %dx%d into %s", width, height, grid)
    return grid
