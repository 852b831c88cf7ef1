from __future__ import annotations

import numpy as np
import pytest

from citra.errors import EmptyBuffer, OutOfBounds
from citra.pixel_buffer import ArrayPixelBuffer, dynamic_range_for


def test_dimensions_and_sampling() -> None:
    arr = np.arange(2 * 3 * 4, dtype=np.uint8).reshape(2, 3, 4)  # H=2, W=3, C=4
    buf = ArrayPixelBuffer(arr)
    assert (buf.width, buf.height, buf.channels) == (3, 2, 4)
    assert buf.bit_depth == 8
    assert buf.sample(2, 1, 3) == float(arr[1, 2, 3])


@pytest.mark.parametrize("xyc", [(-1, 0, 0), (3, 0, 0), (0, 2, 0), (0, 0, 4)])
def test_sample_outside_buffer_raises(xyc) -> None:
    buf = ArrayPixelBuffer(np.zeros((2, 3, 4), dtype=np.uint8))
    with pytest.raises(OutOfBounds):
        buf.sample(*xyc)


def test_out_of_bounds_is_an_index_error() -> None:
    buf = ArrayPixelBuffer(np.zeros((1, 1, 3), dtype=np.uint8))
    with pytest.raises(IndexError):
        buf.sample(1, 0, 0)


def test_buffer_does_not_expose_writable_data() -> None:
    arr = np.zeros((2, 2, 3), dtype=np.uint8)
    buf = ArrayPixelBuffer(arr)
    with pytest.raises(ValueError):
        buf.region(0, 0, 2)[0, 0, 0] = 1
    arr[0, 0, 0] = 9
    assert buf.sample(0, 0, 0) == 9.0


def test_region_must_fit() -> None:
    buf = ArrayPixelBuffer(np.zeros((4, 4, 3), dtype=np.uint8))
    assert buf.region(2, 2, 2).shape == (2, 2, 3)
    with pytest.raises(OutOfBounds):
        buf.region(3, 0, 2)


@pytest.mark.parametrize(
    "dtype, depth",
    [(np.uint8, 8), (np.uint16, 16), (np.float64, 0)],
)
def test_bit_depth_from_dtype(dtype, depth: int) -> None:
    assert ArrayPixelBuffer(np.zeros((1, 1, 3), dtype=dtype)).bit_depth == depth


@pytest.mark.parametrize("depth, expected", [(0, 255.0), (1, 1.0), (8, 255.0), (16, 65535.0)])
def test_dynamic_range_for(depth: int, expected: float) -> None:
    assert dynamic_range_for(depth) == expected


def test_from_rows() -> None:
    buf = ArrayPixelBuffer.from_rows([[(1, 2, 3), (4, 5, 6)]])
    assert (buf.width, buf.height, buf.channels) == (2, 1, 3)
    assert buf.sample(1, 0, 2) == 6.0
    with pytest.raises(EmptyBuffer):
        ArrayPixelBuffer.from_rows([])


def test_rejects_bad_shapes() -> None:
    with pytest.raises(ValueError):
        ArrayPixelBuffer(np.zeros(5))
