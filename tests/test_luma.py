from __future__ import annotations

import numpy as np
import pytest

from citra.errors import InsufficientChannels
from citra.luma import LUMA_WEIGHTS, luma, luma_plane, window_samples
from citra.pixel_buffer import ArrayPixelBuffer
from jendela.window import Window


def test_luma_weights_follow_bt709() -> None:
    assert luma((1, 0, 0)) == 0.2126
    assert luma((0, 1, 0)) == 0.7152
    assert luma((0, 0, 1)) == 0.0722
    assert sum(LUMA_WEIGHTS) == pytest.approx(1.0)


@pytest.mark.parametrize("c", [0, 1, 0.5, 128, 200, 255])
def test_gray_reproduces_itself(c: float) -> None:
    assert luma((c, c, c)) == pytest.approx(c)


def test_luma_of_mixed_sample() -> None:
    assert luma((100, 200, 50)) == pytest.approx(167.91)


def test_luma_ignores_alpha() -> None:
    assert luma((100, 200, 50, 7)) == luma((100, 200, 50))


def test_luma_requires_three_channels() -> None:
    with pytest.raises(InsufficientChannels):
        luma((1, 2))


def test_luma_plane_matches_scalar_luma(noise_rgb: np.ndarray) -> None:
    plane = luma_plane(noise_rgb)
    assert plane.shape == noise_rgb.shape[:2]
    assert plane[3, 5] == luma(noise_rgb[3, 5].astype(float))


def test_window_samples_are_row_major() -> None:
    arr = np.zeros((4, 4, 3), dtype=np.uint8)
    arr[1, 2] = 255  # y=1, x=2
    buf = ArrayPixelBuffer(arr)

    samples = window_samples(buf, Window(origin_x=2, origin_y=0, size=2))
    assert samples.shape == (4,)
    assert list(samples) == pytest.approx([0, 0, 255, 0])


def test_window_samples_reject_grayscale_buffer() -> None:
    buf = ArrayPixelBuffer(np.zeros((4, 4), dtype=np.uint8))
    with pytest.raises(InsufficientChannels):
        window_samples(buf, Window(0, 0, 2))
