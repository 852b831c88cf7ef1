from __future__ import annotations

import io

import numpy as np
import pytest
from PIL import Image

from citra.pixel_buffer import ArrayPixelBuffer


def encode(arr: np.ndarray, fmt: str) -> bytes:
    buf = io.BytesIO()
    Image.fromarray(arr).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(42)


@pytest.fixture
def gray_3x3() -> ArrayPixelBuffer:
    return ArrayPixelBuffer(np.full((3, 3, 3), 128, dtype=np.uint8))


@pytest.fixture
def noise_rgb(rng: np.random.Generator) -> np.ndarray:
    return rng.integers(0, 256, size=(24, 32, 3), dtype=np.uint8)


@pytest.fixture
def png_bytes(noise_rgb: np.ndarray) -> bytes:
    return encode(noise_rgb, "PNG")


@pytest.fixture
def encode_image():
    return encode
