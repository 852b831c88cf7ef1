"""
Image acquisition and decoding into pixel buffers.

This layer is the only place that touches files, the network or compressed
formats; the SSIM core receives already-decoded ``ArrayPixelBuffer`` objects.
"""

from __future__ import annotations

import io
import logging
import mimetypes
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from .errors import DecodeError, UnsupportedFormat
from .pixel_buffer import ArrayPixelBuffer

_LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

_PIL_FORMATS = {
    "image/png": "PNG",
    "image/jpeg": "JPEG",
    "image/jpg": "JPEG",
    "image/gif": "GIF",
}

# formats without an explicit per-sample depth field report 0 (defaults to 8-bit)
_REPORTS_DEPTH = {"PNG"}


@dataclass(frozen=True)
class FromBytes:
    data: bytes


@dataclass(frozen=True)
class FromPath:
    path: Path


@dataclass(frozen=True)
class FromUrl:
    url: str


Source = Union[FromBytes, FromPath, FromUrl]


def _normalize_mime(mime_type: Optional[str]) -> str:
    if not mime_type:
        return ""
    return mime_type.split(";", 1)[0].strip().lower()


def decode(data: bytes, mime_type: str) -> ArrayPixelBuffer:
    """
    Decode PNG/JPEG/GIF bytes into an RGBA pixel buffer.
    16-bit greyscale PNGs keep their 16-bit samples.
    """
    mime = _normalize_mime(mime_type)
    fmt = _PIL_FORMATS.get(mime)
    if fmt is None:
        raise UnsupportedFormat(f"Unsupported file type: {mime_type}")

    try:
        img = Image.open(io.BytesIO(data), formats=[fmt])
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError) as e:
        raise DecodeError(f"Error decoding {fmt} image: {e}") from e

    # I;16 / I -> 16-bit greyscale, replicate on RGB
    if fmt == "PNG" and img.mode.startswith("I"):
        gray = np.asarray(img).astype(np.uint16)
        alpha = np.full_like(gray, 0xFFFF)
        arr = np.stack([gray, gray, gray, alpha], axis=2)
        bit_depth = 16
    else:
        arr = np.array(img.convert("RGBA"), dtype=np.uint8)
        bit_depth = 8 if fmt in _REPORTS_DEPTH else 0

    _LOGGER.debug("Decoded %s (%s) %dx%d, bit depth %d", fmt, img.mode, img.width, img.height, bit_depth)
    return ArrayPixelBuffer(arr, bit_depth=bit_depth)


def as_source(source) -> Source:
    """Classify raw bytes, paths and http(s) URLs into a source variant."""
    if isinstance(source, (FromBytes, FromPath, FromUrl)):
        return source
    if isinstance(source, (bytes, bytearray, memoryview)):
        return FromBytes(bytes(source))
    if isinstance(source, str) and source.startswith(("http://", "https://")):
        return FromUrl(source)
    if isinstance(source, (str, Path)):
        return FromPath(Path(source))
    raise TypeError(f"Cannot read an image from {type(source).__name__}.")


def _read_url(url: str, timeout: float) -> tuple[bytes, Optional[str]]:
    req = urllib.request.Request(url, method="GET")
    with urllib.request.urlopen(req, timeout=timeout) as resp:
        return resp.read(), resp.headers.get("Content-Type")


def acquire(source, hint: Optional[str] = None, timeout: float = DEFAULT_TIMEOUT) -> ArrayPixelBuffer:
    """
    Read and decode an image from bytes, a filesystem path or a URL.
    ``hint`` overrides the detected MIME type.
    """
    src = as_source(source)

    if isinstance(src, FromBytes):
        data, mime = src.data, hint
    elif isinstance(src, FromPath):
        data = src.path.read_bytes()
        mime = hint or mimetypes.guess_type(str(src.path))[0]
    else:
        data, content_type = _read_url(src.url, timeout)
        mime = hint or content_type

    if not mime:
        raise UnsupportedFormat("Invalid file type")
    return decode(data, mime)
