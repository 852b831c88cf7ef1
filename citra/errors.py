"""Exception types raised by the SSIM comparison pipeline."""

from __future__ import annotations


class SsimError(ValueError):
    """Base class for every failure raised while comparing images."""


class EmptyBuffer(SsimError):
    """Raised when a zero-area image is partitioned into windows."""


class OutOfBounds(SsimError, IndexError):
    """Raised when a sample is requested outside the buffer extent."""


class InsufficientChannels(SsimError):
    """Raised when fewer than three channels are available for luma."""


class EmptySequence(SsimError):
    """Raised when statistics are requested over an empty sequence."""


class LengthMismatch(SsimError):
    """Raised when paired sequences differ in length."""


class DimensionMismatch(SsimError):
    """Raised when reference and candidate images differ in size."""


class UnsupportedFormat(SsimError):
    """Raised when an image type cannot be decoded."""


class DecodeError(SsimError):
    """Raised when image bytes of a supported type fail to decode."""
