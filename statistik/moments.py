"""Population moments over luminance sample sequences."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from citra.errors import EmptySequence, LengthMismatch


@dataclass(frozen=True)
class WindowStatistics:
    mean: float
    variance: float


@dataclass(frozen=True)
class PairwiseStatistics:
    mean_a: float
    mean_b: float
    var_a: float
    var_b: float
    covariance: float


def _as_sequence(xs: Sequence[float]) -> np.ndarray:
    x = np.asarray(xs, dtype=np.float64).ravel()
    if x.size == 0:
        raise EmptySequence("Statistics need at least one sample.")
    return x


def _mean(x: np.ndarray) -> float:
    # constant input must give back the constant, so its deviations are exactly 0
    lo, hi = x.min(), x.max()
    if lo == hi:
        return float(lo)
    return float(np.sum(x) / x.size)


def average(xs: Sequence[float]) -> float:
    """Arithmetic mean."""
    return _mean(_as_sequence(xs))


def _deviations(x: np.ndarray) -> np.ndarray:
    return x - _mean(x)


def variance(xs: Sequence[float]) -> float:
    """
    Population variance: mean squared deviation, divisor n (not n - 1).
    """
    x = _as_sequence(xs)
    d = _deviations(x)
    return float(np.sum(d * d) / x.size)


def covariance(xs: Sequence[float], ys: Sequence[float]) -> float:
    """
    Population covariance of two equal-length sequences.
    covariance(xs, xs) is exactly variance(xs).
    """
    x = _as_sequence(xs)
    y = _as_sequence(ys)
    if x.size != y.size:
        raise LengthMismatch(f"Sequences differ in length: {x.size} != {y.size}.")
    return float(np.sum(_deviations(x) * _deviations(y)) / x.size)


def window_statistics(xs: Sequence[float]) -> WindowStatistics:
    return WindowStatistics(mean=average(xs), variance=variance(xs))


def pairwise_statistics(xs: Sequence[float], ys: Sequence[float]) -> PairwiseStatistics:
    """Statistics of two corresponding windows plus their cross-covariance."""
    a = window_statistics(xs)
    b = window_statistics(ys)
    return PairwiseStatistics(
        mean_a=a.mean,
        mean_b=b.mean,
        var_a=a.variance,
        var_b=b.variance,
        covariance=covariance(xs, ys),
    )
