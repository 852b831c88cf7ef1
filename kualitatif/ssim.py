import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

import numpy as np

from citra.errors import DimensionMismatch
from citra.luma import window_samples
from citra.pixel_buffer import PixelBuffer, dynamic_range_for
from jendela.window import DEFAULT_WINDOW_SIZE, Window, WindowGrid, is_positive_int, partition
from statistik.moments import PairwiseStatistics, pairwise_statistics

_LOGGER = logging.getLogger(__name__)

K1, K2 = 0.01, 0.03


@dataclass(frozen=True)
class SsimOptions:
    window_size: int = DEFAULT_WINDOW_SIZE
    dynamic_range: Optional[float] = None
    step: Optional[int] = None
    workers: Optional[int] = None

    def __post_init__(self):
        if not is_positive_int(self.window_size):
            raise ValueError("window_size must be a positive integer.")
        if self.dynamic_range is not None and not self.dynamic_range > 0:
            raise ValueError("dynamic_range must be a positive number.")
        if self.step is not None and not is_positive_int(self.step):
            raise ValueError("step must be a positive integer.")
        if self.workers is not None and not is_positive_int(self.workers):
            raise ValueError("workers must be a positive integer.")


@dataclass(frozen=True, eq=False)
class SsimResult:
    """Mean SSIM index plus the per-window score grid (read-only)."""
    index: float
    grid: np.ndarray

    @property
    def shape(self) -> Tuple[int, int]:
        return self.grid.shape

    def score(self, row: int, col: int) -> float:
        return float(self.grid[row, col])


def combine(stats: PairwiseStatistics, dynamic_range: float = 255.0) -> float:
    """
    SSIM of one window pair: luminance, contrast and structure terms
    combined multiplicatively. 1 means identical windows.
    """
    if not dynamic_range > 0:
        raise ValueError("dynamic_range must be a positive number.")
    C1 = (K1 * dynamic_range) ** 2
    C2 = (K2 * dynamic_range) ** 2

    mu_a, mu_b = stats.mean_a, stats.mean_b
    num = (2 * mu_a * mu_b + C1) * (2 * stats.covariance + C2)
    den = (mu_a * mu_a + mu_b * mu_b + C1) * (stats.var_a + stats.var_b + C2)
    # rounding can overshoot the [-1, 1] bound by a few ulps
    return max(-1.0, min(1.0, float(num / den)))


def _check_dimensions(reference: PixelBuffer, candidate: PixelBuffer) -> None:
    if (reference.width, reference.height) != (candidate.width, candidate.height):
        raise DimensionMismatch(
            f"Images must have the same size for SSIM: "
            f"{reference.width}x{reference.height} != {candidate.width}x{candidate.height}."
        )


def _score_window(window: Window, reference: PixelBuffer, candidate: PixelBuffer, dynamic_range: float) -> float:
    xs = window_samples(reference, window)
    ys = window_samples(candidate, window)
    return combine(pairwise_statistics(xs, ys), dynamic_range)


def aggregate(
    windows: Iterable[Window],
    reference: PixelBuffer,
    candidate: PixelBuffer,
    dynamic_range: float,
    workers: Optional[int] = None,
) -> SsimResult:
    """
    Score every window of both buffers and fold the scores into a result.
    With ``workers`` > 1 the windows are scored on a thread pool.
    """
    _check_dimensions(reference, candidate)
    windows = list(windows)
    if not windows:
        raise ValueError("At least one window is required for SSIM.")

    rows = max(w.row for w in windows) + 1
    cols = max(w.col for w in windows) + 1
    cells = {(w.row, w.col) for w in windows}
    if (
        len(cells) != len(windows)
        or len(cells) != rows * cols
        or min(min(cell) for cell in cells) < 0
    ):
        raise ValueError(
            f"Windows must fill a {rows}x{cols} grid with one window per (row, col) cell."
        )

    if workers is not None and workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            scores = list(executor.map(
                lambda w: _score_window(w, reference, candidate, dynamic_range), windows
            ))
    else:
        scores = [_score_window(w, reference, candidate, dynamic_range) for w in windows]

    grid = np.empty((rows, cols), dtype=np.float64)
    for w, s in zip(windows, scores):
        grid[w.row, w.col] = s
    grid.flags.writeable = False

    index = float(np.mean(scores))
    _LOGGER.debug("SSIM over %d window(s) in a %dx%d grid: %.6f", len(scores), rows, cols, index)
    return SsimResult(index=index, grid=grid)


def resolve_dynamic_range(buffer: PixelBuffer, override: Optional[float] = None) -> float:
    if override is not None:
        return float(override)
    return dynamic_range_for(buffer.bit_depth)


def compare(reference: PixelBuffer, candidate: PixelBuffer, options: Optional[SsimOptions] = None) -> SsimResult:
    """
    Structural Similarity Index between two pixel buffers of the same size.
    """
    options = options or SsimOptions()
    _check_dimensions(reference, candidate)

    grid: WindowGrid = partition(reference.width, reference.height, options.window_size, options.step)
    dynamic_range = resolve_dynamic_range(reference, options.dynamic_range)
    return aggregate(grid, reference, candidate, dynamic_range, workers=options.workers)


def ssim(reference: PixelBuffer, candidate: PixelBuffer, window_size: int = DEFAULT_WINDOW_SIZE) -> float:
    """Shorthand returning only the mean SSIM index."""
    return compare(reference, candidate, SsimOptions(window_size=window_size)).index
