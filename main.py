import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import numpy as np

from citra.reader import acquire
from jendela.window import DEFAULT_WINDOW_SIZE, effective_window_size
from kualitatif.ssim import SsimOptions, SsimResult, compare, resolve_dynamic_range

_LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_BELOW_THRESHOLD = 1
EXIT_ERROR = 2


def format_grid(grid: np.ndarray) -> str:
    return "\n".join(" ".join(f"{v:.4f}" for v in row) for row in grid)


def save_result(result: SsimResult, path: str, window_size: int, dynamic_range: float) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "index": result.index,
        "window_size": window_size,
        "dynamic_range": dynamic_range,
        "grid": result.grid.tolist(),
    }
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)


def run(args: argparse.Namespace) -> int:
    options = SsimOptions(
        window_size=args.window_size,
        dynamic_range=args.dynamic_range,
        step=args.step,
        workers=args.workers,
    )

    reference = acquire(args.reference, hint=args.type)
    candidate = acquire(args.candidate, hint=args.type)
    _LOGGER.debug("Reference %r, candidate %r", reference, candidate)

    result = compare(reference, candidate, options)
    print(f"SSIM={result.index:.6f}")

    if args.grid:
        rows, cols = result.shape
        print(f"\n== Window grid ({rows}x{cols}) ==")
        print(format_grid(result.grid))

    if args.output:
        dynamic_range = resolve_dynamic_range(reference, options.dynamic_range)
        size = effective_window_size(reference.width, reference.height, options.window_size)
        save_result(result, args.output, size, dynamic_range)
        print(f"Saved result to {args.output}")

    if args.threshold is not None and result.index < args.threshold:
        print(f"SSIM below threshold {args.threshold}", file=sys.stderr)
        return EXIT_BELOW_THRESHOLD
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Structural similarity (SSIM) between two images.")
    parser.add_argument("reference", help="Reference image: path, http(s) URL.")
    parser.add_argument("candidate", help="Candidate image: path, http(s) URL.")
    parser.add_argument("--window-size", type=int, default=DEFAULT_WINDOW_SIZE, help="Comparison window size.")
    parser.add_argument("--step", type=int, default=None, help="Window step (default: window size).")
    parser.add_argument("--dynamic-range", type=float, default=None, help="Override max sample value.")
    parser.add_argument("--workers", type=int, default=None, help="Threads used to score windows.")
    parser.add_argument("--type", default=None, help="MIME type for both inputs, e.g. image/png.")
    parser.add_argument("--threshold", type=float, default=None, help="Exit with 1 when SSIM is below this.")
    parser.add_argument("--grid", action="store_true", help="Print the per-window score grid.")
    parser.add_argument("--output", default=None, help="Write the result as JSON to this file.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return run(args)
    except (ValueError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
