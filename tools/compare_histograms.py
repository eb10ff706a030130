#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from intonation.dsp import OCTAVE_CENTS  # noqa: E402
from intonation.export import read_histogram_csv  # noqa: E402
from intonation.kde import CircularHistogram  # noqa: E402
from intonation.kernel import RectangularKernel  # noqa: E402


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compare two exported pitch class histograms.")
    parser.add_argument("first", type=Path, help="Histogram CSV (bin,value)")
    parser.add_argument("second", type=Path, help="Histogram CSV to shift against the first")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    # Stored bins are already smoothed; the kernel only has to fit the size.
    kernel = RectangularKernel(1)
    first = CircularHistogram.from_bins(kernel, read_histogram_csv(args.first))
    second = CircularHistogram.from_bins(kernel, read_histogram_csv(args.second))

    shift = first.shift_for_optimal_correlation(second)
    print(f"Correlation:    {first.correlation(second):.3f}")
    print(f"Optimal shift:  {shift} bins ({shift * OCTAVE_CENTS / first.size:.1f} cents)")
    print(f"At that shift:  {first.correlation(second, shift):.3f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
