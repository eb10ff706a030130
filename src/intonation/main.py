from __future__ import annotations

import argparse
import logging
import queue
import time
from pathlib import Path
from typing import List, Optional

import numpy as np
import sounddevice as sd

from .annotation import Annotator, accumulate
from .config import DETECTION_MODES, AudioConfig, HistogramConfig
from .dsp import OCTAVE_CENTS
from .export import read_histogram_csv, write_histogram_csv
from .kde import CircularHistogram
from .kernel import make_kernel
from .pitch import PitchEstimator

logger = logging.getLogger(__name__)

NOTE_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Live pitch class histogram from an audio input")
    parser.add_argument("--seconds", type=float, default=10.0, help="Capture length in seconds")
    parser.add_argument("--device", help="Audio input device (index or name)")
    parser.add_argument("--samplerate", type=int, default=44100, help="Sample rate")
    parser.add_argument("--mode", choices=sorted(DETECTION_MODES), default="yin", help="Detection preset")
    parser.add_argument("--bins", type=int, default=1200, help="Histogram resolution per octave")
    parser.add_argument("--kernel", choices=["gaussian", "rectangular"], default="gaussian")
    parser.add_argument("--kernel-width", type=float, default=7.0, help="Kernel width in bins")
    parser.add_argument("--min-confidence", type=float, default=0.0)
    parser.add_argument("--out", type=Path, help="Write the normalized histogram to this CSV file")
    parser.add_argument("--reference", type=Path, help="Compare against a histogram CSV file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log every detected pitch")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    audio_cfg = AudioConfig.for_mode(args.mode, sample_rate=args.samplerate)
    hist_cfg = HistogramConfig(
        size=args.bins,
        kernel=args.kernel,
        kernel_width=args.kernel_width,
        min_confidence=args.min_confidence,
    )

    estimator = PitchEstimator(
        sample_rate=audio_cfg.sample_rate,
        buffer_size=audio_cfg.block_size,
        threshold=audio_cfg.threshold,
    )
    annotator = Annotator(estimator, audio_cfg)
    histogram = CircularHistogram(make_kernel(hist_cfg.kernel, hist_cfg.kernel_width), hist_cfg.size)

    audio_queue: "queue.Queue[np.ndarray]" = queue.Queue()

    def audio_callback(indata: np.ndarray, frames: int, time_info, status) -> None:
        if status:
            return
        audio_queue.put(indata.copy())

    stream = sd.InputStream(
        channels=audio_cfg.channels,
        samplerate=audio_cfg.sample_rate,
        blocksize=audio_cfg.block_size,
        device=args.device,
        callback=audio_callback,
    )

    logger.info("Listening for %.1f s (%s mode)", args.seconds, args.mode)
    with stream:
        deadline = time.perf_counter() + args.seconds
        while time.perf_counter() < deadline:
            try:
                block = audio_queue.get(timeout=0.1)
            except queue.Empty:
                continue
            new = annotator.process(block[:, 0])
            accumulate(histogram, new, hist_cfg.reference_hz, hist_cfg.min_confidence)

    while not audio_queue.empty():
        new = annotator.process(audio_queue.get()[:, 0])
        accumulate(histogram, new, hist_cfg.reference_hz, hist_cfg.min_confidence)

    logger.info(
        "%d annotations from %d frames",
        len(annotator.annotations),
        annotator.frames_processed,
    )
    histogram.normalize()

    if args.out:
        write_histogram_csv(args.out, histogram.estimate())

    _print_peaks(histogram)
    if args.reference:
        reference = CircularHistogram.from_bins(histogram.kernel, read_histogram_csv(args.reference))
        _print_comparison(histogram, reference)
    return 0


def _bin_to_cents(index: int, size: int) -> float:
    return index * OCTAVE_CENTS / size


def _cents_label(cents: float) -> str:
    semitone = int(round(cents / 100.0)) % 12
    deviation = cents - round(cents / 100.0) * 100.0
    return f"{NOTE_NAMES[semitone]} {deviation:+.0f}c"


def _print_peaks(histogram: CircularHistogram, count: int = 5) -> None:
    bins = histogram.estimate()
    print("")
    if not np.any(bins > 0):
        print("No pitch detected.")
        return
    # Local maxima on the circular domain.
    peaks = np.flatnonzero((bins > np.roll(bins, 1)) & (bins >= np.roll(bins, -1)))
    if peaks.size == 0:
        peaks = np.array([int(np.argmax(bins))])
    peaks = peaks[np.argsort(bins[peaks])[::-1]][:count]
    print("Strongest pitch classes:")
    for index in peaks:
        cents = _bin_to_cents(int(index), histogram.size)
        print(f"  {cents:7.1f} cents  {_cents_label(cents):>8}  {bins[index]:.3f}")


def _print_comparison(histogram: CircularHistogram, reference: CircularHistogram) -> None:
    shift = histogram.shift_for_optimal_correlation(reference)
    print("")
    print("Comparison with reference:")
    print(f"  Correlation:     {histogram.correlation(reference):.3f}")
    print(f"  Optimal shift:   {shift} bins ({_bin_to_cents(shift, histogram.size):.1f} cents)")
    print(f"  At that shift:   {histogram.correlation(reference, shift):.3f}")


if __name__ == "__main__":
    raise SystemExit(main())
