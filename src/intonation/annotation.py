from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

import numpy as np

from .config import AudioConfig
from .dsp import OCTAVE_CENTS, hz_to_midi, hz_to_pitch_class_cents, is_silence
from .kde import CircularHistogram
from .pitch import PitchEstimator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Annotation:
    time_s: float
    hz: float
    confidence: float

    @property
    def midi(self) -> Optional[float]:
        return hz_to_midi(self.hz)


def iter_frames(samples: np.ndarray, buffer_size: int, overlap: int) -> Iterator[Tuple[int, np.ndarray]]:
    """Yield ``(start_index, frame)`` for every complete, possibly overlapping frame."""
    if not 0 <= overlap < buffer_size:
        raise ValueError(f"Overlap must be in [0, {buffer_size}), got {overlap}")
    step = buffer_size - overlap
    for start in range(0, samples.size - buffer_size + 1, step):
        yield start, samples[start : start + buffer_size]


class Annotator:
    """Runs the estimator over a stream of audio blocks of any length."""

    def __init__(self, estimator: PitchEstimator, config: AudioConfig):
        if not 0 <= config.overlap < estimator.buffer_size:
            raise ValueError(f"Overlap must be in [0, {estimator.buffer_size}), got {config.overlap}")
        self.estimator = estimator
        self.config = config
        self.samples_processed = 0
        self.frames_processed = 0
        self.annotations: List[Annotation] = []
        self._pending = np.zeros(0, dtype=np.float64)

    @property
    def step(self) -> int:
        return self.estimator.buffer_size - self.config.overlap

    def process(self, block: np.ndarray) -> List[Annotation]:
        self._pending = np.concatenate([self._pending, np.asarray(block, dtype=np.float64).ravel()])
        new: List[Annotation] = []
        consumed = 0
        for start, frame in iter_frames(self._pending, self.estimator.buffer_size, self.config.overlap):
            # Stamped at the end of the frame.
            end = self.samples_processed + start + self.estimator.buffer_size
            annotation = self._process_frame(end / self.estimator.sample_rate, frame)
            if annotation is not None:
                new.append(annotation)
            consumed = start + self.step
        self._pending = self._pending[consumed:]
        self.samples_processed += consumed
        self.annotations.extend(new)
        return new

    def _process_frame(self, time_s: float, frame: np.ndarray) -> Optional[Annotation]:
        self.frames_processed += 1
        if is_silence(frame, self.config.silence_threshold_db):
            return None
        estimate = self.estimator.estimate(frame)
        if not estimate.pitched:
            return None
        logger.debug("%.3fs: %.2f Hz (confidence %.2f)", time_s, estimate.hz, estimate.confidence)
        return Annotation(time_s=time_s, hz=estimate.hz, confidence=estimate.confidence)


def annotate(samples: np.ndarray, estimator: PitchEstimator, config: AudioConfig) -> List[Annotation]:
    annotator = Annotator(estimator, config)
    annotations = annotator.process(samples)
    logger.info("Annotated %d of %d frames", len(annotations), annotator.frames_processed)
    return annotations


def accumulate(
    histogram: CircularHistogram,
    annotations: Iterable[Annotation],
    reference_hz: float,
    min_confidence: float = 0.0,
) -> int:
    """Add each annotation to the histogram at its pitch class position.

    Returns the number of annotations added.
    """
    added = 0
    for annotation in annotations:
        if annotation.confidence < min_confidence:
            continue
        cents = hz_to_pitch_class_cents(annotation.hz, reference_hz)
        if cents is None:
            continue
        histogram.add(cents * histogram.size / OCTAVE_CENTS)
        added += 1
    return added
