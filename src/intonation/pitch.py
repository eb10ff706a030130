from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view


@dataclass(frozen=True)
class PitchEstimate:
    hz: Optional[float]
    confidence: float

    @property
    def pitched(self) -> bool:
        return self.hz is not None


NO_PITCH = PitchEstimate(None, 0.0)


def difference(frame: np.ndarray, half_len: int) -> np.ndarray:
    """Squared difference of the frame with itself delayed by every lag."""
    x = frame.astype(np.float64)
    lagged = sliding_window_view(x[: 2 * half_len - 1], half_len)
    diff = np.sum((x[:half_len] - lagged) ** 2, axis=1)
    diff[0] = 0.0
    return diff


def cumulative_mean_normalized_difference(diff: np.ndarray) -> np.ndarray:
    cmnd = np.ones_like(diff)
    if diff.size <= 2:
        return cmnd
    running = np.cumsum(diff[1:])[1:]
    lags = np.arange(2, diff.size, dtype=np.float64)
    scaled = diff[2:] * lags
    # A zero running sum (silence) keeps the lag at 1.0.
    np.divide(scaled, running, out=cmnd[2:], where=running > 0)
    return cmnd


def absolute_threshold(cmnd: np.ndarray, threshold: float) -> Optional[int]:
    """First lag under the threshold, moved down to the bottom of its dip."""
    below = np.flatnonzero(cmnd[1:] < threshold)
    if below.size == 0:
        return None
    tau = int(below[0]) + 1
    while tau + 1 < cmnd.size and cmnd[tau + 1] < cmnd[tau]:
        tau += 1
    return tau


def parabolic_interpolation(cmnd: np.ndarray, tau: int) -> float:
    x0 = tau - 1 if tau >= 1 else tau
    x2 = tau + 1 if tau + 1 < cmnd.size else tau
    if x0 == tau:
        return float(tau if cmnd[tau] <= cmnd[x2] else x2)
    if x2 == tau:
        return float(tau if cmnd[tau] <= cmnd[x0] else x0)

    s0, s1, s2 = float(cmnd[x0]), float(cmnd[tau]), float(cmnd[x2])
    denom = 2.0 * (2.0 * s1 - s2 - s0)
    if denom == 0.0:
        best = tau
        for candidate in (x0, x2):
            if cmnd[candidate] < cmnd[best]:
                best = candidate
        return float(best)
    return tau + (s2 - s0) / denom


class PitchEstimator:
    """YIN fundamental frequency estimator for fixed size frames."""

    def __init__(self, sample_rate: int, buffer_size: int = 1024, threshold: float = 0.15):
        if buffer_size < 4:
            raise ValueError(f"Buffer size too small: {buffer_size}")
        self.sample_rate = sample_rate
        self.buffer_size = buffer_size
        self.threshold = threshold

    def estimate(self, frame: Sequence[float]) -> PitchEstimate:
        frame = np.asarray(frame, dtype=np.float64)
        if frame.size < self.buffer_size:
            raise ValueError(f"Expected a frame of {self.buffer_size} samples, got {frame.size}")

        cmnd = cumulative_mean_normalized_difference(difference(frame, self.buffer_size // 2))
        tau = absolute_threshold(cmnd, self.threshold)
        if tau is None:
            return NO_PITCH

        better_tau = parabolic_interpolation(cmnd, tau)
        if better_tau <= 0:
            return NO_PITCH
        confidence = min(max(1.0 - float(cmnd[tau]), 0.0), 1.0)
        return PitchEstimate(self.sample_rate / better_tau, confidence)
