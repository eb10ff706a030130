import math
from typing import Optional

import numpy as np

OCTAVE_CENTS = 1200.0


def sound_pressure_level(frame: np.ndarray) -> float:
    """Level of a frame in dB, -inf for an all-zero (or empty) frame."""
    if frame.size == 0:
        return -math.inf
    value = math.sqrt(float(np.sum(frame.astype(np.float64) ** 2))) / frame.size
    if value <= 0.0:
        return -math.inf
    return 20.0 * math.log10(value)


def is_silence(frame: np.ndarray, threshold_db: float) -> bool:
    return sound_pressure_level(frame) < threshold_db


def hz_to_midi(hz: float) -> Optional[float]:
    if hz <= 0:
        return None
    return 69.0 + 12.0 * math.log2(hz / 440.0)


def midi_to_hz(midi: float) -> float:
    return 440.0 * (2.0 ** ((midi - 69.0) / 12.0))


def hz_to_cents(hz: float, reference_hz: float) -> Optional[float]:
    if hz <= 0 or reference_hz <= 0:
        return None
    return OCTAVE_CENTS * math.log2(hz / reference_hz)


def hz_to_pitch_class_cents(hz: float, reference_hz: float) -> Optional[float]:
    """Cents above the reference folded into a single octave, in [0, 1200)."""
    cents = hz_to_cents(hz, reference_hz)
    if cents is None:
        return None
    folded = cents % OCTAVE_CENTS
    # -1e-13 % 1200 rounds to 1200.0
    if folded >= OCTAVE_CENTS:
        folded = 0.0
    return folded
