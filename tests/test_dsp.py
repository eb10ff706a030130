import math

import numpy as np
import pytest

from intonation.dsp import (
    hz_to_cents,
    hz_to_midi,
    hz_to_pitch_class_cents,
    is_silence,
    midi_to_hz,
    sound_pressure_level,
)


def test_sound_pressure_level():
    assert sound_pressure_level(np.zeros(512)) == -math.inf
    assert sound_pressure_level(np.array([])) == -math.inf
    frame = np.full(100, 0.5)
    assert sound_pressure_level(frame) == pytest.approx(20 * math.log10(5.0 / 100))


def test_is_silence():
    quiet = np.full(1024, 1e-6)
    loud = 0.5 * np.sin(np.linspace(0, 20 * np.pi, 1024))
    assert is_silence(np.zeros(1024), -70.0)
    assert is_silence(quiet, -70.0)
    assert not is_silence(loud, -70.0)


def test_midi_conversions():
    assert hz_to_midi(440.0) == pytest.approx(69.0)
    assert hz_to_midi(0.0) is None
    assert midi_to_hz(81.0) == pytest.approx(880.0)


def test_cents():
    assert hz_to_cents(880.0, 440.0) == pytest.approx(1200.0)
    assert hz_to_cents(220.0, 440.0) == pytest.approx(-1200.0)
    assert hz_to_cents(-1.0, 440.0) is None


def test_pitch_class_cents_folds_octaves():
    assert hz_to_pitch_class_cents(220.0, 440.0) == pytest.approx(0.0)
    assert hz_to_pitch_class_cents(660.0, 440.0) == pytest.approx(701.955, abs=1e-3)
    assert hz_to_pitch_class_cents(330.0, 440.0) == pytest.approx(701.955, abs=1e-3)
    assert hz_to_pitch_class_cents(0.0, 440.0) is None
    folded = hz_to_pitch_class_cents(440.0 * (1 - 1e-16), 440.0)
    assert 0.0 <= folded < 1200.0
