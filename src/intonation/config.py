from dataclasses import dataclass, replace
from typing import Dict


@dataclass
class AudioConfig:
    sample_rate: int = 44100
    block_size: int = 1024
    overlap: int = 512
    channels: int = 1
    threshold: float = 0.15
    silence_threshold_db: float = -70.0

    @classmethod
    def for_mode(cls, mode: str, **overrides) -> "AudioConfig":
        try:
            preset = DETECTION_MODES[mode]
        except KeyError:
            raise ValueError(f"Unknown detection mode: {mode!r}") from None
        return replace(preset, **overrides)


@dataclass
class HistogramConfig:
    size: int = 1200
    kernel: str = "gaussian"
    kernel_width: float = 7.0
    # MIDI note 0, so bin 0 is pitch class C.
    reference_hz: float = 8.175798915643707
    min_confidence: float = 0.0


DETECTION_MODES: Dict[str, AudioConfig] = {
    "yin": AudioConfig(block_size=1024, overlap=512, threshold=0.15),
    "fast_yin": AudioConfig(block_size=256, overlap=0, threshold=0.75),
}
