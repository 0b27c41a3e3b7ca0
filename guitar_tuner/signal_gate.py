"""
Signal gate: cheap rejection of silent frames before pitch estimation.
"""

import numpy as np

from .audio_frame import AudioFrame, FrameDomain, require_domain
from .constants import RMS_FLOOR


def rms(samples: np.ndarray) -> float:
    """Root-mean-square amplitude of a block of samples."""
    samples = np.asarray(samples, dtype=np.float64)
    if samples.size == 0:
        return 0.0
    return float(np.sqrt(np.mean(np.square(samples))))


def rms_to_dbfs(level: float) -> float:
    """Convert an RMS amplitude to dB relative to full scale."""
    if level <= 0:
        return float("-inf")
    return float(20.0 * np.log10(level))


class SignalGate:
    """
    RMS gate over a time-domain frame.

    The gate opens when the frame's RMS amplitude is strictly above the floor.
    """

    def __init__(self, floor: float = RMS_FLOOR):
        """
        Initialize gate.

        Args:
            floor: RMS amplitude the frame must exceed to count as signal
        """
        self.floor = floor

    def set_floor(self, floor: float):
        self.floor = max(0.0, floor)

    def level(self, frame: AudioFrame) -> float:
        """RMS level of a time-domain frame."""
        require_domain(frame, FrameDomain.TIME, "Signal gate")
        return rms(frame.values)

    def has_signal(self, frame: AudioFrame) -> bool:
        return self.level(frame) > self.floor


def has_signal(frame: AudioFrame, floor: float = RMS_FLOOR) -> bool:
    """Return True if the frame's RMS amplitude exceeds floor."""
    return SignalGate(floor).has_signal(frame)
