"""
Spectral peak pitch detector.

Picks the single strongest bin of a dB magnitude spectrum and accepts it when
it is loud enough and falls inside the plausible instrument range. This works
well at the onset of a plucked string, where one partial dominates, but can
lock onto a harmonic an octave up; the fixed band and magnitude floor suppress
most false positives.
"""

import numpy as np

from .audio_frame import AudioFrame, FrameDomain, require_domain
from .constants import MAX_FREQUENCY, MIN_FREQUENCY, SPECTRUM_FLOOR_DB
from .pitch_detector import PitchDetector, PitchEstimate


class SpectralPeakDetector(PitchDetector):
    """
    Dominant-bin detector over a one-sided dB spectrum.

    A spectrum of N bins is assumed to come from a 2N-point transform, so bin i
    sits at i * sample_rate / (2N) Hz.
    """

    domain = FrameDomain.FREQUENCY

    def __init__(
        self,
        min_frequency: float = MIN_FREQUENCY,
        max_frequency: float = MAX_FREQUENCY,
        floor_db: float = SPECTRUM_FLOOR_DB,
    ):
        """
        Initialize detector.

        Args:
            min_frequency: Lowest accepted peak frequency in Hz (inclusive)
            max_frequency: Highest accepted peak frequency in Hz (inclusive)
            floor_db: Peak magnitude must be strictly above this (dB)
        """
        if min_frequency > max_frequency:
            raise ValueError(
                f"min_frequency {min_frequency} is above max_frequency {max_frequency}"
            )
        self.min_frequency = min_frequency
        self.max_frequency = max_frequency
        self.floor_db = floor_db

    def set_frequency_range(self, min_frequency: float, max_frequency: float):
        if min_frequency > max_frequency:
            min_frequency, max_frequency = max_frequency, min_frequency
        self.min_frequency = max(0.0, min_frequency)
        self.max_frequency = max_frequency

    def set_floor_db(self, floor_db: float):
        self.floor_db = floor_db

    @staticmethod
    def bin_frequency(index: int, bin_count: int, sample_rate: float) -> float:
        """Centre frequency of a spectrum bin."""
        return index * sample_rate / (2 * bin_count)

    def find_peak(self, frame: AudioFrame) -> tuple[int, float]:
        """
        Locate the strongest bin.

        Returns:
            Tuple of (bin index, magnitude in dB); the first bin wins on ties
        """
        require_domain(frame, FrameDomain.FREQUENCY, "Spectral peak detection")
        index = int(np.argmax(frame.values))
        return index, float(frame.values[index])

    def estimate(self, frame: AudioFrame) -> PitchEstimate | None:
        """
        Estimate pitch from a dB magnitude spectrum.

        Args:
            frame: Frequency-domain frame

        Returns:
            PitchEstimate, or None if the peak is DC, too quiet or out of range
        """
        index, magnitude = self.find_peak(frame)
        frequency = self.bin_frequency(index, frame.bin_count, frame.sample_rate)

        # Bin 0 is DC, never a pitch
        if frequency <= 0:
            return None
        if not (self.min_frequency <= frequency <= self.max_frequency):
            return None
        if magnitude <= self.floor_db:
            return None

        return PitchEstimate(frequency_hz=frequency)
