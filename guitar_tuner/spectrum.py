"""
Spectrum analyser producing dB magnitude frames for the spectral detector.

Mirrors a browser-style analyser node: Blackman window, magnitude scaled by the
FFT size, exponential smoothing between successive calls, then conversion to
decibels.
"""

import numpy as np
from scipy.signal import get_window

from .audio_frame import AudioFrame, FrameDomain, require_domain
from .constants import SPECTRAL_FFT_SIZE, SPECTRUM_SMOOTHING

MIN_FFT_SIZE = 32
MAX_FFT_SIZE = 32768


class SpectrumAnalyser:
    """
    Converts time-domain frames into smoothed one-sided dB spectra.

    The returned frame has fft_size // 2 bins, so bin i lies at
    i * sample_rate / fft_size Hz.
    """

    def __init__(
        self,
        fft_size: int = SPECTRAL_FFT_SIZE,
        smoothing: float = SPECTRUM_SMOOTHING,
    ):
        """
        Initialize analyser.

        Args:
            fft_size: Transform length, a power of two in [32, 32768]
            smoothing: Weight given to the previous magnitudes, in [0, 1)
        """
        if fft_size < MIN_FFT_SIZE or fft_size > MAX_FFT_SIZE or fft_size & (fft_size - 1):
            raise ValueError(
                f"fft_size must be a power of two between {MIN_FFT_SIZE} and "
                f"{MAX_FFT_SIZE}, got {fft_size}"
            )
        if not 0.0 <= smoothing < 1.0:
            raise ValueError(f"smoothing must be in [0, 1), got {smoothing}")

        self.fft_size = fft_size
        self.smoothing = smoothing
        self._window = get_window("blackman", fft_size)
        self._previous: np.ndarray | None = None

    @property
    def bin_count(self) -> int:
        return self.fft_size // 2

    def reset(self):
        self._previous = None

    def analyse(self, frame: AudioFrame) -> AudioFrame:
        """
        Compute the smoothed dB spectrum of the newest fft_size samples.

        Args:
            frame: Time-domain frame; shorter frames are zero-padded at the front

        Returns:
            Frequency-domain frame at the same sample rate
        """
        require_domain(frame, FrameDomain.TIME, "Spectrum analysis")

        buffer = np.zeros(self.fft_size, dtype=np.float64)
        samples = frame.values[-self.fft_size :]
        buffer[-samples.size :] = samples

        spectrum = np.fft.rfft(buffer * self._window)
        magnitudes = np.abs(spectrum[: self.bin_count]) / self.fft_size

        if self._previous is not None:
            magnitudes = self.smoothing * self._previous + (1.0 - self.smoothing) * magnitudes
        self._previous = magnitudes

        with np.errstate(divide="ignore"):
            magnitudes_db = 20.0 * np.log10(magnitudes)

        return AudioFrame.from_spectrum(magnitudes_db, frame.sample_rate)
