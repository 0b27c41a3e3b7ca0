"""
Autocorrelation pitch detector.

Searches the lag-normalized autocorrelation of a time-domain buffer for the
first strong rising-then-falling peak after the zero-lag lobe, and reports
sample_rate / lag as the fundamental frequency.
"""

import logging

import numpy as np
from scipy.signal import correlate

from .audio_frame import AudioFrame, FrameDomain, require_domain
from .constants import AUTOCORRELATION_BUFFER_SIZE, CORRELATION_THRESHOLD, RMS_FLOOR
from .pitch_detector import PitchDetector, PitchEstimate
from .signal_gate import rms

logger = logging.getLogger(__name__)


def normalized_autocorrelation(samples: np.ndarray) -> np.ndarray:
    """
    Autocorrelation divided by the number of overlapping samples at each lag.

    Element k is sum(x[i] * x[i + k] for i < n - k) / (n - k), for k in [0, n).
    """
    samples = np.asarray(samples, dtype=np.float64)
    n = samples.size
    raw = correlate(samples, samples, mode="full")[n - 1 :]
    return raw / np.arange(n, 0, -1, dtype=np.float64)


class AutocorrelationDetector(PitchDetector):
    """
    Time-domain detector using a normalized lag search with early exit.

    The scan skips the zero-lag lobe: no lag can qualify until the correlation
    has first dropped to or below the threshold. After that, a lag qualifies
    when its correlation is above the threshold and above the previous lag's.
    The first non-rising lag after a qualifying run ends the scan and the best
    lag of the run is reported. A scan that never qualifies, or runs off the
    end of the buffer while still rising, yields no estimate.

    Cost is dominated by the correlation, so buffers are capped at
    max_buffer_size samples (the newest samples are kept).
    """

    domain = FrameDomain.TIME

    def __init__(
        self,
        threshold: float = CORRELATION_THRESHOLD,
        rms_floor: float = RMS_FLOOR,
        max_buffer_size: int = AUTOCORRELATION_BUFFER_SIZE,
    ):
        """
        Initialize detector.

        Args:
            threshold: Normalized correlation a lag must exceed to qualify
            rms_floor: Buffers below this RMS are rejected before the search
            max_buffer_size: Longest buffer analysed, in samples
        """
        if max_buffer_size < 2:
            raise ValueError(f"max_buffer_size must be at least 2, got {max_buffer_size}")
        self.threshold = threshold
        self.rms_floor = rms_floor
        self.max_buffer_size = max_buffer_size

    def set_threshold(self, threshold: float):
        self.threshold = max(0.0, threshold)

    def set_rms_floor(self, floor: float):
        self.rms_floor = max(0.0, floor)

    def best_lag(self, correlations: np.ndarray) -> int | None:
        """
        Run the early-exit peak search over a normalized correlation sequence.

        Returns:
            Lag of the best qualifying correlation, or None
        """
        in_zero_lag_lobe = True
        found_good_correlation = False
        best_offset = 0
        best_correlation = 0.0
        last_correlation = 0.0

        for offset, correlation in enumerate(correlations):
            correlation = float(correlation)

            if in_zero_lag_lobe:
                if correlation <= self.threshold:
                    in_zero_lag_lobe = False
                last_correlation = correlation
                continue

            if correlation > self.threshold and correlation > last_correlation:
                found_good_correlation = True
                if correlation > best_correlation:
                    best_correlation = correlation
                    best_offset = offset
            elif found_good_correlation:
                # Never report the trivial zero-lag peak
                return best_offset if best_offset > 0 else None

            last_correlation = correlation

        return None

    def estimate(self, frame: AudioFrame) -> PitchEstimate | None:
        """
        Estimate pitch from time-domain samples.

        Args:
            frame: Time-domain frame

        Returns:
            PitchEstimate, or None if the buffer is too quiet or aperiodic
        """
        require_domain(frame, FrameDomain.TIME, "Autocorrelation detection")
        samples = frame.values[-self.max_buffer_size :]

        level = rms(samples)
        if level < self.rms_floor:
            logger.debug("Signal too quiet for autocorrelation, RMS: %.5f", level)
            return None

        lag = self.best_lag(normalized_autocorrelation(samples))
        if lag is None:
            return None

        return PitchEstimate(frequency_hz=frame.sample_rate / lag)
