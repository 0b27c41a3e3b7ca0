"""
Audio frames handed to the detectors once per analysis tick.

A frame carries either time-domain samples (amplitudes roughly in [-1, 1]) or a
one-sided magnitude spectrum in dB, together with the sample rate it was
captured at.
"""

from dataclasses import dataclass
from enum import Enum

import numpy as np

from .exceptions import InvalidFrameError


class FrameDomain(Enum):
    """Domain of the values held by an AudioFrame."""

    TIME = "time"
    FREQUENCY = "frequency"


@dataclass(frozen=True)
class AudioFrame:
    """
    One analysis frame.

    Attributes:
        values: Samples (time domain) or dB magnitudes (frequency domain)
        sample_rate: Sample rate of the captured audio in Hz
        domain: Whether values are samples or spectrum bins
    """

    values: np.ndarray
    sample_rate: float
    domain: FrameDomain = FrameDomain.TIME

    def __post_init__(self):
        values = np.asarray(self.values, dtype=np.float64)
        if values.ndim != 1:
            raise InvalidFrameError(f"Frame must be one-dimensional, got shape {values.shape}")
        if values.size == 0:
            raise InvalidFrameError("Frame is empty")
        if not np.isfinite(self.sample_rate) or self.sample_rate <= 0:
            raise InvalidFrameError(f"Sample rate must be positive, got {self.sample_rate}")

        if self.domain == FrameDomain.TIME:
            if not np.all(np.isfinite(values)):
                raise InvalidFrameError("Time-domain frame contains non-finite samples")
        else:
            # -inf is a legitimate dB value for an empty bin
            if np.any(np.isnan(values)) or np.any(values == np.inf):
                raise InvalidFrameError("Spectrum contains NaN or +inf magnitudes")

        object.__setattr__(self, "values", values)
        object.__setattr__(self, "sample_rate", float(self.sample_rate))

    @classmethod
    def from_samples(cls, samples, sample_rate: float) -> "AudioFrame":
        """Build a time-domain frame."""
        return cls(np.asarray(samples), sample_rate, FrameDomain.TIME)

    @classmethod
    def from_spectrum(cls, magnitudes_db, sample_rate: float) -> "AudioFrame":
        """Build a frequency-domain frame from one-sided dB magnitudes."""
        return cls(np.asarray(magnitudes_db), sample_rate, FrameDomain.FREQUENCY)

    @property
    def is_spectrum(self) -> bool:
        return self.domain == FrameDomain.FREQUENCY

    @property
    def bin_count(self) -> int:
        """Number of spectrum bins (frequency-domain frames only)."""
        if not self.is_spectrum:
            raise InvalidFrameError("bin_count is only defined for spectrum frames")
        return int(self.values.size)

    def __len__(self) -> int:
        return int(self.values.size)


def require_domain(frame: AudioFrame, domain: FrameDomain, operation: str) -> None:
    """Raise InvalidFrameError unless frame is in the given domain."""
    if frame.domain != domain:
        raise InvalidFrameError(
            f"{operation} needs a {domain.value}-domain frame, got {frame.domain.value}"
        )
