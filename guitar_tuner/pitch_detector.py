"""
Common interface for the pitch estimation strategies.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from .audio_frame import AudioFrame, FrameDomain


@dataclass(frozen=True)
class PitchEstimate:
    """Fundamental frequency found in one frame."""

    frequency_hz: float


class PitchDetector(ABC):
    """
    A strategy turning one audio frame into an optional pitch estimate.

    Each detector declares the frame domain it consumes. Returning None means
    no reliable pitch this tick; malformed frames raise InvalidFrameError.
    """

    domain: FrameDomain = FrameDomain.TIME

    @abstractmethod
    def estimate(self, frame: AudioFrame) -> PitchEstimate | None:
        """Estimate the fundamental frequency of a frame."""

    def reset(self):
        """Forget any per-stream state. Stateless detectors need not override."""
