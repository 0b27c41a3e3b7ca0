"""
guitar_tuner - Guitar string pitch detection, note matching and tuning guidance
"""

from .audio_frame import AudioFrame, FrameDomain
from .autocorrelation_detector import AutocorrelationDetector
from .constants import SAMPLE_RATE
from .detection_stabilizer import DetectionStabilizer
from .exceptions import (
    InvalidFrameError,
    InvalidFrequencyError,
    InvalidReferenceTableError,
    TunerError,
    TunerStateError,
)
from .note_matcher import MatchResult, match_note
from .pitch_detector import PitchDetector, PitchEstimate
from .reference_notes import (
    STANDARD_TUNING,
    ReferenceNote,
    load_reference_table,
    validate_reference_table,
)
from .session import DetectorType, TickResult, TunerConfig, TunerSession, TunerState
from .signal_gate import SignalGate, has_signal
from .spectral_peak_detector import SpectralPeakDetector
from .spectrum import SpectrumAnalyser
from .tuning_feedback import Direction, FeedbackBand, TuningFeedback, classify

__version__ = "0.1.0"
__all__ = [
    "AudioFrame",
    "FrameDomain",
    "SAMPLE_RATE",
    "SignalGate",
    "has_signal",
    "PitchDetector",
    "PitchEstimate",
    "SpectralPeakDetector",
    "SpectrumAnalyser",
    "AutocorrelationDetector",
    "ReferenceNote",
    "STANDARD_TUNING",
    "load_reference_table",
    "validate_reference_table",
    "MatchResult",
    "match_note",
    "DetectionStabilizer",
    "FeedbackBand",
    "Direction",
    "TuningFeedback",
    "classify",
    "DetectorType",
    "TunerConfig",
    "TunerSession",
    "TunerState",
    "TickResult",
    "TunerError",
    "InvalidFrameError",
    "InvalidFrequencyError",
    "InvalidReferenceTableError",
    "TunerStateError",
]
