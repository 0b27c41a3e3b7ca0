"""
Tuner session: the per-tick pipeline and its start/stop state.

The host's capture loop calls process() once per analysis tick while the
session is listening:

    gain -> rolling window -> signal gate -> pitch detector -> note matcher
         -> detection stabilizer -> tuning feedback

The session owns all mutable state (rolling window, spectrum smoothing,
stabilizer history) and clears it whenever tuning starts or stops.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum

import numpy as np

from .audio_frame import AudioFrame, FrameDomain
from .autocorrelation_detector import AutocorrelationDetector
from .constants import (
    AUTOCORRELATION_BUFFER_SIZE,
    AUTOCORRELATION_INPUT_GAIN,
    CONFIDENCE_ADMISSION,
    CONFIDENCE_WINDOW_HZ,
    CORRELATION_THRESHOLD,
    HISTORY_CAPACITY,
    MAX_FREQUENCY,
    MIN_FREQUENCY,
    RMS_FLOOR,
    SAMPLE_RATE,
    SPECTRAL_FFT_SIZE,
    SPECTRAL_INPUT_GAIN,
    SPECTRUM_FLOOR_DB,
    SPECTRUM_SMOOTHING,
    STABLE_VOTE_COUNT,
)
from .detection_stabilizer import DetectionStabilizer
from .exceptions import TunerStateError
from .note_matcher import MatchResult, match_note
from .pitch_detector import PitchDetector
from .reference_notes import STANDARD_TUNING, ReferenceNote, validate_reference_table
from .signal_gate import SignalGate
from .spectral_peak_detector import SpectralPeakDetector
from .spectrum import MAX_FFT_SIZE, MIN_FFT_SIZE, SpectrumAnalyser
from .tuning_feedback import (
    FeedbackThresholds,
    TuningFeedback,
    classify,
    meter_position,
    needle_rotation,
    tuning_instruction,
)

logger = logging.getLogger(__name__)


class DetectorType(Enum):
    """Pitch estimation strategy."""

    AUTOCORRELATION = "autocorrelation"  # Time-domain lag search (default)
    SPECTRAL = "spectral"  # Dominant bin of a dB spectrum


DEFAULT_INPUT_GAIN = {
    DetectorType.AUTOCORRELATION: AUTOCORRELATION_INPUT_GAIN,
    DetectorType.SPECTRAL: SPECTRAL_INPUT_GAIN,
}

DEFAULT_BUFFER_SIZE = {
    DetectorType.AUTOCORRELATION: AUTOCORRELATION_BUFFER_SIZE,
    DetectorType.SPECTRAL: SPECTRAL_FFT_SIZE,
}


class TunerState(Enum):
    IDLE = "idle"
    LISTENING = "listening"


@dataclass(frozen=True)
class TunerConfig:
    """
    All tunable parameters of the pipeline.

    input_gain and buffer_size default per detector type when left as None
    (5x gain and 2048 samples for autocorrelation, unity gain and an 8192-point
    analyser for spectral detection).
    """

    sample_rate: float = SAMPLE_RATE
    detector_type: DetectorType = DetectorType.AUTOCORRELATION
    input_gain: float | None = None
    buffer_size: int | None = None
    rms_floor: float = RMS_FLOOR
    spectrum_floor_db: float = SPECTRUM_FLOOR_DB
    spectrum_smoothing: float = SPECTRUM_SMOOTHING
    min_frequency: float = MIN_FREQUENCY
    max_frequency: float = MAX_FREQUENCY
    correlation_threshold: float = CORRELATION_THRESHOLD
    confidence_window: float = CONFIDENCE_WINDOW_HZ
    confidence_admission: float = CONFIDENCE_ADMISSION
    history_capacity: int = HISTORY_CAPACITY
    stable_vote_count: int = STABLE_VOTE_COUNT
    feedback_thresholds: FeedbackThresholds = field(default_factory=FeedbackThresholds)

    def __post_init__(self):
        if not self.sample_rate > 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate}")
        if self.input_gain is not None and not self.input_gain > 0:
            raise ValueError(f"input_gain must be positive, got {self.input_gain}")
        if self.buffer_size is not None and self.buffer_size < 2:
            raise ValueError(f"buffer_size must be at least 2, got {self.buffer_size}")
        if self.rms_floor < 0:
            raise ValueError(f"rms_floor must not be negative, got {self.rms_floor}")
        if self.min_frequency > self.max_frequency:
            raise ValueError(
                f"min_frequency {self.min_frequency} is above max_frequency {self.max_frequency}"
            )
        if not self.confidence_window > 0:
            raise ValueError(f"confidence_window must be positive, got {self.confidence_window}")
        if self.history_capacity < 1:
            raise ValueError(f"history_capacity must be at least 1, got {self.history_capacity}")
        if self.stable_vote_count < 1:
            raise ValueError(f"stable_vote_count must be at least 1, got {self.stable_vote_count}")
        if not 0.0 <= self.spectrum_smoothing < 1.0:
            raise ValueError(f"spectrum_smoothing must be in [0, 1), got {self.spectrum_smoothing}")
        if self.detector_type == DetectorType.SPECTRAL:
            size = self.window_size
            if size < MIN_FFT_SIZE or size > MAX_FFT_SIZE or size & (size - 1):
                raise ValueError(
                    f"Spectral buffer_size must be a power of two between {MIN_FFT_SIZE} "
                    f"and {MAX_FFT_SIZE}, got {size}"
                )

    @property
    def gain(self) -> float:
        if self.input_gain is not None:
            return self.input_gain
        return DEFAULT_INPUT_GAIN[self.detector_type]

    @property
    def window_size(self) -> int:
        if self.buffer_size is not None:
            return self.buffer_size
        return DEFAULT_BUFFER_SIZE[self.detector_type]


def create_detector(config: TunerConfig) -> PitchDetector:
    """Build the pitch detector selected by config.detector_type."""
    if config.detector_type == DetectorType.SPECTRAL:
        return SpectralPeakDetector(
            min_frequency=config.min_frequency,
            max_frequency=config.max_frequency,
            floor_db=config.spectrum_floor_db,
        )
    return AutocorrelationDetector(
        threshold=config.correlation_threshold,
        rms_floor=config.rms_floor,
        max_buffer_size=config.window_size,
    )


@dataclass(frozen=True)
class TickResult:
    """Everything one tick produced for the display."""

    frequency_hz: float
    match: MatchResult
    note: ReferenceNote
    feedback: TuningFeedback
    newly_stable: int | None = None  # Index announced as stable on this tick
    stable_index: int | None = None  # Last announced stable index
    thresholds: FeedbackThresholds = field(default_factory=FeedbackThresholds)

    @property
    def cents_offset(self) -> float:
        return self.match.cents_offset

    @property
    def instruction(self) -> str:
        return tuning_instruction(self.note, self.match.cents_offset, self.thresholds)

    @property
    def meter_position(self) -> float:
        return meter_position(self.match.cents_offset)

    @property
    def needle_rotation(self) -> float:
        return needle_rotation(self.match.cents_offset)


class TunerSession:
    """
    Caller-owned tuner context.

    Starts IDLE. start() begins listening; process() may only be called while
    listening; stop() returns to IDLE. Starting, restarting and stopping all
    clear the stabilizer, the spectrum smoothing and the rolling window.
    """

    def __init__(
        self,
        config: TunerConfig | None = None,
        reference_notes=STANDARD_TUNING,
    ):
        """
        Initialize session.

        Args:
            config: Pipeline parameters (defaults to TunerConfig())
            reference_notes: Target notes, ascending by frequency
        """
        self.config = config or TunerConfig()
        self.reference_notes = validate_reference_table(reference_notes)
        self._state = TunerState.IDLE
        self._install_pipeline(self.config)

    def _install_pipeline(self, cfg: TunerConfig):
        # Build every component before touching self, so a failure leaves
        # the current pipeline in place
        detector = create_detector(cfg)
        analyser = None
        if detector.domain == FrameDomain.FREQUENCY:
            analyser = SpectrumAnalyser(cfg.window_size, cfg.spectrum_smoothing)
        gate = SignalGate(cfg.rms_floor)
        stabilizer = DetectionStabilizer(
            capacity=cfg.history_capacity,
            min_confidence=cfg.confidence_admission,
            min_votes=cfg.stable_vote_count,
        )

        self.config = cfg
        self._gate = gate
        self._detector: PitchDetector = detector
        self._analyser: SpectrumAnalyser | None = analyser
        self._stabilizer = stabilizer
        self._window = np.zeros(cfg.window_size, dtype=np.float64)

    @property
    def state(self) -> TunerState:
        return self._state

    @property
    def is_listening(self) -> bool:
        return self._state == TunerState.LISTENING

    @property
    def stabilizer(self) -> DetectionStabilizer:
        return self._stabilizer

    @property
    def detector(self) -> PitchDetector:
        return self._detector

    def start(self):
        """Begin (or restart) listening with fresh state."""
        if self.is_listening:
            logger.info("Restarting tuner")
        else:
            logger.info(
                "Starting tuner (%s detector, %.0f Hz, gain %.1f)",
                self.config.detector_type.value,
                self.config.sample_rate,
                self.config.gain,
            )
        self.reset()
        self._state = TunerState.LISTENING

    def stop(self):
        """Stop listening and clear detection state."""
        if not self.is_listening:
            return
        self.reset()
        self._state = TunerState.IDLE
        logger.info("Tuner stopped")

    def reset(self):
        """Clear the rolling window, spectrum smoothing and stabilizer."""
        self._window[:] = 0.0
        self._detector.reset()
        if self._analyser is not None:
            self._analyser.reset()
        self._stabilizer.reset()

    def set_detector_type(self, detector_type: DetectorType):
        """
        Switch the pitch estimation strategy.

        Rebuilds the pipeline with the new strategy's defaults, which also
        clears all detection state.

        Raises:
            ValueError: If the current settings are invalid for the new
                strategy; the session keeps its current detector
        """
        if detector_type == self.config.detector_type:
            return
        self._install_pipeline(replace(self.config, detector_type=detector_type))
        logger.info("Switched to %s detector", detector_type.value)

    def _push(self, samples: np.ndarray):
        # Keep only the newest window_size samples
        size = self._window.size
        if samples.size >= size:
            self._window[:] = samples[-size:]
            return
        self._window = np.roll(self._window, -samples.size)
        self._window[-samples.size :] = samples

    def process(self, samples: np.ndarray) -> TickResult | None:
        """
        Run one analysis tick.

        Args:
            samples: Newest block of mono samples from the capture device

        Returns:
            TickResult, or None when the window is silent or has no clear pitch

        Raises:
            TunerStateError: If the session is not listening
            InvalidFrameError: If samples are empty or non-finite
        """
        if not self.is_listening:
            raise TunerStateError("Tuner is not listening; call start() first")

        block = AudioFrame.from_samples(samples, self.config.sample_rate)
        self._push(block.values * self.config.gain)
        frame = AudioFrame.from_samples(self._window, self.config.sample_rate)

        level = self._gate.level(frame)
        if level <= self._gate.floor:
            logger.debug("No signal detected, RMS: %.5f", level)
            return None

        if self._analyser is not None:
            frame = self._analyser.analyse(frame)

        estimate = self._detector.estimate(frame)
        if estimate is None:
            return None

        match = match_note(estimate.frequency_hz, self.reference_notes, self.config.confidence_window)
        note = self.reference_notes[match.note_index]

        newly_stable = self._stabilizer.observe(match)
        if newly_stable is not None:
            logger.info("Detected string: %s", self.reference_notes[newly_stable].display_name)

        logger.debug(
            "%.1f Hz -> %s (%+.1f cents, confidence %.2f)",
            estimate.frequency_hz,
            note.label,
            match.cents_offset,
            match.confidence,
        )

        return TickResult(
            frequency_hz=estimate.frequency_hz,
            match=match,
            note=note,
            feedback=classify(match.cents_offset, self.config.feedback_thresholds),
            newly_stable=newly_stable,
            stable_index=self._stabilizer.stable_index,
            thresholds=self.config.feedback_thresholds,
        )
