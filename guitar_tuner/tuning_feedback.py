"""
Tuning guidance derived from a cents offset.

classify() buckets the error into bands; the helpers below turn it into the
text, meter position and indicator state a tuner display shows.
"""

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple

from .constants import (
    CLOSE_INDICATOR_CENTS,
    IN_TUNE_CENTS,
    METER_SPAN_CENTS,
    NEEDLE_LIMIT_DEGREES,
    OFF_CENTS,
    SLIGHT_CENTS,
)
from .reference_notes import ReferenceNote


class FeedbackBand(Enum):
    """How far from the target the string is."""

    IN_TUNE = "in_tune"
    SLIGHT = "slight"
    OFF = "off"
    FAR = "far"


class Direction(Enum):
    SHARP = "sharp"
    FLAT = "flat"


class IndicatorLevel(Enum):
    """Per-string indicator state."""

    IN_TUNE = "in_tune"
    CLOSE = "close"
    NONE = "none"


class TuningFeedback(NamedTuple):
    band: FeedbackBand
    direction: Direction | None  # None when in tune


@dataclass(frozen=True)
class FeedbackThresholds:
    """
    Band edges in cents. A band includes its lower edge.

    in_tune: |c| below this is IN_TUNE
    slight: |c| below this is SLIGHT
    off: |c| below this is OFF, anything else is FAR
    """

    in_tune: float = IN_TUNE_CENTS
    slight: float = SLIGHT_CENTS
    off: float = OFF_CENTS

    def __post_init__(self):
        if not 0 < self.in_tune <= self.slight <= self.off:
            raise ValueError(
                f"Band edges must satisfy 0 < in_tune <= slight <= off, got "
                f"{self.in_tune}, {self.slight}, {self.off}"
            )


DEFAULT_THRESHOLDS = FeedbackThresholds()


def classify(cents_offset: float, thresholds: FeedbackThresholds = DEFAULT_THRESHOLDS) -> TuningFeedback:
    """
    Bucket a cents offset into a guidance band.

    Args:
        cents_offset: Signed tuning error; positive is sharp
        thresholds: Band edges

    Returns:
        TuningFeedback with band and direction (no direction when in tune)
    """
    magnitude = abs(cents_offset)
    if magnitude < thresholds.in_tune:
        return TuningFeedback(FeedbackBand.IN_TUNE, None)

    direction = Direction.SHARP if cents_offset > 0 else Direction.FLAT
    if magnitude < thresholds.slight:
        band = FeedbackBand.SLIGHT
    elif magnitude < thresholds.off:
        band = FeedbackBand.OFF
    else:
        band = FeedbackBand.FAR
    return TuningFeedback(band, direction)


def tuning_instruction(
    note: ReferenceNote,
    cents_offset: float,
    thresholds: FeedbackThresholds = DEFAULT_THRESHOLDS,
) -> str:
    """Human-readable instruction for the player."""
    feedback = classify(cents_offset, thresholds)
    name = note.display_name
    magnitude = abs(cents_offset)

    if feedback.band == FeedbackBand.IN_TUNE:
        return f"{name} string is in tune"

    way = "down" if feedback.direction == Direction.SHARP else "up"
    state = feedback.direction.value

    if feedback.band == FeedbackBand.SLIGHT:
        return f"Tune {name} {way} slightly ({magnitude:.1f} cents {state})"
    if feedback.band == FeedbackBand.OFF:
        return f"Tune {name} {way} ({magnitude:.0f} cents {state})"
    return f"Tune {name} {way} significantly (very {state})"


def meter_position(cents_offset: float, span: float = METER_SPAN_CENTS) -> float:
    """
    Needle position as a percentage of the meter width.

    0 is span cents flat, 50 is centred, 100 is span cents sharp; offsets
    beyond the span are pinned to the ends.
    """
    clamped = max(-span, min(span, cents_offset))
    return (clamped + span) / (2 * span) * 100.0


def needle_rotation(cents_offset: float, limit: float = NEEDLE_LIMIT_DEGREES) -> float:
    """Needle angle in degrees, two degrees per cent, pinned to +/-limit."""
    return max(-limit, min(limit, cents_offset * 2.0))


def indicator_level(
    cents_offset: float,
    in_tune: float = IN_TUNE_CENTS,
    close: float = CLOSE_INDICATOR_CENTS,
) -> IndicatorLevel:
    magnitude = abs(cents_offset)
    if magnitude < in_tune:
        return IndicatorLevel.IN_TUNE
    if magnitude < close:
        return IndicatorLevel.CLOSE
    return IndicatorLevel.NONE
