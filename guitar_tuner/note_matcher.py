"""
Maps a detected frequency to the closest reference note.
"""

import math
from dataclasses import dataclass

from .constants import CENTS_PER_OCTAVE, CONFIDENCE_WINDOW_HZ
from .exceptions import InvalidFrequencyError, InvalidReferenceTableError
from .reference_notes import ReferenceNote


@dataclass(frozen=True)
class MatchResult:
    """
    Closest reference note for one frequency.

    Attributes:
        note_index: Position of the matched note in the reference table
        cents_offset: Signed error; positive is sharp, negative is flat
        confidence: 1.0 on target, falling linearly to 0.0 at the window edge
    """

    note_index: int
    cents_offset: float
    confidence: float


def cents_between(frequency: float, reference: float) -> float:
    """Interval from reference to frequency in cents."""
    return CENTS_PER_OCTAVE * math.log2(frequency / reference)


def match_confidence(frequency: float, reference: float, window_hz: float = CONFIDENCE_WINDOW_HZ) -> float:
    """Linear closeness score, 0.0 at or beyond window_hz away."""
    return max(0.0, 1.0 - abs(frequency - reference) / window_hz)


def match_note(
    frequency: float,
    table: tuple[ReferenceNote, ...] | list[ReferenceNote],
    confidence_window: float = CONFIDENCE_WINDOW_HZ,
) -> MatchResult:
    """
    Find the reference note closest to frequency in Hz.

    Every entry is compared; on equal distance the lower index wins.

    Args:
        frequency: Detected frequency in Hz
        table: Reference notes
        confidence_window: Hz distance at which confidence reaches zero

    Returns:
        MatchResult for the closest note

    Raises:
        InvalidFrequencyError: If frequency is not a positive finite number
        InvalidReferenceTableError: If the table is empty
    """
    if not math.isfinite(frequency) or frequency <= 0:
        raise InvalidFrequencyError(f"Frequency must be positive and finite, got {frequency}")
    if not table:
        raise InvalidReferenceTableError("Reference table is empty")

    best_index = 0
    best_distance = math.inf
    for index, note in enumerate(table):
        distance = abs(frequency - note.frequency_hz)
        if distance < best_distance:
            best_distance = distance
            best_index = index

    reference = table[best_index].frequency_hz
    return MatchResult(
        note_index=best_index,
        cents_offset=cents_between(frequency, reference),
        confidence=match_confidence(frequency, reference, confidence_window),
    )
