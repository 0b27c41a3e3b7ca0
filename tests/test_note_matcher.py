"""Tests for nearest-note matching."""

import math

import pytest

from guitar_tuner.exceptions import InvalidFrequencyError, InvalidReferenceTableError
from guitar_tuner.note_matcher import cents_between, match_confidence, match_note
from guitar_tuner.reference_notes import STANDARD_TUNING, ReferenceNote


class TestMatchNote:
    """Matching against the standard tuning table."""

    @pytest.mark.parametrize("index", range(6))
    def test_exact_reference(self, index):
        note = STANDARD_TUNING[index]
        result = match_note(note.frequency_hz, STANDARD_TUNING)

        assert result.note_index == index
        assert result.cents_offset == pytest.approx(0.0, abs=1e-9)
        assert result.confidence == pytest.approx(1.0)

    def test_nearest_by_hz(self):
        assert match_note(90.0, STANDARD_TUNING).note_index == 0
        assert match_note(100.0, STANDARD_TUNING).note_index == 1
        assert match_note(300.0, STANDARD_TUNING).note_index == 5

    def test_out_of_range_frequency_still_matches(self):
        """Very low and high pitches clamp to the outer strings with zero confidence."""
        low = match_note(20.0, STANDARD_TUNING)
        high = match_note(1000.0, STANDARD_TUNING)

        assert low.note_index == 0
        assert high.note_index == 5
        assert low.confidence == 0.0
        assert high.confidence == 0.0

    def test_midpoint_tie_goes_to_lower_index(self):
        table = (ReferenceNote("A", 100.0), ReferenceNote("B", 200.0))
        assert match_note(150.0, table).note_index == 0

    def test_sharp_and_flat_sign(self):
        assert match_note(112.0, STANDARD_TUNING).cents_offset > 0
        assert match_note(108.0, STANDARD_TUNING).cents_offset < 0

    def test_cents_monotonic_within_note(self):
        offsets = [match_note(f, STANDARD_TUNING).cents_offset for f in (105.0, 108.0, 110.0, 112.0, 115.0)]
        assert offsets == sorted(offsets)
        assert offsets[2] == pytest.approx(0.0)

    @pytest.mark.parametrize("cents", [-20.0, -5.0, 3.0, 17.0])
    def test_cents_recover_offset(self, cents):
        frequency = 110.0 * 2 ** (cents / 1200)
        assert match_note(frequency, STANDARD_TUNING).cents_offset == pytest.approx(cents)

    def test_confidence_linear(self):
        """15 Hz off with a 30 Hz window is half confidence."""
        result = match_note(125.0, STANDARD_TUNING)
        assert result.note_index == 1
        assert result.confidence == pytest.approx(0.5)

    def test_confidence_window(self):
        result = match_note(125.0, STANDARD_TUNING, confidence_window=60.0)
        assert result.confidence == pytest.approx(0.75)

    @pytest.mark.parametrize("frequency", [0.0, -110.0, math.nan, math.inf])
    def test_invalid_frequency(self, frequency):
        with pytest.raises(InvalidFrequencyError):
            match_note(frequency, STANDARD_TUNING)

    def test_empty_table(self):
        with pytest.raises(InvalidReferenceTableError):
            match_note(110.0, ())


class TestHelpers:
    def test_octave_is_1200_cents(self):
        assert cents_between(220.0, 110.0) == pytest.approx(1200.0)
        assert cents_between(55.0, 110.0) == pytest.approx(-1200.0)

    def test_confidence_clamped(self):
        assert match_confidence(110.0, 110.0) == 1.0
        assert match_confidence(140.0, 110.0) == 0.0
        assert match_confidence(200.0, 110.0) == 0.0
