"""Tests for reference note tables and the table loader."""

import math

import pytest

from guitar_tuner.exceptions import InvalidReferenceTableError
from guitar_tuner.reference_notes import (
    STANDARD_TUNING,
    ReferenceNote,
    load_reference_table,
    validate_reference_table,
)


class TestStandardTuning:
    def test_six_ascending_strings(self):
        assert len(STANDARD_TUNING) == 6
        frequencies = [note.frequency_hz for note in STANDARD_TUNING]
        assert frequencies == sorted(frequencies)
        assert validate_reference_table(STANDARD_TUNING) == STANDARD_TUNING

    def test_labels_and_strings(self):
        assert [note.label for note in STANDARD_TUNING] == ["E2", "A2", "D3", "G3", "B3", "E4"]
        assert [note.string_number for note in STANDARD_TUNING] == [6, 5, 4, 3, 2, 1]

    def test_display_names(self):
        assert STANDARD_TUNING[0].display_name == "E6"
        assert STANDARD_TUNING[5].display_name == "E1"
        assert ReferenceNote("F#3", 185.0).display_name == "F#3"
        assert ReferenceNote("F#3", 185.0).note_name == "F#"


class TestValidateReferenceTable:
    def test_empty(self):
        with pytest.raises(InvalidReferenceTableError):
            validate_reference_table([])

    def test_not_ascending(self):
        notes = [ReferenceNote("A2", 110.0), ReferenceNote("E2", 82.41)]
        with pytest.raises(InvalidReferenceTableError):
            validate_reference_table(notes)

    def test_duplicate_frequency(self):
        notes = [ReferenceNote("A2", 110.0), ReferenceNote("A2", 110.0)]
        with pytest.raises(InvalidReferenceTableError):
            validate_reference_table(notes)

    @pytest.mark.parametrize("frequency", [0.0, -82.41, math.nan, math.inf])
    def test_bad_frequency(self, frequency):
        with pytest.raises(InvalidReferenceTableError):
            validate_reference_table([ReferenceNote("E2", frequency)])

    def test_wrong_entry_type(self):
        with pytest.raises(InvalidReferenceTableError):
            validate_reference_table([("E2", 82.41)])

    def test_returns_tuple(self):
        table = validate_reference_table([ReferenceNote("D2", 73.42)])
        assert isinstance(table, tuple)


class TestLoadReferenceTable:
    def test_load_csv(self, tmp_path):
        path = tmp_path / "drop_d.csv"
        path.write_text(
            "# label, frequency, string\n"
            "D2,73.42,6\n"
            "A2,110.00,5\n"
            "\n"
            "D3,146.83,4\n"
        )
        table = load_reference_table(path)

        assert [note.label for note in table] == ["D2", "A2", "D3"]
        assert table[0].frequency_hz == pytest.approx(73.42)
        assert table[0].display_name == "D6"

    def test_load_tsv(self, tmp_path):
        path = tmp_path / "table.tsv"
        path.write_text("E2\t82.41\t6\nA2\t110.0\t5\n")
        table = load_reference_table(path)
        assert [note.string_number for note in table] == [6, 5]

    def test_load_whitespace_separated(self, tmp_path):
        path = tmp_path / "table.txt"
        path.write_text("E2  82.41  6\nA2  110.0\n")
        table = load_reference_table(path)

        assert len(table) == 2
        assert table[1].string_number is None

    def test_malformed_rows_skipped(self, tmp_path):
        path = tmp_path / "table.csv"
        path.write_text("label,frequency\nE2,82.41\nA2,abc\nD3,146.83\n")
        table = load_reference_table(path)
        assert [note.label for note in table] == ["E2", "D3"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_reference_table(tmp_path / "missing.csv")

    def test_no_valid_rows(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("# nothing here\n\n")
        with pytest.raises(InvalidReferenceTableError):
            load_reference_table(path)

    def test_unsorted_file_rejected(self, tmp_path):
        path = tmp_path / "unsorted.csv"
        path.write_text("A2,110.0\nE2,82.41\n")
        with pytest.raises(InvalidReferenceTableError):
            load_reference_table(path)
