"""
Reference note tables.

A table is an ordered, strictly ascending sequence of notes; a note's identity
is its position in the table. STANDARD_TUNING holds the six open strings of a
guitar in standard tuning. Alternate tables can be loaded from CSV/TSV files:

    # label, frequency, string number
    E2    82.41    6
    A2,110.00,5
"""

import csv
import io
import math
import re
from dataclasses import dataclass
from pathlib import Path

from .exceptions import InvalidReferenceTableError


@dataclass(frozen=True)
class ReferenceNote:
    """
    A target pitch.

    Attributes:
        label: Note label with octave (e.g., "E2")
        frequency_hz: Target frequency in Hz
        string_number: Guitar string number (6 = low E), if the note is a string
    """

    label: str
    frequency_hz: float
    string_number: int | None = None

    @property
    def note_name(self) -> str:
        """Label without its octave number (e.g., "E" for "E2")."""
        match = _LABEL_PATTERN.match(self.label)
        return match.group(1) if match else self.label

    @property
    def display_name(self) -> str:
        """String name such as "E6" when a string number is known, else the label."""
        if self.string_number is not None:
            return f"{self.note_name}{self.string_number}"
        return self.label


STANDARD_TUNING: tuple[ReferenceNote, ...] = (
    ReferenceNote("E2", 82.41, 6),
    ReferenceNote("A2", 110.00, 5),
    ReferenceNote("D3", 146.83, 4),
    ReferenceNote("G3", 196.00, 3),
    ReferenceNote("B3", 246.94, 2),
    ReferenceNote("E4", 329.63, 1),
)

_LABEL_PATTERN = re.compile(r"^([A-Ga-g][#b]?)(-?\d+)?$")


def validate_reference_table(notes) -> tuple[ReferenceNote, ...]:
    """
    Check a reference table and freeze it.

    Args:
        notes: Iterable of ReferenceNote

    Returns:
        The notes as an immutable tuple

    Raises:
        InvalidReferenceTableError: If the table is empty, holds a non-positive
            or non-finite frequency, or is not strictly ascending
    """
    table = tuple(notes)
    if not table:
        raise InvalidReferenceTableError("Reference table is empty")

    previous = None
    for index, note in enumerate(table):
        if not isinstance(note, ReferenceNote):
            raise InvalidReferenceTableError(
                f"Entry {index} is {type(note).__name__}, expected ReferenceNote"
            )
        if not math.isfinite(note.frequency_hz) or note.frequency_hz <= 0:
            raise InvalidReferenceTableError(
                f"Entry {index} ({note.label}) has invalid frequency {note.frequency_hz}"
            )
        if previous is not None and note.frequency_hz <= previous.frequency_hz:
            raise InvalidReferenceTableError(
                f"Entry {index} ({note.label}, {note.frequency_hz} Hz) is not above "
                f"{previous.label} ({previous.frequency_hz} Hz)"
            )
        previous = note

    return table


def load_reference_table(path: str | Path) -> tuple[ReferenceNote, ...]:
    """
    Load a reference table from a CSV, TSV or whitespace-separated file.

    Each row is ``label, frequency[, string_number]``. Blank lines and lines
    starting with # are skipped, as are rows that cannot be parsed.

    Args:
        path: Path to the table file

    Returns:
        Validated reference table

    Raises:
        FileNotFoundError: If the file doesn't exist
        InvalidReferenceTableError: If no valid rows are found or the rows are
            not strictly ascending
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Reference table not found: {path}")

    content = file_path.read_text(encoding="utf-8")
    delimiter = "\t" if "\t" in content else ","

    notes = []
    for row in csv.reader(io.StringIO(content), delimiter=delimiter):
        if not row:
            continue
        first_cell = row[0].strip()
        if not first_cell or first_cell.startswith("#"):
            continue

        if len(row) < 2:
            row = first_cell.split()
            if len(row) < 2:
                continue

        note = _parse_row([cell.strip() for cell in row])
        if note is not None:
            notes.append(note)

    if not notes:
        raise InvalidReferenceTableError(f"No valid entries found in reference table: {path}")

    return validate_reference_table(notes)


def _parse_row(cells: list[str]) -> ReferenceNote | None:
    label = cells[0]
    if not _LABEL_PATTERN.match(label):
        return None

    try:
        frequency = float(cells[1])
    except ValueError:
        return None

    string_number = None
    if len(cells) > 2 and cells[2]:
        try:
            string_number = int(cells[2])
        except ValueError:
            return None

    return ReferenceNote(label, frequency, string_number)
