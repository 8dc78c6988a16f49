"""Readers for the note and tuning CSV tables."""

import csv
from pathlib import Path
from typing import Callable, Dict, List, Sequence, TypeVar

from ..errors import ConfigurationError
from ..logger import get_logger
from .note import Note, NoteName
from .tuning import StringSpec, TuningSpecification

logger = get_logger(__name__)

DATA_DIR = Path(__file__).resolve().parent.parent / "data"
DEFAULT_FREQUENCIES_PATH = DATA_DIR / "frequencies.csv"
DEFAULT_TUNING_PATH = DATA_DIR / "tuning.csv"

NOTE_COLUMNS = ("octave", "name", "frequency")
TUNING_COLUMNS = ("string", "octave", "name")

T = TypeVar("T")


def _read_rows(
    path, columns: Sequence[str], parse_row: Callable[[Dict[str, str]], T]
) -> List[T]:
    path = Path(path)
    try:
        with open(path, newline="", encoding="utf-8") as f:
            reader = csv.DictReader(f, skipinitialspace=True)
            header = [c.strip() for c in reader.fieldnames or []]
            missing = [c for c in columns if c not in header]
            if missing:
                raise ConfigurationError(
                    f"{path}: missing column(s) {', '.join(missing)}"
                )
            reader.fieldnames = header

            rows = []
            for row in reader:
                try:
                    rows.append(parse_row(row))
                except (TypeError, ValueError) as e:
                    raise ConfigurationError(
                        f"{path}, line {reader.line_num}: {e}"
                    ) from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e

    logger.info(f"Read {len(rows)} rows from {path}")
    return rows


def _field(row: Dict[str, str], column: str) -> str:
    value = row.get(column)
    if value is None:
        raise ValueError(f"missing value for {column!r}")
    return value.strip()


def _parse_note(row: Dict[str, str]) -> Note:
    return Note(
        octave=int(_field(row, "octave")),
        name=NoteName.parse(_field(row, "name")),
        frequency=float(_field(row, "frequency")),
    )


def _parse_string(row: Dict[str, str]) -> StringSpec:
    return StringSpec(
        string_idx=int(_field(row, "string")),
        octave=int(_field(row, "octave")),
        name=NoteName.parse(_field(row, "name")),
    )


def read_note_table(path=DEFAULT_FREQUENCIES_PATH) -> List[Note]:
    """Read a note table with columns octave, name, frequency.

    Raises:
        ConfigurationError: If the file is unreadable, a column is missing
            or a value cannot be parsed
    """
    return _read_rows(path, NOTE_COLUMNS, _parse_note)


def read_tuning_table(path=DEFAULT_TUNING_PATH) -> TuningSpecification:
    """Read a tuning table with columns string, octave, name."""
    return TuningSpecification(_read_rows(path, TUNING_COLUMNS, _parse_string))
