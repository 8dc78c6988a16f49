"""Open-string notes of an instrument."""

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from ..errors import InvalidTuningError
from ..logger import get_logger
from .note import Note, NoteName
from .note_registry import NoteRegistry

logger = get_logger(__name__)


@dataclass(frozen=True)
class StringSpec:
    """One row of a tuning table, before it is checked against a registry."""

    string_idx: int
    octave: int
    name: NoteName


class TuningSpecification:
    """Unvalidated list of string specs, as read from a tuning table."""

    def __init__(self, strings: Iterable[StringSpec]):
        self.strings: List[StringSpec] = list(strings)

    def __iter__(self) -> Iterator[StringSpec]:
        return iter(self.strings)

    def __len__(self) -> int:
        return len(self.strings)


class Tuning:
    """Mapping from string index (1 = thinnest string) to the open-string note."""

    def __init__(self, specification: TuningSpecification, registry: NoteRegistry):
        strings: Dict[int, Note] = {}
        for spec in specification:
            if spec.string_idx < 1:
                raise InvalidTuningError(
                    f"String index must be at least 1, got {spec.string_idx}"
                )
            if spec.string_idx in strings:
                raise InvalidTuningError(f"String {spec.string_idx} is tuned twice")

            note = registry.get(spec.name, spec.octave)
            if note is None:
                raise InvalidTuningError(
                    f"String {spec.string_idx} uses {spec.name}{spec.octave}, "
                    "which is not in the note registry"
                )
            strings[spec.string_idx] = note

        indices = sorted(strings)
        if indices != list(range(1, len(indices) + 1)):
            raise InvalidTuningError(
                f"String numbering must be contiguous from 1, got {indices}"
            )

        self._strings: Tuple[Tuple[int, Note], ...] = tuple(
            (idx, strings[idx]) for idx in indices
        )
        self._by_string = strings
        logger.debug(
            "Tuning: "
            + ", ".join(f"{idx}={note.name_octave()}" for idx, note in self._strings)
        )

    @classmethod
    def from_csv(cls, path, registry: NoteRegistry) -> "Tuning":
        """Load a tuning table (string,octave,name) and validate it."""
        from .tables import read_tuning_table

        return cls(read_tuning_table(path), registry)

    def note(self, string_idx: int) -> Optional[Note]:
        return self._by_string.get(string_idx)

    def items(self) -> List[Tuple[int, Note]]:
        return list(self._strings)

    def __iter__(self) -> Iterator[Tuple[int, Note]]:
        return iter(self._strings)

    def __len__(self) -> int:
        return len(self._strings)
