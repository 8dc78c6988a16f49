"""Catalogue of every note the application knows about."""

from typing import Dict, Iterable, List, Optional, Tuple

from ..errors import DuplicateNoteError
from ..logger import get_logger
from .note import Note, NoteName

logger = get_logger(__name__)


class NoteRegistry:
    """Immutable collection of notes sorted by ascending frequency.

    Notes are looked up by identity ``(octave, name)``, so transposed notes
    (whose frequency is NaN) resolve to the registered note and its real
    frequency.
    """

    def __init__(self, notes: Iterable[Note]):
        by_identity: Dict[Tuple[int, NoteName], Note] = {}
        for note in notes:
            key = (note.octave, note.name)
            if key in by_identity:
                raise DuplicateNoteError(
                    f"Duplicate note {note.name_octave()} in note table"
                )
            by_identity[key] = note

        self._notes: Tuple[Note, ...] = tuple(
            sorted(by_identity.values(), key=lambda n: n.frequency)
        )
        self._by_identity = by_identity
        logger.debug(f"Built note registry with {len(self._notes)} notes")

    @classmethod
    def from_notes(cls, notes: Iterable[Note]) -> "NoteRegistry":
        return cls(notes)

    @classmethod
    def from_csv(cls, path) -> "NoteRegistry":
        """Load a registry from a note table (octave,name,frequency)."""
        from .tables import read_note_table

        return cls(read_note_table(path))

    def notes(self) -> List[Note]:
        return list(self._notes)

    def get(self, name: NoteName, octave: int) -> Optional[Note]:
        return self._by_identity.get((octave, name))

    def add_semitones(self, note: Note, semitones: int) -> Optional[Note]:
        """Return the registered note ``semitones`` away from ``note``, if any."""
        moved = note.add_semitone(semitones)
        return self.get(moved.name, moved.octave)

    def __contains__(self, note: Note) -> bool:
        return (note.octave, note.name) in self._by_identity

    def __iter__(self):
        return iter(self._notes)

    def __len__(self) -> int:
        return len(self._notes)
