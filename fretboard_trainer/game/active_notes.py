"""Notes playable inside the practised region of the fretboard."""

from typing import Dict, Iterator, List, Optional

from ..core.note import Note
from ..core.note_registry import NoteRegistry
from ..core.ranges import FretRange, StringRange
from ..core.tuning import Tuning
from ..errors import ConfigurationError
from ..logger import get_logger
from ..note_types import FretLoc

logger = get_logger(__name__)


class ActiveNotes:
    """Read-only map from fretboard location to the note sounded there.

    Locations whose note is missing from the registry (fretted past the end
    of the frequency table) are left out.
    """

    def __init__(
        self,
        registry: NoteRegistry,
        tuning: Tuning,
        string_range: StringRange,
        fret_range: FretRange,
    ):
        self.string_range = string_range
        self.fret_range = fret_range
        self._notes: Dict[FretLoc, Note] = {}

        for string_idx in string_range:
            open_note = tuning.note(string_idx)
            if open_note is None:
                raise ConfigurationError(
                    f"String {string_idx} is in the string range {string_range} "
                    f"but the tuning only has {len(tuning)} strings"
                )
            for fret_idx in fret_range:
                loc = FretLoc(string_idx, fret_idx)
                note = registry.add_semitones(open_note, fret_idx)
                if note is None:
                    logger.warning(
                        f"Note on string {string_idx} fret {fret_idx} does not "
                        "exist in frequency list. Skipping..."
                    )
                    continue
                self._notes[loc] = note

        if not self._notes:
            raise ConfigurationError(
                f"No playable notes on strings {string_range}, frets {fret_range}"
            )
        logger.info(f"{len(self._notes)} active notes")

    def get(self, loc: FretLoc) -> Optional[Note]:
        return self._notes.get(loc)

    def locations(self) -> List[FretLoc]:
        return list(self._notes)

    def items(self):
        return self._notes.items()

    def __contains__(self, loc: FretLoc) -> bool:
        return loc in self._notes

    def __iter__(self) -> Iterator[FretLoc]:
        return iter(self._notes)

    def __len__(self) -> int:
        return len(self._notes)
