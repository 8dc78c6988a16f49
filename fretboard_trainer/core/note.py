"""Pitch classes and notes."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict


class NoteName(Enum):
    """The twelve pitch classes, valued by their position in the octave (C=0)."""

    C = 0
    CSharp = 1
    D = 2
    DSharp = 3
    E = 4
    F = 5
    FSharp = 6
    G = 7
    GSharp = 8
    A = 9
    ASharp = 10
    B = 11

    def __str__(self) -> str:
        return self.name.replace("Sharp", "#")

    @classmethod
    def from_position(cls, position: int) -> "NoteName":
        """Return the pitch class at ``position`` mod 12."""
        return cls(position % 12)

    @classmethod
    def parse(cls, text: str) -> "NoteName":
        """Parse a pitch class such as 'C#', 'C♯', 'CSharp' or 'Db'.

        Single-accidental enharmonics are accepted in both directions ('Cb' is
        B, 'B#' is C). Only the pitch class is parsed, so the octave of such a
        spelling is left to the caller.

        Raises:
            ValueError: If the text does not name a pitch class
        """
        value = str(text).strip()
        if value in cls.__members__:
            return cls.__members__[value]

        value = value.replace("♯", "#").replace("♭", "b")
        if len(value) == 2 and value[1] in "b#":
            value = _ENHARMONICS.get(value[:1].upper() + value[1], value)
        value = value[:1].upper() + value[1:]

        member_name = value.replace("#", "Sharp")
        if member_name in cls.__members__:
            return cls.__members__[member_name]
        raise ValueError(f"Unknown note name: {text!r}")


_ENHARMONICS: Dict[str, str] = {
    "B#": "C",
    "E#": "F",
    "Cb": "B",
    "Db": "C#",
    "Eb": "D#",
    "Fb": "E",
    "Gb": "F#",
    "Ab": "G#",
    "Bb": "A#",
}


@dataclass(frozen=True)
class Note:
    """A pitch class and octave pair with its reference frequency.

    Equality and hashing only look at ``(octave, name)``; the frequency is
    descriptive metadata. Registry lookups and majority voting depend on this.
    """

    octave: int
    name: NoteName
    frequency: float = field(default=math.nan, compare=False)

    def __str__(self) -> str:
        return self.name_octave()

    def name_octave(self) -> str:
        return f"{self.name}{self.octave}"

    def add_semitone(self, semitones: int) -> "Note":
        """Transpose by ``semitones``, carrying into the octave.

        The frequency of the result is NaN: transposition is name/octave
        algebra, use ``NoteRegistry.add_semitones`` to get a real frequency.
        """
        position = self.name.value + semitones
        octave_offset, new_position = divmod(position, 12)
        return Note(
            octave=self.octave + octave_offset,
            name=NoteName.from_position(new_position),
        )
