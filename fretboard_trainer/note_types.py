"""Type definitions for the Fretboard Trainer project."""

from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from .core.note import Note


@dataclass(frozen=True)
class FretLoc:
    """Represents a position on the guitar fretboard."""

    string_idx: int  # String number (1-X, where 1 is the thinnest string)
    fret_idx: int  # Fret number (0 for open string)

    def __str__(self):
        return f"S{self.string_idx}F{self.fret_idx}"


@dataclass(frozen=True)
class GameState:
    """Snapshot of the practice loop sent to every observer."""

    target_note: Note
    target_loc: FretLoc
    needed_detection_count: int
    curr_detection_count: int = 0

    def is_complete(self) -> bool:
        return self.curr_detection_count >= self.needed_detection_count


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of analysing one audio block."""

    note: Optional[Note] = None


@dataclass
class FrameData:
    """Recognized note and smoothed spectrum of one audio block."""

    note: Optional[Note]
    spectrum: np.ndarray = field(repr=False)
    delta_f: float = 1.0
