"""Notes the recognizer is allowed to report."""

import bisect
from typing import Iterable, Iterator, List

from ..core.note import Note


class TargetNotes:
    """Notes sorted by frequency, with nearest-frequency lookup."""

    def __init__(self, notes: Iterable[Note]):
        self._notes: List[Note] = sorted(notes, key=lambda n: n.frequency)
        if not self._notes:
            raise ValueError("Target notes cannot be empty")
        self._freqs: List[float] = [n.frequency for n in self._notes]

    def get_closest(self, freq: float) -> Note:
        """Return the note whose frequency is nearest to ``freq``.

        Frequencies below the lowest or above the highest note clamp to that
        note. When ``freq`` is exactly halfway, the higher note wins.
        """
        idx = bisect.bisect_left(self._freqs, freq)
        if idx == 0:
            return self._notes[0]
        if idx == len(self._notes):
            return self._notes[-1]

        lower = self._notes[idx - 1]
        upper = self._notes[idx]
        if freq - lower.frequency < upper.frequency - freq:
            return lower
        return upper

    def resolution(self) -> float:
        """Smallest spacing between adjacent frequencies, 0.0 for a single note."""
        if len(self._freqs) < 2:
            return 0.0
        return min(b - a for a, b in zip(self._freqs, self._freqs[1:]))

    def notes(self) -> List[Note]:
        return list(self._notes)

    def __iter__(self) -> Iterator[Note]:
        return iter(self._notes)

    def __len__(self) -> int:
        return len(self._notes)
