"""Half-open fret and string ranges of the practised fretboard region."""

from dataclasses import dataclass
from typing import Iterator, Sequence

from ..errors import ConfigurationError


@dataclass(frozen=True)
class FretRange:
    """Frets ``begin`` (inclusive) to ``end`` (exclusive); fret 0 is the open string."""

    begin: int
    end: int

    def __post_init__(self):
        if self.begin < 0:
            raise ConfigurationError(f"Fret range must start at 0 or above: {self}")
        if self.begin >= self.end:
            raise ConfigurationError(f"Empty fret range: {self}")

    @classmethod
    def from_pair(cls, pair: Sequence[int]) -> "FretRange":
        if len(pair) != 2:
            raise ConfigurationError(f"Fret range needs [begin, end], got {pair!r}")
        return cls(int(pair[0]), int(pair[1]))

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.begin, self.end))

    def __len__(self) -> int:
        return self.end - self.begin

    def __contains__(self, fret: int) -> bool:
        return self.begin <= fret < self.end

    def __str__(self):
        return f"[{self.begin}, {self.end})"


@dataclass(frozen=True)
class StringRange:
    """Strings ``begin`` (inclusive) to ``end`` (exclusive); string 1 is the thinnest."""

    begin: int
    end: int

    def __post_init__(self):
        if self.begin < 1:
            raise ConfigurationError(f"String range must start at 1 or above: {self}")
        if self.begin >= self.end:
            raise ConfigurationError(f"Empty string range: {self}")

    @classmethod
    def from_pair(cls, pair: Sequence[int]) -> "StringRange":
        if len(pair) != 2:
            raise ConfigurationError(f"String range needs [begin, end], got {pair!r}")
        return cls(int(pair[0]), int(pair[1]))

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.begin, self.end))

    def __len__(self) -> int:
        return self.end - self.begin

    def __contains__(self, string_idx: int) -> bool:
        return self.begin <= string_idx < self.end

    def __str__(self):
        return f"[{self.begin}, {self.end})"
