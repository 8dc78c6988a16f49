"""Spectral helpers used to turn a magnitude spectrum into a note."""

from collections import Counter
from functools import lru_cache
from typing import Hashable, Iterable, List, NamedTuple, Optional, Tuple, TypeVar

import numpy as np

from ..core.note import Note
from ..logger import get_logger
from .target_notes import TargetNotes

logger = get_logger(__name__)

H = TypeVar("H", bound=Hashable)


class Peak(NamedTuple):
    idx: int
    value: float


@lru_cache(maxsize=8)
def _window_bounds(n: int, window_size: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Prefix-sum indices and sample counts of a centered, edge-truncated window."""
    left = window_size // 2
    right = window_size - 1 - left
    positions = np.arange(n)
    lo = np.maximum(positions - left, 0)
    hi = np.minimum(positions + right, n - 1) + 1
    counts = (hi - lo).astype(float)
    for arr in (lo, hi, counts):
        arr.setflags(write=False)
    return lo, hi, counts


def moving_avg(
    signal,
    window_size: int,
    out: Optional[np.ndarray] = None,
    cumsum: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Centered moving average computed from prefix sums.

    Sample ``i`` averages ``signal[i - W//2 : i + W - 1 - W//2 + 1]``. Near
    the array edges the window is truncated and only the samples that exist
    are averaged.

    Args:
        signal: 1-D input samples
        window_size: Window length ``W``, at least 1
        out: Optional buffer of the same length to write the result into
        cumsum: Optional scratch buffer of length ``len(signal) + 1``

    Returns:
        The smoothed signal (``out`` if it was given)

    Raises:
        ValueError: If ``window_size`` is smaller than 1
    """
    if window_size < 1:
        raise ValueError(f"Moving average needs a window of at least 1, got {window_size}")

    signal = np.asarray(signal, dtype=float)
    n = len(signal)
    if out is None:
        out = np.empty(n)
    if n == 0:
        return out
    if cumsum is None:
        cumsum = np.empty(n + 1)

    cumsum[0] = 0.0
    np.cumsum(signal, out=cumsum[1:])
    lo, hi, counts = _window_bounds(n, window_size)
    np.subtract(cumsum[hi], cumsum[lo], out=out)
    np.divide(out, counts, out=out)
    return out


def find_peaks(
    signal,
    min_height: Optional[float] = None,
    min_peak_dist: Optional[int] = None,
) -> List[Peak]:
    """Find local maxima of ``signal``.

    A sample is a peak when it is strictly greater than each neighbour it
    has and at least ``min_height``. Scanning left to right, a peak closer
    than ``min_peak_dist`` samples to the last kept peak is dropped.
    """
    values = np.asarray(signal, dtype=float)
    n = len(values)
    if n == 0:
        return []
    if n == 1:
        return [Peak(0, float(values[0]))]

    min_height = 0.0 if min_height is None else min_height
    min_peak_dist = 0 if min_peak_dist is None else min_peak_dist

    above_left = np.empty(n, dtype=bool)
    above_left[0] = True
    np.greater(values[1:], values[:-1], out=above_left[1:])
    above_right = np.empty(n, dtype=bool)
    above_right[-1] = True
    np.greater(values[:-1], values[1:], out=above_right[:-1])
    candidates = np.flatnonzero(above_left & above_right & (values >= min_height))

    peaks: List[Peak] = []
    for idx in candidates:
        if peaks and idx - peaks[-1].idx < min_peak_dist:
            continue
        peaks.append(Peak(int(idx), float(values[idx])))
    return peaks


def most_common(items: Iterable[H]) -> Optional[H]:
    """Most frequent item; ties go to the item seen first."""
    counts = Counter(items).most_common(1)
    return counts[0][0] if counts else None


def find_note(
    spectrum,
    delta_f: float,
    target_notes: TargetNotes,
    peak_threshold: float = 500.0,
    min_peak_dist: int = 10,
    num_top_peaks: int = 5,
) -> Optional[Note]:
    """Pick the note a magnitude spectrum most likely contains.

    The strongest ``num_top_peaks`` peaks above ``peak_threshold`` times the
    spectrum median are matched to their closest target notes. The pitch
    class named most often wins and its lowest-frequency candidate is
    returned, so harmonics resolve to the fundamental.
    """
    median = float(np.median(spectrum)) if len(spectrum) else 0.0
    peaks = find_peaks(spectrum, peak_threshold * median, min_peak_dist)
    if not peaks:
        return None

    top_peaks = sorted(peaks, key=lambda p: p.value, reverse=True)[:num_top_peaks]
    candidates = [target_notes.get_closest(p.idx * delta_f) for p in top_peaks]
    winner = most_common(note.name for note in candidates)
    if winner is None:
        return None

    note = min(
        (c for c in candidates if c.name == winner), key=lambda c: c.frequency
    )
    logger.debug(
        f"Peaks at {[round(p.idx * delta_f, 1) for p in top_peaks]} Hz -> {note}"
    )
    return note
