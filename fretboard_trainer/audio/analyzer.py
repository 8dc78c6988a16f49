"""Per-block note recognition from a zero-padded FFT."""

import math
from typing import Sequence

import numpy as np

from ..core.config import AudioConfig
from ..core.note import Note
from ..errors import AnalysisPreconditionError, ConfigurationError
from ..logger import get_logger
from ..note_types import AnalysisResult
from .algorithm import find_note, moving_avg
from .target_notes import TargetNotes

logger = get_logger(__name__)


class AudioAnalyzer:
    """Recognizes which target note an audio block contains.

    The FFT length is chosen so that one bin is a fraction
    (``1 / fft_res_factor``) of the smallest spacing between target notes.
    Working buffers, including the FFT output, are allocated once here and
    reused on every block.

    Args:
        sample_rate: Sample rate of the analysed blocks in Hz
        target_notes: Notes that may be reported, at least two
        config: Analysis parameters
    """

    def __init__(
        self, sample_rate: int, target_notes: Sequence[Note], config: AudioConfig
    ):
        if len(target_notes) < 2:
            raise AnalysisPreconditionError(
                f"Need at least two target notes for analysis, got {len(target_notes)}"
            )
        if config.fft_res_factor <= 0:
            raise ConfigurationError("fft_res_factor must be positive")
        if config.moving_avg_window_size < 1:
            raise ConfigurationError("moving_avg_window_size must be at least 1")

        self.config = config
        self.sample_rate = sample_rate
        self.target_notes = TargetNotes(target_notes)

        resolution = self.target_notes.resolution()
        if resolution <= 0:
            raise AnalysisPreconditionError(
                "Target notes must have distinct frequencies"
            )
        self.delta_f = resolution / config.fft_res_factor
        self.fftsize = int(math.ceil(sample_rate / self.delta_f))
        self.n_bins = self.fftsize // 2 + 1

        self._fft_input = np.zeros(self.fftsize)
        self._bins = np.zeros(self.n_bins, dtype=complex)
        self._magnitudes = np.zeros(self.n_bins)
        self._cumsum = np.zeros(self.n_bins + 1)
        self.spectrum = np.zeros(self.n_bins)
        self._norm_factor = config.fft_magnitude_gain / self.fftsize

        logger.info(
            f"Analyzer: {len(self.target_notes)} target notes, "
            f"delta_f={self.delta_f:.3f} Hz, fftsize={self.fftsize}, n_bins={self.n_bins}"
        )

    def _compute_magnitudes(self, block) -> None:
        n = len(block)
        if n > self.fftsize:
            raise AnalysisPreconditionError(
                f"Audio block of {n} samples exceeds FFT size {self.fftsize}"
            )
        self._fft_input[:n] = block
        self._fft_input[n:] = 0.0

        np.fft.rfft(self._fft_input, out=self._bins)
        np.abs(self._bins, out=self._magnitudes)
        self._magnitudes *= self._norm_factor

    def identify_note(self, block) -> AnalysisResult:
        """Analyse one block of mono samples.

        Raises:
            AnalysisPreconditionError: If the block is longer than ``fftsize``
        """
        self._compute_magnitudes(block)
        moving_avg(
            self._magnitudes,
            self.config.moving_avg_window_size,
            out=self.spectrum,
            cumsum=self._cumsum,
        )
        note = find_note(
            self.spectrum,
            self.delta_f,
            self.target_notes,
            peak_threshold=self.config.peak_threshold,
            min_peak_dist=self.config.min_peak_dist,
            num_top_peaks=self.config.num_top_peaks,
        )
        return AnalysisResult(note)

    def frequencies(self) -> np.ndarray:
        """Centre frequency of each spectrum bin."""
        return np.arange(self.n_bins) * self.delta_f
