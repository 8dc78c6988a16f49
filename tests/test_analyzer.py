import unittest

import numpy as np

from fretboard_trainer.audio.analyzer import AudioAnalyzer
from fretboard_trainer.audio.target_notes import TargetNotes
from fretboard_trainer.core.config import AudioConfig
from fretboard_trainer.core.note import Note, NoteName
from fretboard_trainer.errors import AnalysisPreconditionError

A2 = Note(2, NoteName.A, 110.0)
A3 = Note(3, NoteName.A, 220.0)
A4 = Note(4, NoteName.A, 440.0)
A5 = Note(5, NoteName.A, 880.0)


class TestTargetNotes(unittest.TestCase):
    def setUp(self):
        self.notes = [
            Note(2, NoteName.F, 87.31),
            Note(2, NoteName.E, 82.41),
            Note(2, NoteName.FSharp, 92.50),
            Note(2, NoteName.A, 110.0),
        ]
        self.targets = TargetNotes(self.notes)

    def test_empty_fails(self):
        with self.assertRaises(ValueError):
            TargetNotes([])

    def test_resolution_is_smallest_spacing(self):
        self.assertAlmostEqual(self.targets.resolution(), 4.9)

    def test_resolution_of_single_note(self):
        self.assertEqual(TargetNotes([A4]).resolution(), 0.0)

    def test_clamps_at_boundaries(self):
        self.assertEqual(self.targets.get_closest(0.0), Note(2, NoteName.E))
        self.assertEqual(self.targets.get_closest(5000.0), Note(2, NoteName.A))

    def test_exact_and_tie(self):
        self.assertEqual(self.targets.get_closest(87.31), Note(2, NoteName.F))
        # Halfway between A2 and A3 goes up
        targets = TargetNotes([A2, A3])
        self.assertEqual(targets.get_closest(165.0), A3)

    def test_closest_minimises_distance(self):
        for freq in np.linspace(50.0, 150.0, 401):
            expected = min(self.notes, key=lambda n: abs(freq - n.frequency))
            actual = self.targets.get_closest(freq)
            self.assertAlmostEqual(
                abs(freq - actual.frequency), abs(freq - expected.frequency)
            )


class TestAudioAnalyzer(unittest.TestCase):
    def setUp(self):
        self.config = AudioConfig(
            fft_res_factor=2.0,
            fft_magnitude_gain=1.0,
            peak_threshold=500.0,
            min_peak_dist=1,
            num_top_peaks=1,
            moving_avg_window_size=1,
        )
        self.analyzer = AudioAnalyzer(44100, [A3, A5, A4], self.config)

    def _sine(self, bin_idx, amplitude=0.5):
        n = self.analyzer.fftsize
        t = np.arange(n)
        return amplitude * np.sin(2 * np.pi * bin_idx * t / n)

    def test_sizes(self):
        self.assertAlmostEqual(self.analyzer.delta_f, 110.0)
        self.assertEqual(self.analyzer.fftsize, 401)
        self.assertEqual(self.analyzer.n_bins, 201)
        self.assertEqual(len(self.analyzer.spectrum), 201)

    def test_needs_two_notes(self):
        with self.assertRaises(AnalysisPreconditionError):
            AudioAnalyzer(44100, [A4], self.config)

    def test_block_longer_than_fft(self):
        with self.assertRaises(AnalysisPreconditionError):
            self.analyzer.identify_note(np.zeros(self.analyzer.fftsize + 1))

    def test_silence_has_no_note(self):
        self.assertIsNone(self.analyzer.identify_note(np.zeros(256)).note)

    def test_recognizes_sine(self):
        result = self.analyzer.identify_note(self._sine(4))
        self.assertEqual(result.note, A4)
        result = self.analyzer.identify_note(self._sine(2))
        self.assertEqual(result.note, A3)

    def test_magnitude_is_normalised(self):
        self.analyzer.identify_note(self._sine(4, amplitude=1.0))
        self.assertAlmostEqual(self.analyzer.spectrum[4], 0.5, places=6)

    def test_buffers_are_reused(self):
        bins = self.analyzer._bins
        spectrum = self.analyzer.spectrum
        self.analyzer.identify_note(self._sine(4, amplitude=1.0))
        self.assertIs(self.analyzer._bins, bins)
        self.assertIs(self.analyzer.spectrum, spectrum)
        # The FFT wrote into the preallocated buffer
        self.assertAlmostEqual(abs(bins[4]) / self.analyzer.fftsize, 0.5, places=6)

    def test_short_block_is_zero_padded(self):
        self.analyzer.identify_note(self._sine(4))
        self.analyzer.identify_note(np.zeros(10))
        self.assertTrue(np.allclose(self.analyzer.spectrum, 0.0))


if __name__ == "__main__":
    unittest.main()
