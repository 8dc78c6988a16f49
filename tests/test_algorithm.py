import unittest

import numpy as np

from fretboard_trainer.audio.algorithm import (
    Peak,
    find_note,
    find_peaks,
    most_common,
    moving_avg,
)
from fretboard_trainer.audio.target_notes import TargetNotes
from fretboard_trainer.core.note import Note, NoteName


class TestMovingAvg(unittest.TestCase):
    def test_empty(self):
        self.assertEqual(len(moving_avg([], 1)), 0)
        self.assertEqual(len(moving_avg([], 4)), 0)

    def test_window_one_is_identity(self):
        signal = [0.5, 3.0, -1.25, 8.0, 2.0]
        np.testing.assert_allclose(moving_avg(signal, 1), signal)

    def test_window_two(self):
        np.testing.assert_allclose(moving_avg([1.0, 2.0, 3.0, 4.0], 2), [1.0, 1.5, 2.5, 3.5])

    def test_window_truncates_at_both_edges(self):
        np.testing.assert_allclose(
            moving_avg([1.0, 2.0, 3.0, 4.0, 5.0], 3), [1.5, 2.0, 3.0, 4.0, 4.5]
        )

    def test_window_larger_than_signal(self):
        np.testing.assert_allclose(moving_avg([2.0, 4.0], 7), [3.0, 3.0])

    def test_zero_window(self):
        with self.assertRaises(ValueError):
            moving_avg([1.0, 2.0], 0)

    def test_writes_into_buffers(self):
        out = np.zeros(4)
        cumsum = np.zeros(5)
        result = moving_avg(np.array([1.0, 2.0, 3.0, 4.0]), 2, out=out, cumsum=cumsum)
        self.assertIs(result, out)
        np.testing.assert_allclose(out, [1.0, 1.5, 2.5, 3.5])


class TestFindPeaks(unittest.TestCase):
    def test_empty(self):
        self.assertEqual(find_peaks([]), [])

    def test_single_element(self):
        self.assertEqual(find_peaks([1.0]), [Peak(0, 1.0)])

    def test_decreasing(self):
        self.assertEqual(find_peaks([1.0, 0.5, 0.25]), [Peak(0, 1.0)])

    def test_parabola(self):
        self.assertEqual(
            find_peaks([1.0, 0.5, 0.25, 0.5, 1.0]), [Peak(0, 1.0), Peak(4, 1.0)]
        )

    def test_two_peaks(self):
        peaks = find_peaks([0.5, 1.0, 2.0, 1.0, 0.0, 5.0, 2.5])
        self.assertEqual([p.idx for p in peaks], [2, 5])
        self.assertEqual([p.value for p in peaks], [2.0, 5.0])

    def test_plateau_is_not_a_peak(self):
        self.assertEqual(find_peaks([0.0, 1.0, 1.0, 0.0]), [])

    def test_min_height(self):
        peaks = find_peaks([0.5, 1.0, 2.0, 1.0, 0.0, 5.0, 2.5], min_height=3.0)
        self.assertEqual(peaks, [Peak(5, 5.0)])

    def test_min_distance_is_greedy_left_to_right(self):
        signal = [0.0, 1.0, 0.0, 9.0, 0.0, 2.0, 0.0]
        self.assertEqual(find_peaks(signal, min_peak_dist=3), [Peak(1, 1.0), Peak(5, 2.0)])
        self.assertEqual(find_peaks(signal, min_peak_dist=2), [Peak(1, 1.0), Peak(3, 9.0), Peak(5, 2.0)])


class TestMostCommon(unittest.TestCase):
    def test_majority(self):
        self.assertEqual(most_common("abcbb"), "b")

    def test_tie_goes_to_first_seen(self):
        self.assertEqual(most_common(["x", "y", "y", "x"]), "x")

    def test_empty(self):
        self.assertIsNone(most_common([]))


class TestFindNote(unittest.TestCase):
    def setUp(self):
        self.a2 = Note(2, NoteName.A, 110.0)
        self.e3 = Note(3, NoteName.E, 164.81)
        self.a3 = Note(3, NoteName.A, 220.0)
        self.a4 = Note(4, NoteName.A, 440.0)
        self.targets = TargetNotes([self.a4, self.a2, self.e3, self.a3])

    def _spectrum(self, peaks):
        spectrum = np.full(600, 0.001)
        for idx, value in peaks.items():
            spectrum[idx] = value
        return spectrum

    def test_harmonics_resolve_to_fundamental(self):
        spectrum = self._spectrum({110: 1.0, 165: 0.8, 220: 2.0, 440: 1.5})
        note = find_note(spectrum, 1.0, self.targets, 500.0, 10, 5)
        self.assertEqual(note, self.a2)
        self.assertEqual(note.frequency, 110.0)

    def test_only_top_peaks_vote(self):
        spectrum = self._spectrum({110: 0.6, 165: 3.0, 220: 0.7, 440: 0.9})
        self.assertEqual(find_note(spectrum, 1.0, self.targets, 500.0, 10, 1), self.e3)

    def test_nothing_above_threshold(self):
        spectrum = self._spectrum({220: 0.4})
        self.assertIsNone(find_note(spectrum, 1.0, self.targets, 500.0, 10, 5))

    def test_delta_f_scales_bins(self):
        spectrum = self._spectrum({88: 1.0})
        self.assertEqual(find_note(spectrum, 2.5, self.targets, 500.0, 10, 5), self.a3)


if __name__ == "__main__":
    unittest.main()
