import unittest

import numpy as np

from fretboard_trainer.core.channels import Channel
from fretboard_trainer.core.config import GuiConfig
from fretboard_trainer.ui.gui import SpectrumRenderer, spectrum_points


class TestSpectrumPoints(unittest.TestCase):
    def test_maps_frequency_and_magnitude_to_plot(self):
        spectrum = np.array([0.0, 0.5, 1.0, 2.0, 0.25, 0.75])
        points = spectrum_points(spectrum, 10.0, (100, 50, 400, 200), 40.0, 1.0)
        # Bins above 40 Hz are cut off
        self.assertEqual(len(points), 5)
        self.assertEqual(points[0], (100.0, 250.0))
        self.assertEqual(points[1], (200.0, 150.0))
        self.assertEqual(points[2], (300.0, 50.0))
        # Clipped to the top of the plot
        self.assertEqual(points[3], (400.0, 50.0))
        self.assertEqual(points[4], (500.0, 200.0))

    def test_too_few_bins(self):
        self.assertEqual(spectrum_points(np.array([1.0]), 10.0, (0, 0, 10, 10), 100.0, 1.0), [])


class TestSpectrumRenderer(unittest.TestCase):
    def test_plot_area_leaves_margins(self):
        renderer = SpectrumRenderer(Channel(), GuiConfig(width=800, height=600, margin=20))
        self.assertEqual(renderer.plot_rect, (40, 20, 740, 540))
        self.assertTrue(renderer.is_open())
        renderer.close()
        self.assertFalse(renderer.is_open())


if __name__ == "__main__":
    unittest.main()
