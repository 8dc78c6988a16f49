import json
import os
import tempfile
import unittest

from fretboard_trainer.core.config import AudioConfig, ConfigManager, GameConfig
from fretboard_trainer.core.ranges import FretRange, StringRange
from fretboard_trainer.errors import ConfigurationError


class TestConfigManager(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.config_dir = self.tmp.name

    def tearDown(self):
        self.tmp.cleanup()

    def _write(self, name, data):
        with open(os.path.join(self.config_dir, f"{name}.json"), "w") as f:
            if isinstance(data, str):
                f.write(data)
            else:
                json.dump(data, f)

    def test_creates_default_files(self):
        config = ConfigManager(self.config_dir)
        for name in ["app", "audio", "game", "console", "gui"]:
            self.assertTrue(os.path.exists(os.path.join(self.config_dir, f"{name}.json")))
        self.assertEqual(config.audio, AudioConfig())
        self.assertEqual(config.game.fret_range, FretRange(0, 13))
        self.assertEqual(config.game.string_range, StringRange(1, 7))
        self.assertEqual(config.app.block_size, 8192)

        with open(os.path.join(self.config_dir, "game.json")) as f:
            self.assertEqual(json.load(f)["fret_range"], [0, 13])

    def test_fills_missing_keys(self):
        self._write("audio", {"peak_threshold": 100.0})
        config = ConfigManager(self.config_dir)
        self.assertEqual(config.audio.peak_threshold, 100.0)
        self.assertEqual(config.audio.num_top_peaks, 5)

    def test_unknown_key(self):
        self._write("game", {"fret_count": 12})
        with self.assertRaises(ConfigurationError):
            ConfigManager(self.config_dir)

    def test_malformed_json(self):
        self._write("app", "{not json")
        with self.assertRaises(ConfigurationError):
            ConfigManager(self.config_dir)

    def test_invalid_range(self):
        self._write("game", {"string_range": [0, 3]})
        with self.assertRaises(ConfigurationError):
            ConfigManager(self.config_dir)
        self._write("game", {"fret_range": [5, 5]})
        with self.assertRaises(ConfigurationError):
            ConfigManager(self.config_dir)

    def test_wrong_types_are_rejected(self):
        for name, values in [
            ("app", {"fps": "fast"}),
            ("app", {"block_size": 8192.5}),
            ("app", {"frequencies_path": 7}),
            ("audio", {"peak_threshold": "x"}),
            ("audio", {"num_top_peaks": True}),
            ("console", {"frets_to_number": [0, "three"]}),
            ("gui", {"line_color": [255, 255]}),
        ]:
            with self.subTest(name=name, values=values):
                self._write(name, values)
                with self.assertRaises(ConfigurationError):
                    ConfigManager(self.config_dir)
                os.remove(os.path.join(self.config_dir, f"{name}.json"))

    def test_numbers_are_normalized(self):
        self._write("audio", {"fft_res_factor": 3, "peak_threshold": 250})
        self._write("app", {"device": 2, "tuning_path": None})
        config = ConfigManager(self.config_dir)
        self.assertIsInstance(config.audio.fft_res_factor, float)
        self.assertEqual(config.audio.peak_threshold, 250.0)
        self.assertEqual(config.app.device, 2)

    def test_update_rejects_wrong_type(self):
        config = ConfigManager(self.config_dir)
        with self.assertRaises(ConfigurationError):
            config.update_config("audio", {"moving_avg_window_size": "5"})
        self.assertEqual(config.audio, AudioConfig())

    def test_update_and_reset(self):
        config = ConfigManager(self.config_dir)
        config.update_config("game", {"note_count_for_acceptance": 4, "fret_range": [0, 5]})
        self.assertEqual(config.game.note_count_for_acceptance, 4)

        reloaded = ConfigManager(self.config_dir)
        self.assertEqual(
            reloaded.game,
            GameConfig(fret_range=FretRange(0, 5), note_count_for_acceptance=4),
        )

        reloaded.reset_config("game")
        self.assertEqual(reloaded.game, GameConfig())
        self.assertEqual(ConfigManager(self.config_dir).game, GameConfig())

    def test_unknown_section(self):
        config = ConfigManager(self.config_dir)
        with self.assertRaises(ConfigurationError):
            config.get_config("network")

    def test_resolve_path(self):
        config = ConfigManager(self.config_dir)
        self.assertIsNone(config.resolve_path(None))
        self.assertEqual(
            str(config.resolve_path("notes.csv")), os.path.join(self.config_dir, "notes.csv")
        )
        self.assertEqual(str(config.resolve_path("/tmp/x.csv")), "/tmp/x.csv")


if __name__ == "__main__":
    unittest.main()
