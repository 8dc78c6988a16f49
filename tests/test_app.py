import os
import tempfile
import unittest

import numpy as np
from click.testing import CliRunner

from fretboard_trainer.app import App
from fretboard_trainer.core.channels import Channel
from fretboard_trainer.core.config import ConfigManager
from fretboard_trainer.core.interfaces import IAudioInput
from fretboard_trainer.errors import ConfigurationError
from fretboard_trainer.main import main, run_session
from fretboard_trainer.note_types import AnalysisResult


class FakeAudioInput(IAudioInput):
    """Delivers a fixed list of blocks synchronously from ``start``."""

    def __init__(self, blocks=(), sample_rate=44100, channels=1):
        self.blocks = list(blocks)
        self._sample_rate = sample_rate
        self._channels = channels
        self.running = False
        self.stopped = False

    @property
    def sample_rate(self):
        return self._sample_rate

    @property
    def channels(self):
        return self._channels

    def start(self, callback):
        for block in self.blocks:
            callback(block)

    def stop(self):
        self.stopped = True

    def is_running(self):
        return self.running


class TestApp(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.config = ConfigManager(self.tmp.name)
        self.apps = []

    def tearDown(self):
        for app in self.apps:
            app.game_logic.stop()
        self.tmp.cleanup()

    def make_app(self, audio_input=None, ui=()):
        app = App(self.config, audio_input or FakeAudioInput(), ui=ui)
        self.apps.append(app)
        return app

    def test_builds_from_packaged_tables(self):
        app = self.make_app()
        self.assertEqual(len(app.registry), 49)
        self.assertEqual(len(app.tuning), 6)
        self.assertGreaterEqual(app.analyzer.fftsize, self.config.app.block_size)
        self.assertEqual(len(app.game_logic.active_notes), 6 * 13)
        self.assertEqual(app.renderers, [])

    def test_audio_callback_publishes_results(self):
        app = self.make_app()
        app.frame_channel = Channel("frames")
        app.on_audio(np.zeros((1024, 1), dtype=np.float32))

        self.assertEqual(app.analysis_channel.try_recv(), AnalysisResult(None))
        frame = app.frame_channel.try_recv()
        self.assertIsNone(frame.note)
        self.assertEqual(len(frame.spectrum), app.analyzer.n_bins)
        self.assertIsNot(frame.spectrum, app.analyzer.spectrum)

    def test_block_size_must_fit_fft(self):
        self.config.update_config("app", {"block_size": 65536})
        with self.assertRaises(ConfigurationError):
            self.make_app()

    def test_listened_channel_must_exist(self):
        self.config.update_config("app", {"listened_channel": 1})
        with self.assertRaises(ConfigurationError):
            self.make_app()
        self.make_app(FakeAudioInput(channels=2))

    def test_unknown_ui(self):
        with self.assertRaises(ConfigurationError):
            self.make_app(ui=("web",))

    def test_custom_tables_relative_to_config_dir(self):
        with open(os.path.join(self.tmp.name, "notes.csv"), "w") as f:
            f.write("octave,name,frequency\n2,E,82.41\n2,F,87.31\n2,F#,92.5\n")
        with open(os.path.join(self.tmp.name, "tuning.csv"), "w") as f:
            f.write("string,octave,name\n1,2,E\n")
        self.config.update_config(
            "app", {"frequencies_path": "notes.csv", "tuning_path": "tuning.csv"}
        )
        self.config.update_config("game", {"fret_range": [0, 3], "string_range": [1, 2]})
        app = self.make_app()
        self.assertEqual(len(app.registry), 3)
        self.assertEqual(len(app.game_logic.active_notes), 3)

    def test_headless_run_ends_with_input(self):
        audio = FakeAudioInput([np.zeros((512, 1), dtype=np.float32)] * 3)
        app = self.make_app(audio)
        app.run()
        self.assertTrue(audio.stopped)
        self.assertFalse(app.game_logic.is_running())


class TestMain(unittest.TestCase):
    def setUp(self):
        self.runner = CliRunner()

    def test_help_lists_ui_modes(self):
        result = self.runner.invoke(main, ["--help"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn("--ui", result.output)
        self.assertIn("--list-devices", result.output)

    def test_rejects_unknown_ui(self):
        result = self.runner.invoke(main, ["--ui", "web"])
        self.assertEqual(result.exit_code, 2)

    def test_bad_config_exits_with_error(self):
        with tempfile.TemporaryDirectory() as config_dir:
            with open(os.path.join(config_dir, "app.json"), "w") as f:
                f.write("[1, 2")
            result = self.runner.invoke(main, ["--config-dir", config_dir, "--ui", "none"])
            self.assertEqual(result.exit_code, 1)

    def test_wrong_typed_setting_exits_with_error(self):
        with tempfile.TemporaryDirectory() as config_dir:
            with open(os.path.join(config_dir, "app.json"), "w") as f:
                f.write('{"fps": "fast"}')
            result = self.runner.invoke(main, ["--config-dir", config_dir, "--ui", "none"])
            self.assertEqual(result.exit_code, 1)
            self.assertIn("fps", result.output)

    def test_missing_wav_exits_with_error(self):
        with tempfile.TemporaryDirectory() as config_dir:
            missing = os.path.join(config_dir, "absent.wav")
            self.assertEqual(
                run_session(config_dir=config_dir, wav=missing, ui="none"), 1
            )


if __name__ == "__main__":
    unittest.main()
