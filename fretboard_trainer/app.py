"""Wires audio capture, note recognition, the game thread and the renderers."""

import random
import time
from typing import List, Optional, Sequence

import numpy as np

from .audio.analyzer import AudioAnalyzer
from .audio.audio_input import ChannelRingBuffer
from .core.channels import Broadcaster, Channel
from .core.config import ConfigManager
from .core.interfaces import IAudioInput, IRenderer
from .core.note_registry import NoteRegistry
from .core.tables import DEFAULT_FREQUENCIES_PATH, DEFAULT_TUNING_PATH
from .core.tuning import Tuning
from .errors import ConfigurationError
from .game.game_logic import GameLogic
from .logger import get_logger
from .note_types import AnalysisResult, FrameData, GameState

logger = get_logger(__name__)

UI_CHOICES = ("console", "gui")


class App:
    """One practice session.

    Audio blocks arrive on the capture thread, are windowed by a ring buffer
    of ``block_size`` samples and analysed; results go to the game thread.
    ``run()`` polls the renderers on the main thread at ``fps``.

    Args:
        config: Loaded configuration
        audio_input: Capture source, not yet started
        ui: Renderers to open, any of "console" and "gui"
        rng: Random source for target picks
    """

    def __init__(
        self,
        config: ConfigManager,
        audio_input: IAudioInput,
        ui: Sequence[str] = ("console",),
        rng: Optional[random.Random] = None,
    ):
        app_cfg = config.app
        unknown = [name for name in ui if name not in UI_CHOICES]
        if unknown:
            raise ConfigurationError(f"Unknown UI: {', '.join(unknown)}")
        if app_cfg.fps <= 0:
            raise ConfigurationError("fps must be positive")
        if not 0 <= app_cfg.listened_channel < audio_input.channels:
            raise ConfigurationError(
                f"listened_channel {app_cfg.listened_channel} is not one of the "
                f"{audio_input.channels} input channel(s)"
            )

        frequencies_path = config.resolve_path(app_cfg.frequencies_path) or DEFAULT_FREQUENCIES_PATH
        tuning_path = config.resolve_path(app_cfg.tuning_path) or DEFAULT_TUNING_PATH
        self.registry = NoteRegistry.from_csv(frequencies_path)
        self.tuning = Tuning.from_csv(tuning_path, self.registry)

        self.analyzer = AudioAnalyzer(
            audio_input.sample_rate, self.registry.notes(), config.audio
        )
        if app_cfg.block_size > self.analyzer.fftsize:
            raise ConfigurationError(
                f"block_size {app_cfg.block_size} exceeds the FFT size "
                f"{self.analyzer.fftsize} needed by the note table"
            )
        self.ring_buffer = ChannelRingBuffer(app_cfg.block_size, app_cfg.listened_channel)
        self.audio_input = audio_input
        self.frame_period = 1.0 / app_cfg.fps

        self.analysis_channel: Channel[AnalysisResult] = Channel("analysis")
        self.game_states: Broadcaster[GameState] = Broadcaster("game-state")
        self.frame_channel: Optional[Channel[FrameData]] = None

        self.renderers: List[IRenderer] = []
        if "console" in ui:
            from .ui.console import ConsoleRenderer

            self.renderers.append(
                ConsoleRenderer(
                    self.game_states.subscribe("console"),
                    config.game.fret_range,
                    config.game.string_range,
                    config.console,
                    self.tuning,
                )
            )
        if "gui" in ui:
            from .ui.gui import SpectrumRenderer

            self.frame_channel = Channel("frames")
            self.renderers.append(SpectrumRenderer(self.frame_channel, config.gui))

        self.game_logic = GameLogic(
            self.analysis_channel,
            self.game_states,
            self.registry,
            self.tuning,
            config.game,
            rng=rng,
        )

    def on_audio(self, indata: np.ndarray) -> None:
        """Capture callback: analyse the newest window and publish the result."""
        window = self.ring_buffer.push(indata)
        result = self.analyzer.identify_note(window)
        self.analysis_channel.send(result)
        if self.frame_channel is not None:
            self.frame_channel.send(
                FrameData(result.note, self.analyzer.spectrum.copy(), self.analyzer.delta_f)
            )

    def is_running(self) -> bool:
        if self.renderers:
            return all(r.is_open() for r in self.renderers)
        # Headless sessions last as long as the input
        return self.audio_input.is_running()

    def run(self) -> None:
        """Start capture and the game, then render until a window closes.

        Raises:
            DeviceError: If the audio stream cannot start
            FretboardTrainerError: If the game thread failed
        """
        try:
            self.audio_input.start(self.on_audio)
            self.game_logic.play()
            logger.info("Session started")
            while self.is_running():
                self.game_logic.check()
                for renderer in self.renderers:
                    renderer.draw()
                time.sleep(self.frame_period)
            self.game_logic.check()
        finally:
            self.shutdown()

    def shutdown(self) -> None:
        self.audio_input.stop()
        self.game_logic.stop()
        for renderer in self.renderers:
            renderer.close()
        logger.info("Session ended")
