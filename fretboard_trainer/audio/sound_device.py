"""Live capture from a sound card through sounddevice."""

from __future__ import annotations
from typing import Callable, Optional, Union

import numpy as np
import sounddevice as sd

from ..core.interfaces import IAudioInput
from ..errors import DeviceError
from ..logger import get_logger

logger = get_logger(__name__)


class SoundDeviceInput(IAudioInput):
    """Audio input handler using the sounddevice library."""

    def __init__(
        self,
        device_id: Optional[Union[int, str]] = None,
        sample_rate: int = 44100,
        frames_per_buffer: int = 8192,
        channels: int = 1,
    ) -> None:
        """Initialize the audio input handler.

        Args:
            device_id: Audio input device ID or name, or None for the default
            sample_rate: Sample rate in Hz
            frames_per_buffer: Buffer size in frames
            channels: Number of interleaved channels to capture

        Raises:
            DeviceError: If the device does not accept these settings
        """
        self._device_id = device_id
        self._sample_rate = sample_rate
        self._frames_per_buffer = frames_per_buffer
        self._channels = channels

        self._stream: Optional[sd.InputStream] = None
        self._callback: Optional[Callable[[np.ndarray], None]] = None
        self._running = False

        try:
            sd.check_input_settings(
                device=self._device_id,
                samplerate=self._sample_rate,
                channels=self._channels,
                dtype="float32",
            )
        except Exception as e:
            raise DeviceError(
                f"Input device {self._device_id!r} does not support "
                f"{self._sample_rate} Hz with {self._channels} channel(s): {e}"
            ) from e
        logger.info(
            f"Audio device checked: ID={self._device_id}, Rate={self._sample_rate}Hz"
        )

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def channels(self) -> int:
        return self._channels

    def is_running(self) -> bool:
        return self._running

    def _audio_callback(
        self,
        indata: np.ndarray,
        _frames: int,
        _time_info,
        status: sd.CallbackFlags,
    ) -> None:
        """Forward each captured (frames, channels) block.

        Runs on the PortAudio thread: errors are logged, never raised.
        """
        if status:
            logger.warning(f"Audio callback status: {status}")
        if self._callback is None:
            return
        try:
            self._callback(indata)
        except Exception as e:
            logger.error(f"Error in audio callback: {e}", exc_info=True)

    def start(self, callback: Callable[[np.ndarray], None]) -> None:
        """Start capturing audio and pass each block to ``callback``.

        Raises:
            DeviceError: If the stream cannot be built or started
        """
        if self._running:
            logger.warning("Audio input already running")
            return

        self._callback = callback
        try:
            self._stream = sd.InputStream(
                device=self._device_id,
                samplerate=self._sample_rate,
                blocksize=self._frames_per_buffer,
                channels=self._channels,
                dtype="float32",
                callback=self._audio_callback,
            )
            self._stream.start()
        except Exception as e:
            if self._stream is not None:
                self._stream.close()
                self._stream = None
            raise DeviceError(f"Could not start audio input: {e}") from e

        self._running = True
        logger.info(f"Audio input started with sample rate {self._sample_rate} Hz")

    def stop(self) -> None:
        """Stop capturing audio."""
        if not self._running:
            return

        try:
            if self._stream:
                self._stream.stop()
                self._stream.close()
                self._stream = None
        except Exception as e:
            logger.error(f"Error stopping audio input: {e}")
        finally:
            self._running = False
        logger.info("Audio input stopped")
