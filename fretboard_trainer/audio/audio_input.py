"""Audio input handling for note recognition."""

from __future__ import annotations
import threading
import time
from typing import Callable, Optional

import numpy as np
import soundfile as sf

from ..core.interfaces import IAudioInput
from ..errors import DeviceError
from ..logger import get_logger

logger = get_logger(__name__)


class ChannelRingBuffer:
    """Fixed-size window over the newest samples of one input channel.

    Args:
        capacity: Number of samples kept
        listened_channel: Column of the interleaved input to extract
    """

    def __init__(self, capacity: int, listened_channel: int = 0):
        if capacity < 1:
            raise ValueError(f"Ring buffer capacity must be positive, got {capacity}")
        self.capacity = capacity
        self.listened_channel = listened_channel
        self._data = np.zeros(capacity, dtype=np.float32)

    def push(self, indata: np.ndarray) -> np.ndarray:
        """Append the listened channel of ``indata`` and return the window.

        ``indata`` is a (frames, channels) block or a 1-D mono block. If it
        holds at least ``capacity`` frames the window is replaced by the
        newest ``capacity`` of them, otherwise the oldest samples are evicted.
        """
        samples = indata[:, self.listened_channel] if indata.ndim > 1 else indata
        n = len(samples)
        if n >= self.capacity:
            self._data[:] = samples[n - self.capacity :]
        elif n > 0:
            self._data[:-n] = self._data[n:]
            self._data[-n:] = samples
        return self._data

    @property
    def data(self) -> np.ndarray:
        return self._data


class WavFileInput(IAudioInput):
    """Streams a WAV file through the capture path on a background thread.

    Args:
        file_path: Audio file readable by soundfile
        frames_per_buffer: Frames handed to the callback per block
        realtime: Sleep between blocks to simulate live capture
        loop: Restart from the beginning at end of file
        gain: Factor applied to every sample
    """

    def __init__(
        self,
        file_path: str,
        frames_per_buffer: int = 8192,
        realtime: bool = True,
        loop: bool = False,
        gain: float = 1.0,
    ):
        self._file_path = file_path
        self._frames_per_buffer = frames_per_buffer
        self._realtime = realtime
        self._loop = loop
        self._gain = gain
        self._callback: Optional[Callable[[np.ndarray], None]] = None
        self._running = False
        self._thread: Optional[threading.Thread] = None

        try:
            with sf.SoundFile(self._file_path) as f:
                self._sample_rate = f.samplerate
                self._channels = f.channels
        except Exception as e:
            raise DeviceError(f"Cannot open audio file {file_path}: {e}") from e

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def channels(self) -> int:
        return self._channels

    def is_running(self) -> bool:
        return self._running

    def start(self, callback: Callable[[np.ndarray], None]) -> None:
        if self._running:
            return

        self._callback = callback
        self._running = True
        self._thread = threading.Thread(
            target=self._stream_data, name="wav-input", daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        self._running = False
        if self._thread and self._thread is not threading.current_thread():
            self._thread.join()
        self._thread = None

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for the file to finish streaming."""
        if self._thread:
            self._thread.join(timeout)

    def _stream_data(self) -> None:
        block_duration = self._frames_per_buffer / self._sample_rate
        try:
            with sf.SoundFile(self._file_path) as f:
                while self._running:
                    data = f.read(
                        self._frames_per_buffer, dtype="float32", always_2d=True
                    )
                    if len(data) == 0:
                        if self._loop:
                            f.seek(0)
                            continue
                        break

                    if self._gain != 1.0:
                        data *= self._gain

                    try:
                        self._callback(data)
                    except Exception as e:
                        logger.error(f"Error in audio callback: {e}", exc_info=True)

                    if self._realtime:
                        time.sleep(block_duration)
        except Exception as e:
            logger.error(f"Error streaming WAV file: {e}", exc_info=True)
        finally:
            self._running = False
        logger.info(f"Finished streaming {self._file_path}")
