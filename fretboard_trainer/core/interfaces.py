"""Defines the core interfaces for the Fretboard Trainer application."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Callable

import numpy as np


class IAudioInput(ABC):
    """Interface for audio input handlers."""

    @abstractmethod
    def start(self, callback: Callable[[np.ndarray], None]) -> None:
        """Start capturing audio.

        ``callback`` receives each captured block as a (frames, channels)
        float32 array.
        """
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop capturing audio."""
        pass

    @abstractmethod
    def is_running(self) -> bool:
        """Check if audio is running."""
        pass

    @property
    @abstractmethod
    def sample_rate(self) -> int:
        pass

    @property
    @abstractmethod
    def channels(self) -> int:
        pass


class IRenderer(ABC):
    """Interface for main-thread renderers polled by the application loop."""

    @abstractmethod
    def is_open(self) -> bool:
        """Check if the renderer still wants to be drawn."""
        pass

    @abstractmethod
    def draw(self) -> None:
        """Consume pending updates and draw one frame."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the display."""
        pass
