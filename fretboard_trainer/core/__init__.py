"""Core components for the Fretboard Trainer application."""

# Import interfaces for easier access
from .interfaces import (
    IAudioInput,
    IRenderer,
)

__all__ = ["IAudioInput", "IRenderer"]
