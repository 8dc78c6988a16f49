"""Fretboard Trainer: guitar fretboard practice driven by live note recognition."""

__version__ = "0.1.0"
