"""Pygame window plotting the smoothed spectrum of the latest audio block."""

from typing import List, Optional, Tuple

import numpy as np
import pygame

from ..core.channels import Channel
from ..core.config import GuiConfig
from ..core.interfaces import IRenderer
from ..logger import get_logger
from ..note_types import FrameData

logger = get_logger(__name__)

N_TICKS = 5


def spectrum_points(
    spectrum: np.ndarray,
    delta_f: float,
    plot_rect: Tuple[int, int, int, int],
    max_freq: float,
    max_magnitude: float,
) -> List[Tuple[float, float]]:
    """Screen coordinates of the spectrum bins below ``max_freq``.

    Magnitudes above ``max_magnitude`` are clipped to the top of the plot.
    """
    left, top, width, height = plot_rect
    n_visible = min(len(spectrum), int(max_freq / delta_f) + 1)
    if n_visible < 2:
        return []

    freqs = np.arange(n_visible) * delta_f
    mags = np.clip(spectrum[:n_visible], 0.0, max_magnitude)
    xs = left + freqs / max_freq * width
    ys = top + height - mags / max_magnitude * height
    return list(zip(xs.tolist(), ys.tolist()))


class SpectrumRenderer(IRenderer):
    """Line plot of the magnitude spectrum, frequency on the x axis.

    Args:
        frames: Channel of per-block spectrum frames
        config: Window and plot settings
    """

    def __init__(self, frames: Channel[FrameData], config: GuiConfig):
        self._frames = frames
        self.config = config
        self.screen = None
        self.font = None
        self._open = True
        self.last_frame: Optional[FrameData] = None

        margin = config.margin
        self.plot_rect = (
            margin * 2,
            margin,
            config.width - margin * 3,
            config.height - margin * 3,
        )

    def init_screen(self):
        """Initialize the Pygame screen and resources"""
        try:
            pygame.init()
            self.screen = pygame.display.set_mode((self.config.width, self.config.height))
            pygame.display.set_caption("Fretboard Trainer - Spectrum")
            self.font = pygame.font.SysFont(self.config.font_name, self.config.font_size)
            logger.info("Pygame spectrum renderer initialized")
            return self.screen
        except Exception as e:
            logger.error(f"Failed to initialize Pygame: {e}")
            self.close()
            raise

    def is_open(self) -> bool:
        return self._open

    def _handle_events(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT or (
                event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE
            ):
                logger.info("Spectrum window closed by user")
                self.close()
                return

    def _draw_axes(self) -> None:
        cfg = self.config
        left, top, width, height = self.plot_rect
        bottom = top + height
        pygame.draw.line(self.screen, cfg.axis_color, (left, bottom), (left + width, bottom))
        pygame.draw.line(self.screen, cfg.axis_color, (left, top), (left, bottom))

        for i in range(N_TICKS + 1):
            x = left + width * i / N_TICKS
            freq = cfg.spectrum_max_freq * i / N_TICKS
            pygame.draw.line(self.screen, cfg.axis_color, (x, bottom), (x, bottom + 5))
            label = self.font.render(f"{freq:.0f}", True, cfg.font_color)
            self.screen.blit(label, label.get_rect(midtop=(x, bottom + 8)))

            y = bottom - height * i / N_TICKS
            mag = cfg.spectrum_max_magnitude * i / N_TICKS
            pygame.draw.line(self.screen, cfg.axis_color, (left - 5, y), (left, y))
            label = self.font.render(f"{mag:.3g}", True, cfg.font_color)
            self.screen.blit(label, label.get_rect(midright=(left - 8, y)))

        caption = self.font.render("Frequency [Hz]", True, cfg.font_color)
        self.screen.blit(caption, caption.get_rect(midtop=(left + width / 2, bottom + 30)))

    def draw(self) -> None:
        if not self._open:
            return
        if self.screen is None:
            self.init_screen()

        self._handle_events()
        if not self._open:
            return

        frames = self._frames.drain()
        if not frames:
            return
        frame = frames[-1]
        self.last_frame = frame

        cfg = self.config
        self.screen.fill(cfg.background_color)
        self._draw_axes()
        points = spectrum_points(
            frame.spectrum,
            frame.delta_f,
            self.plot_rect,
            cfg.spectrum_max_freq,
            cfg.spectrum_max_magnitude,
        )
        if points:
            pygame.draw.lines(self.screen, cfg.line_color, False, points)

        note_text = frame.note.name_octave() if frame.note is not None else "-"
        label = self.font.render(f"Detected: {note_text}", True, cfg.font_color)
        self.screen.blit(label, label.get_rect(topright=(cfg.width - cfg.margin, cfg.margin)))
        pygame.display.flip()

    def close(self) -> None:
        if self.screen is not None:
            logger.info("Cleaning up Pygame renderer")
            pygame.quit()
            self.screen = None
        self._open = False
