"""Curses renderer showing the fretboard and the current target."""

import curses
from typing import List, Optional

import pyfiglet

from ..core.channels import Channel
from ..core.config import ConsoleConfig
from ..core.interfaces import IRenderer
from ..core.ranges import FretRange, StringRange
from ..core.tuning import Tuning
from ..logger import get_logger
from ..note_types import FretLoc, GameState

logger = get_logger(__name__)

ESCAPE_KEY = 27


class FretboardDrawer:
    """Draws a text fretboard with one optional fretted location.

    Each string is a row starting with its open-note name; frets are
    ``fret_size`` characters wide and separated by ``sep_str`` (the nut by
    ``open_sep_str``). A final row numbers the frets in ``frets_to_number``
    (taken modulo 12).
    """

    def __init__(self, config: ConsoleConfig, tuning: Tuning):
        if config.fret_size < 1:
            raise ValueError("Fret size must be positive")
        self.fret_size = config.fret_size
        self.string_char = config.string_char
        self.fret_char = config.fret_char
        self.empty_char = config.empty_char
        self.sep_str = config.sep_str
        self.open_sep_str = config.open_sep_str
        self.frets_to_number = set(config.frets_to_number)
        self.n_space_between_strings = config.n_space_between_strings
        self.tuning = tuning

    def draw_fret(self, string_char: str, fret_char: str, is_fretted: bool) -> str:
        left_side = self.fret_size // 2
        marker = fret_char if is_fretted else ""
        right_side = max(self.fret_size - left_side - len(marker), 0)
        return string_char * left_side + marker + string_char * right_side

    def draw_string(
        self, fret_range: FretRange, played_fret: Optional[int], open_note: str
    ) -> str:
        first_sep = self.empty_char if fret_range.begin == 0 else self.sep_str
        parts = [open_note, first_sep]
        for i in fret_range:
            parts.append(self.draw_fret(self.string_char, self.fret_char, i == played_fret))
            parts.append(self.sep_str if i > 0 else self.open_sep_str)
        return "".join(parts)

    def draw_fret_numbers(self, fret_range: FretRange) -> str:
        parts = [self.empty_char]
        for i in fret_range:
            parts.append(
                self.draw_fret(self.empty_char, str(i), i % 12 in self.frets_to_number)
            )
            parts.append(self.empty_char)
        return "".join(parts)

    def draw(
        self,
        fret_range: FretRange,
        string_range: StringRange,
        target_loc: Optional[FretLoc] = None,
    ) -> str:
        names = {}
        for string_idx in string_range:
            note = self.tuning.note(string_idx)
            names[string_idx] = str(note.name) if note is not None else "?"
        label_width = max(len(name) for name in names.values())

        lines: List[str] = []
        for string_idx in string_range:
            played_fret = None
            if target_loc is not None and target_loc.string_idx == string_idx:
                played_fret = target_loc.fret_idx
            lines.append(
                self.draw_string(fret_range, played_fret, names[string_idx].ljust(label_width))
            )
            if string_idx < string_range.end - 1:
                for _ in range(self.n_space_between_strings):
                    lines.append(self.draw_string(fret_range, None, " " * label_width))
        lines.append(" " * label_width + self.draw_fret_numbers(fret_range))
        return "\n".join(lines)


def status_line(state: GameState) -> str:
    return (
        f"Play {state.target_note.name_octave()} on string {state.target_loc.string_idx} "
        f"(detection count: {state.curr_detection_count}/{state.needed_detection_count})"
    )


class ConsoleRenderer(IRenderer):
    """Curses front end fed by a channel of game states.

    Args:
        states: Channel of game states from the game thread
        fret_range: Frets to draw
        string_range: Strings to draw
        config: Console drawing settings
        tuning: Open-string notes for the row labels
    """

    def __init__(
        self,
        states: Channel[GameState],
        fret_range: FretRange,
        string_range: StringRange,
        config: ConsoleConfig,
        tuning: Tuning,
    ):
        self._states = states
        self.fret_range = fret_range
        self.string_range = string_range
        self.drawer = FretboardDrawer(config, tuning)
        self.screen = None
        self._open = True

        self.state: Optional[GameState] = None
        self.previous_target: Optional[FretLoc] = None
        self.curr_target: Optional[FretLoc] = None

    def init_screen(self):
        self.screen = curses.initscr()
        curses.noecho()
        curses.cbreak()
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        self.screen.keypad(True)
        self.screen.nodelay(True)
        self.screen.clear()
        logger.info("Console renderer initialized")
        return self.screen

    def is_open(self) -> bool:
        return self._open

    def update(self) -> bool:
        """Consume pending game states; returns True if anything changed."""
        states = self._states.drain()
        for state in states:
            if self.curr_target != state.target_loc:
                self.previous_target = self.curr_target
                self.curr_target = state.target_loc
            self.state = state
        return bool(states)

    def render_lines(self) -> List[str]:
        """Everything except the banner, as plain text lines."""
        lines = ["Previously played note:"]
        lines.extend(
            self.drawer.draw(self.fret_range, self.string_range, self.previous_target).split("\n")
        )
        lines.append("")
        if self.state is None:
            lines.append("Waiting for the first target...")
        else:
            lines.append(status_line(self.state))
        return lines

    def _handle_keys(self) -> None:
        key = self.screen.getch()
        while key != -1:
            if key in (ord("q"), ord("Q"), ESCAPE_KEY):
                logger.info("Console renderer closed by user")
                self.close()
                return
            key = self.screen.getch()

    def draw(self) -> None:
        if not self._open:
            return
        if self.screen is None:
            self.init_screen()
        self._handle_keys()
        if not self._open or not self.update():
            return

        screen = self.screen
        screen.erase()
        height, width = screen.getmaxyx()
        lines = self.render_lines()
        if self.state is not None:
            banner = pyfiglet.figlet_format(self.state.target_note.name_octave())
            lines.append("")
            lines.extend(banner.splitlines())

        for y, line in enumerate(lines[:height]):
            try:
                screen.addstr(y, 0, line[: max(width - 1, 0)])
            except curses.error:
                pass
        screen.refresh()

    def close(self) -> None:
        if self.screen:
            self.screen.keypad(False)
            curses.nocbreak()
            curses.echo()
            curses.endwin()
            self.screen = None
        self._open = False
