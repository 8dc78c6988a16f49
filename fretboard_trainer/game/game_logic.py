"""Background practice loop: pick a target, count correct detections."""

import random
import threading
from dataclasses import replace
from enum import Enum, auto
from typing import Optional, Tuple

from ..core.channels import Broadcaster, Channel
from ..core.config import GameConfig
from ..core.note import Note
from ..core.note_registry import NoteRegistry
from ..core.tuning import Tuning
from ..errors import ChannelError, ConfigurationError, GameError
from ..logger import get_logger
from ..note_types import AnalysisResult, FretLoc, GameState
from .active_notes import ActiveNotes

logger = get_logger(__name__)


class ThreadCtrl(Enum):
    """Messages on the game thread's control channel."""

    START = auto()
    STOP = auto()


class GameLogic:
    """Runs the practice loop on a daemon thread.

    The thread waits for ``play()``, then repeatedly picks a random location
    in the configured region, broadcasts a fresh ``GameState`` and consumes
    recognized notes in arrival order until the target has been heard
    ``note_count_for_acceptance`` times. Every ``state_update_period``
    detections the current state is broadcast again.

    An error on the thread stops it; it is kept on ``error`` and re-raised by
    ``check()``.

    Args:
        recognized: Channel of analysis results from the audio path
        observers: Broadcaster that delivers game states to renderers
        registry: Known notes
        tuning: Open-string notes
        config: Region and acceptance settings
        rng: Random source for target picks
    """

    def __init__(
        self,
        recognized: Channel[AnalysisResult],
        observers: Broadcaster[GameState],
        registry: NoteRegistry,
        tuning: Tuning,
        config: GameConfig,
        rng: Optional[random.Random] = None,
    ):
        if config.note_count_for_acceptance < 1:
            raise ConfigurationError("note_count_for_acceptance must be at least 1")
        if config.state_update_period < 1:
            raise ConfigurationError("state_update_period must be at least 1")

        self.config = config
        self.fret_range = config.fret_range
        self.string_range = config.string_range
        self.active_notes = ActiveNotes(
            registry, tuning, self.string_range, self.fret_range
        )

        self._recognized = recognized
        self._observers = observers
        self._rng = rng or random.Random()
        self._ctrl: Channel[ThreadCtrl] = Channel("game-ctrl")
        self._stopping = threading.Event()
        self._started = False
        self.error: Optional[BaseException] = None

        self._thread = threading.Thread(
            target=self._run, name="game-logic", daemon=True
        )
        self._thread.start()

    def play(self) -> None:
        """Leave the idle state and start picking targets.

        Raises:
            GameError: If the game has been stopped
        """
        if self._stopping.is_set():
            raise GameError("Cannot start a stopped game")
        if self._started:
            logger.warning("Game already started")
            return
        try:
            self._ctrl.send(ThreadCtrl.START)
        except ChannelError as e:
            raise GameError(f"Could not start game thread: {e}") from e
        self._started = True

    def stop(self, timeout: Optional[float] = 1.0) -> None:
        """Terminate the game thread. There is no resume."""
        if self._stopping.is_set():
            return
        self._stopping.set()
        self._ctrl.send(ThreadCtrl.STOP)
        self._ctrl.close()
        # Wakes the thread if it is blocked waiting for a recognized note
        self._recognized.close()
        self.join(timeout)

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not threading.current_thread():
            self._thread.join(timeout)

    def is_running(self) -> bool:
        return self._thread.is_alive()

    def check(self) -> None:
        """Re-raise the error that terminated the game thread, if any."""
        if self.error is not None:
            raise self.error

    def pick_note(self) -> Tuple[Note, FretLoc]:
        """Draw a uniformly random location and return its note."""
        string_idx = self._rng.randrange(self.string_range.begin, self.string_range.end)
        fret_idx = self._rng.randrange(self.fret_range.begin, self.fret_range.end)
        loc = FretLoc(string_idx, fret_idx)
        note = self.active_notes.get(loc)
        if note is None:
            raise ConfigurationError(f"No note at {loc} in the active region")
        return note, loc

    def _wait_until_start(self) -> bool:
        while True:
            if self._ctrl.recv() is ThreadCtrl.START:
                return True
            if self._stopping.is_set():
                return False

    def _run(self) -> None:
        try:
            if not self._wait_until_start():
                return
            logger.info("Game started")
            while not self._stopping.is_set():
                self._play_round()
        except ChannelError as e:
            if self._stopping.is_set():
                logger.debug(f"Game thread exiting: {e}")
            else:
                self._fail(e)
        except Exception as e:
            self._fail(e)
        finally:
            logger.info("Game thread finished")

    def _fail(self, error: BaseException) -> None:
        logger.error(f"Game thread terminated: {error}", exc_info=True)
        self.error = error

    def _play_round(self) -> None:
        target_note, target_loc = self.pick_note()
        needed = self.config.note_count_for_acceptance
        period = self.config.state_update_period
        state = GameState(target_note, target_loc, needed, 0)
        logger.info(f"New target {target_note} at {target_loc}")
        self._observers.send(state)

        while True:
            result = self._recognized.recv()
            if result.note is not None and result.note == state.target_note:
                state = replace(state, curr_detection_count=state.curr_detection_count + 1)

            count = state.curr_detection_count
            if count > 0 and count % period == 0:
                self._observers.send(state)
            if count == needed:
                logger.info(f"Target {target_note} accepted")
                return
