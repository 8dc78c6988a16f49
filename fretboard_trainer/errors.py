"""Exception types raised by Fretboard Trainer components."""


class FretboardTrainerError(Exception):
    """Base class for all Fretboard Trainer errors."""


class ConfigurationError(FretboardTrainerError):
    """Raised for malformed configuration, note tables or tuning tables."""


class DuplicateNoteError(ConfigurationError):
    """Raised when a note table lists the same (octave, name) twice."""


class InvalidTuningError(ConfigurationError):
    """Raised when a tuning specification does not fit the note registry."""


class DeviceError(FretboardTrainerError):
    """Raised when the audio stream cannot be built or started."""


class AnalysisPreconditionError(FretboardTrainerError):
    """Raised when the audio analyzer is given inputs it cannot work with."""


class ChannelError(FretboardTrainerError):
    """Raised when sending to or receiving from a closed channel."""


class GameError(FretboardTrainerError):
    """Raised when the game loop cannot be controlled as requested."""
