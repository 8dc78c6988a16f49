"""Configuration management for Fretboard Trainer components."""

from dataclasses import dataclass, field, fields
from typing import (
    Any,
    Dict,
    List,
    Optional,
    Tuple,
    Type,
    TypeVar,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)
import json
import os
from pathlib import Path

from ..errors import ConfigurationError
from ..logger import get_logger
from .ranges import FretRange, StringRange

logger = get_logger(__name__)

RGB = Tuple[int, int, int]


@dataclass(frozen=True)
class AppConfig:
    fps: int = 30
    frequencies_path: Optional[str] = None  # None uses the packaged table
    tuning_path: Optional[str] = None  # None uses standard EADGBE
    block_size: int = 8192
    sample_rate: int = 44100
    channels: int = 1
    listened_channel: int = 0
    device: Optional[Any] = None  # Device name, index or None for the default
    log_path: Optional[str] = "fretboard_trainer.log"


@dataclass(frozen=True)
class AudioConfig:
    fft_res_factor: float = 2.0
    fft_magnitude_gain: float = 1.0
    peak_threshold: float = 500.0
    min_peak_dist: int = 10
    num_top_peaks: int = 5
    moving_avg_window_size: int = 5


@dataclass(frozen=True)
class GameConfig:
    fret_range: FretRange = FretRange(0, 13)
    string_range: StringRange = StringRange(1, 7)
    note_count_for_acceptance: int = 10
    state_update_period: int = 2


@dataclass(frozen=True)
class ConsoleConfig:
    fret_size: int = 5
    string_char: str = "-"
    fret_char: str = "O"
    empty_char: str = " "
    sep_str: str = "|"
    open_sep_str: str = "‖"
    frets_to_number: List[int] = field(default_factory=lambda: [0, 3, 5, 7, 9])
    n_space_between_strings: int = 0


@dataclass(frozen=True)
class GuiConfig:
    width: int = 1024
    height: int = 600
    margin: int = 40
    spectrum_max_freq: float = 2000.0
    spectrum_max_magnitude: float = 0.01
    font_name: str = "Arial"
    font_size: int = 18
    font_color: RGB = (230, 230, 230)
    axis_color: RGB = (180, 180, 180)
    background_color: RGB = (20, 20, 30)
    line_color: RGB = (255, 255, 0)


C = TypeVar("C")


def _to_json(config) -> Dict[str, Any]:
    """Flatten a typed config section into JSON-friendly values."""
    result = {}
    for f in fields(config):
        value = getattr(config, f.name)
        if isinstance(value, (FretRange, StringRange)):
            value = [value.begin, value.end]
        elif isinstance(value, tuple):
            value = list(value)
        result[f.name] = value
    return result


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _coerce(key: str, value: Any, expected: Any) -> Any:
    """Check ``value`` against a field annotation, converting ints to floats."""
    if get_origin(expected) is Union:
        options = [t for t in get_args(expected) if t is not type(None)]
        if value is None:
            return None
        expected = options[0] if len(options) == 1 else Any

    if expected is Any:
        return value
    if expected is int:
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValueError(f"{key} must be an integer, got {value!r}")
        return value
    if expected is float:
        if not _is_number(value):
            raise ValueError(f"{key} must be a number, got {value!r}")
        return float(value)
    if expected is str:
        if not isinstance(value, str):
            raise ValueError(f"{key} must be a string, got {value!r}")
        return value
    if get_origin(expected) is list:
        if not isinstance(value, list):
            raise ValueError(f"{key} must be a list, got {value!r}")
        (item_type,) = get_args(expected)
        return [_coerce(key, item, item_type) for item in value]
    return value


def _color(key: str, value: Any) -> RGB:
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise ValueError(f"{key} must be an [r, g, b] list, got {value!r}")
    return tuple(_coerce(key, c, int) for c in value)


def _from_json(name: str, cls: Type[C], values: Dict[str, Any]) -> C:
    """Build a typed config section, rejecting keys it does not know."""
    known = get_type_hints(cls)
    unknown = sorted(set(values) - set(known))
    if unknown:
        raise ConfigurationError(
            f"Unknown key(s) in '{name}' configuration: {', '.join(unknown)}"
        )

    kwargs = {}
    try:
        for key, value in values.items():
            if key == "fret_range":
                value = FretRange.from_pair(value)
            elif key == "string_range":
                value = StringRange.from_pair(value)
            elif key.endswith("_color"):
                value = _color(key, value)
            else:
                value = _coerce(key, value, known[key])
            kwargs[key] = value
        return cls(**kwargs)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid '{name}' configuration: {e}") from e


class ConfigManager:
    """Configuration manager for Fretboard Trainer components.

    Each section lives in its own ``<section>.json`` file inside
    ``config_dir``. Missing files are created from the defaults and missing
    keys are filled in from the defaults.
    """

    SECTIONS: Dict[str, type] = {
        "app": AppConfig,
        "audio": AudioConfig,
        "game": GameConfig,
        "console": ConsoleConfig,
        "gui": GuiConfig,
    }

    def __init__(self, config_dir: Optional[str] = None):
        """Initialize the configuration manager.

        Args:
            config_dir: Directory to store configuration files, or None to use default

        Raises:
            ConfigurationError: If an existing configuration file is malformed
        """
        if config_dir is None:
            # Use ~/.config/fretboard_trainer by default
            home = os.path.expanduser("~")
            config_dir = os.path.join(home, ".config", "fretboard_trainer")

        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self.default_configs = {
            name: _to_json(cls()) for name, cls in self.SECTIONS.items()
        }

        # Load existing configurations or create default ones
        self.configs: Dict[str, Any] = {}
        for config_name in self.SECTIONS:
            self.configs[config_name] = self.load_config(config_name)

    def load_config(self, name: str):
        """Load a typed configuration section from file or create default.

        Args:
            name: Configuration name

        Returns:
            Typed configuration section
        """
        cls = self.SECTIONS[name]
        default_config = self.default_configs[name]
        config_file = self.config_dir / f"{name}.json"

        if not config_file.exists():
            self.save_config(name, default_config)
            return _from_json(name, cls, default_config)

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                f"Error loading configuration from {config_file}: {e}"
            ) from e
        if not isinstance(config, dict):
            raise ConfigurationError(f"{config_file} must contain a JSON object")
        logger.info(f"Loaded configuration from {config_file}")

        # Ensure all default keys are present
        for key, value in default_config.items():
            config.setdefault(key, value)

        return _from_json(name, cls, config)

    def save_config(self, name: str, config: Dict[str, Any]) -> None:
        """Save configuration to file.

        Args:
            name: Configuration name
            config: Configuration dictionary
        """
        config_file = self.config_dir / f"{name}.json"
        try:
            with open(config_file, "w", encoding="utf-8") as f:
                json.dump(config, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigurationError(
                f"Error saving configuration to {config_file}: {e}"
            ) from e
        logger.info(f"Saved configuration to {config_file}")

    def get_config(self, name: str):
        """Get a typed configuration section by name."""
        if name not in self.configs:
            raise ConfigurationError(f"Unknown configuration: {name}")
        return self.configs[name]

    def update_config(self, name: str, updates: Dict[str, Any]) -> None:
        """Apply ``updates`` to a section and save it to file."""
        if name not in self.configs:
            raise ConfigurationError(f"Unknown configuration: {name}")

        config = _to_json(self.configs[name])
        config.update(updates)
        self.configs[name] = _from_json(name, self.SECTIONS[name], config)
        self.save_config(name, config)

    def reset_config(self, name: str) -> None:
        """Reset configuration to default."""
        if name not in self.default_configs:
            raise ConfigurationError(f"Unknown configuration: {name}")

        self.configs[name] = self.SECTIONS[name]()
        self.save_config(name, self.default_configs[name])

    @property
    def app(self) -> AppConfig:
        return self.configs["app"]

    @property
    def audio(self) -> AudioConfig:
        return self.configs["audio"]

    @property
    def game(self) -> GameConfig:
        return self.configs["game"]

    @property
    def console(self) -> ConsoleConfig:
        return self.configs["console"]

    @property
    def gui(self) -> GuiConfig:
        return self.configs["gui"]

    def resolve_path(self, path: Optional[str]) -> Optional[Path]:
        """Resolve a configured path relative to the config directory."""
        if path is None:
            return None
        resolved = Path(os.path.expanduser(path))
        if not resolved.is_absolute():
            resolved = self.config_dir / resolved
        return resolved
