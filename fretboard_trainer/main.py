"""Command line entry point for Fretboard Trainer."""

import sys
from typing import Optional

import click

from .app import App
from .audio.audio_input import WavFileInput
from .core.config import ConfigManager
from .errors import FretboardTrainerError
from .logger import get_logger
from .logging_config import setup_logging

logger = get_logger(__name__)

UI_MODES = {
    "console": ("console",),
    "gui": ("gui",),
    "all": ("console", "gui"),
    "none": (),
}


def create_audio_input(config: ConfigManager, device=None, wav: Optional[str] = None, loop: bool = False):
    app_cfg = config.app
    if wav:
        return WavFileInput(wav, frames_per_buffer=app_cfg.block_size, loop=loop)

    # sounddevice needs PortAudio, only load it for live capture
    from .audio.devices import find_input_device
    from .audio.sound_device import SoundDeviceInput

    if device is None:
        device = app_cfg.device
    return SoundDeviceInput(
        device_id=find_input_device(device),
        sample_rate=app_cfg.sample_rate,
        frames_per_buffer=app_cfg.block_size,
        channels=app_cfg.channels,
    )


def run_session(
    config_dir: Optional[str] = None,
    device=None,
    wav: Optional[str] = None,
    loop: bool = False,
    ui: str = "console",
    debug: bool = False,
) -> int:
    """Load the configuration and play until the session ends.

    Returns:
        Process exit code, 1 after a fatal error
    """
    try:
        config = ConfigManager(config_dir)
    except FretboardTrainerError as e:
        click.echo(f"Configuration error: {e}", err=True)
        return 1

    log_path = config.resolve_path(config.app.log_path)
    setup_logging(level="DEBUG" if debug else None, log_path=log_path)
    logger.info("Starting Fretboard Trainer")

    try:
        audio_input = create_audio_input(config, device, wav, loop)
        app = App(config, audio_input, ui=UI_MODES[ui])
        app.run()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except FretboardTrainerError as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        click.echo(f"Error: {e}", err=True)
        return 1

    logger.info("Fretboard Trainer exited normally")
    return 0


@click.command()
@click.option(
    "--config-dir",
    default=None,
    help="Directory holding the JSON configuration (default: ~/.config/fretboard_trainer)",
)
@click.option(
    "--device",
    default=None,
    help="Audio input device ID or name (default: from config, else system default)",
)
@click.option("--wav", default=None, help="Play a WAV file instead of listening to a device")
@click.option("--loop", is_flag=True, help="Restart the WAV file when it ends")
@click.option(
    "--ui",
    type=click.Choice(sorted(UI_MODES)),
    default="console",
    help="Renderers to open",
)
@click.option("--list-devices", is_flag=True, help="List audio input devices and exit")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(config_dir, device, wav, loop, ui, list_devices, debug):
    """Play the note shown on the fretboard until it is recognized."""
    if list_devices:
        from .audio.devices import describe_input_devices

        try:
            click.echo(describe_input_devices())
        except FretboardTrainerError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)
        return

    sys.exit(run_session(config_dir, device, wav, loop, ui, debug))


if __name__ == "__main__":
    main()
