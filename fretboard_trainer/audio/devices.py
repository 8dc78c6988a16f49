"""Audio input device discovery."""

from typing import Any, Dict, List, Optional, Union

import sounddevice as sd

from ..errors import DeviceError
from ..logger import get_logger

logger = get_logger(__name__)


def list_input_devices() -> List[Dict[str, Any]]:
    """Return every device that can record, with its index under ``"index"``."""
    try:
        devices = sd.query_devices()
    except Exception as e:
        raise DeviceError(f"Cannot query audio devices: {e}") from e

    result = []
    for device_id, device in enumerate(devices):
        if device["max_input_channels"] > 0:
            info = dict(device)
            info["index"] = device_id
            result.append(info)
    return result


def find_input_device(device: Optional[Union[int, str]]) -> Optional[int]:
    """Resolve a device index or (partial, case-insensitive) name.

    Returns None for the system default input.

    Raises:
        DeviceError: If no recording device matches
    """
    if device is None or device == "":
        return None

    inputs = list_input_devices()
    if isinstance(device, int) or str(device).isdigit():
        device_id = int(device)
        if any(d["index"] == device_id for d in inputs):
            return device_id
        raise DeviceError(f"No input device with index {device_id}")

    wanted = str(device).lower()
    for info in inputs:
        if wanted in info["name"].lower():
            logger.info(f"Using input device {info['index']}: {info['name']}")
            return info["index"]
    raise DeviceError(f"No input device matching '{device}'")


def describe_input_devices() -> str:
    """Human readable listing used by ``--list-devices``."""
    lines = []
    try:
        default_input = sd.default.device[0]
    except Exception:
        default_input = None
    for info in list_input_devices():
        marker = "*" if info["index"] == default_input else " "
        lines.append(
            f"{marker} {info['index']:3d}: {info['name']} "
            f"({info['max_input_channels']} in, {info['default_samplerate']:.0f} Hz)"
        )
    if not lines:
        lines.append("No input devices found")
    return "\n".join(lines)
