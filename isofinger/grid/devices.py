"""Device presets — which grid geometry each supported controller uses.

Only layout facts live here; MIDI port handling and SysEx belong to the
host application.
"""

from __future__ import annotations

from typing import Any

from .hex_grid import HexGrid
from .square_grid import SquareGrid


Grid = HexGrid | SquareGrid

DEVICES: dict[str, dict[str, Any]] = {
    "exquis": {
        "name": "Exquis",
        "topology": "hex",
        "mode": "intervals",
        "base_midi": 48,
    },
    "launchpad-x": {
        "name": "Launchpad X",
        "topology": "square",
        "mode": "fourths",
        "base_midi": 36,
    },
    "launchpad-pro-mk1": {
        "name": "Launchpad Pro Mk1",
        "topology": "square",
        "mode": "sequential",
        "base_midi": 48,
    },
}

_TOPOLOGIES: dict[str, type] = {
    "hex": HexGrid,
    "square": SquareGrid,
}


def make_grid(topology: str, mode: str | None = None) -> Grid:
    """Build a grid for *topology* (``"hex"`` or ``"square"``).

    Args:
        topology: Grid topology name.
        mode: Layout mode; the topology's default when omitted.

    Raises:
        ValueError: For an unknown topology or mode.
    """
    try:
        grid_cls = _TOPOLOGIES[topology]
    except KeyError:
        raise ValueError(
            f"Unknown grid topology '{topology}'. Must be one of {sorted(_TOPOLOGIES)}"
        ) from None
    return grid_cls() if mode is None else grid_cls(mode)


def list_devices() -> list[dict[str, str]]:
    """Supported devices as ``{"type", "name"}`` dicts, in display order."""
    return [{"type": key, "name": preset["name"]} for key, preset in DEVICES.items()]


def get_device(device_type: str) -> dict[str, Any]:
    if device_type not in DEVICES:
        raise ValueError(
            f"Unknown device type '{device_type}'. Must be one of {sorted(DEVICES)}"
        )
    return dict(DEVICES[device_type])


def grid_for_device(device_type: str, mode: str | None = None) -> Grid:
    """Grid geometry for a device preset, optionally overriding its mode."""
    preset = get_device(device_type)
    return make_grid(preset["topology"], mode or preset["mode"])


def detect_device(port_name: str | None) -> str | None:
    """Guess the device type from a MIDI port name.

    Returns:
        A key of :data:`DEVICES`, or ``None`` if nothing matches.
    """
    if not port_name:
        return None

    name = port_name.lower()
    if "exquis" in name:
        return "exquis"
    if "launchpad" in name and "x" in name:
        return "launchpad-x"
    # The Mk1 often shows up as plain "Launchpad Pro"
    if "launchpad" in name and "pro" in name:
        if "mk3" not in name and "mk 3" not in name:
            return "launchpad-pro-mk1"
    return None
