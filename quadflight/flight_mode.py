"""Flight mode selection from the RC mode switch."""

from __future__ import annotations

from collections.abc import Sequence
from enum import IntEnum

FLIGHT_MODE_CHANNEL_INDEX = 5
FLIGHT_MODE_SWITCH_US = 1500


class FlightMode(IntEnum):
    ACRO = 0
    AUTO_LEVEL = 1


def flight_mode_from_rc(channels: Sequence[int] | None) -> FlightMode:
    """Pick the flight mode from RC channel pulse widths in microseconds."""
    if channels is None:
        return FlightMode.ACRO
    if channels[FLIGHT_MODE_CHANNEL_INDEX] >= FLIGHT_MODE_SWITCH_US:
        return FlightMode.AUTO_LEVEL
    return FlightMode.ACRO


def flight_mode_name(mode: int) -> str:
    """Return the display name of a mode, or ``"UNKNOWN"``."""
    try:
        return FlightMode(mode).name
    except ValueError:
        return "UNKNOWN"