"""
Mappings between host characteristic values and the device model.

The host speaks Celsius and numeric heating/cooling states; the device speaks
Fahrenheit, a power flag and a mode string.
"""

import math
from enum import IntEnum
from typing import Any

from ..connectivity.models import Mode, Power

MIN_TEMPERATURE_F = 62
MAX_TEMPERATURE_F = 86


class HeatingCoolingState(IntEnum):
    """Host heating/cooling state codes."""
    OFF = 0
    HEAT = 1
    COOL = 2
    AUTO = 3


class TemperatureDisplayUnits(IntEnum):
    """Host display unit codes."""
    CELSIUS = 0
    FAHRENHEIT = 1


_STATE_TO_MODE = {
    HeatingCoolingState.OFF: Mode.OFF,
    HeatingCoolingState.HEAT: Mode.HEAT,
    HeatingCoolingState.COOL: Mode.COOL,
    HeatingCoolingState.AUTO: Mode.AUTO,
}

_MODE_TO_STATE = {mode: state for state, mode in _STATE_TO_MODE.items()}


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def to_celsius(fahrenheit: float) -> float:
    """Convert Fahrenheit to Celsius with one decimal place."""
    return _round_half_up((fahrenheit - 32) * 5 / 9 * 10) / 10


def to_fahrenheit(
    celsius: float,
    minimum: int = MIN_TEMPERATURE_F,
    maximum: int = MAX_TEMPERATURE_F,
) -> int:
    """Convert Celsius to whole Fahrenheit, clamped to the unit's range."""
    return min(max(_round_half_up(celsius * 9 / 5 + 32), minimum), maximum)


def state_to_mode(state: Any) -> Mode:
    """
    Translate a host heating/cooling state code to a device mode.

    Unrecognized codes fall back to ``Mode.OFF`` rather than raising.
    """
    if isinstance(state, float) and state.is_integer():
        state = int(state)
    if isinstance(state, bool) or not isinstance(state, int):
        return Mode.OFF
    try:
        return _STATE_TO_MODE[HeatingCoolingState(state)]
    except ValueError:
        return Mode.OFF


def mode_to_state(mode: Any) -> HeatingCoolingState:
    """Translate a device mode to a host heating/cooling state code."""
    try:
        return _MODE_TO_STATE[Mode(mode)]
    except ValueError:
        return HeatingCoolingState.OFF


def effective_mode(power: Any, mode: Any) -> Mode:
    """The mode the unit is actually running in; ``off`` whenever unpowered."""
    if power == Power.OFF:
        return Mode.OFF
    try:
        return Mode(mode)
    except ValueError:
        return Mode.OFF
