"""Vendor HVAC connectivity for the bridge."""

from .interfaces import HVACConnection, HVACDevice
from .models import ConnectionEvent, DeviceState, Mode, Power
from .simulated import SimulatedConnection, SimulatedHVAC

__all__ = [
    "HVACConnection",
    "HVACDevice",
    "ConnectionEvent",
    "DeviceState",
    "Mode",
    "Power",
    "SimulatedConnection",
    "SimulatedHVAC",
]
