"""Thermostat bridge between the vendor HVAC service and the accessory host."""

from .accessory import ThermostatAccessory
from .platform import HVACPlatform
from .registry import DeviceRegistry

__all__ = ["ThermostatAccessory", "HVACPlatform", "DeviceRegistry"]
