"""
Pytest configuration and fixtures for HVAC bridge tests.
"""

import pytest
from unittest.mock import Mock

from hvac_bridge.config.settings import ConnectionOptions, PlatformOptions
from hvac_bridge.connectivity.models import Mode, Power
from hvac_bridge.connectivity.simulated import SimulatedHVAC

MAC_ADDRESS = "AA:BB:CC:DD:EE:01"

@pytest.fixture
def connection_options():
    """Connection options for a single unit."""
    return ConnectionOptions(
        username="test_user",
        password="test_password",
        mac_addresses=[MAC_ADDRESS],
    )

@pytest.fixture
def platform_options(tmp_path):
    """Platform options with short delays and a temporary cache file."""
    return PlatformOptions(
        mode_set_delay_seconds=0.01,
        reconnect_delay_seconds=0.01,
        cache_file=str(tmp_path / "accessories.yaml"),
    )

@pytest.fixture
def mock_platform(platform_options):
    """Stand-in for the platform an adapter talks through."""
    platform = Mock()
    platform.options = platform_options
    platform.connection = Mock(name="connection")
    return platform

@pytest.fixture
def make_device():
    """Factory for mocked units with fixed readings."""

    def _make_device(
        power: Power = Power.OFF,
        mode: Mode = Mode.AUTO,
        temperature: int = 72,
        room_temperature: float = 70.0,
        mac_address: str = MAC_ADDRESS,
        name: str = "Living Room",
    ):
        device = Mock(spec=SimulatedHVAC)
        device.get_power.return_value = power
        device.get_mode.return_value = mode
        device.get_temperature.return_value = temperature
        device.get_room_temperature.return_value = room_temperature
        device.get_mac_address.return_value = mac_address
        device.get_device_name.return_value = name
        return device

    return _make_device

def issued_commands(device) -> list:
    """Names of the device commands awaited so far, in order."""
    commands = ("power_on", "power_off", "set_mode", "set_temperature")
    return [name for name, _, _ in device.mock_calls if name in commands]
