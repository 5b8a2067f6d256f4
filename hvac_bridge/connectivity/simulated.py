"""
In-memory vendor connection.

Stands in for the vendor cloud session: commands are applied to local device
state and answered with the same push notifications the real service sends.
"""

import asyncio
from typing import Any, Dict, List, Optional, Sequence, Set

import structlog

from ..core.exceptions import ConnectivityError
from .interfaces import EventHandler
from .models import (
    CommandedStateChange,
    ConnectionEvent,
    DeviceState,
    Mode,
    Power,
    RoomTemperatureUpdate,
)

logger = structlog.get_logger(__name__)


class SimulatedHVAC:
    """A single simulated unit."""

    def __init__(self, mac_address: str, name: str, state: Optional[DeviceState] = None):
        self.mac_address = mac_address
        self.name = name
        self.state = state or DeviceState()

    def get_power(self) -> Power:
        return self.state.power

    def get_mode(self) -> Mode:
        return self.state.mode

    def get_temperature(self) -> int:
        return self.state.target_temperature_f

    def get_room_temperature(self) -> float:
        return self.state.room_temperature_f

    def get_mac_address(self) -> str:
        return self.mac_address

    def get_device_name(self) -> str:
        return self.name

    async def power_on(self, connection: "SimulatedConnection") -> None:
        await connection.send_command(self, "power_on", power=Power.ON)

    async def power_off(self, connection: "SimulatedConnection") -> None:
        await connection.send_command(self, "power_off", power=Power.OFF)

    async def set_mode(self, mode: Mode, connection: "SimulatedConnection") -> None:
        await connection.send_command(self, "set_mode", mode=Mode(mode))

    async def set_temperature(self, temperature: int, connection: "SimulatedConnection") -> None:
        await connection.send_command(self, "set_temperature", target_temperature_f=int(temperature))


class SimulatedConnection:
    """
    Vendor connection backed by in-memory units.

    ``fail_next`` and ``inject_error`` let callers exercise the failure paths
    the real service produces.
    """

    def __init__(
        self,
        devices: Optional[Dict[str, DeviceState]] = None,
        command_latency: float = 0.0,
    ):
        self._initial_states = dict(devices or {})
        self.command_latency = command_latency
        self.connected = False
        self.event_handlers: Dict[str, List[EventHandler]] = {}
        self.commands: List[tuple] = []
        self._units: Dict[str, SimulatedHVAC] = {}
        self._subscribed: List[str] = []
        self._failing: Set[str] = set()

    @property
    def hvacs(self) -> List[SimulatedHVAC]:
        """Units subscribed on the current session."""
        return [self._units[mac] for mac in self._subscribed if mac in self._units]

    async def establish_connection(
        self, username: str, password: str, ip: Optional[str] = None
    ) -> None:
        """Open the session."""
        if "establish_connection" in self._failing:
            self._failing.discard("establish_connection")
            raise ConnectivityError("Failed to connect to HVAC service", {"ip": ip})

        logger.info("Connected to simulated HVAC service", username=username, ip=ip or "cloud")
        self.connected = True
        self._subscribed = []

    async def subscribe_to_hvacs(self, mac_addresses: Sequence[str]) -> None:
        """Subscribe to units; each subscription yields a fresh device object."""
        if not self.connected:
            raise ConnectivityError("Not connected to HVAC service")

        for index, mac in enumerate(mac_addresses, start=1):
            previous = self._units.get(mac)
            state = previous.state if previous else self._initial_states.get(mac, DeviceState())
            self._units[mac] = SimulatedHVAC(mac, f"HVAC {index}", state)
        self._subscribed = list(mac_addresses)

        logger.debug("Subscribed to HVAC units", count=len(self._subscribed))

    def add_event_handler(self, event_type: str, handler: EventHandler) -> None:
        """Add handler for a push notification type."""
        self.event_handlers.setdefault(str(ConnectionEvent(event_type).value), []).append(handler)
        logger.debug("Added event handler", event_type=event_type)

    def fail_next(self, command: str) -> None:
        """Make the next call of ``command`` raise ``ConnectivityError``."""
        self._failing.add(command)

    async def send_command(self, hvac: SimulatedHVAC, command: str, **changes: Any) -> None:
        """Apply a command to a unit and push the resulting state."""
        if not self.connected:
            raise ConnectivityError("Not connected to HVAC service", {"command": command})
        if command in self._failing:
            self._failing.discard(command)
            raise ConnectivityError(
                f"Command {command} failed", {"mac_address": hvac.mac_address}
            )

        if self.command_latency:
            await asyncio.sleep(self.command_latency)

        self.commands.append((hvac.mac_address, command, *changes.values()))
        for field_name, value in changes.items():
            setattr(hvac.state, field_name, value)

        await self._dispatch(
            ConnectionEvent.COMMANDED_STATE,
            CommandedStateChange(hvac.mac_address, hvac.state),
        )

    async def update_room_temperature(self, mac_address: str, temperature_f: float) -> None:
        """Simulate a room sensor reading."""
        unit = self._units[mac_address]
        unit.state.room_temperature_f = temperature_f
        await self._dispatch(
            ConnectionEvent.ROOM_TEMPERATURE,
            RoomTemperatureUpdate(mac_address, temperature_f),
        )

    async def inject_error(self, error: Exception) -> None:
        """Simulate a session failure."""
        self.connected = False
        await self._dispatch(ConnectionEvent.ERROR, error)

    async def _dispatch(self, event_type: ConnectionEvent, payload: Any) -> None:
        for handler in self.event_handlers.get(event_type.value, []):
            try:
                await handler(payload)
            except Exception as e:
                logger.error("Error in event handler", event_type=event_type.value, error=str(e))

    async def close(self) -> None:
        """Close the session."""
        self.connected = False
        logger.info("Disconnected from simulated HVAC service")
