"""
Contracts the bridge consumes from the vendor connectivity layer.

The connectivity layer owns the session to the vendor service, keeps each
unit's state current from push notifications and exposes imperative commands.
Every command is a coroutine and may raise ``ConnectivityError``.
"""

from typing import Any, Awaitable, Callable, List, Optional, Protocol, Sequence

from .models import Mode, Power

EventHandler = Callable[[Any], Awaitable[None]]


class HVACDevice(Protocol):
    """One HVAC unit as seen through the vendor connection."""

    def get_power(self) -> Power: ...

    def get_mode(self) -> Mode: ...

    def get_temperature(self) -> int: ...

    def get_room_temperature(self) -> float: ...

    def get_mac_address(self) -> str: ...

    def get_device_name(self) -> str: ...

    async def power_on(self, connection: "HVACConnection") -> None: ...

    async def power_off(self, connection: "HVACConnection") -> None: ...

    async def set_mode(self, mode: Mode, connection: "HVACConnection") -> None: ...

    async def set_temperature(self, temperature: int, connection: "HVACConnection") -> None: ...


class HVACConnection(Protocol):
    """Session to the vendor service shared by all units."""

    connected: bool

    @property
    def hvacs(self) -> List[HVACDevice]: ...

    async def establish_connection(
        self, username: str, password: str, ip: Optional[str] = None
    ) -> None: ...

    async def subscribe_to_hvacs(self, mac_addresses: Sequence[str]) -> None: ...

    def add_event_handler(self, event_type: str, handler: EventHandler) -> None: ...

    async def close(self) -> None: ...
