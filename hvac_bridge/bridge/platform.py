"""
HVAC platform - connects the vendor service to the accessory host.

"""

import asyncio
from typing import Any, Dict, Optional

import structlog

from ..config.settings import ConnectionOptions, PlatformOptions
from ..connectivity.interfaces import HVACConnection
from ..connectivity.models import (
    CommandedStateChange,
    ConnectionEvent,
    RoomTemperatureUpdate,
)
from ..core.exceptions import BridgeError
from ..host.host import AccessoryHost
from .conversion import to_celsius
from .registry import DeviceRegistry

logger = structlog.get_logger(__name__)


class HVACPlatform:
    """
    Platform orchestrator.

    Restores cached accessories, discovers units once the host has finished
    launching and reconnects after connection errors.
    """

    def __init__(
        self,
        host: AccessoryHost,
        connection: HVACConnection,
        connection_options: ConnectionOptions,
        platform_options: PlatformOptions,
    ):
        self.host = host
        self.connection = connection
        self.connection_options = connection_options
        self.options = platform_options
        self.registry = DeviceRegistry(host, self)

        self.running = False
        self._reconnect_task: Optional[asyncio.Task] = None

        self.connection.add_event_handler(
            ConnectionEvent.COMMANDED_STATE.value, self._handle_commanded_state
        )
        self.connection.add_event_handler(
            ConnectionEvent.ROOM_TEMPERATURE.value, self._handle_room_temperature
        )
        self.connection.add_event_handler(ConnectionEvent.ERROR.value, self._handle_error)

        # Cached accessories come back before launch finishes, so they are
        # known before the first discovery pass.
        self.host.restore_accessories(self.registry.configure_accessory)
        self.host.add_launch_handler(self.start)

        logger.info(
            "Finished initializing platform",
            platform_name=platform_options.platform_name,
            devices_count=len(connection_options.mac_addresses),
        )

    async def start(self) -> None:
        """Connect, subscribe and discover; runs when the host finishes launching."""

        if self.running:
            logger.warning("HVAC platform already running")
            return

        logger.info("Starting HVAC platform")

        try:
            await self._connect_and_discover()
        except Exception as e:
            logger.error("Failed to start HVAC platform", error=str(e))
            raise BridgeError(f"Failed to start HVAC platform: {e}")

        self.running = True
        logger.info("HVAC platform started successfully", devices_count=len(self.registry.adapters))

    async def stop(self) -> None:
        """Stop reconnecting, tear down adapters and close the connection."""

        logger.info("Stopping HVAC platform")

        self.running = False

        if self._reconnect_task and not self._reconnect_task.done():
            self._reconnect_task.cancel()
            try:
                await self._reconnect_task
            except asyncio.CancelledError:
                pass
        self._reconnect_task = None

        self.registry.close()

        try:
            await self.connection.close()
        except Exception as e:
            logger.warning("Error closing HVAC connection", error=str(e))

        logger.info("HVAC platform stopped")

    def discover_devices(self) -> None:
        """Register or restore an accessory for every subscribed unit."""
        devices = list(self.connection.hvacs)
        logger.debug("Discovering devices", devices_count=len(devices))
        self.registry.reconcile(devices)

    async def _connect_and_discover(self) -> None:
        logger.debug("Connecting to API")
        await self.connection.establish_connection(
            self.connection_options.username,
            self.connection_options.password,
            self.connection_options.ip,
        )
        await self.connection.subscribe_to_hvacs(self.connection_options.mac_addresses)
        self.discover_devices()

    # Connection events

    async def _handle_commanded_state(self, change: CommandedStateChange) -> None:
        logger.debug("Commanded state change", **change.to_dict())

    async def _handle_room_temperature(self, update: RoomTemperatureUpdate) -> None:
        logger.info(
            "Updated room temperature",
            mac_address=update.mac_address,
            room_temperature_f=update.room_temperature_f,
        )

    async def _handle_error(self, error: Any) -> None:
        logger.error("Communication error", error=str(error))

        if not self.running:
            logger.debug("Platform not running, not reconnecting")
            return

        if self._reconnect_task and not self._reconnect_task.done():
            logger.debug("Reconnection already scheduled")
            return

        logger.error("Reconnecting", delay_seconds=self.options.reconnect_delay_seconds)
        self._reconnect_task = asyncio.create_task(self._reconnect())

    async def _reconnect(self) -> None:
        """Reconnect after a fixed delay, retrying until it succeeds or the platform stops."""
        while True:
            await asyncio.sleep(self.options.reconnect_delay_seconds)
            if not self.running:
                return
            try:
                await self._connect_and_discover()
            except Exception as e:
                logger.warning(
                    "Reconnection attempt failed",
                    delay_seconds=self.options.reconnect_delay_seconds,
                    error=str(e),
                )
                continue

            logger.info("Reconnected to HVAC service", devices_count=len(self.registry.adapters))
            return

    @property
    def reconnect_task(self) -> Optional[asyncio.Task]:
        return self._reconnect_task

    # Public API methods

    async def get_status(self) -> Dict[str, Any]:
        """Get connection and per-device status."""

        devices = {}
        for uuid, adapter in self.registry.adapters.items():
            hvac = adapter.hvac
            devices[hvac.get_mac_address()] = {
                "uuid": uuid,
                "name": hvac.get_device_name(),
                "effective_mode": adapter.effective_mode.value,
                "target_temperature_c": to_celsius(hvac.get_temperature()),
                "room_temperature_c": to_celsius(hvac.get_room_temperature()),
                "mode_set_pending": adapter.pending_mode_set is not None,
            }

        return {
            "platform": {
                "running": self.running,
                "connected": self.connection.connected,
                "reconnecting": self._reconnect_task is not None and not self._reconnect_task.done(),
                "devices_count": len(devices),
            },
            "devices": devices,
        }

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.stop()
