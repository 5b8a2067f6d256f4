"""
Thermostat accessory adapter.

One instance per HVAC unit. Translates host characteristic reads and writes
into queries and commands against the unit.
"""

import asyncio
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, Optional, Tuple

import structlog

from ..host.models import AccessoryHandle, CharacteristicType, ServiceType
from .conversion import (
    HeatingCoolingState,
    Mode,
    Power,
    TemperatureDisplayUnits,
    effective_mode,
    mode_to_state,
    state_to_mode,
    to_celsius,
    to_fahrenheit,
)

if TYPE_CHECKING:
    from ..connectivity.interfaces import HVACDevice
    from .platform import HVACPlatform

logger = structlog.get_logger(__name__)

Query = Callable[[], Awaitable[Any]]
Command = Callable[[Any], Awaitable[None]]


class ThermostatAccessory:
    """
    Exposes an HVAC unit as a thermostat.

    Mode and temperatures are never stored here: every read goes to the unit's
    live state. Only the temperature display units flag lives on the adapter,
    because the unit has no counterpart for it.
    """

    def __init__(
        self,
        platform: "HVACPlatform",
        accessory: AccessoryHandle,
        hvac: "HVACDevice",
    ):
        self.platform = platform
        self.accessory = accessory
        self.hvac = hvac
        self.temperature_display_units = TemperatureDisplayUnits.FAHRENHEIT
        self._pending_mode_set: Optional[asyncio.Task] = None
        self._pending_mode: Optional[Mode] = None

        (
            self.accessory.get_service(ServiceType.ACCESSORY_INFORMATION)
            .set_characteristic(CharacteristicType.MANUFACTURER, platform.options.manufacturer)
            .set_characteristic(CharacteristicType.MODEL, platform.options.model)
            .set_characteristic(CharacteristicType.SERIAL_NUMBER, hvac.get_mac_address())
        )

        self.service = (
            self.accessory.get_service(ServiceType.THERMOSTAT)
            or self.accessory.add_service(ServiceType.THERMOSTAT)
        )
        self.service.set_characteristic(CharacteristicType.NAME, hvac.get_device_name())

        for characteristic_type, (query, command) in self.handlers.items():
            characteristic = self.service.get_characteristic(characteristic_type).on_get(query)
            if command is not None:
                characteristic.on_set(command)

    @property
    def handlers(self) -> Dict[CharacteristicType, Tuple[Query, Optional[Command]]]:
        """Characteristic to (query, command) mapping registered with the host."""
        return {
            CharacteristicType.CURRENT_HEATING_COOLING_STATE: (
                self.get_current_heating_cooling_state,
                None,
            ),
            CharacteristicType.TARGET_HEATING_COOLING_STATE: (
                self.get_target_heating_cooling_state,
                self.set_target_heating_cooling_state,
            ),
            CharacteristicType.CURRENT_TEMPERATURE: (self.get_current_temperature, None),
            CharacteristicType.TARGET_TEMPERATURE: (
                self.get_target_temperature,
                self.set_target_temperature,
            ),
            CharacteristicType.TEMPERATURE_DISPLAY_UNITS: (
                self.get_temperature_display_units,
                self.set_temperature_display_units,
            ),
        }

    @property
    def pending_mode_set(self) -> Optional[asyncio.Task]:
        """The deferred mode-set scheduled after a power on, if still running."""
        if self._pending_mode_set and not self._pending_mode_set.done():
            return self._pending_mode_set
        return None

    @property
    def effective_mode(self) -> Mode:
        return effective_mode(self.hvac.get_power(), self.hvac.get_mode())

    # Reads

    async def get_current_heating_cooling_state(self) -> HeatingCoolingState:
        mode = self.effective_mode
        logger.debug("Read current heating cooling state", mode=mode.value)
        return mode_to_state(mode)

    async def get_target_heating_cooling_state(self) -> HeatingCoolingState:
        # The unit has no pending state, so target mirrors current.
        mode = self.effective_mode
        logger.debug("Read target heating cooling state", mode=mode.value)
        return mode_to_state(mode)

    async def get_current_temperature(self) -> float:
        temperature = self.hvac.get_room_temperature()
        logger.debug("Read current temperature", room_temperature_f=temperature)
        return to_celsius(temperature)

    async def get_target_temperature(self) -> float:
        temperature = self.hvac.get_temperature()
        logger.debug("Read target temperature", temperature_f=temperature)
        return to_celsius(temperature)

    async def get_temperature_display_units(self) -> TemperatureDisplayUnits:
        logger.debug("Read temperature display units", units=int(self.temperature_display_units))
        return self.temperature_display_units

    # Writes

    async def set_target_heating_cooling_state(self, state: Any) -> None:
        """
        Switch the unit to the mode matching ``state``.

        A unit that is off has to be powered on first, and it ignores a mode
        change that arrives right after the power on. No acknowledgment exists
        for the power on, so the mode-set is sent after a fixed delay instead.
        A newer write for a different mode cancels a mode-set that is still
        waiting.
        """
        requested_mode = state_to_mode(state)
        logger.debug("Write target heating cooling state", requested_mode=requested_mode.value)

        if self.pending_mode_set and self._pending_mode == requested_mode:
            logger.debug("Skipping command", reason="mode set already scheduled", mode=requested_mode.value)
            return
        self._cancel_pending_mode_set()

        power = self.hvac.get_power()

        if requested_mode == Mode.OFF:
            if power == Power.OFF:
                logger.debug("Skipping command", reason="already off")
                return
            logger.info("Sending power off", mac_address=self.hvac.get_mac_address())
            await self.hvac.power_off(self.platform.connection)
            return

        if power == Power.ON and self.hvac.get_mode() == requested_mode:
            logger.debug("Skipping command", reason="mode already active", mode=requested_mode.value)
            return

        if power == Power.OFF:
            logger.info("Sending power on", mac_address=self.hvac.get_mac_address())
            await self.hvac.power_on(self.platform.connection)
            logger.debug("Sent command", command="power_on")
            self._pending_mode = requested_mode
            self._pending_mode_set = asyncio.create_task(
                self._set_mode_after_delay(requested_mode),
                name=f"mode_set_{self.hvac.get_mac_address()}",
            )
            return

        logger.info("Setting mode", mode=requested_mode.value)
        await self.hvac.set_mode(requested_mode, self.platform.connection)

    async def set_target_temperature(self, temperature: Any) -> None:
        temperature_f = to_fahrenheit(
            float(temperature),
            self.platform.options.min_temperature_f,
            self.platform.options.max_temperature_f,
        )
        logger.debug("Write target temperature", celsius=temperature, temperature_f=temperature_f)

        if self.hvac.get_temperature() == temperature_f:
            logger.debug("Skipping command", reason="temperature already set")
            return

        logger.info(
            "Setting temperature",
            temperature_f=temperature_f,
            temperature_c=to_celsius(temperature_f),
        )
        await self.hvac.set_temperature(temperature_f, self.platform.connection)

    async def set_temperature_display_units(self, units: Any) -> None:
        self.temperature_display_units = (
            TemperatureDisplayUnits.FAHRENHEIT if units else TemperatureDisplayUnits.CELSIUS
        )
        logger.info(
            "Setting temperature display units",
            units="°F" if self.temperature_display_units else "°C",
        )

    # Deferred mode-set

    async def _set_mode_after_delay(self, mode: Mode) -> None:
        await asyncio.sleep(self.platform.options.mode_set_delay_seconds)
        logger.info("Setting mode", mode=mode.value, deferred=True)
        try:
            await self.hvac.set_mode(mode, self.platform.connection)
        except Exception as e:
            # The host write already completed; nobody is left to receive this.
            logger.error(
                "Deferred mode set failed",
                mode=mode.value,
                mac_address=self.hvac.get_mac_address(),
                error=str(e),
            )

    def _cancel_pending_mode_set(self) -> None:
        pending = self.pending_mode_set
        if pending:
            logger.debug("Cancelling pending mode set", mac_address=self.hvac.get_mac_address())
            pending.cancel()
        self._pending_mode_set = None
        self._pending_mode = None

    def close(self) -> None:
        """Tear down the adapter, dropping any mode-set still waiting."""
        self._cancel_pending_mode_set()
