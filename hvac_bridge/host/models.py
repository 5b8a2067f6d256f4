"""
Accessory host object model.

Accessories own services, services own characteristics, and characteristics
dispatch reads and writes to explicitly registered handlers.
"""

from enum import Enum, IntEnum
from typing import Any, Awaitable, Callable, Dict, Optional

import structlog

from ..core.exceptions import CharacteristicError

logger = structlog.get_logger(__name__)

GetHandler = Callable[[], Awaitable[Any]]
SetHandler = Callable[[Any], Awaitable[None]]


class HapStatus(IntEnum):
    """Status codes reported to controllers."""
    SUCCESS = 0
    SERVICE_COMMUNICATION_FAILURE = -70402
    READ_ONLY_CHARACTERISTIC = -70404


class ServiceType(str, Enum):
    ACCESSORY_INFORMATION = "AccessoryInformation"
    THERMOSTAT = "Thermostat"


class CharacteristicType(str, Enum):
    NAME = "Name"
    MANUFACTURER = "Manufacturer"
    MODEL = "Model"
    SERIAL_NUMBER = "SerialNumber"
    CURRENT_HEATING_COOLING_STATE = "CurrentHeatingCoolingState"
    TARGET_HEATING_COOLING_STATE = "TargetHeatingCoolingState"
    CURRENT_TEMPERATURE = "CurrentTemperature"
    TARGET_TEMPERATURE = "TargetTemperature"
    TEMPERATURE_DISPLAY_UNITS = "TemperatureDisplayUnits"


class Characteristic:
    """A single readable and possibly writable property of a service."""

    def __init__(self, characteristic_type: CharacteristicType, value: Any = None):
        self.type = CharacteristicType(characteristic_type)
        self.value = value
        self._get_handler: Optional[GetHandler] = None
        self._set_handler: Optional[SetHandler] = None

    @property
    def writable(self) -> bool:
        return self._set_handler is not None

    def on_get(self, handler: GetHandler) -> "Characteristic":
        self._get_handler = handler
        return self

    def on_set(self, handler: SetHandler) -> "Characteristic":
        self._set_handler = handler
        return self

    async def handle_get(self) -> Any:
        """Read the value, through the get handler when one is registered."""
        if self._get_handler is None:
            return self.value
        try:
            self.value = await self._get_handler()
        except Exception as e:
            logger.error("Characteristic read failed", characteristic=self.type.value, error=str(e))
            raise CharacteristicError(
                f"Failed to read {self.type.value}: {e}",
                HapStatus.SERVICE_COMMUNICATION_FAILURE,
            ) from e
        return self.value

    async def handle_set(self, value: Any) -> None:
        """Write the value through the set handler."""
        if self._set_handler is None:
            raise CharacteristicError(
                f"{self.type.value} is read-only", HapStatus.READ_ONLY_CHARACTERISTIC
            )
        try:
            await self._set_handler(value)
        except Exception as e:
            logger.error(
                "Characteristic write failed",
                characteristic=self.type.value,
                value=str(value),
                error=str(e),
            )
            raise CharacteristicError(
                f"Failed to write {self.type.value}: {e}",
                HapStatus.SERVICE_COMMUNICATION_FAILURE,
            ) from e
        self.value = value


class Service:
    """A group of characteristics, e.g. a thermostat."""

    def __init__(self, service_type: ServiceType):
        self.type = ServiceType(service_type)
        self.characteristics: Dict[CharacteristicType, Characteristic] = {}

    def get_characteristic(self, characteristic_type: CharacteristicType) -> Characteristic:
        """Get a characteristic, creating it on first use."""
        key = CharacteristicType(characteristic_type)
        if key not in self.characteristics:
            self.characteristics[key] = Characteristic(key)
        return self.characteristics[key]

    def set_characteristic(self, characteristic_type: CharacteristicType, value: Any) -> "Service":
        self.get_characteristic(characteristic_type).value = value
        return self


class AccessoryHandle:
    """Host-owned accessory, keyed by a stable UUID."""

    def __init__(self, display_name: str, uuid: str, context: Optional[Dict[str, Any]] = None):
        self.display_name = display_name
        self.uuid = uuid
        self.context: Dict[str, Any] = context or {}
        self.services: Dict[ServiceType, Service] = {}
        self.add_service(ServiceType.ACCESSORY_INFORMATION)

    def get_service(self, service_type: ServiceType) -> Optional[Service]:
        return self.services.get(ServiceType(service_type))

    def add_service(self, service_type: ServiceType) -> Service:
        key = ServiceType(service_type)
        if key in self.services:
            raise ValueError(f"Service {key.value} already exists on {self.display_name}")
        self.services[key] = Service(key)
        return self.services[key]

    def __repr__(self) -> str:
        return f"AccessoryHandle(display_name={self.display_name!r}, uuid={self.uuid!r})"
