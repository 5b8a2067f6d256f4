"""
Vendor HVAC data models.

"""

from typing import Dict, Any
from dataclasses import dataclass, asdict
from enum import Enum
import structlog

logger = structlog.get_logger(__name__)

class Mode(str, Enum):
    """Device operating modes."""
    OFF = "off"
    HEAT = "heat"
    COOL = "cool"
    AUTO = "auto"

class Power(str, Enum):
    """Device power flag."""
    ON = "on"
    OFF = "off"

class ConnectionEvent(str, Enum):
    """Push notifications delivered by the vendor connection."""
    COMMANDED_STATE = "commanded_state"
    ROOM_TEMPERATURE = "room_temperature"
    ERROR = "error"

@dataclass
class DeviceState:
    """Live state of one HVAC unit, as reported by the vendor service."""
    power: Power = Power.OFF
    mode: Mode = Mode.AUTO
    target_temperature_f: int = 72
    room_temperature_f: float = 72.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeviceState":
        """Create DeviceState from a vendor state payload."""
        try:
            return cls(
                power=Power(data.get("power", Power.OFF)),
                mode=Mode(data.get("mode", Mode.AUTO)),
                target_temperature_f=int(data.get("target_temperature_f", 72)),
                room_temperature_f=float(data.get("room_temperature_f", 72.0)),
            )
        except (TypeError, ValueError) as e:
            logger.error("Failed to parse DeviceState", data=data, error=str(e))
            raise ValueError(f"Invalid DeviceState data: {e}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain payload."""
        result = asdict(self)
        result["power"] = self.power.value
        result["mode"] = self.mode.value
        return result

@dataclass
class CommandedStateChange:
    """State change pushed after a command has been applied."""
    mac_address: str
    state: DeviceState

    def to_dict(self) -> Dict[str, Any]:
        return {"mac_address": self.mac_address, **self.state.to_dict()}

@dataclass
class RoomTemperatureUpdate:
    """Room temperature pushed by a unit's sensor."""
    mac_address: str
    room_temperature_f: float
