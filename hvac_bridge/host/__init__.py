"""Accessory host integration for the HVAC bridge."""

from .host import AccessoryHost
from .identifiers import generate_uuid
from .models import AccessoryHandle, Characteristic, CharacteristicType, Service, ServiceType

__all__ = [
    "AccessoryHost",
    "generate_uuid",
    "AccessoryHandle",
    "Characteristic",
    "CharacteristicType",
    "Service",
    "ServiceType",
]
