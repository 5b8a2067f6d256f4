"""Core infrastructure for the HVAC bridge."""

from .exceptions import (
    BridgeError,
    CharacteristicError,
    ConfigurationError,
    ConnectivityError,
    RegistrationError,
)

__all__ = [
    "BridgeError",
    "CharacteristicError",
    "ConfigurationError",
    "ConnectivityError",
    "RegistrationError",
]
