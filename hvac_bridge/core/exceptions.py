"""
Custom exceptions for the HVAC bridge.

"""

class BridgeError(Exception):
    """Base exception for the HVAC bridge."""

    def __init__(self, message: str, context: dict | None = None):
        self.message = message
        self.context = context or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.context:
            return f"{self.message} (context: {self.context})"
        return self.message

class ConfigurationError(BridgeError):
    """Configuration-related errors."""

    pass

class ConnectivityError(BridgeError):
    """Vendor service connection, query or command errors."""

    pass

class RegistrationError(BridgeError):
    """Accessory registration errors, e.g. a duplicate UUID."""

    pass

class CharacteristicError(BridgeError):
    """Characteristic read/write failure reported back to the host."""

    def __init__(self, message: str, status: int, context: dict | None = None):
        self.status = status
        super().__init__(message, context)
