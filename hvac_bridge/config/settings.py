"""
Configuration models for the HVAC bridge.

Type-safe configuration structures with Pydantic validation.
"""

import re
from typing import List, Optional
from enum import Enum
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MAC_ADDRESS_PATTERN = re.compile(r"^[0-9A-Fa-f]{2}(:[0-9A-Fa-f]{2}){5}$")

class LogLevel(str, Enum):
    """Logging levels."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

class ConnectionOptions(BaseModel):
    """Vendor HVAC service connection options."""
    username: str = Field(..., description="Vendor account username")
    password: str = Field(..., description="Vendor account password")
    ip: Optional[str] = Field(default=None, description="Local bridge address, if any")
    mac_addresses: List[str] = Field(default_factory=list, description="HVAC units to subscribe to")

    @field_validator('mac_addresses')
    @classmethod
    def validate_mac_addresses(cls, v):
        """Validate MAC address format."""
        for address in v:
            if not MAC_ADDRESS_PATTERN.match(address):
                raise ValueError(f'Invalid MAC address: {address}')
        return v

class PlatformOptions(BaseModel):
    """Accessory platform options."""
    platform_name: str = Field(default="MrCoolHVAC", description="Platform name used at registration")
    plugin_name: str = Field(default="hvac-bridge", description="Plugin name used at registration")
    manufacturer: str = Field(default="MrCool", description="Accessory information manufacturer")
    model: str = Field(default="BREEZ-I", description="Accessory information model")
    mode_set_delay_seconds: float = Field(default=10.0, description="Delay between power on and mode set")
    reconnect_delay_seconds: float = Field(default=30.0, description="Delay before reconnecting after an error")
    min_temperature_f: int = Field(default=62, description="Lowest target temperature the unit accepts")
    max_temperature_f: int = Field(default=86, description="Highest target temperature the unit accepts")
    cache_file: str = Field(default="~/.config/hvac-bridge/accessories.yaml", description="Accessory cache file")

    @field_validator('mode_set_delay_seconds', 'reconnect_delay_seconds')
    @classmethod
    def validate_delays(cls, v):
        """Validate delays are non-negative."""
        if v < 0:
            raise ValueError('Delay must not be negative')
        return v

    @model_validator(mode='after')
    def validate_temperature_range(self):
        """Validate the supported temperature range."""
        if self.min_temperature_f >= self.max_temperature_f:
            raise ValueError('min_temperature_f must be lower than max_temperature_f')
        return self

class ApplicationOptions(BaseModel):
    """Application-level configuration options."""
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")

class Settings(BaseSettings):
    """Main application settings."""
    app_options: ApplicationOptions = Field(default_factory=ApplicationOptions)
    connection_options: ConnectionOptions
    platform_options: PlatformOptions = Field(default_factory=PlatformOptions)

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        extra="ignore",
    )
