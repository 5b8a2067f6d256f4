"""Configuration management for the HVAC bridge."""

from .settings import Settings, ConnectionOptions, PlatformOptions
from .loader import ConfigLoader

__all__ = ["Settings", "ConnectionOptions", "PlatformOptions", "ConfigLoader"]
