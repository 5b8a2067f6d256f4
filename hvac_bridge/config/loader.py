"""
Configuration loader for the HVAC bridge.

Reads the YAML bridge configuration and resolves ``${ENV_VAR}`` placeholders.
"""

import os
import yaml
from typing import Dict, Any
from pathlib import Path
import structlog
from hvac_bridge.config.settings import Settings

logger = structlog.get_logger(__name__)

CONFIG_ENV_VAR = "HVAC_BRIDGE_CONFIG_FILE"
DEFAULT_CONFIG_PATH = "config/bridge_config.yaml"
SEARCH_PATHS = (
    DEFAULT_CONFIG_PATH,
    "bridge_config.yaml",
    Path.home() / ".config" / "hvac-bridge" / "bridge_config.yaml",
    "/etc/hvac-bridge/bridge_config.yaml",
)
SECRET_MARKERS = ("password", "token")

class ConfigLoader:
    """Loads bridge settings from YAML."""

    @staticmethod
    def load_yaml(file_path: str) -> Dict[str, Any]:
        """Parse a YAML file into a mapping; empty or malformed files are rejected."""
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error("Invalid YAML in configuration", file_path=file_path, error=str(e))
            raise ValueError(f"Invalid YAML configuration: {e}")

        if config_data is None:
            raise ValueError(f"Empty configuration file: {file_path}")

        return config_data

    @staticmethod
    def apply_env_overrides(config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Replace ``${ENV_VAR}`` strings with the variable's value, when it is set."""

        def _resolve(obj) -> Any:
            if isinstance(obj, dict):
                return {k: _resolve(v) for k, v in obj.items()}
            if isinstance(obj, list):
                return [_resolve(item) for item in obj]
            if not (isinstance(obj, str) and obj.startswith("${") and obj.endswith("}")):
                return obj

            env_var = obj[2:-1]
            value = os.getenv(env_var)
            if value is None:
                logger.warning("Environment variable not set", env_var=env_var)
                return obj
            secret = any(marker in env_var.lower() for marker in SECRET_MARKERS)
            logger.debug("Resolved placeholder", env_var=env_var, value="***" if secret else value)
            return value

        return _resolve(config_data)

    @classmethod
    def load_settings(cls, config_file: str) -> Settings:
        """Load, resolve and validate the bridge settings."""
        logger.info("Loading bridge configuration", config_file=config_file)

        try:
            settings = Settings(**cls.apply_env_overrides(cls.load_yaml(config_file)))
        except Exception as e:
            logger.error("Failed to load configuration", config_file=config_file, error=str(e))
            raise

        logger.info(
            "Configuration validated",
            devices_count=len(settings.connection_options.mac_addresses),
            platform_name=settings.platform_options.platform_name,
        )
        return settings

    @staticmethod
    def get_default_config_path() -> str:
        """The configured path, else the first existing search path, else the default."""
        config_path = os.getenv(CONFIG_ENV_VAR)
        if config_path:
            return config_path

        for path in SEARCH_PATHS:
            if Path(path).exists():
                return str(path)

        return DEFAULT_CONFIG_PATH
