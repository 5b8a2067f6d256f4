"""
Tests for configuration system.
"""

import pytest
from pathlib import Path
import tempfile
import yaml

from hvac_bridge.config.settings import Settings, LogLevel
from hvac_bridge.config.loader import ConfigLoader

def base_config():
    return {
        "connection_options": {
            "username": "test_user",
            "password": "test_password",
            "mac_addresses": ["AA:BB:CC:DD:EE:01"]
        }
    }

class TestConfigLoader:
    """Test configuration loading functionality."""

    def test_load_yaml_valid_config(self):
        """Test loading valid YAML configuration."""

        config_data = base_config()

        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            yaml.dump(config_data, f)
            temp_path = f.name

        try:
            loaded_data = ConfigLoader.load_yaml(temp_path)
            assert loaded_data == config_data
        finally:
            Path(temp_path).unlink()

    def test_load_yaml_file_not_found(self):
        """Test loading non-existent YAML file."""

        with pytest.raises(FileNotFoundError):
            ConfigLoader.load_yaml("nonexistent.yaml")

    def test_load_yaml_empty_file(self, tmp_path):
        """Test loading an empty YAML file."""

        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")

        with pytest.raises(ValueError):
            ConfigLoader.load_yaml(str(config_file))

    def test_load_yaml_invalid_syntax(self, tmp_path):
        """Test loading malformed YAML."""

        config_file = tmp_path / "broken.yaml"
        config_file.write_text("connection_options: [unclosed")

        with pytest.raises(ValueError):
            ConfigLoader.load_yaml(str(config_file))

    def test_apply_env_overrides(self, monkeypatch):
        """Test environment variable substitution."""

        monkeypatch.setenv("TEST_PASSWORD", "env_password_value")

        config_data = {
            "connection_options": {
                "password": "${TEST_PASSWORD}",
                "mac_addresses": ["AA:BB:CC:DD:EE:01"]
            }
        }

        result = ConfigLoader.apply_env_overrides(config_data)

        assert result["connection_options"]["password"] == "env_password_value"
        assert result["connection_options"]["mac_addresses"] == ["AA:BB:CC:DD:EE:01"]

    def test_apply_env_overrides_missing_var(self):
        """Test behavior when environment variable is missing."""

        config_data = {
            "connection_options": {
                "password": "${MISSING_VAR}"
            }
        }

        result = ConfigLoader.apply_env_overrides(config_data)

        # Placeholder is left unchanged
        assert result["connection_options"]["password"] == "${MISSING_VAR}"

    def test_load_settings_from_file(self, tmp_path, monkeypatch):
        """Test full load with env substitution and validation."""

        monkeypatch.setenv("TEST_USERNAME", "env_user")
        config_data = base_config()
        config_data["connection_options"]["username"] = "${TEST_USERNAME}"
        config_data["platform_options"] = {"mode_set_delay_seconds": 5}
        config_file = tmp_path / "bridge_config.yaml"
        config_file.write_text(yaml.dump(config_data))

        settings = ConfigLoader.load_settings(str(config_file))

        assert settings.connection_options.username == "env_user"
        assert settings.platform_options.mode_set_delay_seconds == 5

    def test_default_config_path_from_env(self, monkeypatch):
        """Test config path lookup honours the environment variable."""

        monkeypatch.setenv("HVAC_BRIDGE_CONFIG_FILE", "/tmp/custom.yaml")

        assert ConfigLoader.get_default_config_path() == "/tmp/custom.yaml"

class TestSettings:
    """Test Pydantic settings validation."""

    def test_valid_settings_creation(self):
        """Test creating valid settings with defaults."""

        settings = Settings(**base_config())

        assert settings.connection_options.username == "test_user"
        assert settings.connection_options.ip is None
        assert settings.app_options.log_level == LogLevel.INFO
        assert settings.platform_options.mode_set_delay_seconds == 10.0
        assert settings.platform_options.reconnect_delay_seconds == 30.0
        assert settings.platform_options.min_temperature_f == 62
        assert settings.platform_options.max_temperature_f == 86
        assert settings.platform_options.manufacturer == "MrCool"
        assert settings.platform_options.model == "BREEZ-I"

    def test_missing_credentials(self):
        """Test connection options are required."""

        with pytest.raises(ValueError):
            Settings(connection_options={"username": "test_user"})

    @pytest.mark.parametrize("address", ["AABBCCDDEE01", "AA:BB:CC:DD:EE", "GG:BB:CC:DD:EE:01"])
    def test_mac_address_validation(self, address):
        """Test MAC address format validation."""

        config = base_config()
        config["connection_options"]["mac_addresses"] = [address]

        with pytest.raises(ValueError):
            Settings(**config)

    def test_temperature_range_validation(self):
        """Test the unit temperature range must be ordered."""

        config = base_config()
        config["platform_options"] = {"min_temperature_f": 86, "max_temperature_f": 62}

        with pytest.raises(ValueError):
            Settings(**config)

    def test_negative_delay_rejected(self):
        """Test delays cannot be negative."""

        config = base_config()
        config["platform_options"] = {"mode_set_delay_seconds": -1}

        with pytest.raises(ValueError):
            Settings(**config)

    def test_log_level_enum_validation(self):
        """Test log level enum validation."""

        for level in ["debug", "info", "warning", "error"]:
            config = base_config()
            config["app_options"] = {"log_level": level}

            settings = Settings(**config)
            assert settings.app_options.log_level.value == level

        config = base_config()
        config["app_options"] = {"log_level": "verbose"}
        with pytest.raises(ValueError):
            Settings(**config)
