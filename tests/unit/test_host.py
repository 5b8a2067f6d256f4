"""
Tests for the accessory host and its object model.
"""

from unittest.mock import AsyncMock, Mock

import pytest
import yaml

from hvac_bridge.core.exceptions import CharacteristicError, RegistrationError
from hvac_bridge.host.host import AccessoryHost
from hvac_bridge.host.models import (
    AccessoryHandle,
    Characteristic,
    CharacteristicType,
    HapStatus,
    ServiceType,
)

class TestAccessoryModel:
    """Services and characteristics."""

    def test_new_handle_has_information_service(self):
        handle = AccessoryHandle("Unit", "uuid-1")

        assert handle.get_service(ServiceType.ACCESSORY_INFORMATION) is not None
        assert handle.get_service(ServiceType.THERMOSTAT) is None

    def test_duplicate_service_rejected(self):
        handle = AccessoryHandle("Unit", "uuid-1")
        handle.add_service(ServiceType.THERMOSTAT)

        with pytest.raises(ValueError):
            handle.add_service(ServiceType.THERMOSTAT)

    def test_set_characteristic_is_chainable(self):
        service = AccessoryHandle("Unit", "uuid-1").add_service(ServiceType.THERMOSTAT)

        result = service.set_characteristic(CharacteristicType.NAME, "Unit").set_characteristic(
            CharacteristicType.TARGET_TEMPERATURE, 21.0
        )

        assert result is service
        assert service.get_characteristic(CharacteristicType.TARGET_TEMPERATURE).value == 21.0

    @pytest.mark.asyncio
    async def test_get_without_handler_returns_stored_value(self):
        characteristic = Characteristic(CharacteristicType.NAME, "Unit")

        assert await characteristic.handle_get() == "Unit"

    @pytest.mark.asyncio
    async def test_get_and_set_dispatch_to_handlers(self):
        getter = AsyncMock(return_value=22.5)
        setter = AsyncMock()
        characteristic = Characteristic(CharacteristicType.TARGET_TEMPERATURE)
        characteristic.on_get(getter).on_set(setter)

        assert await characteristic.handle_get() == 22.5
        await characteristic.handle_set(20.0)

        setter.assert_awaited_once_with(20.0)
        assert characteristic.value == 20.0

    @pytest.mark.asyncio
    async def test_write_to_read_only_characteristic(self):
        characteristic = Characteristic(CharacteristicType.CURRENT_TEMPERATURE)

        with pytest.raises(CharacteristicError) as exc_info:
            await characteristic.handle_set(20.0)

        assert exc_info.value.status == HapStatus.READ_ONLY_CHARACTERISTIC

    @pytest.mark.asyncio
    async def test_failed_write_keeps_previous_value(self):
        characteristic = Characteristic(CharacteristicType.TARGET_TEMPERATURE, 21.0)
        characteristic.on_set(AsyncMock(side_effect=RuntimeError("boom")))

        with pytest.raises(CharacteristicError) as exc_info:
            await characteristic.handle_set(25.0)

        assert exc_info.value.status == HapStatus.SERVICE_COMMUNICATION_FAILURE
        assert characteristic.value == 21.0

class TestAccessoryHost:
    """Registration, cache persistence and launch events."""

    def test_duplicate_registration_rejected(self):
        host = AccessoryHost()
        host.register_platform_accessories("plugin", "platform", [AccessoryHandle("Unit", "uuid-1")])

        with pytest.raises(RegistrationError):
            host.register_platform_accessories("plugin", "platform", [AccessoryHandle("Unit", "uuid-1")])

        assert len(host.accessories) == 1

    def test_registration_persisted_to_cache(self, tmp_path):
        cache_file = tmp_path / "nested" / "accessories.yaml"
        host = AccessoryHost(str(cache_file))

        host.register_platform_accessories("plugin", "platform", [AccessoryHandle("Unit", "uuid-1")])

        data = yaml.safe_load(cache_file.read_text())
        assert data["accessories"] == [{
            "uuid": "uuid-1",
            "display_name": "Unit",
            "context": {},
            "plugin": "plugin",
            "platform": "platform",
        }]

    def test_restore_accessories_from_cache(self, tmp_path):
        cache_file = str(tmp_path / "accessories.yaml")
        AccessoryHost(cache_file).register_platform_accessories(
            "plugin", "platform", [AccessoryHandle("Unit", "uuid-1")]
        )

        host = AccessoryHost(cache_file)
        configure = Mock()
        host.restore_accessories(configure)

        configure.assert_called_once()
        restored = configure.call_args.args[0]
        assert restored.uuid == "uuid-1"
        assert restored.display_name == "Unit"
        assert host.get_accessory("uuid-1") is restored

    def test_restored_accessory_cannot_be_registered_again(self, tmp_path):
        cache_file = str(tmp_path / "accessories.yaml")
        AccessoryHost(cache_file).register_platform_accessories(
            "plugin", "platform", [AccessoryHandle("Unit", "uuid-1")]
        )

        host = AccessoryHost(cache_file)
        host.restore_accessories(Mock())

        with pytest.raises(RegistrationError):
            host.register_platform_accessories("plugin", "platform", [AccessoryHandle("Unit", "uuid-1")])

    def test_missing_cache_restores_nothing(self, tmp_path):
        host = AccessoryHost(str(tmp_path / "missing.yaml"))
        configure = Mock()

        host.restore_accessories(configure)

        configure.assert_not_called()

    def test_invalid_cache_raises(self, tmp_path):
        cache_file = tmp_path / "accessories.yaml"
        cache_file.write_text("accessories: [unclosed")

        with pytest.raises(ValueError):
            AccessoryHost(str(cache_file)).restore_accessories(Mock())

    @pytest.mark.asyncio
    async def test_finish_launching_runs_handlers(self):
        host = AccessoryHost()
        handler = AsyncMock()
        host.add_launch_handler(handler)

        await host.finish_launching()

        handler.assert_awaited_once()
        assert host.launched
