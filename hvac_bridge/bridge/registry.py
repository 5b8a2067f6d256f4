"""
Device registry.

Reconciles the units reported by the vendor connection with the accessories
the host already knows about.
"""

from typing import TYPE_CHECKING, Dict, Iterable, List

import structlog

from ..host.identifiers import generate_uuid
from ..host.models import AccessoryHandle
from .accessory import ThermostatAccessory

if TYPE_CHECKING:
    from ..connectivity.interfaces import HVACDevice
    from ..host.host import AccessoryHost
    from .platform import HVACPlatform

logger = structlog.get_logger(__name__)


class DeviceRegistry:
    """
    Tracks accessory handles and the adapter bound to each one.

    Accessories must only be registered with the host once; a handle that is
    already known (restored from the host cache or registered on an earlier
    pass) is reused instead.
    """

    def __init__(self, host: "AccessoryHost", platform: "HVACPlatform"):
        self.host = host
        self.platform = platform
        self._accessories: Dict[str, AccessoryHandle] = {}
        self._adapters: Dict[str, ThermostatAccessory] = {}

    @property
    def accessories(self) -> List[AccessoryHandle]:
        return list(self._accessories.values())

    @property
    def adapters(self) -> Dict[str, ThermostatAccessory]:
        return dict(self._adapters)

    def configure_accessory(self, accessory: AccessoryHandle) -> None:
        """Track an accessory the host restored from its cache."""
        logger.info("Loading accessory from cache", display_name=accessory.display_name)
        self._accessories[accessory.uuid] = accessory

    def reconcile(
        self,
        devices: Iterable["HVACDevice"],
        restored: Iterable[AccessoryHandle] = (),
    ) -> None:
        """Bind an adapter to every device, registering only unknown ones."""
        for accessory in restored:
            self.configure_accessory(accessory)

        for device in devices:
            uuid = generate_uuid(device.get_mac_address())
            existing = self._accessories.get(uuid)

            if existing:
                logger.info(
                    "Restoring existing accessory from cache",
                    display_name=existing.display_name,
                    uuid=uuid,
                )
                self._bind(existing, device)
                continue

            logger.info("Adding new accessory", display_name=device.get_device_name(), uuid=uuid)
            accessory = self.host.create_accessory(device.get_device_name(), uuid)
            self._bind(accessory, device)
            try:
                self.host.register_platform_accessories(
                    self.platform.options.plugin_name,
                    self.platform.options.platform_name,
                    [accessory],
                )
            except Exception:
                self._adapters.pop(uuid).close()
                raise
            self._accessories[uuid] = accessory

    def _bind(self, accessory: AccessoryHandle, device: "HVACDevice") -> None:
        previous = self._adapters.pop(accessory.uuid, None)
        if previous:
            previous.close()
        self._adapters[accessory.uuid] = ThermostatAccessory(self.platform, accessory, device)

    def close(self) -> None:
        """Tear down every adapter."""
        for adapter in self._adapters.values():
            adapter.close()
        self._adapters.clear()
