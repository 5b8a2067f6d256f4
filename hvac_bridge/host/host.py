"""
In-process accessory host.

Creates and registers accessory handles, persists the registered set to a YAML
cache and hands cached handles back to the platform on the next start.
"""

from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

import structlog
import yaml

from ..core.exceptions import RegistrationError
from .models import AccessoryHandle

logger = structlog.get_logger(__name__)

LaunchHandler = Callable[[], Awaitable[None]]


class AccessoryHost:
    """Accessory lifecycle host with a YAML-backed accessory cache."""

    def __init__(self, cache_file: Optional[str] = None):
        self.cache_file = Path(cache_file).expanduser() if cache_file else None
        self._accessories: Dict[str, AccessoryHandle] = {}
        self._owners: Dict[str, Dict[str, str]] = {}
        self._launch_handlers: List[LaunchHandler] = []
        self.launched = False

    @property
    def accessories(self) -> List[AccessoryHandle]:
        return list(self._accessories.values())

    def get_accessory(self, uuid: str) -> Optional[AccessoryHandle]:
        return self._accessories.get(uuid)

    def create_accessory(self, display_name: str, uuid: str) -> AccessoryHandle:
        """Create an unregistered accessory handle."""
        return AccessoryHandle(display_name, uuid)

    def register_platform_accessories(
        self, plugin_name: str, platform_name: str, accessories: Sequence[AccessoryHandle]
    ) -> None:
        """Register new accessories; each UUID may be registered only once."""
        for accessory in accessories:
            if accessory.uuid in self._accessories:
                raise RegistrationError(
                    "Cannot add a bridged accessory with the same UUID as another",
                    {"uuid": accessory.uuid, "display_name": accessory.display_name},
                )

        for accessory in accessories:
            self._accessories[accessory.uuid] = accessory
            self._owners[accessory.uuid] = {"plugin": plugin_name, "platform": platform_name}
            logger.info(
                "Registered accessory",
                display_name=accessory.display_name,
                uuid=accessory.uuid,
                platform=platform_name,
            )

        self._save_cache()

    def restore_accessories(self, configure: Callable[[AccessoryHandle], None]) -> None:
        """Load cached accessories and pass each one to ``configure``."""
        for entry in self._load_cache():
            accessory = AccessoryHandle(
                entry["display_name"], entry["uuid"], entry.get("context") or {}
            )
            self._accessories[accessory.uuid] = accessory
            self._owners[accessory.uuid] = {
                "plugin": entry.get("plugin", ""),
                "platform": entry.get("platform", ""),
            }
            configure(accessory)

    def add_launch_handler(self, handler: LaunchHandler) -> None:
        self._launch_handlers.append(handler)

    async def finish_launching(self) -> None:
        """Signal that cached accessories are restored and run launch handlers."""
        self.launched = True
        logger.debug("Host finished launching", handlers_count=len(self._launch_handlers))
        for handler in self._launch_handlers:
            await handler()

    def _load_cache(self) -> List[Dict[str, Any]]:
        if not self.cache_file or not self.cache_file.exists():
            return []

        try:
            with open(self.cache_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.error("Failed to parse accessory cache", cache_file=str(self.cache_file), error=str(e))
            raise ValueError(f"Invalid accessory cache: {e}")

        entries = data.get("accessories", [])
        logger.debug("Loaded accessory cache", cache_file=str(self.cache_file), count=len(entries))
        return entries

    def _save_cache(self) -> None:
        if not self.cache_file:
            return

        entries = [
            {
                "uuid": accessory.uuid,
                "display_name": accessory.display_name,
                "context": accessory.context,
                **self._owners.get(accessory.uuid, {}),
            }
            for accessory in self._accessories.values()
        ]

        self.cache_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.cache_file, "w", encoding="utf-8") as f:
            yaml.safe_dump({"accessories": entries}, f, sort_keys=False)
