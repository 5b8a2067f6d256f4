"""
Dependency injection container for the HVAC bridge.

"""

from dependency_injector import containers, providers
import structlog

from hvac_bridge.config.loader import ConfigLoader
from hvac_bridge.connectivity.simulated import SimulatedConnection
from hvac_bridge.host.host import AccessoryHost

logger = structlog.get_logger(__name__)


class ApplicationContainer(containers.DeclarativeContainer):
    """
    Main dependency injection container.

    The vendor connection defaults to the in-memory simulation; a real
    connection is plugged in with ``container.hvac_connection.override(...)``.
    """

    config = providers.Configuration()

    settings_from_file = providers.Singleton(
        ConfigLoader.load_settings, config_file=config.config_file
    )

    accessory_host = providers.Singleton(
        AccessoryHost, cache_file=settings_from_file.provided.platform_options.cache_file
    )

    hvac_connection = providers.Singleton(SimulatedConnection)

    hvac_platform = providers.Singleton(
        "hvac_bridge.bridge.platform.HVACPlatform",
        host=accessory_host,
        connection=hvac_connection,
        connection_options=settings_from_file.provided.connection_options,
        platform_options=settings_from_file.provided.platform_options,
    )


class ContainerBuilder:
    """Builder for setting up the application container."""

    def __init__(self):
        self.container = ApplicationContainer()
        self._config_file: str = ConfigLoader.get_default_config_path()

    def with_config_file(self, config_file: str) -> "ContainerBuilder":
        """Set configuration file path."""
        self._config_file = config_file
        return self

    def build(self) -> ApplicationContainer:
        """Build and configure the container."""

        logger.info("Building application container", config_file=self._config_file)

        self.container.config.from_dict({"config_file": self._config_file})

        self.container.wire(modules=["hvac_bridge.main"])

        logger.info("Application container built successfully")
        return self.container


def create_container(config_file: str | None = None) -> ApplicationContainer:
    """
    Convenience function to create a configured container.
    """

    builder = ContainerBuilder()

    if config_file:
        builder.with_config_file(config_file)

    return builder.build()
