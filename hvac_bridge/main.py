"""
Main application entry point for the HVAC bridge.

"""

import asyncio
import sys
import signal
from pathlib import Path
from typing import Optional
import structlog
from dependency_injector.wiring import inject, Provide

from hvac_bridge.core.container import ApplicationContainer, create_container
from hvac_bridge.core.exceptions import BridgeError, ConfigurationError
from hvac_bridge.core.logging import setup_colored_logging
from hvac_bridge.bridge.platform import HVACPlatform
from hvac_bridge.config.loader import ConfigLoader
from hvac_bridge.host.host import AccessoryHost

setup_colored_logging("info")

logger = structlog.get_logger(__name__)

VERSION = "0.1.0"


class BridgeApplication:
    """Main bridge application class."""

    def __init__(
        self, config_file: Optional[str] = None, cli_log_level: Optional[str] = None
    ):
        self.config_file = config_file or ConfigLoader.get_default_config_path()
        self.cli_log_level = cli_log_level
        self.container: Optional[ApplicationContainer] = None
        self.host: Optional[AccessoryHost] = None
        self.platform: Optional[HVACPlatform] = None
        self.shutdown_event = asyncio.Event()

    def _setup_logging(self) -> None:
        """Setup logging from configuration unless the CLI already chose a level."""

        if self.cli_log_level is not None or not self.container:
            return

        settings = self.container.settings_from_file()
        config_log_level = settings.app_options.log_level.value
        setup_colored_logging(config_log_level)
        logger.info("Log level set from config", level=config_log_level)

    async def setup(self) -> None:
        """Setup application dependencies."""

        logger.info("Setting up HVAC bridge", config_file=self.config_file)

        try:
            if not Path(self.config_file).exists():
                raise ConfigurationError(
                    f"Configuration file not found: {self.config_file}"
                )

            self.container = create_container(self.config_file)
            self._setup_logging()

            self.host = self.container.accessory_host()
            self.platform = self.container.hvac_platform()

            logger.info("HVAC bridge setup completed")

        except Exception as e:
            logger.error("Failed to setup HVAC bridge", error=str(e))
            raise BridgeError(f"Application setup failed: {e}")

    async def run(self) -> None:
        """Run until a shutdown signal arrives."""

        logger.info("Starting HVAC bridge")

        try:
            self._setup_signal_handlers()

            if self.host:
                await self.host.finish_launching()

            await log_status()

            logger.info("HVAC bridge is running. Use Ctrl+C to stop")

            await self.shutdown_event.wait()

        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt, shutting down...")
        except Exception as e:
            logger.error("Application error", error=str(e))
            raise
        finally:
            await self.shutdown()

    async def shutdown(self) -> None:
        """Graceful shutdown of the application."""

        logger.info("Shutting down HVAC bridge")

        try:
            if self.platform:
                await self.platform.stop()

            logger.info("HVAC bridge stopped gracefully")

        except Exception as e:
            logger.error("Error during shutdown", error=str(e))

    def _setup_signal_handlers(self) -> None:
        """Setup signal handlers for graceful shutdown."""

        def signal_handler(signum, frame):
            logger.info("Received shutdown signal", signal=signum)
            self.shutdown_event.set()

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)


@inject
async def log_status(
    platform: HVACPlatform = Provide[ApplicationContainer.hvac_platform],
) -> None:
    """Log one line per bridged device."""

    status = await platform.get_status()
    logger.info(
        "Platform status",
        connected=status["platform"]["connected"],
        devices_count=status["platform"]["devices_count"],
    )
    for mac_address, device in status["devices"].items():
        logger.info(
            "Bridged accessory",
            mac_address=mac_address,
            name=device["name"],
            effective_mode=device["effective_mode"],
            temperature_c=device["target_temperature_c"],
        )


# CLI Interface
async def main_async(
    config_file: Optional[str] = None, cli_log_level: Optional[str] = None
) -> None:
    """Async main function."""

    app = BridgeApplication(config_file, cli_log_level)

    try:
        await app.setup()
        await app.run()
    except BridgeError as e:
        logger.error("HVAC bridge error", error=str(e))
        sys.exit(1)


def main() -> None:
    """Main entry point for the application."""

    import argparse

    parser = argparse.ArgumentParser(
        description="HVAC bridge - expose vendor HVAC units as thermostat accessories",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  hvac-bridge                                 # Run with default config
  hvac-bridge --config custom_config.yaml     # Run with custom config
  hvac-bridge --log-level debug               # Run with debug logging
        """,
    )

    parser.add_argument(
        "--config",
        "-c",
        type=str,
        help="Path to configuration file (default: auto-detect)",
    )

    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        help="Set logging level (default: from config, else info)",
    )

    parser.add_argument(
        "--validate-config", action="store_true", help="Validate configuration and exit"
    )

    parser.add_argument("--version", action="version", version=f"hvac-bridge {VERSION}")

    args = parser.parse_args()

    if args.log_level:
        setup_colored_logging(args.log_level)

    if args.validate_config:
        config_file = args.config or ConfigLoader.get_default_config_path()
        try:
            settings = ConfigLoader.load_settings(config_file)
        except Exception as e:
            print(f"Configuration validation failed: {e}")
            sys.exit(1)

        print(f"Configuration is valid: {config_file}")
        print(f"   Log level: {settings.app_options.log_level.value}")
        print(f"   Platform: {settings.platform_options.platform_name}")
        print(f"   Devices: {len(settings.connection_options.mac_addresses)}")
        print(f"   Mode set delay: {settings.platform_options.mode_set_delay_seconds}s")
        sys.exit(0)

    try:
        asyncio.run(main_async(args.config, args.log_level))
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    main()
