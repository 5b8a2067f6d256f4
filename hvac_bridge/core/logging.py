"""
Structured logging with colored console output.
"""

import sys
import logging
from datetime import datetime

import structlog
from colorama import init, Fore, Style

# Initialize colorama for cross-platform colored output
init(autoreset=True)

LEVEL_COLORS = {
    "debug": Fore.CYAN,
    "info": Fore.BLUE,
    "warning": Fore.YELLOW,
    "error": Fore.RED,
    "critical": Fore.RED + Style.BRIGHT,
}

LEVEL_MAP = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class ColoredConsoleRenderer:
    """Console renderer that highlights device command events."""

    def _event_color(self, event: str, level_color: str) -> str:
        lowered = event.lower()
        if "power on" in lowered:
            return Fore.GREEN + Style.BRIGHT
        if "power off" in lowered:
            return Fore.WHITE
        if "mode" in lowered:
            return Fore.MAGENTA + Style.BRIGHT
        if "temperature" in lowered:
            return Fore.CYAN + Style.BRIGHT
        if "skipping" in lowered:
            return Fore.WHITE + Style.DIM
        if "reconnect" in lowered or "error" in lowered:
            return Fore.RED + Style.BRIGHT
        if "accessory" in lowered:
            return Fore.YELLOW + Style.BRIGHT
        return level_color

    def _format_timestamp(self, timestamp: str) -> str:
        if not timestamp:
            return ""
        try:
            dt = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
        except ValueError:
            return timestamp[:8]
        return dt.strftime("%H:%M:%S")

    def _format_context(self, event_dict: dict) -> list[str]:
        context_parts = []
        for key, value in event_dict.items():
            if key in ("temperature_f", "room_temperature_f"):
                context_parts.append(f"{Fore.CYAN}{key}={value}°F")
            elif key in ("temperature_c", "celsius"):
                context_parts.append(f"{Fore.CYAN}{key}={value}°C")
            elif key in ("mode", "requested_mode", "effective_mode"):
                context_parts.append(f"{Fore.MAGENTA}{key}={value}")
            elif key in ("mac_address", "uuid"):
                context_parts.append(f"{Fore.GREEN}{key}={value}")
            elif isinstance(value, bool):
                color = Fore.GREEN if value else Fore.RED
                context_parts.append(f"{color}{key}={value}")
            elif isinstance(value, (int, float)):
                context_parts.append(f"{Fore.CYAN}{key}={value}")
            elif isinstance(value, str) and len(value) < 60:
                context_parts.append(f"{key}={value}")
        return context_parts

    def __call__(self, logger, name, event_dict):
        """Render log entry with colors."""

        event = str(event_dict.pop("event", ""))
        level = event_dict.pop("level", "info")
        logger_name = event_dict.pop("logger", name)
        time_str = self._format_timestamp(event_dict.pop("timestamp", ""))
        exception = event_dict.pop("exception", None)

        level_color = LEVEL_COLORS.get(level, Fore.WHITE)

        parts = []
        if time_str:
            parts.append(f"{Fore.WHITE}{Style.DIM}[{time_str}]")
        parts.append(f"{level_color}{level.upper():<5}")
        if logger_name:
            short_name = logger_name.split(".")[-1]
            parts.append(f"{Fore.WHITE}{Style.DIM}{short_name}:")
        parts.append(f"{self._event_color(event, level_color)}{event}")

        context_parts = self._format_context(event_dict)
        if context_parts:
            parts.append(f"{Fore.WHITE}{Style.DIM}({', '.join(context_parts)})")

        line = " ".join(parts) + Style.RESET_ALL
        if exception:
            line = f"{line}\n{exception}"
        print(line, file=sys.stderr)

        # Already printed
        return ""


def setup_colored_logging(log_level: str = "info") -> None:
    """Setup colored structlog output and the stdlib log level."""

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        ColoredConsoleRenderer(),
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        level=LEVEL_MAP.get(str(log_level).lower(), logging.INFO),
        force=True,
        handlers=[],  # structlog renders to stderr itself
    )
