"""
Configuration and logging setup for the Godot bridge server.

Provides centralized configuration with environment variable support
and sensible defaults for the server and the addon connection.
"""

import os
import sys
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


# =============================================================================
# Logging Configuration
# =============================================================================

# ANSI color codes for terminal output
class LogColors:
    """ANSI escape codes for colored terminal output."""
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"

    BRIGHT_BLACK = "\033[90m"
    BRIGHT_RED = "\033[91m"
    BRIGHT_BLUE = "\033[94m"
    BRIGHT_MAGENTA = "\033[95m"
    BRIGHT_CYAN = "\033[96m"
    BRIGHT_WHITE = "\033[97m"


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors and component-based formatting."""

    # Component colors and icons
    COMPONENT_STYLES = {
        "godot_bridge": (LogColors.BRIGHT_CYAN, "🚀"),
        "godot_bridge.godot": (LogColors.MAGENTA, "🎮"),
        "godot_bridge.router": (LogColors.CYAN, "📡"),
        "godot_bridge.transport": (LogColors.BRIGHT_BLACK, "📦"),
        "godot_bridge.tools": (LogColors.BRIGHT_MAGENTA, "🛠"),
        "godot_bridge.installer": (LogColors.BLUE, "📥"),
    }

    # Level colors and labels
    LEVEL_STYLES = {
        logging.DEBUG: (LogColors.BRIGHT_BLACK, "DBG"),
        logging.INFO: (LogColors.GREEN, "INF"),
        logging.WARNING: (LogColors.YELLOW, "WRN"),
        logging.ERROR: (LogColors.RED, "ERR"),
        logging.CRITICAL: (LogColors.BRIGHT_RED + LogColors.BOLD, "CRT"),
    }

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors and sys.stdout.isatty()

    def format(self, record: logging.LogRecord) -> str:
        component_color, icon = self.COMPONENT_STYLES.get(
            record.name,
            (LogColors.WHITE, "•")
        )

        # Check for parent logger match
        if record.name not in self.COMPONENT_STYLES:
            for comp_name, style in self.COMPONENT_STYLES.items():
                if record.name.startswith(comp_name + "."):
                    component_color, icon = style
                    break

        level_color, level_label = self.LEVEL_STYLES.get(
            record.levelno,
            (LogColors.WHITE, "???")
        )

        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        short_name = record.name.replace("godot_bridge.", "").upper()
        if short_name == "GODOT_BRIDGE":
            short_name = "SERVER"

        if self.use_colors:
            line = (
                f"{LogColors.DIM}{timestamp}{LogColors.RESET} "
                f"{level_color}{level_label}{LogColors.RESET} "
                f"{icon} {component_color}{short_name:10}{LogColors.RESET} "
                f"{LogColors.BRIGHT_WHITE}{record.getMessage()}{LogColors.RESET}"
            )
        else:
            # Plain output (for file logging or non-TTY)
            line = f"{timestamp} {level_label} {short_name:10} {record.getMessage()}"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)

        return line


def setup_logging(
    level: int = logging.INFO,
    use_colors: bool = True
) -> logging.Logger:
    """
    Configure and return the main logger.

    Args:
        level: Logging level
        use_colors: Whether to use colored output

    Returns:
        Configured logger instance
    """
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(ColoredFormatter(use_colors=use_colors))
    console_handler.setLevel(level)

    root.setLevel(level)
    root.addHandler(console_handler)

    bridge_logger = logging.getLogger("godot_bridge")
    bridge_logger.setLevel(level)
    bridge_logger.propagate = True

    for child in ["server", "godot", "router", "transport", "tools", "installer"]:
        logging.getLogger(f"godot_bridge.{child}").setLevel(level)

    # Silence noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    uvicorn_access = logging.getLogger("uvicorn.access")
    uvicorn_access.handlers = []
    uvicorn_access.addHandler(console_handler)

    uvicorn_error = logging.getLogger("uvicorn.error")
    uvicorn_error.handlers = []
    uvicorn_error.addHandler(console_handler)

    logging.getLogger("uvicorn").setLevel(logging.WARNING)

    return bridge_logger


def print_startup_banner(host: str, port: int, version: str) -> None:
    """Print the startup banner."""
    C = LogColors
    banner = f"""
{C.BRIGHT_CYAN}  godot-bridge {version}{C.RESET}

  {C.GREEN}▸ Server:{C.WHITE}  http://{host}:{port}
  {C.MAGENTA}▸ Godot:{C.WHITE}   ws://{host}:{port}/ws/godot
  {C.BLUE}▸ Tools:{C.WHITE}   http://{host}:{port}/tools
  {C.YELLOW}▸ Status:{C.WHITE}  http://{host}:{port}/godot/status
{C.RESET}"""
    print(banner)


# =============================================================================
# Server Configuration
# =============================================================================

# Bundled addon payload shipped next to the packages
DEFAULT_ADDON_SOURCE = Path(__file__).resolve().parent.parent / "addon"


@dataclass
class ServerConfig:
    """Main server configuration."""
    host: str = "127.0.0.1"
    port: int = 6550

    # CORS settings
    cors_origins: list = field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = True

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Create config from environment variables."""
        return cls(
            host=os.getenv("SERVER_HOST", "127.0.0.1"),
            port=int(os.getenv("SERVER_PORT", "6550")),
            log_level=os.getenv("LOG_LEVEL", "INFO")
        )


@dataclass
class GodotConfig:
    """Addon connection configuration."""
    command_timeout: float = 30.0  # seconds

    addon_source: Path = DEFAULT_ADDON_SOURCE

    @classmethod
    def from_env(cls) -> "GodotConfig":
        """Create config from environment variables."""
        return cls(
            command_timeout=float(os.getenv("GODOT_COMMAND_TIMEOUT", "30.0")),
            addon_source=Path(os.getenv("GODOT_ADDON_SOURCE", str(DEFAULT_ADDON_SOURCE)))
        )


# =============================================================================
# Composite Configuration
# =============================================================================

@dataclass
class Config:
    """Complete application configuration."""
    server: ServerConfig = field(default_factory=ServerConfig)
    godot: GodotConfig = field(default_factory=GodotConfig)

    @classmethod
    def from_env(cls) -> "Config":
        """Create complete config from environment."""
        return cls(
            server=ServerConfig.from_env(),
            godot=GodotConfig.from_env()
        )


config = Config.from_env()
