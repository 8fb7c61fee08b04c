"""
Shared connection utilities for the Godot tools.

Tools call ``call_godot()``, which routes through the GodotManager's
WebSocket. The manager is registered once during server startup.
"""
import json
import logging
from typing import Any, Optional, Protocol

from langchain_core.tools import ToolException

from godot.errors import GodotConnectionError

logger = logging.getLogger("godot_bridge.tools")


class CommandChannel(Protocol):
    """What the tools need from a Godot connection."""

    is_connected: bool
    addon_version: Optional[str]
    project_path: Optional[str]
    project_name: Optional[str]
    godot_version: Optional[str]
    versions_match: bool

    async def send_command(self, command_name: str, params: Optional[dict] = None) -> dict:
        ...


class GodotCommandError(ToolException):
    """The addon answered a command with an ``error`` field."""


# Global reference to the godot manager - set during server startup
_godot_manager: Optional[CommandChannel] = None


def set_godot_manager(manager: Optional[CommandChannel]) -> None:
    """
    Set the global godot manager reference.
    Called from server.py during startup.
    """
    global _godot_manager
    _godot_manager = manager
    logger.info("Godot manager registered with tools")


def get_godot_manager() -> CommandChannel:
    """Get the registered godot manager."""
    if _godot_manager is None:
        raise GodotConnectionError("Godot manager not initialized. Tools cannot communicate with Godot.")
    return _godot_manager


async def call_godot(
    godot: CommandChannel,
    command_name: str,
    params: Optional[dict] = None
) -> dict[str, Any]:
    """
    Send one command to Godot and return the response.

    Channel failures (not connected, timeout) propagate unchanged.

    Raises:
        GodotCommandError: If the response carries a non-empty ``error``
    """
    logger.debug(f"call_godot: command={command_name}, params={json.dumps(params)}")

    if params is None:
        result = await godot.send_command(command_name)
    else:
        result = await godot.send_command(command_name, params)

    error = result.get("error")
    if error:
        logger.warning(f"Godot command {command_name} failed: {error}")
        raise GodotCommandError(error)

    return result
