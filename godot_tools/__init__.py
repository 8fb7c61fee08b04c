"""
Godot Tools Package - tools for driving a running Godot editor or game.

Each tool validates its arguments, sends one command to the Godot addon
through the registered GodotManager, and formats the reply as a string.

Tools:
- input: The Puppeteer - input map, timed action sequences, typing, mouse
- project: The Archivist - project info, settings, addon compatibility
"""

from .connection import (
    CommandChannel,
    GodotCommandError,
    call_godot,
    get_godot_manager,
    set_godot_manager,
)
from .input import godot_input, parse_input_request, execute_input
from .project import godot_project, execute_project

godot_tools = [
    godot_input,    # The Puppeteer - input injection
    godot_project,  # The Archivist - project metadata
]

__all__ = [
    # Connection utilities
    "CommandChannel",
    "GodotCommandError",
    "call_godot",
    "get_godot_manager",
    "set_godot_manager",
    # Input tool
    "godot_input",
    "parse_input_request",
    "execute_input",
    # Project tool
    "godot_project",
    "execute_project",
    # Tool collection
    "godot_tools",
]
