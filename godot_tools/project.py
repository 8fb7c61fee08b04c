"""
THE ARCHIVIST: project
"I need to know what project I'm working in."
Consumes: get_project_info, get_project_settings
"""
import json
from typing import Literal, Optional
from pydantic import BaseModel, Field
from langchain_core.tools import tool

from version import get_server_version

from .connection import CommandChannel, call_godot, get_godot_manager

INSTALL_COMMAND = "godot-bridge --install-addon"


class ProjectSchema(BaseModel):
    action: Literal["get_info", "get_settings", "addon_status"] = Field(
        ..., description="get_info, get_settings, addon_status (check addon/server version compatibility)."
    )
    category: Optional[str] = Field(
        None, description="Settings category to filter by (get_settings only, use 'input' for input mappings)."
    )
    include_builtin: Optional[bool] = Field(
        None, description="Include built-in ui_* actions (get_settings with category='input' only)."
    )


def addon_status_report(godot: CommandChannel) -> dict:
    """Connection state plus a recommendation when something needs fixing."""
    server_version = get_server_version()

    if not godot.is_connected:
        return {
            "connected": False,
            "server_version": server_version,
            "recommendation": (
                "Not connected to Godot. Ask user for their project path, "
                f"then install with: {INSTALL_COMMAND} <path>"
            ),
        }

    project_path = godot.project_path
    versions_match = godot.versions_match

    return {
        "connected": True,
        "server_version": server_version,
        "addon_version": godot.addon_version or "unknown",
        "versions_match": versions_match,
        "project_path": project_path,
        "project_name": godot.project_name,
        "godot_version": godot.godot_version,
        "recommendation": None if versions_match else (
            f'Version mismatch. Close Godot and run: {INSTALL_COMMAND} "{project_path}"'
        ),
    }


async def execute_project(
    action: str,
    godot: CommandChannel,
    category: Optional[str] = None,
    include_builtin: Optional[bool] = None
) -> str:
    if action == "get_info":
        result = await call_godot(godot, "get_project_info")
        return json.dumps(result, indent=2)

    if action == "get_settings":
        params = {}
        if category is not None:
            params["category"] = category
        if include_builtin is not None:
            params["include_builtin"] = include_builtin
        result = await call_godot(godot, "get_project_settings", params)
        return json.dumps(result.get("settings", {}), indent=2)

    if action == "addon_status":
        return json.dumps(addon_status_report(godot), indent=2)

    raise ValueError(f"Unknown action: {action}")


@tool("project", args_schema=ProjectSchema)
async def godot_project(
    action: Literal["get_info", "get_settings", "addon_status"],
    category: Optional[str] = None,
    include_builtin: Optional[bool] = None
) -> str:
    """
    Get project information and settings.

    Actions:
    - 'get_info': Project name, path, Godot version and main scene.
    - 'get_settings': Project settings, optionally filtered by category.
    - 'addon_status': Check that the Godot addon is connected and matches this server's version.
    """
    return await execute_project(action, get_godot_manager(), category, include_builtin)
