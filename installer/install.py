"""
Addon installer.

Copies the bundled Godot addon into ``<project>/addons/godot_mcp``, replacing
any previous installation. Problems are reported in the returned
InstallResult rather than raised, so the CLI can print them as-is.
"""

import logging
import re
import shutil
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional, Union

from godot.config import config

logger = logging.getLogger("godot_bridge.installer")

ADDON_DIR_NAME = "godot_mcp"
PROJECT_MARKER = "project.godot"
PLUGIN_CFG = "plugin.cfg"

_VERSION_RE = re.compile(r'^version="([^"]+)"', re.MULTILINE)


@dataclass
class InstallResult:
    success: bool
    message: str
    installed_version: Optional[str] = None
    previous_version: Optional[str] = None

    def to_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass
class AddonStatus:
    installed: bool
    version: Optional[str] = None
    path: Optional[str] = None

    def to_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}


def parse_plugin_version(plugin_cfg: Path) -> Optional[str]:
    """Read ``version="..."`` from a plugin.cfg, or None if it can't be read."""
    try:
        content = plugin_cfg.read_text(encoding="utf-8")
    except OSError:
        return None

    match = _VERSION_RE.search(content)
    return match.group(1) if match else None


def install_addon(
    project_path: Union[str, Path],
    addon_source: Optional[Path] = None
) -> InstallResult:
    """
    Install (or upgrade) the addon into a Godot project.

    Args:
        project_path: Root of the Godot project (the folder holding project.godot)
        addon_source: Addon payload to copy (defaults to the configured bundle)
    """
    absolute_path = Path(project_path).expanduser().resolve()

    if not absolute_path.exists():
        return InstallResult(success=False, message=f"Path does not exist: {absolute_path}")

    if not (absolute_path / PROJECT_MARKER).exists():
        return InstallResult(
            success=False,
            message=f"Not a Godot project: {absolute_path} (no {PROJECT_MARKER} found)"
        )

    bundled_addon = Path(addon_source or config.godot.addon_source)
    if not bundled_addon.is_dir():
        return InstallResult(
            success=False,
            message=(
                f"Addon not found in package (looked in {bundled_addon}). "
                "Set GODOT_ADDON_SOURCE to the addon folder to install from."
            )
        )

    addons_dir = absolute_path / "addons"
    target_dir = addons_dir / ADDON_DIR_NAME

    previous_version = None
    existing_cfg = target_dir / PLUGIN_CFG
    if existing_cfg.exists():
        previous_version = parse_plugin_version(existing_cfg)
        logger.info(f"Removing previous addon {previous_version} from {target_dir}")
        shutil.rmtree(target_dir)

    addons_dir.mkdir(parents=True, exist_ok=True)
    shutil.copytree(bundled_addon, target_dir, dirs_exist_ok=True)

    installed_version = parse_plugin_version(target_dir / PLUGIN_CFG)
    logger.info(f"Installed addon {installed_version} into {target_dir}")

    if previous_version:
        return InstallResult(
            success=True,
            message=f"Updated addon from {previous_version} to {installed_version}",
            installed_version=installed_version,
            previous_version=previous_version,
        )

    return InstallResult(
        success=True,
        message=f"Installed addon version {installed_version}",
        installed_version=installed_version,
    )


def get_addon_status(project_path: Union[str, Path]) -> AddonStatus:
    """Report whether the addon is installed in a project, without changing anything."""
    target_dir = Path(project_path).expanduser().resolve() / "addons" / ADDON_DIR_NAME
    plugin_cfg = target_dir / PLUGIN_CFG

    if not plugin_cfg.exists():
        return AddonStatus(installed=False)

    return AddonStatus(
        installed=True,
        version=parse_plugin_version(plugin_cfg),
        path=str(target_dir),
    )
