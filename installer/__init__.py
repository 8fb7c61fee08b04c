from .install import (
    AddonStatus,
    InstallResult,
    get_addon_status,
    install_addon,
    parse_plugin_version,
)

__all__ = [
    "AddonStatus",
    "InstallResult",
    "get_addon_status",
    "install_addon",
    "parse_plugin_version",
]
