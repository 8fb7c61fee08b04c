"""
Godot addon connection management.

The Godot addon connects to this server over WebSocket. Tools talk to it
through ``GodotManager.send_command``, one request/response round trip per
call.

Usage:
    from godot import GodotManager, Config

    config = Config.from_env()
    manager = GodotManager(config=config.godot)

    # In FastAPI endpoint
    @app.websocket("/ws/godot")
    async def godot_endpoint(websocket: WebSocket):
        await manager.handle_connection(websocket)
"""

from .types import (
    BridgeMessage,
    ExtendedConnection,
    ConnectionSource,
    ConnectionState,
    CloseCode,
    ACK_REQUIRED_TYPES
)

from .config import (
    Config,
    ServerConfig,
    GodotConfig,
    config,
    setup_logging,
)

from .errors import GodotConnectionError

from .router import (
    MessageRouter,
    RouterCallbacks
)

from .transport import (
    send_to_client,
    send_message,
    send_welcome,
    send_error,
)

from .manager import GodotManager

__all__ = [
    # Types
    "BridgeMessage",
    "ExtendedConnection",
    "ConnectionSource",
    "ConnectionState",
    "CloseCode",
    "ACK_REQUIRED_TYPES",

    # Configuration
    "Config",
    "ServerConfig",
    "GodotConfig",
    "config",
    "setup_logging",

    # Errors
    "GodotConnectionError",

    # Router
    "MessageRouter",
    "RouterCallbacks",

    # Transport
    "send_to_client",
    "send_message",
    "send_welcome",
    "send_error",

    # Manager
    "GodotManager",
]
