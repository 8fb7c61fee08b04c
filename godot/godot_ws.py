"""
Godot WebSocket endpoint - the Godot addon connects here as CLIENT.

This endpoint handles:
- Connection acceptance
- Session/connection sequence from query params
- Delegation to GodotManager for all connection logic
"""

import asyncio
from typing import Optional

from fastapi import APIRouter, WebSocket, Query, HTTPException
from fastapi.responses import JSONResponse

from .errors import GodotConnectionError
from .manager import GodotManager


router = APIRouter(tags=["Godot WebSocket"])

# Set by the main server module
_godot_manager: Optional[GodotManager] = None


def init_godot_routes(godot_manager: GodotManager) -> None:
    """Initialize route dependencies."""
    global _godot_manager
    _godot_manager = godot_manager


@router.websocket("/ws/godot")
async def godot_websocket_endpoint(
    websocket: WebSocket,
    session: Optional[str] = Query(None, description="Session identifier"),
    conn: int = Query(0, description="Connection sequence number for monotonic takeover")
) -> None:
    """
    WebSocket endpoint for the Godot addon.

    Protocol:
        1. Addon connects with optional query params
        2. Server sends welcome message with its version
        3. Addon sends hello with project info
        4. Server sends commands; the addon answers each with the same message id

    Example hello body:
        {
            "project_path": "/path/to/project",
            "project_name": "My Game",
            "godot_version": "4.3.stable",
            "addon_version": "0.4.0"
        }
    """
    if _godot_manager is None:
        await websocket.close(code=1011, reason="Server not initialized")
        return

    await _godot_manager.handle_connection(
        websocket=websocket,
        session_id=session,
        conn_seq=conn
    )


@router.get("/godot/status")
async def godot_status() -> JSONResponse:
    """Get addon connection status."""
    if _godot_manager is None:
        return JSONResponse(
            status_code=503,
            content={"status": "unavailable", "message": "Server not initialized"}
        )

    return JSONResponse(content={
        "status": "connected" if _godot_manager.is_connected else "disconnected",
        "project": _godot_manager.project_path,
        "project_name": _godot_manager.project_name,
        "godot_version": _godot_manager.godot_version,
        "addon_version": _godot_manager.addon_version,
        "versions_match": _godot_manager.versions_match,
        "last_seen": _godot_manager.last_seen,
        "connections": _godot_manager.connection_count
    })


@router.post("/godot/command/{command_name}")
async def send_godot_command(
    command_name: str,
    body: dict
) -> JSONResponse:
    """
    Send a raw command to the addon (for testing/debugging).

    Args:
        command_name: Addon command (e.g., "get_input_map")
        body: Command parameters
    """
    if _godot_manager is None:
        raise HTTPException(status_code=503, detail="Server not initialized")

    try:
        result = await _godot_manager.send_command(command_name, body)
        return JSONResponse(content=result)
    except GodotConnectionError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except asyncio.TimeoutError:
        raise HTTPException(status_code=504, detail="Command timed out")
