"""
Outgoing frames for the addon WebSocket.

Sends never raise: a socket that has gone away is logged and reported as
``False`` so the caller decides what a lost frame means.
"""

import logging
from typing import Any, Optional

from fastapi import WebSocketDisconnect

from .types import BridgeMessage


logger = logging.getLogger("godot_bridge.transport")


async def send_to_client(ws: Any, frame: dict) -> bool:
    """Send an already encoded frame. Returns False if the socket is gone."""
    try:
        await ws.send_json(frame)
    except WebSocketDisconnect:
        logger.debug(f"Cannot send {frame.get('type')}: WebSocket disconnected")
        return False
    except Exception as e:
        logger.error(f"Failed to send {frame.get('type')}: {e}")
        return False
    return True


async def send_message(
    ws: Any,
    msg_type: str,
    body: dict,
    session: Optional[str] = None
) -> bool:
    return await send_to_client(ws, BridgeMessage.create(msg_type, body, session=session).to_dict())


async def send_welcome(ws: Any, session: str, cid: str, server_version: str) -> bool:
    """First frame on a new addon connection."""
    return await send_message(ws, "welcome", {
        "message": "Connected to godot-bridge",
        "cid": cid,
        "session": session,
        "server_version": server_version,
    })


async def send_error(ws: Any, error_message: str, error_code: Optional[str] = None) -> bool:
    body = {"error": error_message}
    if error_code:
        body["error_code"] = error_code
    return await send_message(ws, "error", body)
