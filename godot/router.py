"""
Incoming frame handling for the addon WebSocket.

Each frame is decoded and checked, then handled in this order:
- heartbeats are answered, acks and pongs are dropped
- hello updates the connection facts
- notifications in ACK_REQUIRED_TYPES are acknowledged
- replies to pending commands are handed to ``resolve_reply``
- anything else goes to ``on_domain_event``
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from .types import ACK_REQUIRED_TYPES, BridgeMessage, ExtendedConnection


logger = logging.getLogger("godot_bridge.router")

REQUIRED_FIELDS = ("source", "type", "ts", "id")


@dataclass
class RouterCallbacks:
    send_to_client: Callable[[Any, dict], Awaitable[Any]]
    # Returns True when the frame answered a pending command
    resolve_reply: Optional[Callable[[BridgeMessage], bool]] = None
    on_domain_event: Optional[Callable[[BridgeMessage], Awaitable[None]]] = None


class MessageRouter:
    """Decodes addon frames and dispatches them to the manager's callbacks."""

    def __init__(self, callbacks: RouterCallbacks):
        self.callbacks = callbacks

    async def handle_message(
        self,
        ws: Any,
        connection: ExtendedConnection,
        raw_data: str | bytes
    ) -> Optional[BridgeMessage]:
        """
        Handle one incoming frame.

        Returns:
            The decoded message, or None for invalid frames and heartbeat
            traffic
        """
        connection.update_seen()

        try:
            text = raw_data if isinstance(raw_data, str) else raw_data.decode("utf-8")
            data = json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Invalid JSON from [{connection.cid}]: {e}")
            return None

        problem = self._envelope_problem(data)
        if problem:
            logger.warning(f"Dropping frame from [{connection.cid}]: {problem}")
            return None

        msg = BridgeMessage.from_dict(data)
        if msg.session:
            connection.session = msg.session

        if msg.type == "hb":
            await self._reply(ws, "pong", msg)
            return None
        if msg.type in ("ack", "pong"):
            return None

        if msg.type == "hello":
            connection.apply_hello(msg.body)
            logger.info(
                f"Addon hello [{connection.cid}]: project={connection.project_name} "
                f"godot={connection.godot_version} addon={connection.addon_version}"
            )

        if msg.type in ACK_REQUIRED_TYPES:
            await self._reply(ws, "ack", msg)

        if self.callbacks.resolve_reply and self.callbacks.resolve_reply(msg):
            return msg

        if self.callbacks.on_domain_event:
            try:
                await self.callbacks.on_domain_event(msg)
            except Exception as e:
                logger.error(f"Error in domain event handler: {e}", exc_info=True)

        return msg

    @staticmethod
    def _envelope_problem(data: Any) -> Optional[str]:
        if not isinstance(data, dict):
            return "not an object"
        missing = [f for f in REQUIRED_FIELDS if f not in data]
        if missing:
            return f"missing {missing}"
        if not isinstance(data["type"], str):
            return "'type' must be a string"
        if not isinstance(data.get("body") or {}, dict):
            return "'body' must be an object"
        return None

    async def _reply(self, ws: Any, msg_type: str, msg: BridgeMessage) -> None:
        reply = BridgeMessage.create(msg_type, reply_to=msg.id)
        await self.callbacks.send_to_client(ws, reply.to_dict())
