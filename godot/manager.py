"""
Godot Manager for the addon WebSocket connection.

Owns the single active addon connection and turns tool calls into
request/response round trips:
- Monotonic takeover of older connections
- Hello handshake facts (project, engine and addon versions)
- Command/response correlation by message id
"""

import asyncio
import logging
import secrets
import uuid
from typing import Awaitable, Callable, Dict, Optional

from fastapi import WebSocket, WebSocketDisconnect

from version import get_server_version

from .config import GodotConfig
from .errors import GodotConnectionError
from .router import MessageRouter, RouterCallbacks
from .transport import send_error, send_to_client, send_welcome
from .types import BridgeMessage, CloseCode, ConnectionState, ExtendedConnection


logger = logging.getLogger("godot_bridge.godot")


class GodotManager:
    """
    Manages the WebSocket connection from the Godot addon.

    Usage:
        manager = GodotManager()

        # In WebSocket endpoint
        await manager.handle_connection(websocket)

        # From tools
        result = await manager.send_command("get_input_map")
    """

    def __init__(
        self,
        config: Optional[GodotConfig] = None,
        on_domain_event: Optional[Callable[[BridgeMessage], Awaitable[None]]] = None
    ):
        """
        Args:
            config: Command timeout and addon settings
            on_domain_event: Receives addon frames that are not command replies
        """
        self.config = config or GodotConfig()

        self._router = MessageRouter(RouterCallbacks(
            send_to_client=send_to_client,
            resolve_reply=self._resolve_reply,
            on_domain_event=on_domain_event
        ))

        self._ws: Optional[WebSocket] = None
        self._connection: Optional[ExtendedConnection] = None

        # Futures for commands awaiting a reply, keyed by message id
        self._pending: Dict[str, asyncio.Future] = {}

    # =========================================================================
    # Public API
    # =========================================================================

    async def handle_connection(
        self,
        websocket: WebSocket,
        session_id: Optional[str] = None,
        conn_seq: int = 0
    ) -> None:
        """
        Serve one addon WebSocket until it closes.

        A connection whose ``conn_seq`` is lower than the active one is
        refused; otherwise it replaces the active connection.
        """
        await websocket.accept()

        cid = secrets.token_hex(4)
        session_id = session_id or str(uuid.uuid4())

        active = self._connection
        if active is not None and conn_seq < active.conn_seq:
            logger.info(f"Rejecting connection [{cid}]: stale conn_seq {conn_seq} < {active.conn_seq}")
            await send_error(websocket, "A newer connection is already active", error_code="stale_connection")
            await websocket.close(code=CloseCode.DUPLICATE_SESSION, reason="newer connection already active")
            return

        if self._ws is not None:
            logger.info(f"Superseding connection [{active.cid}] with [{cid}]")
            self._fail_pending("Connection superseded")
            try:
                await self._ws.close(code=CloseCode.SUPERSEDED, reason="superseded by newer connection")
            except Exception as e:
                logger.debug(f"Error closing superseded connection: {e}")

        connection = ExtendedConnection(cid=cid, session=session_id, conn_seq=conn_seq)
        self._ws = websocket
        self._connection = connection

        await send_welcome(websocket, session=session_id, cid=cid, server_version=get_server_version())
        logger.info(f"Godot connected [{cid}] session={session_id[:8]}")

        try:
            while True:
                await self._router.handle_message(websocket, connection, await websocket.receive_text())
        except WebSocketDisconnect:
            logger.info(f"Godot disconnected [{cid}]")
        except Exception as e:
            logger.error(f"Godot connection error [{cid}]: {e}", exc_info=True)
        finally:
            self._release(websocket, connection)

    async def send_command(
        self,
        command_name: str,
        params: Optional[dict] = None,
        timeout: Optional[float] = None
    ) -> dict:
        """
        Send a command to the addon and wait for its reply body.

        Raises:
            GodotConnectionError: If no addon is connected, the send fails,
                or the connection drops while waiting
            asyncio.TimeoutError: If no reply arrives in time
        """
        if not self.is_connected:
            raise GodotConnectionError("Not connected to Godot")

        timeout = timeout or self.config.command_timeout
        msg = BridgeMessage.create(command_name, params, session=self._connection.session)

        future: asyncio.Future = asyncio.get_running_loop().create_future()
        self._pending[msg.id] = future

        try:
            if not await send_to_client(self._ws, msg.to_dict()):
                raise GodotConnectionError(f"Failed to send command: {command_name}")
            logger.debug(f"Sent command {command_name} [msg.id={msg.id}]")
            return await asyncio.wait_for(future, timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Command {command_name} timed out after {timeout}s")
            raise
        finally:
            self._pending.pop(msg.id, None)

    @property
    def is_connected(self) -> bool:
        return (
            self._ws is not None
            and self._connection is not None
            and self._connection.state == ConnectionState.OPEN
        )

    @property
    def addon_version(self) -> Optional[str]:
        return self._connection.addon_version if self._connection else None

    @property
    def project_path(self) -> Optional[str]:
        return self._connection.project_path if self._connection else None

    @property
    def project_name(self) -> Optional[str]:
        return self._connection.project_name if self._connection else None

    @property
    def godot_version(self) -> Optional[str]:
        return self._connection.godot_version if self._connection else None

    @property
    def last_seen(self) -> Optional[float]:
        """Unix time of the last frame received from the addon."""
        return self._connection.last_seen if self._connection else None

    @property
    def versions_match(self) -> bool:
        """True when the connected addon reports the same version as this server."""
        return self.addon_version is not None and self.addon_version == get_server_version()

    @property
    def connection_count(self) -> int:
        return 1 if self.is_connected else 0

    async def close_all(self) -> None:
        """Close the addon connection on shutdown."""
        self._fail_pending("Server shutting down")

        ws, self._ws, self._connection = self._ws, None, None
        if ws is not None:
            try:
                await ws.close(code=CloseCode.GOING_AWAY, reason="server shutdown")
            except Exception as e:
                logger.debug(f"Error closing connection on shutdown: {e}")

    # =========================================================================
    # Private Implementation
    # =========================================================================

    def _resolve_reply(self, msg: BridgeMessage) -> bool:
        future = self._pending.get(msg.id)
        if future is None or future.done():
            return False
        future.set_result(msg.body)
        return True

    def _release(self, websocket: WebSocket, connection: ExtendedConnection) -> None:
        connection.state = ConnectionState.CLOSED

        if self._ws is not websocket:
            # Superseded; pending commands were already failed at takeover
            logger.info(f"Released superseded connection [{connection.cid}]")
            return

        self._ws = None
        self._connection = None
        self._fail_pending("Connection closed")
        logger.info(f"Released connection [{connection.cid}]")

    def _fail_pending(self, reason: str) -> None:
        for future in self._pending.values():
            if not future.done():
                future.set_exception(GodotConnectionError(reason))
        self._pending.clear()
