"""
Wire types for the Godot addon connection.

Every frame is a JSON object ``{source, type, ts, id, body, session?}``.
A command goes out with the command name as ``type``; the addon answers
with a frame that repeats the command's ``id``.
"""

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ConnectionSource(str, Enum):
    GODOT = "godot"
    SERVER = "server"


class ConnectionState(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


# Addon notifications the server confirms with an "ack" frame
ACK_REQUIRED_TYPES = frozenset({"hello", "scene_changed", "project_changed"})


class CloseCode:
    """WebSocket close codes sent to the addon."""
    GOING_AWAY = 1001
    SUPERSEDED = 4001  # a newer addon connection took over
    DUPLICATE_SESSION = 4002  # an addon connection with a higher sequence is active


@dataclass
class BridgeMessage:
    type: str
    id: str
    ts: int  # unix seconds
    body: dict = field(default_factory=dict)
    source: ConnectionSource = ConnectionSource.SERVER
    session: Optional[str] = None

    @classmethod
    def create(
        cls,
        msg_type: str,
        body: Optional[dict] = None,
        session: Optional[str] = None,
        reply_to: Optional[str] = None
    ) -> "BridgeMessage":
        """
        Build an outgoing frame.

        ``reply_to`` reuses the id of a received frame, otherwise a new
        uuid4 is generated.
        """
        return cls(
            type=msg_type,
            id=reply_to or str(uuid.uuid4()),
            ts=int(time.time()),
            body=body or {},
            session=session
        )

    @classmethod
    def from_dict(cls, data: dict) -> "BridgeMessage":
        """Decode a validated frame. Unknown sources count as the addon."""
        try:
            source = ConnectionSource(data.get("source"))
        except ValueError:
            source = ConnectionSource.GODOT

        return cls(
            type=data["type"],
            id=data["id"],
            ts=data["ts"],
            body=data.get("body") or {},
            source=source,
            session=data.get("session")
        )

    def to_dict(self) -> dict:
        frame = {
            "source": self.source.value,
            "type": self.type,
            "ts": self.ts,
            "id": self.id,
            "body": self.body,
        }
        if self.session:
            frame["session"] = self.session
        return frame


@dataclass
class ExtendedConnection:
    """One addon WebSocket plus the facts its hello reported."""
    cid: str
    session: Optional[str] = None
    conn_seq: int = 0
    state: ConnectionState = ConnectionState.OPEN
    last_seen: float = field(default_factory=time.time)

    project_path: Optional[str] = None
    project_name: Optional[str] = None
    godot_version: Optional[str] = None
    addon_version: Optional[str] = None

    def update_seen(self) -> None:
        self.last_seen = time.time()

    def apply_hello(self, body: dict) -> None:
        """Copy the project and version facts from a hello body."""
        for key in ("project_path", "project_name", "godot_version", "addon_version"):
            if key in body:
                setattr(self, key, body[key])
