import asyncio
import json
from typing import Any, Optional

import pytest
from fastapi import WebSocketDisconnect

from godot_tools import set_godot_manager


class MockGodotConnection:
    """Stands in for GodotManager: records commands and replays queued responses."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self._responses: list[Any] = []
        self.is_connected = True
        self.addon_version: Optional[str] = "0.4.0"
        self.project_path: Optional[str] = "/home/dev/games/platformer"
        self.project_name: Optional[str] = "Platformer"
        self.godot_version: Optional[str] = "4.3.stable"
        self.versions_match = True

    def mock_response(self, response: Any) -> None:
        """Queue a response dict, or an exception to raise, for the next command."""
        self._responses.append(response)

    async def send_command(self, command_name: str, params: Optional[dict] = None) -> dict:
        self.calls.append({"command": command_name, "params": params})
        response = self._responses.pop(0) if self._responses else {}
        if isinstance(response, BaseException):
            raise response
        return response


class FakeWebSocket:
    """In-memory WebSocket with the subset of the FastAPI API the manager uses."""

    def __init__(self) -> None:
        self.sent: list[dict] = []
        self.incoming: asyncio.Queue = asyncio.Queue()
        self.accepted = False
        self.closed_with: Optional[tuple] = None

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, data: dict) -> None:
        self.sent.append(data)

    async def receive_text(self) -> str:
        item = await self.incoming.get()
        if item is None:
            raise WebSocketDisconnect(code=1000)
        return item

    async def close(self, code: int = 1000, reason: Optional[str] = None) -> None:
        self.closed_with = (code, reason)
        self.incoming.put_nowait(None)

    def push(self, msg_type: str, body: dict, msg_id: str = "godot-1") -> None:
        self.incoming.put_nowait(json.dumps({
            "source": "godot",
            "type": msg_type,
            "ts": 1700000000,
            "id": msg_id,
            "body": body,
        }))

    def sent_of_type(self, msg_type: str) -> list[dict]:
        return [m for m in self.sent if m.get("type") == msg_type]


async def wait_until(predicate, attempts: int = 200) -> None:
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0.001)
    raise AssertionError("condition not reached")


@pytest.fixture
def mock_godot():
    return MockGodotConnection()


@pytest.fixture
def registered_godot(mock_godot):
    """Register the mock as the manager the tools talk to."""
    set_godot_manager(mock_godot)
    yield mock_godot
    set_godot_manager(None)
