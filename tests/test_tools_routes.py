"""Tests for the HTTP tool endpoints."""

import asyncio

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from godot.errors import GodotConnectionError
from routes import tools_router


@pytest.fixture
def client():
    app = FastAPI()
    app.include_router(tools_router)
    return TestClient(app)


def test_list_tools(client):
    response = client.get("/tools")

    assert response.status_code == 200
    tools = {t["name"]: t for t in response.json()}
    assert set(tools) == {"input", "project"}
    assert "action" in tools["input"]["args_schema"]["properties"]
    assert tools["project"]["description"]


def test_invoke_success(client, registered_godot):
    registered_godot.mock_response({"completed": True})

    response = client.post("/tools/input", json={"action": "mouse_move", "x": 10, "y": 20})

    assert response.status_code == 200
    assert response.json() == {"result": "Moved mouse to (10, 20)"}
    assert registered_godot.calls[0]["command"] == "mouse_move"


def test_unknown_tool(client):
    response = client.post("/tools/scene", json={"action": "list"})

    assert response.status_code == 404


def test_invalid_arguments_never_reach_godot(client, registered_godot):
    response = client.post("/tools/input", json={"action": "mouse_drag", "from_x": 1, "from_y": 2})

    assert response.status_code == 422
    assert registered_godot.calls == []


def test_godot_error_passed_through_verbatim(client, registered_godot):
    registered_godot.mock_response({"error": "Action 'fly' not found in InputMap"})

    response = client.post("/tools/input", json={
        "action": "sequence",
        "inputs": [{"action_name": "fly"}],
    })

    assert response.status_code == 400
    assert response.json()["detail"] == "Action 'fly' not found in InputMap"


def test_not_connected(client, registered_godot):
    registered_godot.mock_response(GodotConnectionError("Not connected to Godot"))

    response = client.post("/tools/project", json={"action": "get_info"})

    assert response.status_code == 503
    assert response.json()["detail"] == "Not connected to Godot"


def test_no_manager_registered(client):
    response = client.post("/tools/project", json={"action": "get_info"})

    assert response.status_code == 503


def test_timeout(client, registered_godot):
    registered_godot.mock_response(asyncio.TimeoutError())

    response = client.post("/tools/input", json={"action": "get_map"})

    assert response.status_code == 504
