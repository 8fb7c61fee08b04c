"""Tests for the server app and command line."""

import json

from fastapi.testclient import TestClient

import server


def test_health():
    client = TestClient(server.app)

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "godot_connected": False}


def test_addon_connects_and_reports_project():
    with TestClient(server.app) as client:
        with client.websocket_connect("/ws/godot?session=editor-1&conn=1") as ws:
            welcome = ws.receive_json()
            assert welcome["type"] == "welcome"
            assert welcome["body"]["session"] == "editor-1"
            assert "server_version" in welcome["body"]

            ws.send_json({
                "source": "godot",
                "type": "hello",
                "ts": 1700000000,
                "id": "hello-1",
                "body": {
                    "project_path": "/games/platformer",
                    "project_name": "Platformer",
                    "godot_version": "4.3.stable",
                    "addon_version": "0.4.0",
                },
            })
            ack = ws.receive_json()
            assert ack["type"] == "ack"
            assert ack["id"] == "hello-1"

            status = client.get("/godot/status").json()
            assert status["status"] == "connected"
            assert status["project"] == "/games/platformer"
            assert status["godot_version"] == "4.3.stable"
            assert status["connections"] == 1
            assert isinstance(status["last_seen"], float)


def test_cli_install_into_missing_path(tmp_path, capsys):
    missing = tmp_path / "nowhere"

    assert server.main(["--install-addon", str(missing)]) == 1
    assert "Path does not exist" in capsys.readouterr().out


def test_cli_addon_status(tmp_path, capsys):
    (tmp_path / "project.godot").write_text("config_version=5\n", encoding="utf-8")

    assert server.main(["--addon-status", str(tmp_path)]) == 0
    assert json.loads(capsys.readouterr().out) == {"installed": False}


def test_install_help_names_addon_source():
    help_text = " ".join(server.build_parser().format_help().split())

    assert "GODOT_ADDON_SOURCE" in help_text
