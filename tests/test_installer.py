"""Tests for the addon installer."""

from pathlib import Path

import pytest

from installer import get_addon_status, install_addon, parse_plugin_version


def write_plugin(directory: Path, version: str) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "plugin.cfg").write_text(
        "[plugin]\n\n"
        'name="Godot MCP"\n'
        'description="Bridge addon"\n'
        'author="dev"\n'
        f'version="{version}"\n'
        'script="plugin.gd"\n',
        encoding="utf-8",
    )


@pytest.fixture
def addon_source(tmp_path):
    source = tmp_path / "bundle"
    write_plugin(source, "0.4.0")
    (source / "plugin.gd").write_text("@tool\nextends EditorPlugin\n", encoding="utf-8")
    return source


@pytest.fixture
def project(tmp_path):
    path = tmp_path / "game"
    path.mkdir()
    (path / "project.godot").write_text("config_version=5\n", encoding="utf-8")
    return path


def test_missing_path(tmp_path, addon_source):
    missing = tmp_path / "nope"

    result = install_addon(missing, addon_source=addon_source)

    assert result.success is False
    assert result.message == f"Path does not exist: {missing.resolve()}"


def test_not_a_godot_project(tmp_path, addon_source):
    folder = tmp_path / "plain"
    folder.mkdir()

    result = install_addon(folder, addon_source=addon_source)

    assert result.success is False
    assert "no project.godot found" in result.message


def test_missing_bundled_addon(tmp_path, project):
    result = install_addon(project, addon_source=tmp_path / "missing-bundle")

    assert result.success is False
    assert result.message.startswith("Addon not found in package")
    assert str(tmp_path / "missing-bundle") in result.message
    assert "GODOT_ADDON_SOURCE" in result.message
    assert not (project / "addons").exists()


def test_fresh_install(project, addon_source):
    result = install_addon(str(project), addon_source=addon_source)

    assert result.success is True
    assert result.message == "Installed addon version 0.4.0"
    assert result.installed_version == "0.4.0"
    assert result.previous_version is None
    assert (project / "addons" / "godot_mcp" / "plugin.gd").exists()
    assert result.to_dict() == {
        "success": True,
        "message": "Installed addon version 0.4.0",
        "installed_version": "0.4.0",
    }


def test_upgrade_replaces_previous_installation(project, addon_source):
    target = project / "addons" / "godot_mcp"
    write_plugin(target, "0.3.1")
    (target / "stale.gd").write_text("# old file\n", encoding="utf-8")

    result = install_addon(project, addon_source=addon_source)

    assert result.success is True
    assert result.message == "Updated addon from 0.3.1 to 0.4.0"
    assert result.previous_version == "0.3.1"
    assert not (target / "stale.gd").exists()
    assert parse_plugin_version(target / "plugin.cfg") == "0.4.0"


def test_parse_plugin_version(tmp_path):
    cfg = tmp_path / "plugin.cfg"
    cfg.write_text('[plugin]\nname="x"\n  version="9.9"\nversion="1.2.3"\n', encoding="utf-8")

    assert parse_plugin_version(cfg) == "1.2.3"
    assert parse_plugin_version(tmp_path / "absent.cfg") is None


def test_status_not_installed(project):
    status = get_addon_status(project)

    assert status.installed is False
    assert status.to_dict() == {"installed": False}


def test_status_installed_does_not_mutate(project, addon_source):
    install_addon(project, addon_source=addon_source)
    before = sorted(p.name for p in (project / "addons" / "godot_mcp").iterdir())

    status = get_addon_status(project)

    assert status.installed is True
    assert status.version == "0.4.0"
    assert status.path == str((project / "addons" / "godot_mcp").resolve())
    assert sorted(p.name for p in (project / "addons" / "godot_mcp").iterdir()) == before
