from __future__ import annotations

import importlib

import pytest


def test_console_entrypoint_exposes_app() -> None:
    pytest.importorskip("typer")

    module = importlib.import_module("rcon_console.main")

    assert hasattr(module, "app")
    assert module.app is not None


def test_run_command_fails_without_password(monkeypatch) -> None:
    pytest.importorskip("typer")
    from typer.testing import CliRunner

    module = importlib.import_module("rcon_console.main")
    monkeypatch.setattr(module.settings, "password", "")
    monkeypatch.setattr(module.settings, "log_file", None)

    result = CliRunner().invoke(module.app, ["run", "127.0.0.1", "status"])

    assert result.exit_code == 1
    assert "No password specified" in result.output
