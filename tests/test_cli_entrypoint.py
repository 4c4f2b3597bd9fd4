from __future__ import annotations

import importlib
from pathlib import Path

import pytest

ENV = {
    "TELEGRAM_TOKEN": "123:abc",
    "AWS_INSTANCE_ID": "i-0123456789abcdef0",
    "AWS_ACCESS_KEY_ID": "AKIATEST",
    "AWS_ACCESS_KEY_SECRET": "shh",
    "MC_HOST": "127.0.0.1",
    "MC_PORT": "8080",
}


def test_console_entrypoint_exposes_app() -> None:
    pytest.importorskip("typer")

    module = importlib.import_module("mc_server_bot.main")

    assert hasattr(module, "app")
    assert module.app is not None


def test_missing_configuration_exits_with_error(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    typer_testing = pytest.importorskip("typer.testing")
    from mc_server_bot.main import app

    monkeypatch.chdir(tmp_path)
    for name in ENV:
        monkeypatch.delenv(name, raising=False)

    result = typer_testing.CliRunner().invoke(app, ["run"])

    assert result.exit_code == 1
    assert "TELEGRAM_TOKEN is missing" in result.stdout


def test_config_command_masks_secrets(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    typer_testing = pytest.importorskip("typer.testing")
    from mc_server_bot.main import app

    monkeypatch.chdir(tmp_path)
    for name, value in ENV.items():
        monkeypatch.setenv(name, value)

    result = typer_testing.CliRunner().invoke(app, ["config"])

    assert result.exit_code == 0
    assert "i-0123456789abcdef0" in result.stdout
    assert "shh" not in result.stdout


def test_exec_reports_invalid_command_locally(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    typer_testing = pytest.importorskip("typer.testing")
    from mc_server_bot.main import app

    monkeypatch.chdir(tmp_path)
    for name, value in ENV.items():
        monkeypatch.setenv(name, value)

    result = typer_testing.CliRunner().invoke(app, ["exec", "/Teleport"])

    assert result.exit_code == 0
    assert "Teleport is an invalid command." in result.stdout
