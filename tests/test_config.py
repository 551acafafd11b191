# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from predicted_processes.config import Settings

_VARS = (
    "PREDICTED_APP_NAME",
    "PREDICTED_LOG_LEVEL",
    "PREDICTED_DATA_DIR",
    "PREDICTED_SHELL",
    "PREDICTED_SHELL_EXECUTABLE",
    "PREDICTED_TERMINATE_SIGNAL",
    "PREDICTED_NEW_SESSION",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    settings = Settings.from_env()

    assert settings.app_name == "predicted-processes"
    assert settings.log_level == "INFO"
    assert settings.data_dir == Path(".local/predicted")
    assert settings.shell is True
    assert settings.shell_executable is None
    assert settings.terminate_signal == "SIGTERM"
    assert settings.new_session is True


def test_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("PREDICTED_LOG_LEVEL", "debug")
    monkeypatch.setenv("PREDICTED_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("PREDICTED_SHELL", "no")
    monkeypatch.setenv("PREDICTED_SHELL_EXECUTABLE", "/bin/bash")
    monkeypatch.setenv("PREDICTED_TERMINATE_SIGNAL", "SIGINT")
    monkeypatch.setenv("PREDICTED_NEW_SESSION", "0")

    settings = Settings.from_env()

    assert settings.log_level == "DEBUG"
    assert settings.data_dir == tmp_path
    assert settings.shell is False
    assert settings.shell_executable == "/bin/bash"
    assert settings.terminate_signal == "SIGINT"
    assert settings.new_session is False


def test_blank_values_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PREDICTED_SHELL", "  ")
    monkeypatch.setenv("PREDICTED_SHELL_EXECUTABLE", "")
    monkeypatch.setenv("PREDICTED_TERMINATE_SIGNAL", "")

    settings = Settings.from_env()

    assert settings.shell is True
    assert settings.shell_executable is None
    assert settings.terminate_signal == "SIGTERM"
