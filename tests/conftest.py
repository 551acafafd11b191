# tests/conftest.py

from __future__ import annotations

from types import SimpleNamespace

import pytest

from .fakes import FakeExecutor



@pytest.fixture()
def executor() -> FakeExecutor:
    """Executor whose processes run until the test finishes them."""
    return FakeExecutor()


@pytest.fixture()
def settings(tmp_path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the executor and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="predicted-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        shell=True,
        shell_executable=None,
        terminate_signal="SIGTERM",
        new_session=True,
    )
