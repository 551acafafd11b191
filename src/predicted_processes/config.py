# src/predicted_processes/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Bad values fall back to defaults instead of failing at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "PREDICTED"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_optional(name: str) -> str | None:
    v = os.getenv(name)
    if v is None or v.strip() == "":
        return None
    return v.strip()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Process executor ----
    shell: bool
    shell_executable: str | None
    terminate_signal: str
    new_session: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "predicted-processes").strip() or "predicted-processes"
        log_level = _env(_k("LOG_LEVEL"), "INFO").strip().upper() or "INFO"
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/predicted"))

        shell = _env_bool(_k("SHELL"), True)
        shell_executable = _env_optional(_k("SHELL_EXECUTABLE"))
        # Resolved to a number by the executor (accepts SIGTERM, TERM, 15).
        terminate_signal = _env(_k("TERMINATE_SIGNAL"), "SIGTERM").strip() or "SIGTERM"
        new_session = _env_bool(_k("NEW_SESSION"), True)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            shell=shell,
            shell_executable=shell_executable,
            terminate_signal=terminate_signal,
            new_session=new_session,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
