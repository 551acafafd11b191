# src/predicted_processes/executor/subprocess_executor.py

"""
Process executor backed by asyncio subprocesses.

- spawn() starts the command (through the shell by default) and returns a handle
- the handle's wait() resolves with the ExitStatus once the process is reaped
- terminate() sends the configured signal; on POSIX the process is started
  in its own session so the whole process group receives it

stdout/stderr are inherited from the parent process.
"""

from __future__ import annotations

import asyncio
import logging
import os
import shlex
import signal
import subprocess

from ..core.errors import LaunchError
from ..tasks.task_models import ExitStatus

logger = logging.getLogger(__name__)

_POSIX = os.name == "posix"


def resolve_signal(name_or_number: str | int, default: int = signal.SIGTERM) -> int:
    """Turn "SIGTERM" / "TERM" / "15" / 15 into a signal number."""
    if isinstance(name_or_number, int):
        return name_or_number
    raw = name_or_number.strip().upper()
    if not raw:
        return int(default)
    if raw.isdigit():
        return int(raw)
    if not raw.startswith("SIG"):
        raw = f"SIG{raw}"
    try:
        return int(signal.Signals[raw])
    except KeyError:
        logger.warning("Unknown signal name %r, using %s", name_or_number, signal.Signals(default).name)
        return int(default)


class SubprocessHandle:
    def __init__(
        self,
        process: asyncio.subprocess.Process,
        *,
        command: str,
        terminate_signal: int,
        process_group: bool,
    ) -> None:
        self._process = process
        self.command = command
        self._terminate_signal = terminate_signal
        self._process_group = process_group

    @property
    def pid(self) -> int:
        return self._process.pid

    @property
    def returncode(self) -> int | None:
        return self._process.returncode

    def terminate(self) -> bool:
        """Best-effort termination request. Returns False once the process has been reaped."""
        if self._process.returncode is not None:
            return False
        try:
            if self._process_group:
                os.killpg(self._process.pid, self._terminate_signal)
            else:
                self._process.send_signal(self._terminate_signal)
        except ProcessLookupError:
            logger.debug("terminate: pid=%s already gone", self._process.pid)
            return False
        logger.debug("Sent signal %s to pid=%s", self._terminate_signal, self._process.pid)
        return True

    async def wait(self) -> ExitStatus:
        returncode = await self._process.wait()
        return ExitStatus.from_returncode(returncode)

    def __repr__(self) -> str:
        return f"<SubprocessHandle pid={self._process.pid} returncode={self._process.returncode}>"


class SubprocessExecutor:
    """ProcessExecutor implementation used outside of tests."""

    def __init__(
        self,
        *,
        shell: bool = True,
        shell_executable: str | None = None,
        terminate_signal: int = signal.SIGTERM,
        new_session: bool = True,
    ) -> None:
        self.shell = shell
        self.shell_executable = shell_executable
        self.terminate_signal = int(terminate_signal)
        # Process groups are a POSIX concept.
        self.new_session = bool(new_session) and _POSIX

    @classmethod
    def from_settings(cls, settings) -> SubprocessExecutor:
        return cls(
            shell=settings.shell,
            shell_executable=settings.shell_executable,
            terminate_signal=resolve_signal(settings.terminate_signal),
            new_session=settings.new_session,
        )

    async def spawn(self, command: str) -> SubprocessHandle:
        if not command.strip():
            raise LaunchError("Command is empty", command=command)

        if self.shell:
            head = command.split(maxsplit=1)[0]
        else:
            try:
                argv = shlex.split(command)
            except ValueError as error:
                raise LaunchError(f"Cannot parse command: {error}", command=command) from error
            head = argv[0]

        try:
            if self.shell:
                process = await asyncio.create_subprocess_shell(
                    command,
                    stdin=subprocess.DEVNULL,
                    executable=self.shell_executable,
                    start_new_session=self.new_session,
                )
            else:
                process = await asyncio.create_subprocess_exec(
                    *argv,
                    stdin=subprocess.DEVNULL,
                    start_new_session=self.new_session,
                )
        except FileNotFoundError as error:
            raise LaunchError(f"Command not found: {head}", command=command) from error
        except OSError as error:
            raise LaunchError(f"Failed to start {head}: {error}", command=command) from error

        logger.debug("Spawned pid=%s: %s", process.pid, command)
        return SubprocessHandle(
            process,
            command=command,
            terminate_signal=self.terminate_signal,
            process_group=self.new_session,
        )
