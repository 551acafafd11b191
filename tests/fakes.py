# tests/fakes.py

from __future__ import annotations

import asyncio
import os
import signal

import pytest

from predicted_processes.core.errors import LaunchError
from predicted_processes.tasks.task_models import ExitStatus

posix_only = pytest.mark.skipif(os.name != "posix", reason="needs /bin/sh and process groups")


async def settle(rounds: int = 10) -> None:
    """Let every ready callback on the loop run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class FakeHandle:
    """
    Deterministic ProcessHandle.

    - finish(code, signal) delivers the exit notification (later calls are ignored)
    - terminate() is recorded; when honored it finishes the process with SIGTERM.
      Like a real handle it reports False once the process has exited.
    """

    def __init__(self, command: str, *, honor_terminate: bool = True) -> None:
        self.command = command
        self.honor_terminate = honor_terminate
        self.terminate_calls = 0
        self._exit: asyncio.Future[ExitStatus] = asyncio.get_running_loop().create_future()

    @property
    def exited(self) -> bool:
        return self._exit.done()

    def finish(self, code: int | None = 0, signal: int | None = None) -> None:
        if not self._exit.done():
            self._exit.set_result(ExitStatus(code=code, signal=signal))

    def terminate(self) -> bool:
        self.terminate_calls += 1
        if self._exit.done():
            return False
        if self.honor_terminate:
            self.finish(code=None, signal=signal.SIGTERM)
        return True

    async def wait(self) -> ExitStatus:
        # Like a real process: a cancelled waiter does not stop the process.
        return await asyncio.shield(self._exit)


class FakeExecutor:
    """
    Deterministic ProcessExecutor.

    - exit_codes: commands that exit immediately with the given code
    - launch_errors: commands that fail to launch
    - gate: when set, spawn() waits for it before "starting" the process
    Every other command stays running until the test calls finish() on its handle.
    """

    def __init__(
        self,
        *,
        exit_codes: dict[str, int] | None = None,
        launch_errors: set[str] | None = None,
        honor_terminate: bool = True,
        gate: asyncio.Event | None = None,
    ) -> None:
        self.exit_codes = dict(exit_codes or {})
        self.launch_errors = set(launch_errors or ())
        self.honor_terminate = honor_terminate
        self.gate = gate
        self.spawned: list[FakeHandle] = []

    async def spawn(self, command: str) -> FakeHandle:
        if self.gate is not None:
            await self.gate.wait()
        if command in self.launch_errors:
            raise LaunchError(f"Command not found: {command}", command=command)

        handle = FakeHandle(command, honor_terminate=self.honor_terminate)
        self.spawned.append(handle)
        if command in self.exit_codes:
            handle.finish(self.exit_codes[command])
        return handle

    def handles_for(self, command: str) -> list[FakeHandle]:
        return [h for h in self.spawned if h.command == command]
