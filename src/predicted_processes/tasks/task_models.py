# src/predicted_processes/tasks/task_models.py

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass

from ..core.errors import ProcessAborted, ProcessError, ProcessFailed, ProcessIndeterminate


@dataclass(slots=True, frozen=True)
class ExitStatus:
    """
    Exit notification reported by a process handle.

    Exactly one of the fields is normally set:
    - code: the process exited on its own with this code
    - signal: the process was killed by this signal
    Both None means the executor could not tell.
    """

    code: int | None = None
    signal: int | None = None

    @classmethod
    def from_returncode(cls, returncode: int | None) -> ExitStatus:
        # asyncio/subprocess convention: -N means "killed by signal N".
        if returncode is None:
            return cls()
        if returncode < 0:
            return cls(signal=-returncode)
        return cls(code=returncode)

    @property
    def ok(self) -> bool:
        return self.code == 0 and self.signal is None


@dataclass(slots=True, frozen=True)
class TaskFailure:
    """One failed member of a task group run."""

    task_id: Hashable
    command: str
    error: BaseException

    @property
    def message(self) -> str:
        return f"Process {self.task_id} ({self.command!r}): {self.error}"


def exit_error(status: ExitStatus, *, terminated: bool) -> ProcessError | None:
    """
    Classify an exit notification.

    Returns None on success. `terminated` tells whether the task requested
    termination because its cancel signal fired; such a run never succeeds.
    """
    if status.signal is not None:
        return ProcessAborted(status.signal)
    if status.code is None:
        return ProcessIndeterminate()
    if terminated:
        return ProcessAborted(exit_code=status.code)
    if status.code == 0:
        return None
    return ProcessFailed(status.code)
