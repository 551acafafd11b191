# src/predicted_processes/core/errors.py

from __future__ import annotations

"""
Error kinds raised by tasks and task groups.

Every failure is an exception raised to the caller of run()/run_all():
nothing here is fatal to the hosting program.
"""

import signal as _signal
from collections.abc import Hashable, Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..tasks.task_models import TaskFailure


def signal_name(signum: int | None) -> str:
    if signum is None:
        return "none"
    try:
        return _signal.Signals(signum).name
    except ValueError:
        return str(signum)


class ProcessError(RuntimeError):
    """Base class for everything a task or task group can fail with."""


class AlreadyCancelled(ProcessError):
    """The cancel signal was already triggered when run was called."""

    def __init__(self, message: str = "Cancel signal already triggered", *, task_id: Hashable | None = None) -> None:
        super().__init__(message)
        self.task_id = task_id


class AlreadyRunning(ProcessError):
    def __init__(self, task_id: Hashable) -> None:
        super().__init__(f"Process {task_id} is already running")
        self.task_id = task_id


class LaunchError(ProcessError):
    """The executor could not start the command at all."""

    def __init__(self, message: str, *, command: str) -> None:
        super().__init__(message)
        self.command = command


class ProcessFailed(ProcessError):
    def __init__(self, exit_code: int) -> None:
        super().__init__(f"Process failed with code {exit_code}")
        self.exit_code = exit_code


class ProcessAborted(ProcessError):
    """
    The process did not finish on its own.

    `signal` is the terminating signal when one was reported.
    `exit_code` is set when the process exited normally after termination was requested.
    """

    def __init__(self, signal: int | None = None, *, exit_code: int | None = None, message: str | None = None) -> None:
        if message is None:
            if signal is None and exit_code is not None:
                message = f"Process aborted, exited with code {exit_code} after termination request"
            else:
                message = f"Process aborted with signal: {signal_name(signal)}"
        super().__init__(message)
        self.signal = signal
        self.exit_code = exit_code


class ProcessIndeterminate(ProcessAborted):
    """The executor reported neither an exit code nor a signal."""

    def __init__(self) -> None:
        super().__init__(message="Process exited without a determinable status")


class BatchFailed(ProcessError):
    """One or more members of a task group failed; `causes` keeps group order."""

    def __init__(self, causes: Sequence[TaskFailure]) -> None:
        self.causes: tuple[TaskFailure, ...] = tuple(causes)
        lines = "\n".join(cause.message for cause in self.causes)
        super().__init__(f"At least one process has exited with an error:\n{lines}")
