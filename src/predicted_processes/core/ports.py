# src/predicted_processes/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by tasks.

Tasks depend on Protocols instead of concrete implementations.
This keeps the process executor swappable and makes testing easier:
the test-suite drives tasks with a fake executor and never forks.
"""

from collections.abc import Callable, Hashable
from typing import TYPE_CHECKING, Awaitable, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import ExitStatus

CancelListener = Callable[[], None]


class CancelSignalLike(Protocol):
    """One-shot, externally triggered cancellation flag."""

    @property
    def cancelled(self) -> bool: ...

    def add_listener(self, listener: CancelListener) -> None: ...
    def remove_listener(self, listener: CancelListener) -> None: ...


class ProcessHandle(Protocol):
    """
    A live process owned by exactly one task run.

    - terminate(): asynchronous, signal-like request; the process may ignore or delay it.
      Returns False when the process had already exited and nothing was sent.
    - wait(): one-shot exit notification
    """

    def terminate(self) -> bool: ...
    def wait(self) -> Awaitable[ExitStatus]: ...


class ProcessExecutor(Protocol):
    """Launches a command line. Launch-time failures raise LaunchError."""

    def spawn(self, command: str) -> Awaitable[ProcessHandle]: ...


class RunnableTask(Protocol):
    """What a TaskGroup needs from its members."""

    @property
    def id(self) -> Hashable: ...

    @property
    def command(self) -> str: ...

    def run(self, cancel: CancelSignalLike | None = None) -> Awaitable[None]: ...
