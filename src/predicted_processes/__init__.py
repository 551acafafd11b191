"""
Run external commands with cooperative cancellation.

- Task: one command, one process per run, cancel-aware
- MemoizedTask: shares in-flight and successful runs per cancel signal
- TaskGroup: runs many tasks concurrently and aggregates failures
"""

from .core.cancellation import CancelController, CancelSignal
from .core.errors import (
    AlreadyCancelled,
    AlreadyRunning,
    BatchFailed,
    LaunchError,
    ProcessAborted,
    ProcessError,
    ProcessFailed,
    ProcessIndeterminate,
)
from .executor.subprocess_executor import SubprocessExecutor
from .tasks.task import MemoizedTask, Task
from .tasks.task_group import TaskGroup
from .tasks.task_models import ExitStatus, TaskFailure

__all__ = [
    "AlreadyCancelled",
    "AlreadyRunning",
    "BatchFailed",
    "CancelController",
    "CancelSignal",
    "ExitStatus",
    "LaunchError",
    "MemoizedTask",
    "ProcessAborted",
    "ProcessError",
    "ProcessFailed",
    "ProcessIndeterminate",
    "SubprocessExecutor",
    "Task",
    "TaskFailure",
    "TaskGroup",
]
