# src/predicted_processes/tasks/task_group.py

from __future__ import annotations

"""
TaskGroup: an ordered collection of tasks run concurrently as one unit.

run_all(cancel):
- starts every member through its own run(cancel), so memoized members dedupe
  and the shared cancel signal reaches each member's process
- waits for every member to finish (no short-circuit on the first failure)
- raises BatchFailed listing each failed member, in group order
"""

import asyncio
import logging
from collections.abc import Hashable, Iterable, Iterator

from ..core.errors import AlreadyCancelled, BatchFailed
from ..core.ports import CancelSignalLike, RunnableTask
from .task_models import TaskFailure

logger = logging.getLogger(__name__)


class TaskGroup:
    def __init__(self, tasks: Iterable[RunnableTask] = ()) -> None:
        self._tasks: list[RunnableTask] = list(tasks)

    @property
    def tasks(self) -> tuple[RunnableTask, ...]:
        return tuple(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[RunnableTask]:
        return iter(tuple(self._tasks))

    def add(self, task: RunnableTask) -> None:
        # Ids are not required to be unique; get() returns the first match.
        self._tasks.append(task)

    def remove(self, task_id: Hashable) -> None:
        """Remove every task with `task_id`. No-op if there is none."""
        self._tasks = [task for task in self._tasks if task.id != task_id]

    def get(self, task_id: Hashable) -> RunnableTask | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    async def run_all(self, cancel: CancelSignalLike | None = None) -> None:
        if cancel is not None and cancel.cancelled:
            raise AlreadyCancelled("Cancel signal already triggered for task group")

        tasks = list(self._tasks)
        if not tasks:
            return

        logger.info("Running %d processes", len(tasks))
        results = await asyncio.gather(*(task.run(cancel) for task in tasks), return_exceptions=True)

        causes = [
            TaskFailure(task_id=task.id, command=task.command, error=result)
            for task, result in zip(tasks, results)
            if isinstance(result, BaseException)
        ]
        if causes:
            logger.warning("%d of %d processes failed", len(causes), len(tasks))
            raise BatchFailed(causes)

        logger.info("All %d processes exited successfully", len(tasks))
