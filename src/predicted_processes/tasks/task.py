# src/predicted_processes/tasks/task.py

from __future__ import annotations

"""
Task: one external command plus a cancellation-aware run protocol.

run(cancel):
- rejects immediately if the cancel signal is already triggered (nothing is launched)
- rejects immediately if this instance already has a run in flight
- launches exactly one process and waits for its exit notification
- on cancel, asks the process to terminate; the exit notification that follows decides the outcome
- always releases the handle, unsubscribes from the signal and clears `running`

memoize() returns a MemoizedTask that shares runs per cancel signal.
"""

import asyncio
import logging
from collections.abc import Hashable
from dataclasses import dataclass, field

from ..config import get_settings
from ..core.errors import AlreadyCancelled, AlreadyRunning
from ..core.ports import CancelSignalLike, ProcessExecutor, ProcessHandle
from ..executor.subprocess_executor import SubprocessExecutor
from .task_models import ExitStatus, exit_error

logger = logging.getLogger(__name__)


def _terminate_late_spawn(spawning: asyncio.Future[ProcessHandle]) -> None:
    # The caller went away while the process was being launched.
    if spawning.cancelled() or spawning.exception() is not None:
        return
    spawning.result().terminate()


class Task:
    def __init__(self, id: Hashable, command: str, *, executor: ProcessExecutor | None = None) -> None:
        self._id = id
        self._command = command
        if executor is None:
            executor = SubprocessExecutor.from_settings(get_settings())
        self._executor: ProcessExecutor = executor

        self._running = False
        self._handle: ProcessHandle | None = None

    @property
    def id(self) -> Hashable:
        return self._id

    @property
    def command(self) -> str:
        return self._command

    @property
    def running(self) -> bool:
        return self._running

    @property
    def executor(self) -> ProcessExecutor:
        return self._executor

    async def run(self, cancel: CancelSignalLike | None = None) -> None:
        if cancel is not None and cancel.cancelled:
            raise AlreadyCancelled(f"Cancel signal already triggered for process {self._id}", task_id=self._id)
        if self._running:
            raise AlreadyRunning(self._id)

        # Set before the first await so a concurrent second call is rejected.
        self._running = True
        terminated = False
        handle: ProcessHandle | None = None

        def on_cancel() -> None:
            nonlocal terminated
            if handle is None or terminated:
                return
            logger.info("Process %s: cancel requested, terminating", self._id)
            # False when the process already exited: its own exit decides the outcome.
            terminated = handle.terminate()

        try:
            spawning = asyncio.ensure_future(self._executor.spawn(self._command))
            try:
                handle = await asyncio.shield(spawning)
            except asyncio.CancelledError:
                if not spawning.done():
                    spawning.add_done_callback(_terminate_late_spawn)
                raise
            self._handle = handle
            logger.debug("Process %s started: %s", self._id, self._command)

            if cancel is not None:
                cancel.add_listener(on_cancel)
                # Triggered while we were launching.
                if cancel.cancelled:
                    on_cancel()

            try:
                status: ExitStatus = await handle.wait()
            except asyncio.CancelledError:
                on_cancel()
                raise
        finally:
            if cancel is not None:
                cancel.remove_listener(on_cancel)
            self._handle = None
            self._running = False

        error = exit_error(status, terminated=terminated)
        if error is not None:
            logger.warning("Process %s -> %s", self._id, error)
            raise error
        logger.info("Process %s -> ok", self._id)

    def memoize(self) -> MemoizedTask:
        return MemoizedTask(self._id, self._command, executor=self._executor)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self._id!r} command={self._command!r} running={self.running}>"


# Cache key for calls made without a cancel signal.
_NO_SIGNAL = object()


def _failed(run: asyncio.Future[None]) -> bool:
    return run.done() and (run.cancelled() or run.exception() is not None)


@dataclass(slots=True, eq=False)
class _SharedRun:
    # Holding the marker keeps its id() from being reused while the entry lives.
    marker: object
    run: asyncio.Future[None]
    waiters: int = field(default=0)


class MemoizedTask(Task):
    """
    Task wrapper that shares runs per cancel signal.

    Cache states per key (the identity of the signal, or "no signal"):
    - no entry: next call launches a fresh process
    - pending entry: callers await the same in-flight run
    - completed entry: the run succeeded; callers return immediately

    A failed or aborted run removes its entry, so failures are never cached.
    Distinct keys never share a process and may run concurrently.
    When the last waiting caller is cancelled, the shared run is cancelled too.
    """

    def __init__(self, id: Hashable, command: str, *, executor: ProcessExecutor | None = None) -> None:
        super().__init__(id, command, executor=executor)
        self._cache: dict[int, _SharedRun] = {}

    @property
    def running(self) -> bool:
        return any(not entry.run.done() for entry in self._cache.values())

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    async def run(self, cancel: CancelSignalLike | None = None) -> None:
        if cancel is not None and cancel.cancelled:
            raise AlreadyCancelled(f"Cancel signal already triggered for process {self._id}", task_id=self._id)

        marker = _NO_SIGNAL if cancel is None else cancel
        key = id(marker)

        entry = self._cache.get(key)
        if entry is None or _failed(entry.run):
            shared = asyncio.ensure_future(Task(self._id, self._command, executor=self._executor).run(cancel))
            entry = _SharedRun(marker, shared)
            self._cache[key] = entry
            shared.add_done_callback(lambda run: self._forget_failed(key, run))
        elif entry.run.done():
            logger.debug("Process %s: reusing successful run", self._id)
        else:
            logger.debug("Process %s: joining in-flight run", self._id)

        entry.waiters += 1
        try:
            # Cancelling one caller must not cancel the run other callers share.
            await asyncio.shield(entry.run)
        finally:
            entry.waiters -= 1
            if entry.waiters == 0 and not entry.run.done():
                logger.info("Process %s: last caller left, cancelling shared run", self._id)
                self._drop(key, entry.run)
                entry.run.cancel()

    def _forget_failed(self, key: int, run: asyncio.Future[None]) -> None:
        # Also retrieves the exception of runs nobody awaits any more.
        if _failed(run):
            self._drop(key, run)

    def _drop(self, key: int, run: asyncio.Future[None]) -> None:
        entry = self._cache.get(key)
        if entry is not None and entry.run is run:
            del self._cache[key]

    def clear_cache(self) -> None:
        """Forget successful runs. In-flight runs are kept."""
        self._cache = {key: entry for key, entry in self._cache.items() if not entry.run.done()}
