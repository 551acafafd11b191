# src/predicted_processes/cli/main.py

"""
CLI entrypoint.

Runs every command given on the command line concurrently as one TaskGroup.
SIGINT/SIGTERM trigger the group's cancel signal: running processes are asked
to terminate and the batch reports them as aborted.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
from collections.abc import Sequence

from ..config import Settings, get_settings
from ..core.cancellation import CancelController
from ..core.errors import AlreadyCancelled, BatchFailed
from ..executor.subprocess_executor import SubprocessExecutor
from ..logging_setup import parse_level, setup_logging
from ..tasks.task import Task
from ..tasks.task_group import TaskGroup

logger = logging.getLogger(__name__)


def build_group(commands: Sequence[str], executor: SubprocessExecutor) -> TaskGroup:
    return TaskGroup(Task(n, command, executor=executor) for n, command in enumerate(commands, start=1))


async def run_commands(commands: Sequence[str], settings: Settings) -> int:
    group = build_group(commands, SubprocessExecutor.from_settings(settings))
    controller = CancelController()

    loop = asyncio.get_running_loop()
    installed: list[int] = []
    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signum, controller.cancel, signal.Signals(signum).name)
            installed.append(signum)
        except (NotImplementedError, RuntimeError):
            # Windows event loops have no signal handlers.
            logger.debug("Signal handler for %s not installed", signum)

    try:
        await group.run_all(controller.signal)
    except (BatchFailed, AlreadyCancelled) as error:
        logger.error("%s", error)
        return 1
    finally:
        for signum in installed:
            loop.remove_signal_handler(signum)

    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="predicted-processes",
        description="Run shell commands concurrently and report failures as one batch.",
    )
    parser.add_argument("commands", nargs="+", metavar="COMMAND", help="command line to run")
    parser.add_argument("--log-level", default=None, help="console log level (default: from settings)")
    args = parser.parse_args(argv)

    settings = get_settings()

    log_file = setup_logging(
        log_dir=settings.data_dir,
        console_level=parse_level(args.log_level or settings.log_level),
    )
    logger.debug("Logging to %s", log_file)

    logger.info("Starting %s with %d commands...", settings.app_name, len(args.commands))
    return asyncio.run(run_commands(args.commands, settings))


if __name__ == "__main__":
    raise SystemExit(main())
