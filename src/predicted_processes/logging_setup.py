# src/predicted_processes/logging_setup.py

"""
Logging for the CLI.

stdout and the terminal belong to the child processes, so our own records go
to stderr. The console shows this package at the requested level and other
loggers only when something is wrong; the optional log file keeps everything.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from pathlib import Path

PACKAGE = "predicted_processes"
LOG_FILE_NAME = "predicted.log"

CONSOLE_FORMAT = "%(asctime)s %(levelname)-7s %(message)s"
FILE_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s [%(process)d]: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Minimum level per foreign logger on the console.
DEFAULT_THRESHOLDS: Mapping[str, int] = {
    "asyncio": logging.WARNING,
    "py.warnings": logging.ERROR,
}


def parse_level(value: str | int | None, default: int = logging.INFO) -> int:
    """Accept "debug", "INFO", "10" or 10. Unknown names give `default`."""
    if value is None:
        return default
    if isinstance(value, int):
        return value
    raw = value.strip().upper()
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else default


class LoggerThresholdFilter(logging.Filter):
    """
    Per-logger minimum levels.

    Records from `package` (and its children) always pass. A record from any
    other logger passes when it reaches the threshold of its closest listed
    ancestor, or `default` when none is listed.
    """

    def __init__(
        self,
        package: str = PACKAGE,
        thresholds: Mapping[str, int] | None = None,
        default: int = logging.ERROR,
    ) -> None:
        super().__init__()
        self.package = package
        self.thresholds = dict(DEFAULT_THRESHOLDS if thresholds is None else thresholds)
        self.default = default

    def _owns(self, name: str, prefix: str) -> bool:
        return name == prefix or name.startswith(prefix + ".")

    def threshold_for(self, name: str) -> int:
        if self._owns(name, self.package):
            return logging.NOTSET
        best = None
        for prefix in self.thresholds:
            if self._owns(name, prefix) and (best is None or len(prefix) > len(best)):
                best = prefix
        return self.default if best is None else self.thresholds[best]

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= self.threshold_for(record.name)


def _handler(
    handler: logging.Handler,
    level: int,
    fmt: str,
    *filters: logging.Filter,
) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=fmt, datefmt=DATE_FORMAT))
    for f in filters:
        handler.addFilter(f)
    return handler


def setup_logging(
    *,
    log_dir: str | Path | None = None,
    console_level: str | int = logging.INFO,
    file_level: str | int = logging.DEBUG,
    thresholds: Mapping[str, int] | None = None,
) -> Path | None:
    """
    Replace the root handlers with a filtered stderr handler and, when
    `log_dir` is given, a file handler writing `predicted.log` there.

    Returns the log file path (None for console only). Safe to call again:
    previous handlers are closed first.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()

    root.addHandler(
        _handler(
            logging.StreamHandler(sys.stderr),
            parse_level(console_level),
            CONSOLE_FORMAT,
            LoggerThresholdFilter(thresholds=thresholds),
        )
    )

    log_file = None
    if log_dir is not None:
        log_file = Path(log_dir) / LOG_FILE_NAME
        log_file.parent.mkdir(parents=True, exist_ok=True)
        root.addHandler(
            _handler(
                logging.FileHandler(log_file, encoding="utf-8"),
                parse_level(file_level, logging.DEBUG),
                FILE_FORMAT,
            )
        )

    logging.captureWarnings(True)
    return log_file
