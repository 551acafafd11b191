# tests/test_logging_setup.py

from __future__ import annotations

import logging

import pytest

from predicted_processes.logging_setup import LoggerThresholdFilter, parse_level, setup_logging


@pytest.fixture()
def root_logger():
    """Give setup_logging() the root logger and put the previous handlers back afterwards."""
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
        if handler not in saved_handlers:
            handler.close()
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)
    logging.captureWarnings(False)


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "message", None, None)


@pytest.mark.parametrize(
    ("value", "expected"),
    [("debug", logging.DEBUG), (" WARNING ", logging.WARNING), ("15", 15), (40, 40), ("nope", logging.INFO), (None, logging.INFO)],
)
def test_parse_level(value, expected) -> None:
    assert parse_level(value) == expected


def test_package_records_always_pass_the_console_filter() -> None:
    f = LoggerThresholdFilter()

    assert f.filter(_record("predicted_processes", logging.DEBUG))
    assert f.filter(_record("predicted_processes.tasks.task", logging.DEBUG))
    # Same prefix, different package.
    assert not f.filter(_record("predicted_processes_extra", logging.WARNING))


def test_foreign_loggers_use_the_closest_threshold() -> None:
    f = LoggerThresholdFilter(thresholds={"asyncio": logging.WARNING, "urllib3": logging.INFO, "urllib3.pool": logging.ERROR})

    assert f.filter(_record("asyncio", logging.WARNING))
    assert not f.filter(_record("asyncio", logging.INFO))
    assert f.filter(_record("urllib3.connection", logging.INFO))
    assert not f.filter(_record("urllib3.pool", logging.WARNING))
    assert not f.filter(_record("somelib", logging.WARNING))
    assert f.filter(_record("somelib", logging.ERROR))


def test_console_only_without_log_dir(root_logger: logging.Logger) -> None:
    log_file = setup_logging(console_level="WARNING")

    assert log_file is None
    assert len(root_logger.handlers) == 1
    console = root_logger.handlers[0]
    assert isinstance(console, logging.StreamHandler)
    assert console.level == logging.WARNING
    assert any(isinstance(f, LoggerThresholdFilter) for f in console.filters)


def test_log_file_receives_debug_records(root_logger: logging.Logger, tmp_path) -> None:
    log_file = setup_logging(log_dir=tmp_path / "logs", console_level=logging.ERROR)

    assert log_file == tmp_path / "logs" / "predicted.log"
    logging.getLogger("predicted_processes.tasks.task").debug("Process %s started", "build")
    for handler in root_logger.handlers:
        handler.flush()

    text = log_file.read_text(encoding="utf-8")
    assert "DEBUG predicted_processes.tasks.task" in text
    assert "Process build started" in text


def test_repeated_setup_does_not_duplicate_handlers(root_logger: logging.Logger, tmp_path) -> None:
    setup_logging(log_dir=tmp_path)
    setup_logging(log_dir=tmp_path)

    assert len(root_logger.handlers) == 2
