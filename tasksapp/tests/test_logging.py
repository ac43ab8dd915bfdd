from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from tasksapp.shared.config import LoggingConfig
from tasksapp.shared.logging import clear_correlation_id, logger, set_correlation_id, setup_logging
from tasksapp.shared.logging.logger import resolve_level


def _written(config: LoggingConfig) -> str:
    logger.complete()
    return Path(config.file).read_text(encoding="utf-8")


@pytest.fixture(autouse=True)
def _reset_correlation():
    yield
    clear_correlation_id()


def test_level_comes_from_config_before_debug_flag() -> None:
    assert resolve_level(LoggingConfig(level="warning")) == "WARNING"
    assert resolve_level(LoggingConfig(level=None), debug_mode=True) == "DEBUG"
    assert resolve_level(LoggingConfig(level=None)) == "INFO"


def test_file_sink_is_created_under_configured_path(tmp_path: Path) -> None:
    config = LoggingConfig(level="INFO", file=tmp_path / "nested" / "app.log")

    setup_logging(config)
    set_correlation_id("req-7")
    logger.info("session issued")
    logger.debug("not at this level")

    text = _written(config)
    assert "session issued" in text
    assert "req-7" in text
    assert "not at this level" not in text


def test_file_sink_redacts_secrets(tmp_path: Path) -> None:
    config = LoggingConfig(level="DEBUG", file=tmp_path / "app.log")

    setup_logging(config)
    logger.info("login attempt password=hunter2 for ana@x.com")

    text = _written(config)
    assert "hunter2" not in text
    assert "ana@x.com" not in text


def test_stdlib_records_reach_loguru_sinks(tmp_path: Path) -> None:
    config = LoggingConfig(level="INFO", file=tmp_path / "app.log")

    setup_logging(config)
    logging.getLogger("tasksapp.thirdparty").warning("bridged warning")

    assert "bridged warning" in _written(config)


def test_serialized_sink_writes_json_lines(tmp_path: Path) -> None:
    config = LoggingConfig(level="INFO", file=tmp_path / "app.log", serialize=True)

    setup_logging(config)
    set_correlation_id("req-9")
    logger.info("json line")

    records = [json.loads(line) for line in _written(config).splitlines() if line]
    last = records[-1]["record"]
    assert last["message"] == "json line"
    assert last["extra"]["correlation_id"] == "req-9"
