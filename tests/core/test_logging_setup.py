# tests/core/test_logging_setup.py
from __future__ import annotations

import json
import logging

import pytest

from monitor.inventory.core.logging import configure_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


def test_json_lines(capsys):
    configure_logging("debug")

    logging.getLogger("monitor.inventory.test").info("hello %s", "world")

    record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert record["message"] == "hello world"
    assert record["level"] == "INFO"
    assert record["logger"] == "monitor.inventory.test"
    assert logging.getLogger().level == logging.DEBUG


def test_plain_text(capsys):
    configure_logging("INFO", json_format=False)

    logging.getLogger("monitor.inventory.test").warning("careful")

    out = capsys.readouterr().out
    assert "WARNING" in out
    assert "careful" in out


def test_single_handler_and_quiet_httpx():
    configure_logging()
    configure_logging()

    assert len(logging.getLogger().handlers) == 1
    assert logging.getLogger("httpx").level == logging.WARNING
