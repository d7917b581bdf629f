"""Test unified logging configuration.

Tests for src.utils.logging_config:
    - setup_logging is idempotent (no duplicated handlers or lines)
    - JSON file output carries context fields
    - push_context / pop_context / log_context
    - Human formatter layout
    - Unknown rotation mode rejected

Run:
    pytest tests/test_logging.py -v
"""

import json
import logging

import pytest

from src.utils import logging_config


@pytest.fixture(autouse=True)
def clean_context():
    logging_config.pop_context()
    yield
    logging_config.pop_context()


def test_logging_idempotency(tmp_path):
    log_path = tmp_path / "test.log"
    for _ in range(2):
        logging_config.setup_logging(
            log_level="INFO",
            log_file=str(log_path),
            json=True,
            to_stderr=False,
            context={"app": "test"},
        )
    logger = logging_config.get_logger("logging_test")
    logger.info("hello")

    lines = log_path.read_text().strip().splitlines()
    assert len(lines) == 1
    record = json.loads(lines[0])
    assert record["msg"] == "hello"
    assert record["lvl"] == "INFO"
    assert record["app"] == "test"


def test_push_pop_context():
    logging_config.push_context(app="serve", path="/captcha")
    assert logging_config.current_context() == {"app": "serve", "path": "/captcha"}
    logging_config.pop_context(keys=["path"])
    assert logging_config.current_context() == {"app": "serve"}
    logging_config.pop_context()
    assert logging_config.current_context() == {}


def test_log_context_restores():
    logging_config.push_context(app="serve")
    with logging_config.log_context(path="/qrcode"):
        assert logging_config.current_context()["path"] == "/qrcode"
    assert logging_config.current_context() == {"app": "serve"}


def test_log_context_restores_on_error():
    with pytest.raises(RuntimeError):
        with logging_config.log_context(path="/image"):
            raise RuntimeError("boom")
    assert "path" not in logging_config.current_context()


def test_human_format():
    fmt = logging_config.ContextFormatter("human", use_color=False)
    logging_config.push_context(path="/captcha")
    record = logging.LogRecord("x", logging.WARNING, __file__, 1, "rendered %s", ("ok",), None)
    line = fmt.format(record)
    assert "WARNING" in line
    assert "path=/captcha |" in line
    assert line.endswith("rendered ok")


def test_unknown_rotation_mode(tmp_path):
    with pytest.raises(ValueError):
        logging_config.setup_logging(
            log_file=str(tmp_path / "x.log"),
            to_stderr=False,
            rotate={"mode": "weekly"},
        )
