import logging
import sys

import pytest

from lisplet.config.logging_config import LOG_FORMAT, get_logger, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


def test_setup_logging_to_stderr(restore_root_logger):
    setup_logging("info")
    root = restore_root_logger
    assert root.level == logging.INFO
    stream_handlers = [h for h in root.handlers if isinstance(h, logging.StreamHandler)]
    assert stream_handlers
    assert stream_handlers[0].stream is sys.stderr
    assert stream_handlers[0].formatter._fmt == LOG_FORMAT

def test_setup_logging_unknown_level_falls_back_to_warning(restore_root_logger):
    setup_logging("nonsense")
    assert restore_root_logger.level == logging.WARNING

def test_setup_logging_to_file_creates_directory(tmp_path, restore_root_logger):
    log_file = tmp_path / "logs" / "nested" / "lisplet.log"
    setup_logging("DEBUG", str(log_file))
    get_logger("lisplet.test").debug("hello from the test")
    for handler in restore_root_logger.handlers:
        handler.flush()
    assert log_file.exists()
    assert "hello from the test" in log_file.read_text()

def test_get_logger_returns_named_logger():
    assert get_logger("lisplet.sample") is logging.getLogger("lisplet.sample")
