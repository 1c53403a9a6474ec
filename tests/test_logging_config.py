import logging

import pytest

from logging_config import LOGGER_NAMES, setup_logging


@pytest.fixture(autouse=True)
def restore_loggers():
    yield
    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
        logger.propagate = True
        logger.setLevel(logging.NOTSET)


def test_setup_logging_writes_to_file(tmp_path):
    log_file = tmp_path / 'orders.log'
    setup_logging(logging.INFO, str(log_file))
    logging.getLogger('orders').info("Added order %d", 1)
    logging.getLogger('orders').debug("not shown")
    for handler in logging.getLogger('orders').handlers:
        handler.flush()
    text = log_file.read_text(encoding='utf-8')
    assert 'orders - INFO - Added order 1' in text
    assert 'not shown' not in text


def test_setup_logging_twice_does_not_duplicate_handlers():
    setup_logging(logging.WARNING)
    setup_logging(logging.WARNING)
    for name in LOGGER_NAMES:
        assert len(logging.getLogger(name).handlers) == 1
