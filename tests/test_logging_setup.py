import logging

import pytest

from salary_ledger import logging_setup


@pytest.fixture
def package_logger():
    logger = logging.getLogger(logging_setup.ROOT_LOGGER)
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield logger
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


def test_level_from_argument_name_or_number():
    assert logging_setup.resolve_level("debug") == logging.DEBUG
    assert logging_setup.resolve_level(" 30 ") == logging.WARNING
    assert logging_setup.resolve_level(logging.ERROR) == logging.ERROR


def test_level_falls_back_to_env_then_info(monkeypatch):
    monkeypatch.setenv("SALARY_LEDGER_LOG_LEVEL", "WARNING")
    assert logging_setup.resolve_level() == logging.WARNING
    monkeypatch.setenv("SALARY_LEDGER_LOG_LEVEL", "")
    assert logging_setup.resolve_level() == logging.INFO
    monkeypatch.delenv("SALARY_LEDGER_LOG_LEVEL")
    assert logging_setup.resolve_level() == logging.INFO
    assert logging_setup.resolve_level("nonsense") == logging.INFO


def test_configure_logging_attaches_one_console_handler(package_logger):
    logging_setup.configure_logging("DEBUG")
    logging_setup.configure_logging("ERROR")

    stream_handlers = [h for h in package_logger.handlers if type(h) is logging.StreamHandler]
    assert len(stream_handlers) == 1
    assert package_logger.level == logging.ERROR
    assert package_logger.propagate is False


def test_get_logger_returns_package_child():
    log = logging_setup.get_logger("salary_ledger.parser")
    assert log.name == "salary_ledger.parser"
    assert log.parent is logging.getLogger("salary_ledger")
