"""Tests for logging setup."""

import logging

import pytest
from rich.logging import RichHandler

from apidelta.analyzers import impact_analyzer, type_relation
from apidelta.analyzers.type_relation import HeuristicTypeComparator
from apidelta.core import TypeSchema
from apidelta.logging_config import LOGGER_NAME, get_logger, resolve_level, setup_logging


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


class TestSetupLogging:

    @pytest.mark.parametrize("verbose,quiet,level", [
        (False, False, logging.WARNING),
        (True, False, logging.DEBUG),
        (False, True, logging.ERROR),
        (True, True, logging.ERROR),
    ])
    def test_levels(self, verbose, quiet, level):
        logger = setup_logging(verbose=verbose, quiet=quiet)
        assert logger.level == level

    def test_uses_rich_handler(self):
        logger = setup_logging()
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)
        assert logger.propagate is False

    def test_repeated_setup_does_not_stack_handlers(self):
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "apidelta.log"
        logger = setup_logging(verbose=True, log_file=str(log_file))
        get_logger("analyzers.impact").debug("traversal done")
        for handler in logger.handlers:
            handler.flush()
        assert "traversal done" in log_file.read_text()


class TestGetLogger:

    def test_root_logger(self):
        assert get_logger().name == LOGGER_NAME

    def test_prefixes_name(self):
        assert get_logger("analyzers").name == "apidelta.analyzers"

    def test_keeps_qualified_name(self):
        assert get_logger("apidelta.analyzers.api_differ").name == "apidelta.analyzers.api_differ"


class TestPackageLoggers:

    @pytest.mark.parametrize("verbose,quiet,level", [
        (False, False, logging.WARNING),
        (True, False, logging.DEBUG),
        (True, True, logging.ERROR),
    ])
    def test_resolve_level(self, verbose, quiet, level):
        assert resolve_level(verbose, quiet) == level

    def test_modules_log_under_package_namespace(self):
        assert type_relation.logger.name == "apidelta.analyzers.type_relation"
        assert impact_analyzer.logger.name == "apidelta.analyzers.impact_analyzer"

    def test_debug_records_reach_handlers(self, caplog):
        with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
            HeuristicTypeComparator().compare(TypeSchema("string"), TypeSchema("number"))
        assert "Unrelated type change" in caplog.text
