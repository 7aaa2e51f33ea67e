"""
Tests for logging setup.
"""

import logging

from ideapress.utils.config import config
from ideapress.utils.logger import APP_LOGGER_NAME, configure_logging, logger


def test_module_logger_is_under_app_logger():
    assert logger.name.startswith(APP_LOGGER_NAME + ".")


def test_configure_logging_is_idempotent():
    try:
        app_logger = configure_logging("DEBUG")
        app_logger = configure_logging("DEBUG")

        assert app_logger.level == logging.DEBUG
        assert len(app_logger.handlers) == 1
        assert app_logger.propagate is False
        assert logging.getLogger("urllib3").level == logging.WARNING
    finally:
        configure_logging(config.log_level, config.log_format)
