"""
Logging setup for IdeaPress.

Only the ``ideapress`` logger reports at LOG_LEVEL; the HTTP and SDK clients
underneath stay at WARNING.
"""

import logging
import sys

from ideapress.utils.config import config

APP_LOGGER_NAME = "ideapress"
QUIET_LOGGERS = ("httpx", "urllib3", "openai", "pinecone", "google_genai", "sentence_transformers")


def configure_logging(level: str = config.log_level, fmt: str = config.log_format) -> logging.Logger:
    """(Re)configure the application logger with a single stdout handler."""
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    app_logger = logging.getLogger(APP_LOGGER_NAME)
    app_logger.setLevel(level)
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt))
    app_logger.addHandler(handler)
    # Keeps records from being printed twice when a root handler is configured
    app_logger.propagate = False
    return app_logger


configure_logging()

logger = logging.getLogger(__name__)
