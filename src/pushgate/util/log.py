# src/pushgate/util/log.py: Structured JSON logger.
# This module provides a centralized logging setup that outputs structured
# JSON logs to stderr. It uses contextvars to automatically inject the name of
# the repository being evaluated into log records, making them easier to parse
# and analyze in a log management system.

import logging
import json
import contextvars

from ..config import LoggingConfig

APP_LOGGER = "pushgate"

repo_context = contextvars.ContextVar('repo_context', default=None)

class JsonFormatter(logging.Formatter):
    def format(self, record):
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "repo": repo_context.get(),
        }
        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(log_record)

class TextFormatter(logging.Formatter):
    def __init__(self):
        super().__init__('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    def format(self, record):
        message = super().format(record)
        repo = repo_context.get()
        return f"[{repo}] {message}" if repo else message

def _app_handler() -> logging.Handler:
    app_logger = logging.getLogger(APP_LOGGER)
    if not app_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
        app_logger.addHandler(handler)
        app_logger.setLevel(logging.WARNING)
    return app_logger.handlers[0]

def get_logger(name):
    _app_handler()
    return logging.getLogger(name)

def setup_logging(config: LoggingConfig):
    """Applies the configured level and format to the application's loggers."""
    handler = _app_handler()
    handler.setFormatter(JsonFormatter() if config.json_format else TextFormatter())
    logging.getLogger(APP_LOGGER).setLevel(config.level.upper())
