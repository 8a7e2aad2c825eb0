"""Application logging."""

import logging
import os
from typing import Optional


APP_LOGGER_NAME = "chatdesk"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(
    name: str,
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    log_format: str = DEFAULT_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT
) -> logging.Logger:
    """
    Configure a logger writing to the console and, optionally, a file.

    Calling it again for the same name re-applies level and format to the
    handlers already attached instead of adding new ones.

    Args:
        name: Logger name
        log_level: Level name; unknown names fall back to INFO
        log_file: Optional log file, its directory is created on demand
        log_format: logging.Formatter format string
        date_format: strftime format for %(asctime)s

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    level = getattr(logging, log_level.upper(), logging.INFO)
    formatter = logging.Formatter(log_format, datefmt=date_format)
    logger.setLevel(level)

    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
            handler.setFormatter(formatter)
        return logger

    handlers = [logging.StreamHandler()]
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


app_logger: Optional[logging.Logger] = None


def init_app_logger(settings) -> logging.Logger:
    """Configure the chatdesk logger from Settings and make it the app logger."""
    global app_logger

    app_logger = setup_logger(
        name=APP_LOGGER_NAME,
        log_level=settings.log_level,
        log_file=settings.log_file,
        log_format=settings.log_format,
        date_format=settings.log_date_format
    )
    return app_logger


def get_app_logger(component: Optional[str] = None) -> logging.Logger:
    """
    Get the application logger, or a child of it for one component.

    Child loggers ("chatdesk.<component>") carry no handlers of their own
    and propagate to the app logger.
    """
    root = app_logger if app_logger is not None else setup_logger(APP_LOGGER_NAME)
    if component:
        return root.getChild(component)
    return root
