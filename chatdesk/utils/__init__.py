"""Utilities package."""

from .logger import get_app_logger, setup_logger, init_app_logger
from .timestamps import to_epoch

__all__ = [
    "get_app_logger",
    "setup_logger",
    "init_app_logger",
    "to_epoch",
]
