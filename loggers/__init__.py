import logging
from logging import FileHandler, Formatter, Logger, StreamHandler
import os
from typing import Any

from src.main.config import config

LOG_DIR = os.path.join(os.path.dirname(__file__), "..", "logs")
LOG_FILE = os.path.join(LOG_DIR, "service.log")

os.makedirs(LOG_DIR, exist_ok=True)

logging_format = "%(asctime)s [%(levelname)s]|[%(process)d]| %(name)s: %(message)s"
plain_logging_format = "%(asctime)s [%(process)d]| %(message)s"
time_logging_format = "%Y-%m-%d %H:%M:%S"

log_level = getattr(logging, config.app.LOG_LEVEL.upper(), logging.INFO)
file_log_level = getattr(logging, config.app.LOG_LEVEL_FILE.upper(), logging.WARNING)


def get_file_handler() -> FileHandler:
    file_handler = FileHandler(LOG_FILE, "a", "utf-8")
    file_handler.setLevel(file_log_level)
    file_handler.setFormatter(Formatter(logging_format, time_logging_format))
    return file_handler


def get_stream_handler(fmt: str = logging_format) -> StreamHandler:  # type: ignore
    stream_handler = StreamHandler()
    stream_handler.setLevel(log_level)
    stream_handler.setFormatter(Formatter(fmt, time_logging_format))
    return stream_handler


def get_logger(name: Any, *, plain_format: bool = False) -> Logger:
    """
    Return a configured logger. Handlers are attached once per name, so calling
    this at import time in many modules is safe.

    plain_format drops the level and logger name, and skips the file handler;
    it is meant for high-volume request logs.
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    logger.setLevel(log_level)

    if plain_format:
        logger.addHandler(get_stream_handler(plain_logging_format))
    else:
        logger.addHandler(get_file_handler())
        logger.addHandler(get_stream_handler())

    logger.propagate = False
    return logger
