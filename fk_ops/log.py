"""Logger setup shared by the engine and the front-end."""
from __future__ import annotations

import logging
from typing import Union

LOGGER_NAME = "fk_ops"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def configure_logger(level: Union[int, str] = logging.INFO) -> logging.Logger:
    """Attach a stream handler to the package logger once."""

    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
