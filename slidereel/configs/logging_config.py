"""
Logging configuration for SlideReel (configs).
"""

import logging
import logging.config
import os
import sys
from typing import Any

from loguru import logger as loguru_logger

from slidereel.configs.config import config


def setup_logging(
    log_level: str | None = None,
    enable_file_logging: bool = False,
    log_file: str | None = None,
    log_dir: str | None = None,
) -> None:
    if log_level is None:
        log_level = config.log_level
    log_level = log_level.upper()
    log_file = log_file or config.log_file or "slidereel.log"
    log_dir = log_dir or config.log_dir

    logging_dict: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "level": log_level,
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "stream": "ext://sys.stderr",
            }
        },
        "loggers": {
            # SDK loggers are chatty at INFO (one line per HTTP request)
            "httpx": {"level": "WARNING", "handlers": ["console"], "propagate": False},
            "openai": {"level": "WARNING", "handlers": ["console"], "propagate": False},
        },
        "root": {"level": log_level, "handlers": ["console"]},
    }
    logging.config.dictConfig(logging_dict)

    loguru_logger.remove()
    loguru_logger.add(sys.stderr, level=log_level)

    if enable_file_logging:
        os.makedirs(log_dir, exist_ok=True)
        loguru_logger.add(
            os.path.join(log_dir, log_file),
            level="DEBUG",
            rotation="10 MB",
            retention=5,
            backtrace=False,
            diagnose=False,
        )
