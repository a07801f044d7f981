"""
Logging helpers for repo-status-check.

Everything goes to the log sink file when one is configured. Warnings
always reach stderr as well, so that cron mails them; progress lines
only do so in debug mode or with -v.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

PACKAGE_LOGGER = "repo_status"

FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
STDERR_FORMAT = "%(levelname)s %(name)s: %(message)s"


def configure_logging(
    verbosity: int,
    debug: bool = False,
    log_file: Optional[Path] = None,
) -> None:
    """
    Configure the package logger.

    stderr level:
      verbosity == 0 -> WARNING (INFO when debug is set)
      verbosity == 1 -> INFO
      verbosity >= 2 -> DEBUG
    """

    if verbosity >= 2:
        stderr_level = logging.DEBUG
    elif verbosity == 1 or debug:
        stderr_level = logging.INFO
    else:
        stderr_level = logging.WARNING
    file_level = logging.DEBUG if verbosity >= 2 else logging.INFO

    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.DEBUG)

    stderr_handler = logging.StreamHandler()
    stderr_handler.setLevel(stderr_level)
    stderr_handler.setFormatter(logging.Formatter(STDERR_FORMAT))
    logger.addHandler(stderr_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(file_level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)
