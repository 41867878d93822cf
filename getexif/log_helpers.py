# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Logging helpers for the command-line interface.

The library itself only creates module loggers; handlers are attached
here, by the CLI.

Copyright 2025 DNAi inc.
"""

import logging
import os
import sys
from typing import Optional


def setup_logger(log_file: Optional[str] = None, level: int = logging.INFO) -> logging.Logger:
    """
    Set up and configure the root logger.

    Args:
        log_file: Optional path of a log file; its directory is created if needed
        level: The logging level

    Returns:
        The configured root logger instance
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter('%(levelname)s: %(message)s')
    file_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    # Output goes to stdout; diagnostics go to stderr
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        file_handler = logging.FileHandler(log_file, mode='w')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    return logger


def shutdown_logger(logger: logging.Logger) -> None:
    """
    Remove and close the handlers of a logger, releasing any log file.
    """
    if not logger:
        return
    for handler in logger.handlers[:]:
        handler.flush()
        handler.close()
        logger.removeHandler(handler)
