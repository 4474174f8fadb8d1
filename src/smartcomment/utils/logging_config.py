# smartcomment/utils/logging_config.py
"""smartcomment.utils.logging_config
===================================

Logging configuration for the smartcomment command line.

Features:
    - Console logging to stderr; the threshold comes from the configuration
      (default WARNING) and is lowered by ``-v`` (INFO) and ``-vv`` (DEBUG).
    - Optional rotating file log when ``[logging] file`` is set.
    - Optional separate error log (``<file>.error``) for ERROR and CRITICAL.
    - Safe reconfiguration: existing root handlers are replaced, so repeated
      calls (e.g. in tests) never duplicate records.
    - Never raises; problems are reported to stderr and logging continues
      with whatever could be set up.

Usage:
    >>> from smartcomment.utils import logging_config
    >>> logging_config.setup_logging({"logging": {"console_level": "INFO"}})

Globals:
    logger: Main application logger ("smartcomment").
"""

import logging
import logging.handlers
import os
import sys
from typing import Any, Optional


# Created at import time, configured by ``setup_logging()``.
logger = logging.getLogger("smartcomment")


def _level(name: Any, default: int) -> int:
    return getattr(logging, str(name).upper(), default)


def _rotating_handler(
    filename: str, level: int, formatter: logging.Formatter, max_bytes: int, backups: int
) -> Optional[logging.Handler]:
    try:
        log_dir = os.path.dirname(filename)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)
        handler = logging.handlers.RotatingFileHandler(
            filename, maxBytes=max_bytes, backupCount=backups, encoding="utf-8"
        )
    except OSError as e:
        print(f"Error setting up log file '{filename}': {e}.", file=sys.stderr)
        return None
    handler.setFormatter(formatter)
    handler.setLevel(level)
    return handler


def setup_logging(config: Optional[dict[str, Any]] = None, verbosity: int = 0) -> None:
    """Configures application-wide logging handlers and levels.

    Args:
        config (dict | None): Application configuration. Only the
            ``["logging"]`` section is consulted; recognised keys are:

            - ``console_level`` (str): stderr threshold. Default ``"WARNING"``.
            - ``file`` (str): path of a rotating log file; empty disables it.
            - ``file_level`` (str): threshold of the log file. Default ``"DEBUG"``.
            - ``separate_error_log`` (bool): also write ERROR and above to
              ``<file>.error``. Default ``False``.
        verbosity (int): Number of ``-v`` flags; 1 means INFO, 2 or more DEBUG.
            Lowers the console threshold, never raises it.
    """
    if config is None:
        config = {}
    logging_config = config.get("logging", {})

    # Console handler
    console_level = _level(logging_config.get("console_level", "WARNING"), logging.WARNING)
    if verbosity >= 2:
        console_level = min(console_level, logging.DEBUG)
    elif verbosity == 1:
        console_level = min(console_level, logging.INFO)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter("%(levelname)-8s - %(name)-20s - %(message)s"))
    console_handler.setLevel(console_level)

    # Optional file handlers
    file_formatter = logging.Formatter(
        "%(asctime)s - %(levelname)-8s - %(name)-20s - %(message)s (%(filename)s:%(lineno)d)"
    )
    log_filename = str(logging_config.get("file") or "")
    file_level = _level(logging_config.get("file_level", "DEBUG"), logging.DEBUG)
    file_handler = None
    error_file_handler = None
    if log_filename:
        log_filename = os.path.expanduser(log_filename)
        file_handler = _rotating_handler(
            log_filename, file_level, file_formatter, 2 * 1024 * 1024, 5
        )
        if logging_config.get("separate_error_log", False):
            error_file_handler = _rotating_handler(
                log_filename + ".error", logging.ERROR, file_formatter, 1024 * 1024, 3
            )

    # Configure the root logger
    root_logger = logging.getLogger()
    root_logger.handlers = []  # Clear existing root handlers to avoid duplicates
    root_logger.addHandler(console_handler)
    if file_handler:
        root_logger.addHandler(file_handler)
    if error_file_handler:
        root_logger.addHandler(error_file_handler)

    levels = [console_level] + ([file_level] if file_handler else [])
    root_logger.setLevel(min(levels))

    logger.debug(
        "Logging setup complete. Root logger level: %s.",
        logging.getLevelName(root_logger.level),
    )
    if file_handler:
        logger.debug(
            "File logging to '%s' at level: %s.",
            log_filename,
            logging.getLevelName(file_handler.level),
        )
