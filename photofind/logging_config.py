"""
Logging setup for the PhotoFind API.

Records go to the console and to a rotating file under config.LOG_DIR
(10MB per file, 5 backups). The root level comes from PHOTOFIND_LOG_LEVEL
unless the caller passes one.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional, Union

from photofind import config

# Timestamp, level, logger name, message
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Rotation settings
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5

LOG_FILE_NAME = "photofind.log"

# Chatty per-request loggers kept at WARNING unless we run at DEBUG
QUIET_LOGGERS = ("uvicorn.access", "httpx")

_configured = False


def resolve_level(level: Union[int, str, None]) -> int:
    """Turn a level name or number into a logging level; unknown names fall back to INFO."""
    if level is None:
        level = config.LOG_LEVEL
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(
    level: Union[int, str, None] = None,
    console: bool = True,
    file_logging: bool = True,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Install the console and rotating file handlers on the root logger.

    Only the first call does anything; later calls return the root logger
    as it is.

    Args:
        level: Level number or name (default: config.LOG_LEVEL)
        console: Whether to log to stdout
        file_logging: Whether to log to a file in config.LOG_DIR
        log_file: File name inside config.LOG_DIR (default: photofind.log)
    """
    global _configured

    if _configured:
        return logging.getLogger()

    level = resolve_level(level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Drop handlers installed by earlier basicConfig calls
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handlers = []

    if file_logging:
        config.LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            config.LOG_DIR / (log_file or LOG_FILE_NAME),
            maxBytes=MAX_LOG_SIZE,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
        handlers.append(file_handler)

    if console:
        handlers.append(logging.StreamHandler(sys.stdout))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    if level > logging.DEBUG:
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(max(level, logging.WARNING))

    root_logger.info(
        f"{config.APP_NAME} v{config.APP_VERSION} logging at {logging.getLevelName(level)}"
        + (f", files in {config.LOG_DIR}" if file_logging else "")
    )

    _configured = True

    return root_logger
