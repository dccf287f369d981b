"""
Logging setup for the family support platform.

Log level and optional log file come from Settings (LOG_LEVEL / LOG_FILE);
explicit arguments override them.
"""
import logging
import sys
from typing import List, Optional

from src.utils.config import Settings, get_settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# HTTP and SDK clients log every request at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "anthropic")


def setup_logging(
    settings: Optional[Settings] = None,
    level: Optional[str] = None,
    log_file: Optional[str] = None,
) -> int:
    """
    Configure the root logger.

    Args:
        settings: Source of log_level and log_file (defaults to global settings)
        level: Level name overriding settings.log_level
        log_file: Path overriding settings.log_file

    Returns:
        The numeric level applied
    """
    settings = settings or get_settings()
    level_name = (level or settings.log_level or "INFO").upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    log_file = log_file or settings.log_file
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    root_logger.setLevel(numeric_level)

    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return numeric_level
