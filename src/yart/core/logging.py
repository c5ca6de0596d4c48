"""
Logging setup for applications hosting yart tools.

The library logs through loguru and never adds sinks on its own; call
``setup_logging`` from the host application to get console/file output.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from yart.config.manager import ConfigManager, get_config

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logging(config: Optional[ConfigManager] = None, *, console: bool = True) -> None:
    """Configure loguru sinks from the ``logging.*`` settings."""
    config = config or get_config()
    level = "DEBUG" if config.get("app.debug", False) else config.get("logging.level", "INFO")

    # Remove default handler
    logger.remove()

    if console:
        logger.add(
            sys.stderr,
            format=CONSOLE_FORMAT,
            level=level,
            colorize=True,
        )

    log_file = config.get("logging.file")
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            format=FILE_FORMAT,
            level="DEBUG",
            rotation=config.get("logging.rotation", "10 MB"),
            retention=config.get("logging.retention", "7 days"),
        )

    logger.debug(f"Logging configured (level={level}, file={log_file})")
