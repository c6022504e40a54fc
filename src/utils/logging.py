"""
Logging setup for simulation runs and the CLI.
"""
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> "
    "<level>{level: <8}</level> "
    "<cyan>{name}:{function}:{line}</cyan> - {message}"
)

FILE_FORMAT = "{time:YYYY-MM-DDTHH:mm:ss.SSSZZ} | {level: <8} | {name}:{function}:{line} | {message}"


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[Path] = None,
    console: bool = True,
) -> None:
    """
    Route loguru output to stderr and, optionally, a rotating log file.

    Existing sinks are removed first, so every CLI command can call this
    without duplicating output.

    Args:
        log_level: Minimum level name, case-insensitive
        log_file: File sink path; its directory is created when missing
        console: Whether to add the stderr sink
    """
    level = log_level.upper()
    logger.remove()

    if console:
        logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            format=FILE_FORMAT,
            level=level,
            rotation="5 MB",
            retention=5,
            encoding="utf-8",
            colorize=False,
        )

    logger.debug(f"Logging at {level} (file: {log_file or 'none'})")
