"""
User-facing output and file logging through Loguru.

Domain modules log with ``from loguru import logger`` and only reach the log
file. ``log()`` is for messages the user should also see on the console.
"""

from pathlib import Path

from loguru import logger

from .console import get_console

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}"


def setup_loguru(log_file: Path, level: str = "INFO") -> None:
    """
    Send all logging to a rotating file; the console only shows log() output.

    Args:
        log_file: Path to the log file (parent directories are created)
        level: Minimum level written (DEBUG, INFO, WARNING, ERROR)
    """
    logger.remove()
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        level=level,
        format=LOG_FORMAT,
        rotation="10 MB",
        retention=5,
        encoding="utf-8",
    )
    logger.debug(f"Logging to {log_file} at {level}")


def log(message: str, level: str = "info") -> None:
    """
    Log message and print it for the user.

    Args:
        message: Text shown as-is (no Rich markup)
        level: debug, info, success, warning or error
    """
    logger.opt(depth=1).log(level.upper(), message)

    style = None if level == "info" else f"log.{level}"
    get_console().print(message, style=style, markup=False, highlight=False)
