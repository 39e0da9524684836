"""Logging utilities with rich console output for the publisher.

Every module obtains its logger the same way:

    from common.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Creating repository...")
    logger.warning("Blob upload failed for %s", path)

The CLI calls ``setup_logging`` once at start-up; library code never
configures handlers on its own beyond ``get_logger``.
"""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

# Shared console so progress lines and log records interleave cleanly
console = Console(stderr=True)

_FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Chatty third-party loggers kept at WARNING unless we are debugging
_NOISY_LOGGERS = ("urllib3", "requests", "httpx", "uvicorn.access")


def _make_handler(show_time: bool, show_path: bool) -> RichHandler:
    handler = RichHandler(
        console=console,
        show_time=show_time,
        show_path=show_path,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))
    return handler


def get_logger(
    name: str,
    level: str | None = None,
    show_time: bool = False,
    show_path: bool = False,
) -> logging.Logger:
    """Get a configured logger with rich output.

    Args:
        name: Logger name (typically __name__ of the module)
        level: Logging level name. If None, uses the LOG_LEVEL environment
               variable or defaults to INFO.
        show_time: Show timestamp in log output
        show_path: Show file path in log output

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid stacking handlers when a module is re-imported
    if logger.handlers:
        return logger

    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")

    logger.setLevel(level.upper())
    logger.addHandler(_make_handler(show_time, show_path))

    # pytest's caplog hooks the root logger
    logger.propagate = True

    return logger


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure the root logger for a CLI or server process.

    Args:
        level: Default logging level; LOG_LEVEL in the environment wins
        log_file: Optional file path that receives full-detail records
    """
    level = os.getenv("LOG_LEVEL", level).upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(_make_handler(show_time=False, show_path=False))

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(fmt=_FILE_FORMAT, datefmt=_FILE_DATEFMT))
        root_logger.addHandler(file_handler)

    if level != "DEBUG":
        for noisy in _NOISY_LOGGERS:
            logging.getLogger(noisy).setLevel(logging.WARNING)


def success(message: str) -> None:
    """Print a success line with a green checkmark."""
    console.print(f"[green]✓[/green] {message}")


def error(message: str) -> None:
    """Print an error line with a red cross."""
    console.print(f"[red]✗[/red] {message}")
