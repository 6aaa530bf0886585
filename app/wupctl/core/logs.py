"""Logging configuration for wupctl.

Modules log through ``logging.getLogger(__name__)``. The CLI configures
the ``wupctl`` logger once per invocation: a Rich handler on stderr for
the interactive console and, optionally, a plain line-oriented
transcript file that keeps every INFO-and-above record of the run.
"""

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

# Between INFO (20) and WARNING (30)
SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

ROOT_LOGGER = "wupctl"

TRANSCRIPT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
TRANSCRIPT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def log_success(logger: logging.Logger, msg: str, *args: object) -> None:
    """Log a message at the SUCCESS level."""
    logger.log(SUCCESS, msg, *args)


def console_level(verbose: bool = False, quiet: bool = False) -> int:
    """Map the global CLI flags to a console log level.

    Args:
        verbose: Show INFO and DEBUG records.
        quiet: Show only errors.

    Returns:
        Logging level for the console handler.
    """
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.WARNING


def configure_logging(
    console: Console,
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure the wupctl logger for a CLI invocation.

    Existing handlers are replaced, so calling this twice does not
    duplicate output.

    Args:
        console: Rich console the console handler writes to.
        verbose: Show debug output on the console.
        quiet: Show only errors on the console.
        log_file: Optional transcript file (appended to).

    Returns:
        The configured package logger.

    Raises:
        OSError: If the transcript file cannot be opened.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    console_handler = RichHandler(
        console=console,
        show_path=False,
        show_time=verbose,
        markup=False,
        rich_tracebacks=True,
    )
    console_handler.setLevel(console_level(verbose, quiet))
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter(TRANSCRIPT_FORMAT, TRANSCRIPT_DATEFMT))
        logger.addHandler(file_handler)

    return logger
