"""
Console logging for the Skillkeeper CLI.

Library modules only ever call `logging.getLogger(__name__)`; the CLI calls
configure_logging() once to attach a Rich handler writing to stderr. Reports
themselves go to stdout through click, so piping `audit --json` stays clean.
"""

import logging as _logging

import rich.console as _rich_console
import rich.logging as _rich_logging

SUCCESS = 25
"""Log level between INFO and WARNING for completed operations."""

_logging.addLevelName(SUCCESS, "SUCCESS")

PACKAGE_LOGGER = "skillkeeper"


def configure_logging(
    *,
    debug: bool = False,
    show_timestamp: bool = True,
    timestamp_format: str = "%Y-%m-%d %H:%M:%S",
    console: _rich_console.Console | None = None,
) -> _logging.Logger:
    """
    Attach a Rich handler to the package logger.

    Calling this again replaces the previous handler, so repeated CLI
    invocations in one process do not duplicate output.

    Args:
        debug: Emit DEBUG records when True, INFO and above otherwise.
        show_timestamp: Prefix records with their time.
        timestamp_format: strftime format for the timestamp column.
        console: Rich console to write to (stderr by default).

    Returns:
        The configured package logger.
    """
    logger = _logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, "_skillkeeper", False):
            logger.removeHandler(handler)

    handler = _rich_logging.RichHandler(
        console=console or _rich_console.Console(stderr=True),
        show_time=show_timestamp,
        show_path=debug,
        log_time_format=timestamp_format,
        markup=False,
        rich_tracebacks=debug,
    )
    handler._skillkeeper = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(_logging.DEBUG if debug else _logging.INFO)
    return logger


def success(logger: _logging.Logger, message: str, *args: object) -> None:
    """Log a message at the SUCCESS level."""
    logger.log(SUCCESS, message, *args)
