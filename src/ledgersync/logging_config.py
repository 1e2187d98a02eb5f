"""Logging setup for the ledgersync command line."""

import logging
from typing import Any

import click

LOGGER_NAME = "ledgersync"


class ClickEchoHandler(logging.Handler):
    """Write log records to stderr through click.echo.

    The stream is looked up on every record, so output follows click's
    stream redirection (for example under CliRunner).
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(self.format(record), err=True)
        except Exception:
            self.handleError(record)


def setup_logging(log_level: str = "info") -> logging.Logger:
    """Configure the package logger with a single console handler.

    Calling this more than once replaces the handler instead of stacking them.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = ClickEchoHandler()
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] %(levelname)s in %(module)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)
    return logger


def details(value: Any) -> str:
    """Highlight a value in console output.

    Meant for ``click.echo``, which strips the styling when stdout is not a
    terminal. Log records use plain ``%s`` arguments instead.
    """
    return click.style(str(value), fg="red")
