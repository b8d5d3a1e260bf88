"""Logging configuration using loguru.

Command results are printed on stdout by the CLI; log records go to
stderr and, optionally, to a rotating file, so both can be piped
separately.
"""

import logging
import sys

from loguru import logger

from schemaledger.config.models import LoggingConfig

_CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> <level>{level: <7}</level> <level>{message}</level>"
)

_FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"
)


class _InterceptHandler(logging.Handler):
    """Forward stdlib logging records (psycopg, aiosqlite) to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore[assignment]
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def configure_logging(config: LoggingConfig) -> None:
    """
    Replace loguru's default sink with the configured ones.

    ``console`` format writes short colored lines to stderr; ``json``
    serializes every record, on stderr and in the log file alike.

    Args:
        config: LoggingConfig with level, format, and file settings.
    """
    serialize = config.format == "json"

    logger.remove()
    logger.add(
        sys.stderr,
        format="{message}" if serialize else _CONSOLE_FORMAT,
        level=config.level,
        serialize=serialize,
        colorize=not serialize,
    )

    if config.file:
        logger.add(
            config.file,
            format="{message}" if serialize else _FILE_FORMAT,
            level=config.level,
            serialize=serialize,
            rotation=config.rotation,
            retention=config.retention,
            compression="gz",
        )

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)

    logger.debug("Logging configured: level={} format={}", config.level, config.format)
