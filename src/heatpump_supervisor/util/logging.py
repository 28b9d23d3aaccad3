"""This module provides a centralized utility for configuring application logging.

It defines the `LoggingUtil` class, whose static method hands out loggers that
share one console format. The level is taken from the `LOGLEVEL` environment
variable so that the supervisor can be run verbosely on the heat pump host
without code changes.
"""

import logging
import os

LOG_FORMAT = "%(asctime)s - [%(name)s][%(levelname)s] %(message)s"


class LoggingUtil:
    """A utility class for configuring and retrieving loggers.

    Every module of the supervisor obtains its logger through
    `LoggingUtil.get_logger(__name__)`, which guarantees a single console
    handler per logger and a consistent format across the state machine,
    the persistence layer and the relay drivers.
    """

    @staticmethod
    def get_logger(logger_name: str) -> logging.Logger:
        """Retrieves a configured logger instance.

        The logger's level is determined by the 'LOGLEVEL' environment variable
        (e.g. 'DEBUG', 'warning'). Unknown or missing values fall back to INFO.

        Args:
            logger_name: The name of the logger to retrieve (typically `__name__`
                         of the calling module).

        Returns:
            A configured `logging.Logger` instance.
        """
        logger = logging.getLogger(logger_name)
        logger.setLevel(LoggingUtil.resolve_level(os.getenv("LOGLEVEL")))

        # Ensure that handlers are not duplicated if get_logger is called multiple times
        if not logger.handlers:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            logger.addHandler(console_handler)

        return logger

    @staticmethod
    def resolve_level(level_name: str | None) -> int:
        """Maps a level name to a `logging` level, defaulting to INFO."""
        if level_name is None:
            return logging.INFO
        level = logging.getLevelName(level_name.strip().upper())
        return level if isinstance(level, int) else logging.INFO
