# -*- coding: utf-8 -*-
"""
footprint/core/logging.py - Logging management

Everything under the ``footprint`` logger goes to stderr, leaving stdout
to the manifest. An optional log file always receives the detailed format.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO


CONSOLE_FORMAT = "%(levelname)s: %(message)s"
DEBUG_FORMAT = "%(levelname)s [%(name)s:%(lineno)d] %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s:%(lineno)d %(message)s"

ROOT_LOGGER_NAME = "footprint"


def _level(name: str) -> int:
    """Numeric level for a level name; unknown names fall back to INFO."""
    value = logging.getLevelName(str(name).upper())
    return value if isinstance(value, int) else logging.INFO


class ColoredFormatter(logging.Formatter):
    """
    Prefixes the level name with an ANSI colour when writing to a terminal.
    """

    LEVEL_COLORS = {
        logging.DEBUG: '\033[2m',       # Dim
        logging.INFO: '\033[34m',       # Blue
        logging.WARNING: '\033[33m',    # Yellow
        logging.ERROR: '\033[31m',      # Red
        logging.CRITICAL: '\033[1;31m', # Bold red
    }
    RESET = '\033[0m'

    def __init__(self, fmt=None, datefmt=None, use_colors=True, stream=None) -> None:
        super().__init__(fmt, datefmt)
        stream = stream if stream is not None else sys.stderr
        isatty = getattr(stream, 'isatty', None)
        self.use_colors = bool(use_colors and isatty and isatty())

    def format(self, record) -> str:
        if not self.use_colors:
            return super().format(record)

        # Colour a copy; other handlers see the plain record
        colored = logging.makeLogRecord(record.__dict__)
        prefix = self.LEVEL_COLORS.get(record.levelno, '')
        colored.levelname = f"{prefix}{record.levelname}{self.RESET}"
        return super().format(colored)


def _console_handler(fmt: str, use_colors: bool, stream: TextIO) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    handler.setFormatter(ColoredFormatter(fmt, use_colors=use_colors, stream=stream))
    return handler


def _file_handler(log_file: Path) -> logging.Handler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, encoding='utf-8')
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler


class FootprintLogger:
    """
    Owns the handlers of the ``footprint`` logger.

    ``setup`` is idempotent; ``reset`` detaches and closes the handlers it
    installed so that a later ``setup`` can apply new settings.
    """

    _handlers = []
    _configured = False

    @classmethod
    def setup(
        cls,
        level: str = "INFO",
        log_file: Optional[Path] = None,
        detailed: bool = False,
        use_colors: bool = True,
        stream: Optional[TextIO] = None
    ):
        """
        Configure logging

        Args:
            level: Log level name (DEBUG/INFO/WARNING/ERROR/CRITICAL)
            log_file: Also log to this file (optional)
            detailed: Show logger name and line number on the console
            use_colors: Colour level names when the console is a terminal
            stream: Console stream (defaults to sys.stderr)
        """
        if cls._configured:
            return

        root = logging.getLogger(ROOT_LOGGER_NAME)
        root.setLevel(_level(level))

        handlers = [_console_handler(DEBUG_FORMAT if detailed else CONSOLE_FORMAT,
                                     use_colors, stream or sys.stderr)]
        if log_file:
            handlers.append(_file_handler(Path(log_file)))

        for handler in handlers:
            root.addHandler(handler)

        cls._handlers = handlers
        cls._configured = True

    @classmethod
    def reset(cls) -> None:
        root = logging.getLogger(ROOT_LOGGER_NAME)
        for handler in cls._handlers:
            root.removeHandler(handler)
            handler.close()
        cls._handlers = []
        cls._configured = False

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Logger below ``footprint``; the prefix is added when missing."""
        if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
            name = f"{ROOT_LOGGER_NAME}.{name}"
        return logging.getLogger(name)

    @classmethod
    def set_level(cls, level: str) -> None:
        logging.getLogger(ROOT_LOGGER_NAME).setLevel(_level(level))


def get_logger(name: str) -> logging.Logger:
    return FootprintLogger.get_logger(name)


def set_level(level: str) -> None:
    FootprintLogger.set_level(level)


def setup_logging(level: str = "INFO", log_file: Optional[str] = None, detailed: bool = False):
    """Convenience wrapper around FootprintLogger.setup"""
    FootprintLogger.setup(level=level, log_file=Path(log_file) if log_file else None, detailed=detailed)


def setup_logging_from_config(config) -> None:
    """
    Configure logging from a FootprintConfig

    DEBUG runs get the detailed console format.
    """
    FootprintLogger.setup(
        level=config.log_level,
        log_file=config.log_file,
        detailed=_level(config.log_level) <= logging.DEBUG,
    )
