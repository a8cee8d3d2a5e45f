"""
Logging for minishell.

Every module logs through a standard library logger under the 'minishell'
namespace. Nothing is printed unless configure_logging() is called: the
interactive display is drawn by hand in raw mode, so log lines go to a
file unless a verbose level is explicitly asked for.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

ROOT_LOGGER = 'minishell'


class LogFormatter(logging.Formatter):
    """
    Log formatter for minishell.

    Produces: [timestamp] LEVEL    [subsystem] message
    """

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = False):
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime(
            '%Y-%m-%d %H:%M:%S.%f'
        )[:-3]

        level = record.levelname
        if self.use_colors and level in self.COLORS:
            level_display = f"{self.COLORS[level]}{level:8s}{self.RESET}"
        else:
            level_display = f"{level:8s}"

        # minishell.terminal -> terminal
        subsystem = record.name.split('.', 1)[-1]

        message = f"[{timestamp}] {level_display} [{subsystem}] {record.getMessage()}"
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        return message


def get_logger(name: str) -> logging.Logger:
    """Get a logger inside the minishell namespace."""
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + '.'):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def parse_level(level: Union[int, str]) -> int:
    """Turn 'debug', 'INFO' or 10 into a logging level number."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError(f"unknown log level: {level}")
    return value


def configure_logging(level: Union[int, str] = logging.WARNING,
                      log_file: Optional[str] = None) -> logging.Logger:
    """
    Attach handlers to the minishell root logger.

    With a log file everything at or above level goes there. Without one,
    records are written to stderr only when level is below WARNING.
    Calling it again replaces the handlers it installed earlier.
    """
    numeric_level = parse_level(level)
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(numeric_level)

    for handler in list(root.handlers):
        if getattr(handler, '_minishell', False):
            root.removeHandler(handler)
            handler.close()

    handler: Optional[logging.Handler] = None
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, encoding='utf-8')
        handler.setFormatter(LogFormatter(use_colors=False))
    elif numeric_level < logging.WARNING:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(LogFormatter(use_colors=sys.stderr.isatty()))

    if handler is not None:
        handler.setLevel(numeric_level)
        handler._minishell = True
        root.addHandler(handler)

    return root
