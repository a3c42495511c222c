"""
Logging configuration for the installer.

User-facing progress goes through the prompter (click); logging is
for diagnostics only and goes to stderr, so the interactive
transcript stays readable at the default WARNING level.

Level precedence:
    --debug / --verbose  >  APPFAST_LOG_LEVEL  >  WARNING

APPFAST_LOG_FILE adds a file handler at APPFAST_LOG_FILE_LEVEL
(defaults to the console level).
"""

from __future__ import annotations

import logging
import sys

# (format, datefmt) per console verbosity
_CONSOLE_FORMATS: dict[int, tuple[str, str | None]] = {
    logging.DEBUG: ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s", "%H:%M:%S"),
    logging.INFO: ("%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
}
_CONSOLE_DEFAULT = ("%(levelname)s: %(message)s", None)

_FILE_FORMAT = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Loggers outside this package that get chatty below WARNING
_THIRD_PARTY = ("urllib3", "asyncio")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Configure the root logger once, at CLI startup.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ...).
        log_file: Optional log file path.
        log_file_level: Level for the log file; defaults to ``level``.
        quiet_third_party: Keep other libraries at WARNING unless at DEBUG.
    """
    console_level = _parse_level(level)

    if console_level <= logging.DEBUG:
        fmt, datefmt = _CONSOLE_FORMATS[logging.DEBUG]
    elif console_level <= logging.INFO:
        fmt, datefmt = _CONSOLE_FORMATS[logging.INFO]
    else:
        fmt, datefmt = _CONSOLE_DEFAULT

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = console_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        root_level = min(root_level, file_level)

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(file_level)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
        root.addHandler(file_handler)

    root.setLevel(root_level)

    if quiet_third_party and console_level > logging.DEBUG:
        for name in _THIRD_PARTY:
            logging.getLogger(name).setLevel(logging.WARNING)


def _parse_level(level: str | None) -> int:
    """Level name → numeric level; unknown names mean WARNING."""
    if not level:
        return logging.WARNING
    numeric = logging.getLevelName(level.strip().upper())
    return numeric if isinstance(numeric, int) else logging.WARNING
