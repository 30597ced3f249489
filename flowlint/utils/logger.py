# utils/logger.py
from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler

LOGGER_NAME = "flowlint"

_FMT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d - %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"

# (threshold, ANSI code), highest first
_COLORS = (
    (logging.ERROR, "91"),    # red
    (logging.WARNING, "93"),  # yellow
    (logging.INFO, "92"),     # green
)


def parse_level(value: str | int | None, default: int = logging.WARNING) -> int:
    """Map a level name ("debug", "WARN", ...) or number to a logging level."""
    if value is None:
        return default
    if isinstance(value, int):
        return value
    level = logging.getLevelName(str(value).strip().upper())
    return level if isinstance(level, int) else default


class _ColorFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        if os.getenv("NO_COLOR") or not sys.stderr.isatty():
            return base
        for threshold, code in _COLORS:
            if record.levelno >= threshold:
                return f"\033[{code}m{base}\033[0m"
        return base


def init_logger(
    name: str = LOGGER_NAME,
    level: int | str | None = None,
    log_dir: str | Path | None = None,
    file_name: str = "flowlint.log",
    file_max_mb: int = 5,
    file_backup: int = 3,
) -> logging.Logger:
    """
    Configure the project logger once per CLI run:
      - colored handler on stderr, level from `level` or LOG_LEVEL (default WARNING)
      - rotating file handler under `log_dir` when given
    Library code never calls this; it only asks for get_logger(...) children.
    """
    logger = logging.getLogger(name)
    logger.handlers.clear()
    logger.propagate = False
    logger.setLevel(parse_level(level if level is not None else os.getenv("LOG_LEVEL")))

    # stdout carries the validation report
    sh = logging.StreamHandler(sys.stderr)
    sh.setLevel(logger.level)
    sh.setFormatter(_ColorFormatter(fmt=_FMT, datefmt=_DATEFMT))
    logger.addHandler(sh)

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(
            filename=str(log_dir / file_name),
            maxBytes=file_max_mb * 1024 * 1024,
            backupCount=file_backup,
            encoding="utf-8",
        )
        fh.setLevel(logger.level)
        fh.setFormatter(logging.Formatter(fmt=_FMT, datefmt=_DATEFMT))
        logger.addHandler(fh)

    return logger


def get_logger(child: str) -> logging.Logger:
    """Child of the project logger, e.g. get_logger("validator") -> flowlint.validator."""
    return logging.getLogger(LOGGER_NAME).getChild(child)
