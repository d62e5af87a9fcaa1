# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

import logging, sys


class _ColorFormatter(logging.Formatter):
    """Formatter with ANSI colors for terminal output."""
    COLORS = {
        logging.DEBUG:    "\033[36m",   # cyan
        logging.INFO:     "\033[32m",   # green
        logging.WARNING:  "\033[33m",   # yellow
        logging.ERROR:    "\033[31m",   # red
        logging.CRITICAL: "\033[35m",   # magenta
    }
    RESET = "\033[0m"
    BOLD  = "\033[1m"

    def __init__(self, fmt: str, datefmt: str, use_color: bool = True):
        super().__init__(fmt, datefmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_color:
            return super().format(record)
        # colorize a copy; other handlers must still see the plain record
        record = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelno, "")
        if record.name.startswith("remeta"):
            record.name = f"{self.BOLD}{record.name}{self.RESET}{color}"
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        record.msg = f"{color}{record.msg}{self.RESET}"
        return super().format(record)


_QUIET_DEFAULT = ["botocore", "boto3", "urllib3", "opensearch"]


def _init_logger() -> logging.Logger:
    """
    Initializes hierarchical logging levels:
      - remeta (base) → bold + colored, to stderr
      - watch namespaces (base -1 → more verbose)
      - quiet namespaces (base +1 → less verbose)
      - all others (base +2)
    Lazy import of get_cfg keeps config.py free of logging imports.
    """
    from remeta.config import get_cfg
    cfg = get_cfg()
    base_level = getattr(logging, str(cfg.get("log.level")).upper(), logging.INFO)

    def shift(level: int, delta: int) -> int:
        return min(logging.CRITICAL, max(logging.DEBUG, level + 10 * delta))

    root = logging.getLogger()
    root.setLevel(shift(base_level, +2))
    root.handlers.clear()

    use_color = hasattr(sys.stderr, "isatty") and sys.stderr.isatty()
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(_ColorFormatter(
        "%(asctime)s %(levelname)-5s %(name)s: %(message)s",
        "%H:%M:%S",
        use_color=use_color,
    ))

    root.addHandler(handler)

    remeta_log = logging.getLogger("remeta")
    remeta_log.setLevel(base_level)

    for ns in cfg.get("log.debug", []):
        logging.getLogger(ns).setLevel(logging.DEBUG)

    for ns in cfg.get("log.watch", []):
        logging.getLogger(ns).setLevel(shift(base_level, -1))

    for ns in cfg.get("log.quiet", _QUIET_DEFAULT):
        logging.getLogger(ns).setLevel(shift(base_level, +1))

    return remeta_log


_LOGGER_SINGLETON = _init_logger()


def get_logger(name: str | None = None) -> logging.Logger:
    """Returns the package logger, or a child of it."""
    if name:
        return _LOGGER_SINGLETON.getChild(name)
    return _LOGGER_SINGLETON


LOG = _LOGGER_SINGLETON
