# rastermap:logging_utils.py

# MIT License
#
# Copyright (c) 2025 Jonas Waldeck
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND.

from __future__ import annotations

import logging
import sys
import time
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Iterable, Optional

PACKAGE_LOGGER = "rastermap"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class UTCFormatter(logging.Formatter):
    # 2026-01-03T18:43:55.067Z
    converter = time.gmtime

    def formatTime(self, record, datefmt=None):
        base = time.strftime("%Y-%m-%dT%H:%M:%S", self.converter(record.created))
        return f"{base}.{int(record.msecs):03d}Z"


def attach_handlers(name: str, handlers: Iterable[logging.Handler], level: int) -> logging.Logger:
    """
    Give logger `name` and the rastermap package logger the same handlers,
    so core debug output (grid extents) lands next to the caller's own lines.
    Existing handlers on both are replaced.
    """
    handlers = list(handlers)
    for logger_name in (name, PACKAGE_LOGGER):
        lg = logging.getLogger(logger_name)
        lg.setLevel(level)
        lg.propagate = False
        lg.handlers.clear()
        for h in handlers:
            lg.addHandler(h)
    return logging.getLogger(name)


def setup_logger(
    name: str,
    logs_dir: Optional[Path],
    level: str = "INFO",
    to_console: bool = True,
    backup_days: int = 14,
) -> logging.Logger:
    """
    Script logger: one file per name under logs_dir, rotated daily (UTC).
    logs_dir=None logs to the console only.
    """
    fmt = UTCFormatter(LOG_FORMAT)
    handlers: list[logging.Handler] = []

    if logs_dir is not None:
        logs_dir.mkdir(parents=True, exist_ok=True)
        fh = TimedRotatingFileHandler(
            str(logs_dir / f"{name}.log"),
            when="D",
            interval=1,
            backupCount=backup_days,
            encoding="utf-8",
            utc=True,
        )
        fh.setFormatter(fmt)
        handlers.append(fh)

    if to_console:
        ch = logging.StreamHandler(sys.stdout)
        ch.setFormatter(fmt)
        handlers.append(ch)

    return attach_handlers(name, handlers, getattr(logging, level.upper(), logging.INFO))
