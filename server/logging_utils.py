# server/logging_utils.py

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

# -*- coding: utf-8 -*-


from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rastermap.logging_utils import UTCFormatter, attach_handlers

SERVER_LOG_FORMAT = "%(asctime)s %(levelname)-5s %(name)s: %(message)s"


def setup_server_logger(
    name: str = "rastermap-server",
    log_dir: Path | None = None,
    level: int = logging.INFO,
    max_bytes: int = 5_000_000,
    backup_count: int = 5,
) -> logging.Logger:
    """
    Console + optional size-rotated server.log, shared with the rastermap
    core logger so resolver debug lines end up in the server log.

    A server logger that already has handlers is returned untouched.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    fmt = UTCFormatter(SERVER_LOG_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if log_dir:
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                log_dir / "server.log",
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
        )

    for h in handlers:
        h.setFormatter(fmt)

    return attach_handlers(name, handlers, level)
