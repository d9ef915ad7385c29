# rastermap:cli_paths.py

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

import os
from pathlib import Path
from typing import Optional


def _as_dir(p: str, *, create: bool = False, name: str = "path") -> Path:
    pp = Path(p).expanduser().resolve()
    if create:
        pp.mkdir(parents=True, exist_ok=True)
    if pp.exists() and not pp.is_dir():
        raise ValueError(f"{name} exists but is not a directory: {pp}")
    return pp


def _as_file(p: str, *, name: str = "path") -> Path:
    pp = Path(p).expanduser().resolve()
    if not pp.is_file():
        raise ValueError(f"{name} is not a file: {pp}")
    return pp


def apply_path_overrides(
    *,
    scheme: Optional[str] = None,     # tile scheme JSON
    logs_dir: Optional[str] = None,
    create_dirs: bool = False,
) -> None:
    """
    Map CLI overrides into the RASTERMAP_* env vars that Config reads.
    """
    if scheme:
        os.environ["RASTERMAP_SCHEME"] = str(_as_file(scheme, name="scheme"))

    if logs_dir:
        p = _as_dir(logs_dir, create=create_dirs, name="logs_dir")
        os.environ["RASTERMAP_LOGS_DIR"] = str(p)
