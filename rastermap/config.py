from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import os

from rastermap.scheme import DEFAULT_SCHEME, TileScheme, load_scheme


@dataclass(frozen=True)
class Config:
    repo_root: Path

    default_depth: int = None           # type: ignore[assignment]
    log_level: str = None               # type: ignore[assignment]
    max_tiles: int = None               # type: ignore[assignment]  # per /api/raster request

    scheme_path: Optional[Path] = None  # None => built-in scheme
    logs_dir: Path = None               # type: ignore[assignment]

    def __post_init__(self) -> None:
        def _p(env_key: str, default_rel: Path) -> Path:
            raw = os.getenv(env_key, str(default_rel))
            return Path(raw).expanduser().resolve()

        if self.default_depth is None:
            object.__setattr__(self, "default_depth", int(os.getenv("RASTERMAP_DEFAULT_DEPTH", "0")))
        if self.max_tiles is None:
            object.__setattr__(self, "max_tiles", int(os.getenv("RASTERMAP_MAX_TILES", "4096")))
        if self.log_level is None:
            object.__setattr__(self, "log_level", os.getenv("RASTERMAP_LOG_LEVEL", "INFO").strip())

        raw_scheme = os.getenv("RASTERMAP_SCHEME", "").strip()
        if self.scheme_path is None and raw_scheme:
            object.__setattr__(self, "scheme_path", Path(raw_scheme).expanduser().resolve())

        if self.logs_dir is None:
            object.__setattr__(self, "logs_dir", _p("RASTERMAP_LOGS_DIR", self.repo_root / "logs"))

    def load_scheme(self) -> TileScheme:
        if self.scheme_path is None:
            return DEFAULT_SCHEME
        return load_scheme(self.scheme_path)
