# rastermap:scheme.py

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

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Sequence, Tuple

from rastermap.tiles import lat_from_ytile, lon_from_xtile


@dataclass(frozen=True)
class TileScheme:
    """
    Read-only constants table for one tiling scheme.

    Index i of every per-depth table describes depth i, i.e. slippy zoom
    min_zoom_level + i. The scheme's origin tile at depth i is the slippy tile
    (min_x_tile_at_depth[i], min_y_tile_at_depth[i]); its upper-left corner is
    (root_ullat, root_ullon).
    """
    root_ullat: float
    root_ullon: float
    min_zoom_level: int
    lat_per_tile: Tuple[float, ...]
    lon_per_tile: Tuple[float, ...]
    min_x_tile_at_depth: Tuple[int, ...]
    min_y_tile_at_depth: Tuple[int, ...]

    def __post_init__(self) -> None:
        # accept lists from callers / json, store tuples
        for name in ("lat_per_tile", "lon_per_tile"):
            object.__setattr__(self, name, tuple(float(v) for v in getattr(self, name)))
        for name in ("min_x_tile_at_depth", "min_y_tile_at_depth"):
            object.__setattr__(self, name, tuple(int(v) for v in getattr(self, name)))
        object.__setattr__(self, "root_ullat", float(self.root_ullat))
        object.__setattr__(self, "root_ullon", float(self.root_ullon))
        object.__setattr__(self, "min_zoom_level", int(self.min_zoom_level))

        n = len(self.lat_per_tile)
        if n == 0:
            raise ValueError("tile scheme needs at least one depth")
        lengths = {
            "lon_per_tile": len(self.lon_per_tile),
            "min_x_tile_at_depth": len(self.min_x_tile_at_depth),
            "min_y_tile_at_depth": len(self.min_y_tile_at_depth),
        }
        for name, length in lengths.items():
            if length != n:
                raise ValueError(f"{name} has {length} depths, lat_per_tile has {n}")
        if self.min_zoom_level < 0:
            raise ValueError(f"min_zoom_level must be >= 0, got {self.min_zoom_level}")
        if any(v <= 0 for v in self.lat_per_tile + self.lon_per_tile):
            raise ValueError("tile sizes must be positive")

    @property
    def num_depths(self) -> int:
        return len(self.lat_per_tile)

    @property
    def max_depth(self) -> int:
        return self.num_depths - 1

    def has_depth(self, depth: int) -> bool:
        return 0 <= depth < self.num_depths

    def zoom(self, depth: int) -> int:
        return self.min_zoom_level + depth

    @classmethod
    def from_root_tile(
        cls,
        min_zoom_level: int,
        root_x: int,
        root_y: int,
        num_depths: int,
        width_tiles: int = 1,
        height_tiles: int = 1,
    ) -> "TileScheme":
        """
        Derive the table from a block of slippy tiles at min_zoom_level.

        Each extra depth halves the tile edge. Latitude is subdivided linearly
        over the root block, longitude exactly.
        """
        if num_depths <= 0:
            raise ValueError(f"num_depths must be positive, got {num_depths}")
        if width_tiles <= 0 or height_tiles <= 0:
            raise ValueError("root block must be at least one tile wide and high")

        ullat = lat_from_ytile(root_y, min_zoom_level)
        ullon = lon_from_xtile(root_x, min_zoom_level)
        lrlat = lat_from_ytile(root_y + height_tiles, min_zoom_level)

        lat_per_tile = []
        lon_per_tile = []
        min_x = []
        min_y = []
        for d in range(num_depths):
            scale = 2 ** d
            lat_per_tile.append((ullat - lrlat) / (height_tiles * scale))
            lon_per_tile.append(360.0 / 2 ** (min_zoom_level + d))
            min_x.append(root_x * scale)
            min_y.append(root_y * scale)

        return cls(
            root_ullat=ullat,
            root_ullon=ullon,
            min_zoom_level=min_zoom_level,
            lat_per_tile=tuple(lat_per_tile),
            lon_per_tile=tuple(lon_per_tile),
            min_x_tile_at_depth=tuple(min_x),
            min_y_tile_at_depth=tuple(min_y),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TileScheme":
        """
        Two accepted shapes:
          1) explicit tables (has "lat_per_tile")
          2) root tile: min_zoom_level, root_x, root_y, num_depths[, width_tiles, height_tiles]
        """
        if not isinstance(data, dict):
            raise ValueError("tile scheme must be a JSON object")
        try:
            if "lat_per_tile" in data:
                return cls(
                    root_ullat=data["root_ullat"],
                    root_ullon=data["root_ullon"],
                    min_zoom_level=data["min_zoom_level"],
                    lat_per_tile=_seq(data, "lat_per_tile"),
                    lon_per_tile=_seq(data, "lon_per_tile"),
                    min_x_tile_at_depth=_seq(data, "min_x_tile_at_depth"),
                    min_y_tile_at_depth=_seq(data, "min_y_tile_at_depth"),
                )
            return cls.from_root_tile(
                min_zoom_level=int(data["min_zoom_level"]),
                root_x=int(data["root_x"]),
                root_y=int(data["root_y"]),
                num_depths=int(data["num_depths"]),
                width_tiles=int(data.get("width_tiles", 1)),
                height_tiles=int(data.get("height_tiles", 1)),
            )
        except KeyError as e:
            raise ValueError(f"tile scheme is missing key {e}") from e
        except TypeError as e:
            raise ValueError(f"invalid tile scheme: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root_ullat": self.root_ullat,
            "root_ullon": self.root_ullon,
            "min_zoom_level": self.min_zoom_level,
            "lat_per_tile": list(self.lat_per_tile),
            "lon_per_tile": list(self.lon_per_tile),
            "min_x_tile_at_depth": list(self.min_x_tile_at_depth),
            "min_y_tile_at_depth": list(self.min_y_tile_at_depth),
        }


def _seq(data: Dict[str, Any], key: str) -> Sequence[Any]:
    v = data[key]
    if not isinstance(v, (list, tuple)):
        raise ValueError(f"{key} must be a list")
    return v


def load_scheme(path: Path) -> TileScheme:
    if not path.exists():
        raise FileNotFoundError(str(path))
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"tile scheme {path} is not valid JSON: {e}") from e
    return TileScheme.from_dict(data)


# Seattle: zoom 10 tile (164, 357), depths 0..7 => zoom 10..17
DEFAULT_SCHEME = TileScheme.from_root_tile(min_zoom_level=10, root_x=164, root_y=357, num_depths=8)
