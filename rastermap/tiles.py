# rastermap:tiles.py

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

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Tuple

from rastermap.errors import InvalidDepth

if TYPE_CHECKING:
    from rastermap.scheme import TileScheme


def lon_from_xtile(x: float, z: int) -> float:
    n = 2 ** z
    return x / n * 360.0 - 180.0


def lat_from_ytile(y: float, z: int) -> float:
    n = 2 ** z
    lat_rad = math.atan(math.sinh(math.pi * (1 - 2 * y / n)))
    return math.degrees(lat_rad)


def tile_bbox_latlon(x: int, y: int, z: int) -> Tuple[float, float, float, float]:
    """
    Returns (top_lat, left_lon, bottom_lat, right_lon) for slippy tiles (Web Mercator).
    """
    return lat_from_ytile(y, z), lon_from_xtile(x, z), lat_from_ytile(y + 1, z), lon_from_xtile(x + 1, z)


@dataclass(frozen=True)
class Tile:
    """
    One image tile of a scheme, addressed relative to the scheme's origin tile.

    Equality and hashing use (depth, x, y) only; the scheme is just the
    context the corner coordinates are computed in.
    """
    depth: int
    x: int
    y: int
    scheme: Optional["TileScheme"] = field(default=None, compare=False, repr=False)

    def _scheme(self) -> "TileScheme":
        s = self.scheme
        if s is None:
            from rastermap.scheme import DEFAULT_SCHEME
            s = DEFAULT_SCHEME
        if not s.has_depth(self.depth):
            raise InvalidDepth(self.depth, s.num_depths)
        return s

    @property
    def zoom(self) -> int:
        return self._scheme().zoom(self.depth)

    @property
    def slippy_x(self) -> int:
        return self._scheme().min_x_tile_at_depth[self.depth] + self.x

    @property
    def slippy_y(self) -> int:
        return self._scheme().min_y_tile_at_depth[self.depth] + self.y

    def lat(self) -> float:
        """Latitude of the upper-left corner."""
        return lat_from_ytile(self.slippy_y, self.zoom)

    def lon(self) -> float:
        """Longitude of the upper-left corner."""
        return lon_from_xtile(self.slippy_x, self.zoom)

    def offset(self) -> "Tile":
        """The diagonal south-east neighbour; its upper-left is this tile's lower-right."""
        return Tile(self.depth, self.x + 1, self.y + 1, self.scheme)

    def bbox(self) -> Tuple[float, float, float, float]:
        """(top_lat, left_lon, bottom_lat, right_lon); the bottom-right corner is offset()'s upper-left."""
        return tile_bbox_latlon(self.slippy_x, self.slippy_y, self.zoom)

    def filename(self) -> str:
        return f"d{self.depth}_x{self.x}_y{self.y}.jpg"

    def __str__(self) -> str:
        return self.filename()
