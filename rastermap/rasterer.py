# rastermap:rasterer.py

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
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple

from rastermap.errors import InvalidDepth
from rastermap.scheme import DEFAULT_SCHEME, TileScheme
from rastermap.tiles import Tile

logger = logging.getLogger(__name__)

# quotients closer than this to an integer are treated as lying on a tile edge
EDGE_EPS = 1e-9


@dataclass(frozen=True)
class BoundingBoxQuery:
    ullat: float
    ullon: float
    lrlat: float
    lrlon: float
    depth: int

    @property
    def top(self) -> float:
        return self.ullat

    @property
    def bottom(self) -> float:
        return self.lrlat

    @property
    def left(self) -> float:
        return self.ullon

    @property
    def right(self) -> float:
        return self.lrlon


Row = Tuple[Optional[Tile], ...]


class TileGrid:
    """
    Rows of tiles, north to south; each row west to east.

    Cells are None only when the query box was inverted (bottom above top or
    right left of left), in which case nothing is placed.
    """

    def __init__(self, rows: List[List[Optional[Tile]]]) -> None:
        self._rows: Tuple[Row, ...] = tuple(tuple(r) for r in rows)

    @property
    def rows(self) -> Tuple[Row, ...]:
        return self._rows

    @property
    def shape(self) -> Tuple[int, int]:
        return len(self._rows), (len(self._rows[0]) if self._rows else 0)

    def __len__(self) -> int:
        return len(self._rows)

    def __getitem__(self, i: int) -> Row:
        return self._rows[i]

    def __iter__(self) -> Iterator[Row]:
        return iter(self._rows)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TileGrid):
            return NotImplemented
        return self._rows == other._rows

    def __hash__(self) -> int:
        return hash(self._rows)

    def __repr__(self) -> str:
        h, w = self.shape
        return f"TileGrid({h}x{w})"

    def tiles(self) -> List[Tile]:
        """Populated tiles in row-major order."""
        return [t for row in self._rows for t in row if t is not None]

    def is_complete(self) -> bool:
        return all(t is not None for row in self._rows for t in row)

    def render_grid(self) -> List[List[Optional[str]]]:
        return [[t.filename() if t is not None else None for t in row] for row in self._rows]


@dataclass(frozen=True)
class RasterResult:
    grid: TileGrid
    depth: int
    query_success: bool
    raster_ul_lat: Optional[float] = None
    raster_ul_lon: Optional[float] = None
    raster_lr_lat: Optional[float] = None
    raster_lr_lon: Optional[float] = None

    @classmethod
    def from_grid(cls, grid: TileGrid, depth: int) -> "RasterResult":
        if not grid.is_complete():
            return cls(grid=grid, depth=depth, query_success=False)

        ul = grid[0][0]
        lr = grid[-1][-1].offset()
        return cls(
            grid=grid,
            depth=depth,
            query_success=True,
            raster_ul_lat=ul.lat(),
            raster_ul_lon=ul.lon(),
            raster_lr_lat=lr.lat(),
            raster_lr_lon=lr.lon(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "render_grid": self.grid.render_grid(),
            "raster_ul_lat": self.raster_ul_lat,
            "raster_ul_lon": self.raster_ul_lon,
            "raster_lr_lat": self.raster_lr_lat,
            "raster_lr_lon": self.raster_lr_lon,
            "depth": self.depth,
            "query_success": self.query_success,
        }


def _tile_index(delta: float, tile_size: float) -> Tuple[int, bool]:
    """
    Truncate delta / tile_size toward zero.
    Returns (index, on_edge) where on_edge means the quotient was integral.
    """
    q = delta / tile_size
    r = round(q)
    if abs(q - r) < EDGE_EPS:
        return int(r), True
    return math.trunc(q), False


def _edge_range(first_delta: float, last_delta: float, tile_size: float) -> Tuple[int, int]:
    first, _ = _tile_index(first_delta, tile_size)
    last, on_edge = _tile_index(last_delta, tile_size)
    # a closing edge on a tile boundary belongs to the tile before it
    if on_edge and last > first:
        last -= 1
    return first, last


class TileGridResolver:
    """Materializes the tile grid covering a bounding box at a caller-chosen depth."""

    def __init__(self, scheme: TileScheme = DEFAULT_SCHEME) -> None:
        self.scheme = scheme

    def extent(self, query: BoundingBoxQuery) -> Tuple[int, int, int, int]:
        """
        Tile index range (left_y, right_y, left_x, right_x) the query maps to,
        without allocating anything. Raises InvalidDepth.
        """
        s = self.scheme
        depth = query.depth
        if not s.has_depth(depth):
            raise InvalidDepth(depth, s.num_depths)

        left_y, right_y = _edge_range(query.top - s.root_ullat, query.bottom - s.root_ullat, -s.lat_per_tile[depth])
        left_x, right_x = _edge_range(query.left - s.root_ullon, query.right - s.root_ullon, s.lon_per_tile[depth])
        return left_y, right_y, left_x, right_x

    def cell_count(self, query: BoundingBoxQuery) -> int:
        left_y, right_y, left_x, right_x = self.extent(query)
        return (abs(left_y - right_y) + 1) * (abs(left_x - right_x) + 1)

    def rasterize(self, query: BoundingBoxQuery) -> TileGrid:
        s = self.scheme
        depth = query.depth
        left_y, right_y, left_x, right_x = self.extent(query)

        height = abs(left_y - right_y)
        width = abs(left_x - right_x)

        rows: List[List[Optional[Tile]]] = [[None] * (width + 1) for _ in range(height + 1)]
        for y in range(left_y, right_y + 1):
            for x in range(left_x, right_x + 1):
                rows[y - left_y][x - left_x] = Tile(depth, x, y, s)

        if right_y < left_y or right_x < left_x:
            logger.debug("inverted query box %s: grid left empty", query)
        logger.debug(
            "rasterized depth=%d y=%d..%d x=%d..%d grid=%dx%d",
            depth, left_y, right_y, left_x, right_x, height + 1, width + 1,
        )
        return TileGrid(rows)

    def raster(self, query: BoundingBoxQuery) -> RasterResult:
        grid = self.rasterize(query)
        return RasterResult.from_grid(grid, query.depth)
