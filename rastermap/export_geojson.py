# rastermap:export_geojson.py

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
from pathlib import Path
from typing import Any, Dict

from rastermap.rasterer import TileGrid


def grid_to_geojson(grid: TileGrid) -> Dict[str, Any]:
    features = []
    for row_idx, row in enumerate(grid):
        for col_idx, tile in enumerate(row):
            if tile is None:
                continue
            top_lat, left_lon, bottom_lat, right_lon = tile.bbox()
            poly = [
                [left_lon, top_lat],
                [right_lon, top_lat],
                [right_lon, bottom_lat],
                [left_lon, bottom_lat],
                [left_lon, top_lat],
            ]
            features.append(
                {
                    "type": "Feature",
                    "properties": {
                        "depth": int(tile.depth),
                        "x": int(tile.x),
                        "y": int(tile.y),
                        "row": row_idx,
                        "col": col_idx,
                        "filename": tile.filename(),
                    },
                    "geometry": {"type": "Polygon", "coordinates": [poly]},
                }
            )

    return {"type": "FeatureCollection", "features": features}


def export_grid_geojson(grid: TileGrid, out_path: Path) -> None:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(grid_to_geojson(grid), ensure_ascii=False), encoding="utf-8")
