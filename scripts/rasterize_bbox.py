#!/usr/bin/env python3

# script:rasterize_bbox.py

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

import argparse
import sys
from pathlib import Path

# --- make repo root importable ---
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))
# --------------------------------

from rastermap.cli_paths import apply_path_overrides
from rastermap.config import Config
from rastermap.errors import InvalidDepth
from rastermap.export_geojson import export_grid_geojson
from rastermap.logging_utils import setup_logger
from rastermap.rasterer import BoundingBoxQuery, TileGridResolver


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Print the tile grid covering a bounding box.")
    ap.add_argument("--ullat", type=float, required=True)
    ap.add_argument("--ullon", type=float, required=True)
    ap.add_argument("--lrlat", type=float, required=True)
    ap.add_argument("--lrlon", type=float, required=True)
    ap.add_argument("--depth", type=int, default=None, help="Default: RASTERMAP_DEFAULT_DEPTH or 0.")
    ap.add_argument("--scheme", default=None, help="Tile scheme JSON (default: built-in).")
    ap.add_argument("--logs-dir", default=None)
    ap.add_argument("--geojson", default=None, help="Also write the grid as GeoJSON to this path.")
    args = ap.parse_args(argv)

    apply_path_overrides(scheme=args.scheme, logs_dir=args.logs_dir, create_dirs=True)

    cfg = Config(repo_root=REPO_ROOT)
    logger = setup_logger("rasterize_bbox", cfg.logs_dir, level=cfg.log_level)

    depth = cfg.default_depth if args.depth is None else args.depth
    q = BoundingBoxQuery(ullat=args.ullat, ullon=args.ullon, lrlat=args.lrlat, lrlon=args.lrlon, depth=depth)

    resolver = TileGridResolver(cfg.load_scheme())
    try:
        result = resolver.raster(q)
    except InvalidDepth as e:
        logger.error("%s", e)
        return 2

    h, w = result.grid.shape
    logger.info("Grid %dx%d at depth %d (success=%s)", h, w, depth, result.query_success)
    if result.query_success:
        logger.info(
            "Raster bounds ul=(%.6f, %.6f) lr=(%.6f, %.6f)",
            result.raster_ul_lat, result.raster_ul_lon, result.raster_lr_lat, result.raster_lr_lon,
        )
    for row in result.grid.render_grid():
        print(" ".join(name or "-" for name in row))

    if args.geojson:
        out = Path(args.geojson).expanduser().resolve()
        export_grid_geojson(result.grid, out)
        logger.info("Wrote GeoJSON: %s", out)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
