#!/usr/bin/env python3

# server/app.py

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

import math
import os
import sys
from pathlib import Path
from typing import Any, Optional

from flask import Flask, request, jsonify
from flask_cors import CORS
from werkzeug.exceptions import BadRequest, HTTPException

# repo root resolution
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from rastermap.config import Config
from rastermap.errors import InvalidDepth
from rastermap.rasterer import BoundingBoxQuery, TileGridResolver
from rastermap.scheme import TileScheme

import logging
logger = logging.getLogger("rastermap-server")

RASTER_PARAMS = ("ullat", "ullon", "lrlat", "lrlon")


def parse_coord(value: Any, *, name: str) -> float:
    if value is None or str(value).strip() == "":
        raise BadRequest(description=f"{name} is required")
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise BadRequest(description=f"{name} must be a number")
    if not math.isfinite(v):
        raise BadRequest(description=f"{name} must be finite")
    return v


def parse_depth(value: Any, *, default: int, name: str = "depth") -> int:
    """
    Range is not checked here; the resolver raises InvalidDepth for that.
    """
    if value is None or str(value).strip() == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise BadRequest(description=f"{name} must be an integer")


def parse_raster_query(args, *, default_depth: int) -> BoundingBoxQuery:
    ullat, ullon, lrlat, lrlon = (parse_coord(args.get(k), name=k) for k in RASTER_PARAMS)
    depth = parse_depth(args.get("depth"), default=default_depth)
    return BoundingBoxQuery(ullat=ullat, ullon=ullon, lrlat=lrlat, lrlon=lrlon, depth=depth)


def make_app(cfg: Optional[Config] = None, scheme: Optional[TileScheme] = None) -> Flask:
    app = Flask(__name__)
    CORS(app)  # keep it simple for local dev

    if cfg is None:
        cfg = Config(repo_root=REPO_ROOT)
    if scheme is None:
        scheme = cfg.load_scheme()

    logger.info("Resolved logs_dir=%s", cfg.logs_dir)
    logger.info("Resolved scheme=%s", cfg.scheme_path or "<built-in>")
    logger.info(
        "Scheme min_zoom=%d max_depth=%d root_ul=(%.6f, %.6f) max_tiles=%d",
        scheme.min_zoom_level, scheme.max_depth, scheme.root_ullat, scheme.root_ullon, cfg.max_tiles,
    )

    # Built once; immutable, shared by all request threads
    resolver = TileGridResolver(scheme)

    @app.before_request
    def log_request():
        logger.info(
            "REQUEST %s %s from %s",
            request.method,
            request.path,
            request.remote_addr,
        )

    @app.get("/api/health")
    def health():
        return jsonify({"ok": True})

    @app.get("/api/scheme")
    def scheme_info():
        out = scheme.to_dict()
        out["max_depth"] = scheme.max_depth
        out["max_tiles"] = cfg.max_tiles
        out["ok"] = True
        return jsonify(out)

    @app.get("/api/raster")
    def raster():
        q = parse_raster_query(request.args, default_depth=cfg.default_depth)
        cells = resolver.cell_count(q)
        if cells > cfg.max_tiles:
            raise BadRequest(description=f"box covers {cells} tiles at depth {q.depth} (limit: {cfg.max_tiles})")
        result = resolver.raster(q)
        h, w = result.grid.shape
        logger.info(
            "raster request depth=%d box=(%.6f, %.6f, %.6f, %.6f) grid=%dx%d success=%s",
            q.depth, q.ullat, q.ullon, q.lrlat, q.lrlon, h, w, result.query_success,
        )
        out = result.to_dict()
        out["ok"] = True
        return jsonify(out)

    @app.errorhandler(Exception)
    def handle_any_exception(e: Exception):
        logger.exception("Unhandled exception: %s", e)
        return jsonify({"ok": False, "code": "internal_error", "error": str(e), "status": 500}), 500

    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        return jsonify({
            "ok": False,
            "code": "bad_request" if e.code == 400 else "http_error",
            "error": e.description,
            "status": e.code,
        }), e.code

    @app.errorhandler(InvalidDepth)
    def handle_invalid_depth(e: InvalidDepth):
        logger.warning("Rejected depth=%d (scheme has %d depths)", e.depth, e.num_depths)
        return jsonify({
            "ok": False,
            "code": "invalid_depth",
            "error": str(e),
            "status": 400,
            "query_success": False,
        }), 400

    return app


if __name__ == "__main__":
    import argparse

    ap = argparse.ArgumentParser(description="Raster tile-grid API server.")
    ap.add_argument("--host", default=os.environ.get("HOST", "0.0.0.0"))
    ap.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8088")))
    ap.add_argument("--scheme", default=None, help="Tile scheme JSON (default: built-in Seattle scheme).")
    ap.add_argument("--logs-dir", default=None, help="Override logs directory.")
    args = ap.parse_args()

    # Map CLI overrides into RASTERMAP_* env vars so Config sees them
    from rastermap.cli_paths import apply_path_overrides
    apply_path_overrides(scheme=args.scheme, logs_dir=args.logs_dir, create_dirs=True)

    from server.logging_utils import setup_server_logger
    log_dir = Path(args.logs_dir).expanduser().resolve() if args.logs_dir else None
    logger = setup_server_logger(name="rastermap-server", log_dir=log_dir)

    logger.info("RASTERMAP_SCHEME=%s", os.getenv("RASTERMAP_SCHEME"))
    logger.info("RASTERMAP_LOGS_DIR=%s", os.getenv("RASTERMAP_LOGS_DIR"))
    logger.info("Starting server with host=%s port=%d", args.host, args.port)

    app = make_app()

    debug = bool(os.environ.get("RASTERMAP_SERVER_DEBUG", "0") == "1")
    use_reloader = bool(os.environ.get("RASTERMAP_SERVER_RELOAD", "0") == "1")

    app.run(
        host=args.host,
        port=args.port,
        debug=debug,
        use_reloader=use_reloader,
    )
