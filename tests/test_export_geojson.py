"""Tests for the rastermap.export_geojson module."""

import json

import pytest

from rastermap.export_geojson import export_grid_geojson, grid_to_geojson
from rastermap.rasterer import BoundingBoxQuery, TileGrid
from rastermap.tiles import Tile


@pytest.fixture
def world_grid(world_resolver):
    q = BoundingBoxQuery(ullat=90.0, ullon=-180.0, lrlat=-90.0, lrlon=180.0, depth=1)
    return world_resolver.rasterize(q)


class TestGridToGeojson:
    def test_one_feature_per_tile(self, world_grid):
        fc = grid_to_geojson(world_grid)
        assert fc["type"] == "FeatureCollection"
        assert len(fc["features"]) == 4

    def test_properties_follow_grid_position(self, world_grid):
        props = [f["properties"] for f in grid_to_geojson(world_grid)["features"]]
        assert [(p["row"], p["col"]) for p in props] == [(0, 0), (0, 1), (1, 0), (1, 1)]
        assert props[3] == {"depth": 1, "x": 1, "y": 1, "row": 1, "col": 1, "filename": "d1_x1_y1.jpg"}

    def test_polygon_ring(self, world_grid):
        feature = grid_to_geojson(world_grid)["features"][0]
        ring = feature["geometry"]["coordinates"][0]
        assert feature["geometry"]["type"] == "Polygon"
        assert len(ring) == 5
        assert ring[0] == ring[-1]
        # [lon, lat] order; first corner is the north-west one
        assert ring[0][0] == pytest.approx(-180.0)
        assert ring[0][1] > ring[2][1]

    def test_skips_empty_cells(self, world_scheme):
        grid = TileGrid([[None, Tile(1, 1, 0, world_scheme)]])
        features = grid_to_geojson(grid)["features"]
        assert len(features) == 1
        assert features[0]["properties"]["col"] == 1

    def test_export_writes_file(self, world_grid, tmp_path):
        out = tmp_path / "out" / "grid.geojson"
        export_grid_geojson(world_grid, out)
        data = json.loads(out.read_text(encoding="utf-8"))
        assert len(data["features"]) == 4
