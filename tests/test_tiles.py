"""Tests for the rastermap.tiles module."""

import dataclasses
import math

import pytest

from rastermap.errors import InvalidDepth
from rastermap.scheme import DEFAULT_SCHEME
from rastermap.tiles import Tile, lat_from_ytile, lon_from_xtile, tile_bbox_latlon

SEATTLE = (47.6062, -122.3321)

# Web Mercator is undefined at the poles
MAX_MERCATOR_LAT = 85.0511287798066


def latlon_to_tile(lat, lon, z):
    """Forward slippy projection (https://wiki.openstreetmap.org/wiki/Slippy_map_tilenames)."""
    lat = max(-MAX_MERCATOR_LAT, min(MAX_MERCATOR_LAT, lat))
    n = 2 ** z
    x = int(math.floor((lon + 180.0) / 360.0 * n))
    y = int(math.floor((1.0 - math.asinh(math.tan(math.radians(lat))) / math.pi) / 2.0 * n))
    return min(max(x, 0), n - 1), min(max(y, 0), n - 1)


class TestProjectionHelpers:
    """Tests for the slippy tile projection functions."""

    def test_zoom0_corners(self):
        assert lon_from_xtile(0, 0) == -180.0
        assert lon_from_xtile(1, 0) == 180.0
        assert lat_from_ytile(0, 0) == pytest.approx(MAX_MERCATOR_LAT)
        assert lat_from_ytile(1, 0) == pytest.approx(-MAX_MERCATOR_LAT)

    def test_equator_and_prime_meridian(self):
        assert lat_from_ytile(1, 1) == pytest.approx(0.0, abs=1e-12)
        assert lon_from_xtile(1, 1) == pytest.approx(0.0, abs=1e-12)

    def test_latlon_to_tile_seattle(self):
        assert latlon_to_tile(*SEATTLE, 10) == (164, 357)

    def test_latlon_to_tile_clamps_far_edges(self):
        assert latlon_to_tile(-90.0, 180.0, 2) == (3, 3)
        assert latlon_to_tile(90.0, -180.0, 2) == (0, 0)

    def test_tile_bbox_contains_point(self):
        x, y = latlon_to_tile(*SEATTLE, 14)
        top, left, bottom, right = tile_bbox_latlon(x, y, 14)
        assert bottom < SEATTLE[0] <= top
        assert left <= SEATTLE[1] < right


class TestTileCorners:
    """Tests for Tile.lat / Tile.lon / Tile.offset."""

    def test_root_tile_is_scheme_origin(self):
        tile = Tile(0, 0, 0, DEFAULT_SCHEME)
        assert tile.lat() == pytest.approx(DEFAULT_SCHEME.root_ullat)
        assert tile.lon() == pytest.approx(DEFAULT_SCHEME.root_ullon)

    def test_without_scheme_uses_default(self):
        assert Tile(2, 1, 3).lat() == Tile(2, 1, 3, DEFAULT_SCHEME).lat()
        assert Tile(2, 1, 3).lon() == Tile(2, 1, 3, DEFAULT_SCHEME).lon()

    @pytest.mark.parametrize("depth", [0, 3, 7])
    def test_seattle_round_trip(self, depth):
        """Forward projection then Tile corner recovers the slippy tile corner."""
        zoom = DEFAULT_SCHEME.zoom(depth)
        sx, sy = latlon_to_tile(*SEATTLE, zoom)
        tile = Tile(
            depth,
            sx - DEFAULT_SCHEME.min_x_tile_at_depth[depth],
            sy - DEFAULT_SCHEME.min_y_tile_at_depth[depth],
            DEFAULT_SCHEME,
        )
        top, left, bottom, right = tile_bbox_latlon(sx, sy, zoom)

        assert tile.slippy_x == sx
        assert tile.slippy_y == sy
        assert abs(tile.lat() - top) < 1e-6
        assert abs(tile.lon() - left) < 1e-6
        assert abs(tile.offset().lat() - bottom) < 1e-6
        assert abs(tile.offset().lon() - right) < 1e-6
        assert tile.offset().lat() < SEATTLE[0] <= tile.lat()
        assert tile.lon() <= SEATTLE[1] < tile.offset().lon()

    def test_offset_is_south_east(self, world_scheme):
        for depth, x, y in [(0, 0, 0), (1, 0, 0), (1, 1, 0), (1, 0, 1)]:
            tile = Tile(depth, x, y, world_scheme)
            assert tile.offset().lat() < tile.lat()
            assert tile.offset().lon() > tile.lon()

    def test_offset_returns_new_tile(self):
        tile = Tile(1, 2, 3, DEFAULT_SCHEME)
        shifted = tile.offset()
        assert shifted == Tile(1, 3, 4)
        assert shifted.scheme is DEFAULT_SCHEME
        assert tile == Tile(1, 2, 3)

    def test_bbox_matches_offset(self):
        tile = Tile(4, 5, 6, DEFAULT_SCHEME)
        assert tile.bbox() == (tile.lat(), tile.lon(), tile.offset().lat(), tile.offset().lon())

    def test_bbox_is_slippy_bbox(self, world_scheme):
        assert Tile(1, 1, 0, world_scheme).bbox() == tile_bbox_latlon(1, 0, 1)

    def test_depth_outside_scheme_raises(self, world_scheme):
        with pytest.raises(InvalidDepth):
            Tile(2, 0, 0, world_scheme).lat()
        with pytest.raises(InvalidDepth):
            Tile(-1, 0, 0, world_scheme).lon()


class TestTileValue:
    """Tests for Tile equality, hashing and naming."""

    def test_equal_and_same_hash(self, world_scheme):
        a = Tile(1, 2, 3)
        b = Tile(1, 2, 3, world_scheme)
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    @pytest.mark.parametrize("other", [Tile(2, 2, 3), Tile(1, 9, 3), Tile(1, 2, 9)])
    def test_any_field_differs(self, other):
        assert Tile(1, 2, 3) != other

    def test_immutable(self):
        tile = Tile(1, 2, 3)
        with pytest.raises(dataclasses.FrozenInstanceError):
            tile.x = 5

    def test_filename(self):
        assert Tile(3, 10, 7).filename() == "d3_x10_y7.jpg"
        assert str(Tile(0, 0, 0)) == "d0_x0_y0.jpg"

    def test_repr_hides_scheme(self):
        assert repr(Tile(1, 2, 3, DEFAULT_SCHEME)) == "Tile(depth=1, x=2, y=3)"
