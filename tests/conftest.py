"""Shared pytest fixtures for rastermap tests."""

import pytest

from rastermap.rasterer import TileGridResolver
from rastermap.scheme import DEFAULT_SCHEME, TileScheme


@pytest.fixture
def world_scheme():
    """Whole-world scheme: depth 0 is the single zoom-0 tile, depth 1 the 2x2 zoom-1 tiles."""
    return TileScheme(
        root_ullat=90.0,
        root_ullon=-180.0,
        min_zoom_level=0,
        lat_per_tile=(180.0, 90.0),
        lon_per_tile=(360.0, 180.0),
        min_x_tile_at_depth=(0, 0),
        min_y_tile_at_depth=(0, 0),
    )


@pytest.fixture
def seattle_scheme():
    return DEFAULT_SCHEME


@pytest.fixture
def world_resolver(world_scheme):
    return TileGridResolver(world_scheme)


@pytest.fixture
def seattle_resolver(seattle_scheme):
    return TileGridResolver(seattle_scheme)


@pytest.fixture
def clean_env(monkeypatch):
    """Unset RASTERMAP_* so Config falls back to its defaults; restored after the test."""
    for name in (
        "RASTERMAP_SCHEME",
        "RASTERMAP_LOGS_DIR",
        "RASTERMAP_DEFAULT_DEPTH",
        "RASTERMAP_LOG_LEVEL",
        "RASTERMAP_MAX_TILES",
    ):
        # setenv first so monkeypatch records the original state for undo
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch
