"""
rastermap package
"""
__all__ = [
    "cli_paths",
    "config",
    "errors",
    "export_geojson",
    "logging_utils",
    "rasterer",
    "scheme",
    "tiles",
]
