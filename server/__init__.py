"""
rastermap HTTP server
"""
