"""Tile loaders for the image exporter."""

from .base import (
    ACCEPTED_MIME_TYPES,
    RasterTile,
    TilesetLoader,
    check_mime_type,
    detect_mime_type,
    fetch_tiles,
    is_complete_image,
)
from .xyz_loader import TILE_SOURCES, TileCache, TileSource, XYZTilesetLoader, list_available_sources
from .mapbox_loader import MapboxTilesetLoader

__all__ = [
    "ACCEPTED_MIME_TYPES",
    "RasterTile",
    "TilesetLoader",
    "check_mime_type",
    "detect_mime_type",
    "fetch_tiles",
    "is_complete_image",
    "TILE_SOURCES",
    "TileCache",
    "TileSource",
    "XYZTilesetLoader",
    "list_available_sources",
    "MapboxTilesetLoader",
]
