"""Image export: tile-backed maps rendered to SVG or PNG.

This module projects geographic coordinates into slippy-map pixel space,
fetches the map tiles covering a bounding box and overlays shapes on them:
- ``projection``: web-Mercator projection and tile grid
- ``loaders``: tile sources (XYZ presets, Mapbox) and concurrent fetching
- ``compositor``/``overlays``: tiles and shapes merged into a ``Document``
- ``rasterizer``: PNG output with Pillow

Example:
    from mapplot.image import ImageMap, XYZTilesetLoader

    loader = XYZTilesetLoader.from_preset("cartodb_positron")
    image = ImageMap.fetch(((52.0, 4.0), (52.1, 4.1)), 10, loader)
    image.save("map.svg")
"""

from .projection import (
    MAX_LATITUDE,
    MAX_ZOOM,
    MIN_ZOOM,
    TILE_SIZE,
    ProjectedPoint,
    TileIndex,
    choose_zoom_level,
    meters_per_pixel,
    project,
    project_path,
    tile_bounds,
    tile_grid,
    tile_to_location,
    unproject,
)
from .loaders import (
    TILE_SOURCES,
    MapboxTilesetLoader,
    RasterTile,
    TileCache,
    TileSource,
    TilesetLoader,
    XYZTilesetLoader,
    fetch_tiles,
    list_available_sources,
)
from .document import Document, Viewport
from .overlays import render_shape
from .compositor import compose, compute_viewport
from .rasterizer import rasterize
from .image_map import ImageMap

__all__ = [
    "MAX_LATITUDE",
    "MAX_ZOOM",
    "MIN_ZOOM",
    "TILE_SIZE",
    "ProjectedPoint",
    "TileIndex",
    "choose_zoom_level",
    "meters_per_pixel",
    "project",
    "project_path",
    "tile_bounds",
    "tile_grid",
    "tile_to_location",
    "unproject",
    "TILE_SOURCES",
    "MapboxTilesetLoader",
    "RasterTile",
    "TileCache",
    "TileSource",
    "TilesetLoader",
    "XYZTilesetLoader",
    "fetch_tiles",
    "list_available_sources",
    "Document",
    "Viewport",
    "render_shape",
    "compose",
    "compute_viewport",
    "rasterize",
    "ImageMap",
]
