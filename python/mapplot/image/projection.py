"""Web Mercator (EPSG:3857) projection onto the slippy-map tile pyramid.

At zoom level ``z`` the whole world is a square of ``256 * 2**z`` pixels with
the origin at the north-west corner and y growing southward. Tiles are the
256x256 pixel squares of that space, indexed by (column, row).
"""

from typing import FrozenSet, Iterable, NamedTuple, Sequence
import itertools
import math

import numpy as np

from ..coordinates import BoundingBox, Location, LocationLike, as_location

TILE_SIZE = 256

# Latitude at which the Mercator square ends: atan(sinh(pi))
MAX_LATITUDE = 85.0511287798066

EARTH_RADIUS = 6378137.0

MIN_ZOOM = 0
MAX_ZOOM = 22


class ProjectedPoint(NamedTuple):
    """Position in the global pixel space of one zoom level."""
    x: float
    y: float


class TileIndex(NamedTuple):
    """A 256x256 tile at a given zoom level."""
    column: int
    row: int


def check_zoom(zoom: int) -> int:
    """Validate a zoom level; integral floats such as 10.0 are accepted."""
    if isinstance(zoom, bool) or int(zoom) != zoom:
        raise ValueError(f"zoom must be an integer, got {zoom!r}")
    if not MIN_ZOOM <= zoom <= MAX_ZOOM:
        raise ValueError(f"zoom must be within [{MIN_ZOOM}, {MAX_ZOOM}], got {zoom}")
    return int(zoom)


def clamp_latitude(lat: float) -> float:
    """Clamp a latitude to the range covered by Web Mercator."""
    return max(-MAX_LATITUDE, min(MAX_LATITUDE, lat))


def world_size(zoom: int) -> int:
    """Side length of the world square at a zoom level, in pixels."""
    return TILE_SIZE * 2 ** zoom


def project(location: LocationLike, zoom: int) -> ProjectedPoint:
    """Project a location into pixel space at a zoom level.

    Latitudes beyond +-85.0511 degrees are clamped, so poles map onto the top
    and bottom edges of the world instead of infinity.

    Example:
        >>> project((0.0, 0.0), 0)
        ProjectedPoint(x=128.0, y=128.0)
    """
    lat, lon = as_location(location)
    size = world_size(zoom)
    lat_rad = math.radians(clamp_latitude(lat))
    x = (lon + 180.0) / 360.0 * size
    y = (1.0 - math.asinh(math.tan(lat_rad)) / math.pi) / 2.0 * size
    return ProjectedPoint(x, y)


def project_path(locations: Iterable[LocationLike], zoom: int) -> np.ndarray:
    """Project a sequence of locations at once.

    Returns:
        Array of shape (n, 2) with one (x, y) row per location, in input order.
    """
    coords = np.asarray([tuple(as_location(p)) for p in locations], dtype=np.float64)
    if coords.size == 0:
        return np.zeros((0, 2), dtype=np.float64)

    size = world_size(zoom)
    lat_rad = np.radians(np.clip(coords[:, 0], -MAX_LATITUDE, MAX_LATITUDE))
    x = (coords[:, 1] + 180.0) / 360.0 * size
    y = (1.0 - np.arcsinh(np.tan(lat_rad)) / np.pi) / 2.0 * size
    return np.column_stack((x, y))


def unproject(point: Sequence[float], zoom: int) -> Location:
    """Inverse of ``project``: pixel position back to a location."""
    x, y = point
    size = world_size(zoom)
    lon = x / size * 360.0 - 180.0
    lat = math.degrees(math.atan(math.sinh(math.pi * (1.0 - 2.0 * y / size))))
    return Location(lat, lon)


def tile_to_location(column: int, row: int, zoom: int) -> Location:
    """North-west corner of a tile."""
    return unproject((column * TILE_SIZE, row * TILE_SIZE), zoom)


def tile_bounds(column: int, row: int, zoom: int) -> BoundingBox:
    """Geographic extent of a tile."""
    return BoundingBox(
        tile_to_location(column, row, zoom),
        tile_to_location(column + 1, row + 1, zoom),
    )


def tile_origin(index: TileIndex) -> ProjectedPoint:
    """Pixel position of a tile's top-left corner."""
    return ProjectedPoint(float(index.column * TILE_SIZE), float(index.row * TILE_SIZE))


def meters_per_pixel(lat: float, zoom: int) -> float:
    """Ground resolution at a latitude, in meters per pixel."""
    lat_rad = math.radians(clamp_latitude(lat))
    return math.cos(lat_rad) * 2.0 * math.pi * EARTH_RADIUS / world_size(zoom)


def _tile_span(a: float, b: float, n_tiles: int):
    """Inclusive tile range covering the pixel interval between a and b."""
    lo, hi = min(a, b), max(a, b)
    # snap away floating point noise so exact tile edges stay exact
    lo = round(lo / TILE_SIZE, 9)
    hi = round(hi / TILE_SIZE, 9)

    first = math.floor(lo)
    # the far edge is exclusive: an edge on a tile boundary does not pull in
    # the next tile
    last = max(first, math.ceil(hi) - 1)

    first = max(0, min(n_tiles - 1, first))
    last = max(0, min(n_tiles - 1, last))
    return range(first, last + 1)


def tile_grid(bbox: BoundingBox, zoom: int) -> FrozenSet[TileIndex]:
    """Set of tiles covering a bounding box at a zoom level.

    The corners of ``bbox`` may be given in any order. Boxes crossing the
    anti-meridian are not supported.
    """
    zoom = check_zoom(zoom)
    p1 = project(bbox.p1, zoom)
    p2 = project(bbox.p2, zoom)
    n_tiles = 2 ** zoom

    columns = _tile_span(p1.x, p2.x, n_tiles)
    rows = _tile_span(p1.y, p2.y, n_tiles)
    return frozenset(TileIndex(c, r) for c, r in itertools.product(columns, rows))


def choose_zoom_level(bbox: BoundingBox, target_size: Sequence[int]) -> int:
    """Highest zoom level at which ``bbox`` still fits into ``target_size``.

    Args:
        bbox: Area to show.
        target_size: (width, height) in pixels.
    """
    width, height = target_size
    for zoom in range(MAX_ZOOM, MIN_ZOOM - 1, -1):
        p1 = project(bbox.p1, zoom)
        p2 = project(bbox.p2, zoom)
        if abs(p2.x - p1.x) <= width and abs(p2.y - p1.y) <= height:
            return zoom
    return MIN_ZOOM
