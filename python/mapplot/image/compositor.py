"""Compositing of map tiles and shape overlays into one document.

Tiles and shapes share one coordinate system: the global pixel space of the
export's zoom level. The document viewport is the projected bounding box, so
tiles and shapes never need to be shifted relative to each other.
"""

from typing import Iterable, List, Mapping, Union

from ..coordinates import BoundingBox
from ..shapes import Shape
from .document import Document, Viewport
from .loaders.base import RasterTile
from .overlays import render_shape
from .primitives import ImagePrimitive, Primitive
from .projection import check_zoom, project


def compute_viewport(bbox: BoundingBox, zoom: int) -> Viewport:
    """Pixel-space rectangle covered by a bounding box at a zoom level."""
    p1 = project(bbox.p1, zoom)
    p2 = project(bbox.p2, zoom)
    return Viewport(
        x=min(p1.x, p2.x),
        y=min(p1.y, p2.y),
        width=abs(p2.x - p1.x),
        height=abs(p2.y - p1.y),
    )


def place_tile(tile: RasterTile) -> ImagePrimitive:
    origin = tile.origin
    return ImagePrimitive(
        x=origin.x,
        y=origin.y,
        width=tile.size,
        height=tile.size,
        data=tile.data,
        mime_type=tile.mime_type,
    )


def compose(
    bbox: BoundingBox,
    zoom: int,
    tiles: Union[Mapping[object, RasterTile], Iterable[RasterTile]],
    shapes: Iterable[Shape] = (),
) -> Document:
    """Merge tiles and shapes into a document.

    Tiles are placed first (background), ordered by (row, column) so the
    result does not depend on the order in which they were fetched. Shapes
    follow in draw order, stable-sorted by z-index; invisible shapes are left
    out.

    Args:
        bbox: Area of the map; defines the viewport.
        zoom: Zoom level of tiles and projection.
        tiles: Fetched tiles (a sequence, or a dict keyed by tile index).
        shapes: Shapes to overlay.
    """
    zoom = check_zoom(zoom)
    if isinstance(tiles, Mapping):
        tiles = tiles.values()

    primitives: List[Primitive] = []
    for tile in sorted(tiles, key=lambda t: (t.index.row, t.index.column)):
        if tile.zoom != zoom:
            raise ValueError(f"tile {tile.index} has zoom {tile.zoom}, expected {zoom}")
        primitives.append(place_tile(tile))

    visible = [shape for shape in shapes if shape.is_visible]
    for shape in sorted(visible, key=lambda s: s.draw_order):
        primitives.append(render_shape(shape, zoom))

    return Document(viewport=compute_viewport(bbox, zoom), primitives=primitives)
