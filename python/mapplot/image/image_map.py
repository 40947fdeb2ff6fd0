"""ImageMap: tile-backed map exported as SVG or PNG.

Example usage:
    from mapplot import BoundingBox, Color, Marker, Polyline
    from mapplot.image import ImageMap, XYZTilesetLoader

    bbox = BoundingBox((52.0, 4.0), (52.1, 4.1))
    image = ImageMap.fetch(bbox, 10, XYZTilesetLoader.from_preset("osm"), progress=True)
    image.draw(Marker((52.05, 4.05)).set_label("A"))
    image.draw(Polyline([(52.0, 4.0), (52.1, 4.1)]).style(Color.RED))

    svg = image.export_svg()
    image.save("map.png", scale=2)
"""

from typing import Dict, FrozenSet, Iterable, Mapping, Optional, Tuple, Union
from pathlib import Path
import asyncio

from ..config import FetchConfig
from ..coordinates import BoundingBox, LocationLike
from ..shapes import SHAPE_TYPES, Shape
from .compositor import compose, compute_viewport
from .document import Document, Viewport
from .loaders.base import RasterTile, TilesetLoader, fetch_tiles
from .projection import TileIndex, check_zoom, tile_grid

BoundingBoxLike = Union[BoundingBox, Tuple[LocationLike, LocationLike]]


class ImageMap:
    """A bounding box at a zoom level, its fetched tiles and the shapes drawn on it.

    Tiles are usually obtained with ``ImageMap.load`` (async) or
    ``ImageMap.fetch`` (blocking). Shapes are drawn in the order they are
    added, stable-sorted by z-index.
    """

    def __init__(
        self,
        bbox: BoundingBoxLike,
        zoom: int,
        tiles: Optional[Union[Mapping[TileIndex, RasterTile], Iterable[RasterTile]]] = None,
    ):
        """Initialize an ImageMap.

        Args:
            bbox: Area to export (a BoundingBox or two opposite corners).
            zoom: Zoom level (0-22).
            tiles: Already fetched tiles, either keyed by tile index or as a sequence.
        """
        self._bbox = bbox if isinstance(bbox, BoundingBox) else BoundingBox(*bbox)
        self._zoom = check_zoom(zoom)
        self._tiles: Dict[TileIndex, RasterTile] = {}
        self._shapes = []

        if tiles is not None:
            if isinstance(tiles, Mapping):
                tiles = tiles.values()
            for tile in tiles:
                self.add_tile(tile)

    # =========================================================================
    # Tile loading
    # =========================================================================

    @classmethod
    async def load(
        cls,
        bbox: BoundingBoxLike,
        zoom: int,
        loader: TilesetLoader,
        config: Optional[FetchConfig] = None,
        progress=False,
    ) -> "ImageMap":
        """Fetch all tiles covering ``bbox`` and return a new ImageMap.

        Args:
            bbox: Area to export.
            zoom: Zoom level.
            loader: Tile source.
            config: Concurrency/tolerance settings (default: FetchConfig()).
            progress: Show a progress bar (True, or a tqdm-like class).

        Raises:
            TilesetLoaderError: If a tile fails to load and ``config.tolerant`` is False.
        """
        config = config if config is not None else FetchConfig()
        image = cls(bbox, zoom)
        tiles = await fetch_tiles(
            loader,
            image.required_tiles,
            image.zoom,
            concurrency=config.concurrency,
            tolerant=config.tolerant,
            progress=progress,
        )
        for tile in tiles.values():
            image.add_tile(tile)
        return image

    @classmethod
    def fetch(
        cls,
        bbox: BoundingBoxLike,
        zoom: int,
        loader: TilesetLoader,
        config: Optional[FetchConfig] = None,
        progress=False,
    ) -> "ImageMap":
        """Blocking version of ``load``.

        Runs its own event loop, so it cannot be called from a running loop
        (use ``await ImageMap.load(...)`` there).
        """
        return asyncio.run(cls.load(bbox, zoom, loader, config=config, progress=progress))

    def add_tile(self, tile: RasterTile) -> "ImageMap":
        """Add (or replace) a fetched tile.

        Returns:
            Self for method chaining.
        """
        if tile.zoom != self._zoom:
            raise ValueError(f"tile {tuple(tile.index)} has zoom {tile.zoom}, map has zoom {self._zoom}")
        self._tiles[tile.index] = tile
        return self

    # =========================================================================
    # Shapes
    # =========================================================================

    def draw(self, shape: Shape) -> "ImageMap":
        """Add a shape on top of the already drawn ones.

        Returns:
            Self for method chaining.
        """
        if not isinstance(shape, SHAPE_TYPES):
            raise TypeError(f"Cannot draw {type(shape).__name__}")
        self._shapes.append(shape)
        return self

    def draw_all(self, shapes: Iterable[Shape]) -> "ImageMap":
        for shape in shapes:
            self.draw(shape)
        return self

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def bbox(self) -> BoundingBox:
        return self._bbox

    @property
    def zoom(self) -> int:
        return self._zoom

    @property
    def viewport(self) -> Viewport:
        return compute_viewport(self._bbox, self._zoom)

    @property
    def tiles(self) -> Dict[TileIndex, RasterTile]:
        return dict(self._tiles)

    @property
    def shapes(self) -> Tuple[Shape, ...]:
        return tuple(self._shapes)

    @property
    def required_tiles(self) -> FrozenSet[TileIndex]:
        """Indices of all tiles that cover the bounding box."""
        return tile_grid(self._bbox, self._zoom)

    @property
    def missing_tiles(self) -> FrozenSet[TileIndex]:
        """Required tiles that were not loaded (e.g. skipped in tolerant mode)."""
        return self.required_tiles - frozenset(self._tiles)

    # =========================================================================
    # Export
    # =========================================================================

    def compose(self) -> Document:
        return compose(self._bbox, self._zoom, self._tiles, self._shapes)

    def export_svg(self) -> str:
        """The map as a standalone SVG document."""
        return self.compose().to_svg()

    def export_png(self, scale: int = 1) -> bytes:
        """The map as PNG bytes.

        Args:
            scale: Output pixels per map pixel (1 or more).

        Raises:
            ValueError: If ``scale`` is smaller than 1.
            RenderError: If a tile cannot be decoded.
        """
        return self.compose().to_png(scale)

    def save(self, path: Union[str, Path], scale: int = 1) -> Path:
        """Write the map to ``path``; the format (.svg or .png) follows the suffix."""
        path = Path(path)
        suffix = path.suffix.lower()
        if suffix == ".svg":
            path.write_text(self.export_svg(), encoding="utf-8")
        elif suffix == ".png":
            path.write_bytes(self.export_png(scale))
        else:
            raise ValueError(f"Unsupported file type '{path.suffix}', expected .svg or .png")
        return path

    def __str__(self) -> str:
        return self.export_svg()

    def __repr__(self) -> str:
        return (
            f"ImageMap(bbox={self._bbox!r}, zoom={self._zoom}, "
            f"tiles={len(self._tiles)}, shapes={len(self._shapes)})"
        )
