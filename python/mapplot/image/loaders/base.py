"""Tile loader interface and concurrent tile fetching.

A tile loader fetches the raster image of one slippy-map tile. Loaders are
asynchronous so that the tiles of an export can be fetched concurrently;
``fetch_tiles`` drives a loader over a whole tile grid with a bounded number of
requests in flight.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional, Tuple
from dataclasses import dataclass
import asyncio
import io
import warnings

from PIL import Image, UnidentifiedImageError

from ...core.progress import ProgressLike, get_progress_iterator
from ...errors import TilesetLoaderError, UnexpectedMimeTypeError
from ..projection import TILE_SIZE, ProjectedPoint, TileIndex, tile_origin

ACCEPTED_MIME_TYPES = ("image/png", "image/jpeg")


def detect_mime_type(data: bytes) -> Optional[str]:
    """Detect the MIME type of an encoded image from its content.

    Returns:
        The MIME type (e.g. 'image/png'), or None if the data is not an image
        format known to Pillow.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            return Image.MIME.get(img.format)
    except (UnidentifiedImageError, OSError):
        return None


def check_mime_type(data: bytes) -> str:
    """Return the MIME type of a tile image, rejecting anything but PNG/JPEG."""
    mime_type = detect_mime_type(data)
    if mime_type not in ACCEPTED_MIME_TYPES:
        raise UnexpectedMimeTypeError(mime_type)
    return mime_type


def is_complete_image(data: bytes) -> bool:
    """Whether ``data`` is a PNG/JPEG image that decodes without error.

    Stricter than ``check_mime_type``: truncated files are detected too.
    """
    try:
        check_mime_type(data)
        with Image.open(io.BytesIO(data)) as img:
            img.load()
    except (UnexpectedMimeTypeError, OSError, SyntaxError, ValueError):
        return False
    return True


@dataclass(frozen=True)
class RasterTile:
    """An encoded tile image and the tile it belongs to.

    Attributes:
        index: Tile column and row.
        zoom: Zoom level of the tile.
        data: Encoded image bytes (PNG or JPEG).
        mime_type: 'image/png' or 'image/jpeg'.
    """
    index: TileIndex
    zoom: int
    data: bytes
    mime_type: str

    @property
    def origin(self) -> ProjectedPoint:
        """Top-left corner of the tile in pixel space at ``zoom``."""
        return tile_origin(self.index)

    @property
    def size(self) -> int:
        """Side length of the tile in pixel space. Hi-res images are scaled down."""
        return TILE_SIZE


class TilesetLoader(ABC):
    """Abstract base class for tile sources.

    Implementations must raise a ``TilesetLoaderError`` subclass when a tile
    cannot be loaded:

    - ``TileTransportError`` for network failures,
    - ``TileRequestError`` for non-success responses (status and body kept),
    - ``UnexpectedMimeTypeError`` for payloads that are not PNG or JPEG.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Identifier of the tile source (used for caching and messages)."""
        pass

    @abstractmethod
    async def load_tile(self, zoom: int, x: int, y: int) -> RasterTile:
        """Load the tile at column ``x``, row ``y`` of zoom level ``zoom``."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


async def fetch_tiles(
    loader: TilesetLoader,
    indices: Iterable[TileIndex],
    zoom: int,
    concurrency: int = 8,
    tolerant: bool = False,
    progress: ProgressLike = False,
) -> Dict[TileIndex, RasterTile]:
    """Fetch a set of tiles with at most ``concurrency`` requests in flight.

    Results are keyed by tile index, so the completion order of the requests
    does not matter.

    Args:
        loader: Tile source.
        indices: Tiles to fetch (duplicates are fetched once).
        zoom: Zoom level.
        concurrency: Maximum number of concurrent requests.
        tolerant: If False (default) the first failing tile aborts the whole
                  fetch and the remaining requests are cancelled. If True,
                  failing tiles are skipped with a warning.
        progress: Show a progress bar (True, or a tqdm-like class).

    Returns:
        Dict mapping each successfully loaded tile index to its tile.

    Raises:
        TilesetLoaderError: In non-tolerant mode, the first tile error.
    """
    if concurrency < 1:
        raise ValueError(f"concurrency must be >= 1, got {concurrency}")

    semaphore = asyncio.Semaphore(concurrency)

    async def fetch_one(index: TileIndex) -> Tuple[TileIndex, Optional[RasterTile]]:
        async with semaphore:
            try:
                return index, await loader.load_tile(zoom, index.column, index.row)
            except TilesetLoaderError as e:
                if not tolerant:
                    raise
                warnings.warn(f"Skipping tile {zoom}/{index.column}/{index.row} from {loader.name}: {e}")
                return index, None

    unique = sorted({TileIndex(*index) for index in indices}, key=lambda i: (i.row, i.column))
    tasks = [asyncio.ensure_future(fetch_one(index)) for index in unique]

    tiles: Dict[TileIndex, RasterTile] = {}
    try:
        for next_done in get_progress_iterator(
            asyncio.as_completed(tasks), progress, total=len(tasks), desc="Fetching tiles"
        ):
            index, tile = await next_done
            if tile is not None:
                tiles[index] = tile
    finally:
        # abandon whatever is still in flight (error or cancellation)
        for task in tasks:
            if not task.done():
                task.cancel()
            elif not task.cancelled():
                # retrieve secondary errors so asyncio does not report them
                task.exception()

    return tiles
