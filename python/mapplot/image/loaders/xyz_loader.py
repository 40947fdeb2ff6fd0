"""Loader for XYZ tile services (OpenStreetMap, CartoDB, ESRI, ...).

Example:
    from mapplot.image.loaders import XYZTilesetLoader

    loader = XYZTilesetLoader.from_preset("osm")
    tile = await loader.load_tile(10, 526, 336)
"""

from typing import Dict, List, Optional
from dataclasses import dataclass, field, replace
from pathlib import Path
import asyncio
import os
import shutil
import tempfile
import warnings

import requests

from ...config import FetchConfig
from ...errors import TileRequestError, TileTransportError
from ..projection import TileIndex
from .base import RasterTile, TilesetLoader, check_mime_type, is_complete_image


# ============================================================================
# Common Tile Sources
# ============================================================================

@dataclass(frozen=True)
class TileSource:
    """Configuration for a tile source.

    Attributes:
        name: Display name of the source.
        url_template: URL template with {z}, {x}, {y} placeholders.
        attribution: Attribution text (required by most providers).
        max_zoom: Maximum zoom level (typically 18-19).
        min_zoom: Minimum zoom level (typically 0).
        headers: Optional HTTP headers for requests.
    """
    name: str
    url_template: str
    attribution: str = ""
    max_zoom: int = 19
    min_zoom: int = 0
    headers: Dict[str, str] = field(default_factory=dict)

    def url(self, zoom: int, x: int, y: int) -> str:
        return self.url_template.format(z=zoom, x=x, y=y)


# Pre-defined tile sources
TILE_SOURCES = {
    # OpenStreetMap
    "osm": TileSource(
        name="OpenStreetMap",
        url_template="https://tile.openstreetmap.org/{z}/{x}/{y}.png",
        attribution="© OpenStreetMap contributors",
        max_zoom=19,
    ),

    # ESRI
    "esri_worldimagery": TileSource(
        name="ESRI World Imagery",
        url_template="https://server.arcgisonline.com/ArcGIS/rest/services/World_Imagery/MapServer/tile/{z}/{y}/{x}",
        attribution="© Esri, Maxar, Earthstar Geographics",
        max_zoom=19,
    ),
    "esri_worldstreetmap": TileSource(
        name="ESRI World Street Map",
        url_template="https://server.arcgisonline.com/ArcGIS/rest/services/World_Street_Map/MapServer/tile/{z}/{y}/{x}",
        attribution="© Esri",
        max_zoom=19,
    ),

    # CartoDB
    "cartodb_positron": TileSource(
        name="CartoDB Positron",
        url_template="https://a.basemaps.cartocdn.com/light_all/{z}/{x}/{y}.png",
        attribution="© OpenStreetMap, © CartoDB",
        max_zoom=19,
    ),
    "cartodb_darkmatter": TileSource(
        name="CartoDB Dark Matter",
        url_template="https://a.basemaps.cartocdn.com/dark_all/{z}/{x}/{y}.png",
        attribution="© OpenStreetMap, © CartoDB",
        max_zoom=19,
    ),

    # OpenTopoMap
    "opentopomap": TileSource(
        name="OpenTopoMap",
        url_template="https://a.tile.opentopomap.org/{z}/{x}/{y}.png",
        attribution="© OpenStreetMap, © SRTM, © OpenTopoMap",
        max_zoom=17,
    ),
}


def list_available_sources() -> List[str]:
    """List available pre-defined tile sources."""
    return list(TILE_SOURCES.keys())


# ============================================================================
# Tile Cache
# ============================================================================

class TileCache:
    """Simple disk-based cache of encoded tile images."""

    def __init__(self, cache_dir: Optional[Path] = None):
        """Initialize tile cache.

        Args:
            cache_dir: Directory for cached tiles. If None, uses ~/.cache/mapplot/tiles
        """
        if cache_dir is None:
            cache_dir = Path.home() / ".cache" / "mapplot" / "tiles"
        self._cache_dir = Path(cache_dir)
        self._cache_dir.mkdir(parents=True, exist_ok=True)

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def _tile_path(self, source_name: str, z: int, x: int, y: int) -> Path:
        """Generate file path for cached tile."""
        safe_name = "".join(c if c.isalnum() or c in "-_." else "_" for c in source_name)
        return self._cache_dir / safe_name / str(z) / str(x) / f"{y}.tile"

    def get(self, source_name: str, z: int, x: int, y: int) -> Optional[bytes]:
        """Get encoded tile bytes from disk, or None if not cached.

        Cached files that are not a complete PNG/JPEG image are removed, so the
        tile is downloaded again.
        """
        path = self._tile_path(source_name, z, x, y)
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            return None

        if not is_complete_image(data):
            # Corrupted cache file, remove it
            path.unlink(missing_ok=True)
            return None
        return data

    def put(self, source_name: str, z: int, x: int, y: int, data: bytes) -> None:
        """Store encoded tile bytes on disk.

        The file is written under a temporary name and then renamed, so readers
        never see a partially written tile.
        """
        path = self._tile_path(source_name, z, x, y)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                os.replace(tmp_name, path)
            except OSError:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            warnings.warn(f"Failed to cache tile: {e}")

    def clear(self, source_name: Optional[str] = None) -> None:
        """Clear disk cache for a source or all sources."""
        if source_name:
            path = self._tile_path(source_name, 0, 0, 0).parents[2]
            if path.exists():
                shutil.rmtree(path)
        else:
            if self._cache_dir.exists():
                shutil.rmtree(self._cache_dir)
            self._cache_dir.mkdir(parents=True, exist_ok=True)


# ============================================================================
# XYZTilesetLoader
# ============================================================================

class XYZTilesetLoader(TilesetLoader):
    """Loads tiles from a {z}/{x}/{y} URL template over HTTP.

    Requests are made with a shared ``requests.Session`` on the event loop's
    default executor, so several tiles can be in flight at once.
    """

    def __init__(
        self,
        source: TileSource,
        config: Optional[FetchConfig] = None,
        cache: Optional[TileCache] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the loader.

        Args:
            source: Tile source (URL template, headers).
            config: Timeout and User-Agent settings (default: FetchConfig()).
            cache: Optional disk cache; tiles found there are not requested.
            session: HTTP session to use (default: a new requests.Session).
        """
        self._source = source
        self._config = config if config is not None else FetchConfig()
        self._cache = cache
        # shared by all executor threads
        self._session = session if session is not None else requests.Session()

    @classmethod
    def from_preset(cls, preset_name: str, **kwargs) -> "XYZTilesetLoader":
        """Create a loader for a pre-defined tile source.

        Args:
            preset_name: Name from TILE_SOURCES (e.g., 'osm', 'esri_worldimagery').
        """
        if preset_name not in TILE_SOURCES:
            available = ", ".join(TILE_SOURCES.keys())
            raise ValueError(f"Unknown preset '{preset_name}'. Available: {available}")
        # copy so the shared preset headers are never modified
        source = TILE_SOURCES[preset_name]
        return cls(replace(source, headers=dict(source.headers)), **kwargs)

    @property
    def name(self) -> str:
        return self._source.name

    @property
    def source(self) -> TileSource:
        return self._source

    @property
    def attribution(self) -> str:
        return self._source.attribution

    def tile_url(self, zoom: int, x: int, y: int) -> str:
        return self._source.url(zoom, x, y)

    def download(self, zoom: int, x: int, y: int) -> RasterTile:
        """Fetch one tile (blocking).

        Raises:
            ValueError: If ``zoom`` is outside the zoom range of the source.
            TilesetLoaderError: If the tile cannot be loaded.
        """
        if not self._source.min_zoom <= zoom <= self._source.max_zoom:
            raise ValueError(
                f"{self.name} serves zoom levels {self._source.min_zoom}-{self._source.max_zoom}, got {zoom}"
            )

        if self._cache is not None:
            cached = self._cache.get(self.name, zoom, x, y)
            if cached is not None:
                return self._make_tile(zoom, x, y, cached)

        url = self.tile_url(zoom, x, y)
        headers = {"User-Agent": self._config.user_agent}
        headers.update(self._source.headers)

        try:
            response = self._session.get(url, headers=headers, timeout=self._config.timeout)
        except requests.RequestException as e:
            raise TileTransportError(url, e) from e

        if response.status_code != 200:
            raise TileRequestError(response.status_code, response.text, url=url)

        tile = self._make_tile(zoom, x, y, response.content)
        if self._cache is not None:
            self._cache.put(self.name, zoom, x, y, tile.data)
        return tile

    @staticmethod
    def _make_tile(zoom: int, x: int, y: int, data: bytes) -> RasterTile:
        mime_type = check_mime_type(data)
        return RasterTile(index=TileIndex(x, y), zoom=zoom, data=data, mime_type=mime_type)

    async def load_tile(self, zoom: int, x: int, y: int) -> RasterTile:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.download, zoom, x, y)
