"""Loader for Mapbox raster tilesets (v4 API)."""

from typing import Mapping, Optional
import os

from ...config import FetchConfig
from .xyz_loader import TileCache, TileSource, XYZTilesetLoader

MAPBOX_URL = "https://api.mapbox.com/v4/{tileset}/{{z}}/{{x}}/{{y}}{hires}.png?access_token={token}"


class MapboxTilesetLoader(XYZTilesetLoader):
    """Loads raster tiles of a Mapbox tileset such as 'mapbox.satellite'.

    With ``hires=True`` the 512x512 '@2x' images are requested; they cover
    the same 256x256 pixel area and are scaled down when composited.
    """

    def __init__(
        self,
        tileset: str,
        token: str,
        hires: bool = False,
        config: Optional[FetchConfig] = None,
        cache: Optional[TileCache] = None,
        session=None,
    ):
        self._tileset = tileset
        self._hires = hires
        source = TileSource(
            name=f"mapbox-{tileset}{'@2x' if hires else ''}",
            url_template=MAPBOX_URL.format(tileset=tileset, hires="@2x" if hires else "", token=token),
            attribution="© Mapbox, © OpenStreetMap",
            max_zoom=22,
        )
        super().__init__(source, config=config, cache=cache, session=session)

    @classmethod
    def from_env(
        cls,
        tileset: str,
        hires: bool = False,
        environ: Optional[Mapping[str, str]] = None,
        **kwargs,
    ) -> "MapboxTilesetLoader":
        """Create a loader with the access token from MAPBOX_ACCESS_TOKEN."""
        env = os.environ if environ is None else environ
        token = env.get("MAPBOX_ACCESS_TOKEN")
        if not token:
            raise ValueError("MAPBOX_ACCESS_TOKEN is not set")
        return cls(tileset, token, hires=hires, **kwargs)

    @property
    def tileset(self) -> str:
        return self._tileset

    @property
    def hires(self) -> bool:
        return self._hires
