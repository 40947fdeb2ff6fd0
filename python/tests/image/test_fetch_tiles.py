"""
Tests for concurrent tile fetching with a fake asynchronous loader.
"""

import asyncio
import io

import pytest
from PIL import Image

from mapplot.errors import TileRequestError, TilesetLoaderError
from mapplot.image.loaders.base import RasterTile, TilesetLoader, fetch_tiles
from mapplot.image.projection import TileIndex

PNG = io.BytesIO()
Image.new("RGB", (256, 256)).save(PNG, format="PNG")
PNG = PNG.getvalue()


class FakeLoader(TilesetLoader):
    """Returns tiles after a short delay and tracks the number of requests in flight."""

    def __init__(self, failing=(), delay=0.01):
        self.failing = {TileIndex(*index) for index in failing}
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0
        self.requested = []
        self.cancelled = 0

    @property
    def name(self) -> str:
        return "fake"

    async def load_tile(self, zoom, x, y):
        self.requested.append(TileIndex(x, y))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled += 1
            raise
        finally:
            self.in_flight -= 1
        if TileIndex(x, y) in self.failing:
            raise TileRequestError(503, "unavailable")
        return RasterTile(TileIndex(x, y), zoom, PNG, "image/png")


def grid(columns, rows):
    return [TileIndex(c, r) for c in range(columns) for r in range(rows)]


class TestFetchTiles:
    """Tests for fetch_tiles."""

    def test_all_tiles_are_keyed_by_index(self):
        # Given
        loader = FakeLoader()
        indices = grid(3, 2)

        # When
        tiles = asyncio.run(fetch_tiles(loader, indices, 5))

        # Then
        assert set(tiles) == set(indices)
        for index, tile in tiles.items():
            assert tile.index == index
            assert tile.zoom == 5

    def test_duplicates_are_fetched_once(self):
        loader = FakeLoader()
        asyncio.run(fetch_tiles(loader, [(0, 0), (0, 0), (1, 0)], 3))
        assert sorted(loader.requested) == [TileIndex(0, 0), TileIndex(1, 0)]

    def test_concurrency_is_bounded(self):
        loader = FakeLoader()
        asyncio.run(fetch_tiles(loader, grid(5, 4), 6, concurrency=3))
        assert loader.max_in_flight <= 3
        assert len(loader.requested) == 20

    def test_first_error_aborts(self):
        # Given: one failing tile out of many slow ones
        loader = FakeLoader(failing=[(0, 0)])

        # When
        with pytest.raises(TileRequestError) as exc_info:
            asyncio.run(fetch_tiles(loader, grid(6, 6), 8, concurrency=2))

        # Then
        assert exc_info.value.status_code == 503
        assert len(loader.requested) < 36

    def test_tolerant_mode_skips_failing_tiles(self):
        # Given
        loader = FakeLoader(failing=[(1, 1), (2, 0)])

        # When
        with pytest.warns(UserWarning, match="Skipping tile"):
            tiles = asyncio.run(fetch_tiles(loader, grid(3, 2), 4, tolerant=True))

        # Then
        assert set(tiles) == set(grid(3, 2)) - {TileIndex(1, 1), TileIndex(2, 0)}

    def test_non_loader_errors_are_not_swallowed_in_tolerant_mode(self):
        class BrokenLoader(FakeLoader):
            async def load_tile(self, zoom, x, y):
                raise RuntimeError("bug")

        with pytest.raises(RuntimeError):
            asyncio.run(fetch_tiles(BrokenLoader(), grid(2, 2), 1, tolerant=True))

    def test_invalid_concurrency(self):
        with pytest.raises(ValueError):
            asyncio.run(fetch_tiles(FakeLoader(), grid(1, 1), 1, concurrency=0))

    def test_progress_class_receives_total(self):
        seen = {}

        class Progress:
            def __init__(self, iterable, **kwargs):
                seen.update(kwargs)
                self.iterable = iterable

            def __iter__(self):
                return iter(self.iterable)

        asyncio.run(fetch_tiles(FakeLoader(), grid(2, 2), 1, progress=Progress))
        assert seen["total"] == 4

    def test_empty_grid(self):
        assert asyncio.run(fetch_tiles(FakeLoader(), [], 1)) == {}

    def test_loader_errors_share_a_base_class(self):
        assert issubclass(TileRequestError, TilesetLoaderError)
