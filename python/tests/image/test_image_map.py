"""
Tests for the ImageMap export object, end to end with a fake loader.
"""

import asyncio
import io
import xml.etree.ElementTree as ET

import pytest
from PIL import Image

from mapplot.config import FetchConfig
from mapplot.coordinates import BoundingBox, Location
from mapplot.errors import TileRequestError
from mapplot.image import ImageMap
from mapplot.image.loaders.base import RasterTile, TilesetLoader
from mapplot.image.primitives import ImagePrimitive, PolylinePrimitive
from mapplot.image.projection import TileIndex, project
from mapplot.image.rasterizer import raster_size
from mapplot.shapes import Marker, Polyline
from mapplot.style import Color

SVG = "{http://www.w3.org/2000/svg}"
BBOX = BoundingBox((52.0, 4.0), (52.1, 4.1))


def png_bytes(color=(240, 240, 240)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (256, 256), color).save(buffer, format="PNG")
    return buffer.getvalue()


class FakeLoader(TilesetLoader):
    def __init__(self, failing=()):
        self.failing = set(failing)
        self.requested = []

    @property
    def name(self) -> str:
        return "fake"

    async def load_tile(self, zoom, x, y):
        self.requested.append((zoom, x, y))
        await asyncio.sleep(0)
        if (x, y) in self.failing:
            raise TileRequestError(500, "boom")
        return RasterTile(TileIndex(x, y), zoom, png_bytes(), "image/png")


class TestImageMapLoad:
    """Tests for loading the tiles of an ImageMap."""

    def test_fetch_requests_the_tile_grid(self):
        # Given
        loader = FakeLoader()

        # When
        image = ImageMap.fetch(BBOX, 10, loader)

        # Then
        assert sorted(loader.requested) == [(10, 523, 337), (10, 523, 338)]
        assert set(image.tiles) == {TileIndex(523, 337), TileIndex(523, 338)}
        assert image.missing_tiles == frozenset()

    def test_load_is_awaitable(self):
        image = asyncio.run(ImageMap.load(BBOX, 10, FakeLoader()))
        assert len(image.tiles) == 2

    def test_aborts_on_tile_error_by_default(self):
        with pytest.raises(TileRequestError):
            ImageMap.fetch(BBOX, 10, FakeLoader(failing={(523, 337)}))

    def test_tolerant_config_leaves_a_gap(self):
        # Given
        config = FetchConfig(tolerant=True)

        # When
        with pytest.warns(UserWarning):
            image = ImageMap.fetch(BBOX, 10, FakeLoader(failing={(523, 337)}), config=config)

        # Then
        assert set(image.tiles) == {TileIndex(523, 338)}
        assert image.missing_tiles == frozenset({TileIndex(523, 337)})

    def test_accepts_corner_tuples(self):
        image = ImageMap(((52.1, 4.1), (52.0, 4.0)), 10)
        assert image.bbox.south_west == BBOX.south_west
        assert image.required_tiles == frozenset({TileIndex(523, 337), TileIndex(523, 338)})

    def test_tile_zoom_must_match(self):
        image = ImageMap(BBOX, 10)
        with pytest.raises(ValueError):
            image.add_tile(RasterTile(TileIndex(0, 0), 9, png_bytes(), "image/png"))

    def test_invalid_zoom(self):
        with pytest.raises(ValueError):
            ImageMap(BBOX, 23)


class TestImageMapExport:
    """Tests for drawing shapes and exporting SVG/PNG."""

    def make_map(self) -> ImageMap:
        return ImageMap.fetch(BBOX, 10, FakeLoader())

    def test_draw_returns_self_and_keeps_order(self):
        image = self.make_map()
        marker = Marker((52.05, 4.05))
        line = Polyline([(52.0, 4.0), (52.1, 4.1)])
        assert image.draw(marker).draw(line) is image
        assert image.shapes == (marker, line)

    def test_draw_rejects_other_objects(self):
        with pytest.raises(TypeError):
            self.make_map().draw("marker")

    def test_export_svg(self):
        # Given
        image = self.make_map()
        image.draw_all([
            Polyline([(52.0, 4.0), (52.05, 4.08), (52.1, 4.1)]).style(Color.RED),
            Marker((52.05, 4.05)).set_label("A"),
        ])

        # When
        root = ET.fromstring(image.export_svg())

        # Then
        tags = [child.tag.replace(SVG, "") for child in root if child.tag != f"{SVG}defs"]
        assert tags == ["image", "image", "polyline", "g"]
        assert str(image) == image.export_svg()

    def test_export_png_size(self):
        image = self.make_map().draw(Marker((52.05, 4.05)))
        png = Image.open(io.BytesIO(image.export_png(2)))
        assert png.size == raster_size(image.viewport, 2)

    def test_save(self, tmp_path):
        image = self.make_map()
        svg_path = image.save(tmp_path / "map.svg")
        png_path = image.save(tmp_path / "map.png")
        assert svg_path.read_text(encoding="utf-8").startswith("<svg")
        assert png_path.read_bytes().startswith(b"\x89PNG")
        with pytest.raises(ValueError):
            image.save(tmp_path / "map.gif")

    def test_polyline_inside_the_bbox_lies_within_the_viewport(self):
        # Given
        image = self.make_map()
        image.draw(Polyline([(52.02, 4.03), (52.08, 4.07)]))

        # When
        document = image.compose()

        # Then: the viewport is the projected extent of the bbox
        top_left = project(Location(BBOX.north, BBOX.west), 10)
        bottom_right = project(Location(BBOX.south, BBOX.east), 10)
        viewport = document.viewport
        assert viewport.x == pytest.approx(top_left.x)
        assert viewport.y == pytest.approx(top_left.y)
        assert viewport.width == pytest.approx(bottom_right.x - top_left.x)
        assert viewport.height == pytest.approx(bottom_right.y - top_left.y)

        # Then: two tiles below one 2-point line, inside the viewport
        assert [type(p) for p in document.primitives] == [ImagePrimitive, ImagePrimitive, PolylinePrimitive]
        line = document.primitives[-1]
        assert len(line.points) == 2
        for x, y in line.points:
            assert viewport.contains(x, y)
